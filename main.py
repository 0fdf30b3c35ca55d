#!/usr/bin/env python3
"""
E-Library API -- command-line entry point.

Usage:
  python main.py serve
  python main.py serve --port 8080 --reload
  python main.py init-db
  python main.py create-user alice --first-name Alice --last-name Smith --role admin

Environment variables (see core/config.py for the full list):
  JWT_SECRET    Token signing secret (required unless DEBUG=true).
  PORT          Listening port for `serve` (default 5000).
  DATABASE_URL  SQLAlchemy URL. Alternatively DB_HOST / DB_USER / DB_PASSWORD
                / DB_NAME for MySQL. Falls back to a local SQLite file.
"""

import argparse
import getpass
import sys

from sqlalchemy.exc import IntegrityError

from core.config import get_settings
from core.database import create_db_engine
from core.errors import LibraryError


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def _init_db(args: argparse.Namespace) -> int:
    from auth.store import UserStore
    from catalog.store import CatalogStore

    engine = create_db_engine(get_settings().resolved_database_url())
    UserStore(engine)
    CatalogStore(engine).close()
    print(f"  Schema ready at {engine.url.render_as_string(hide_password=True)}")
    return 0


def _create_user(args: argparse.Namespace) -> int:
    """Create an account from the terminal -- the only way to mint an admin
    without going through the public /signup endpoint."""
    from auth.models import User
    from auth.store import UserStore
    from auth.tokens import hash_password

    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    if not password:
        print("  [!] Password must not be empty.")
        return 1

    engine = create_db_engine(get_settings().resolved_database_url())
    store = UserStore(engine)
    try:
        user_id = store.create_user(
            User(
                username=args.username,
                hashed_password=hash_password(password),
                first_name=args.first_name,
                last_name=args.last_name,
                role=args.role,
            )
        )
    except IntegrityError:
        print(f"  [!] Username '{args.username}' already exists.")
        return 1
    except LibraryError as exc:
        print(f"  [!] {exc.message}")
        return 1
    finally:
        store.close()

    print(f"  Created {args.role} '{args.username}' (id={user_id}).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elibrary",
        description="E-Library catalog API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST or 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT or 5000)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    serve.set_defaults(func=_serve)

    init_db = sub.add_parser("init-db", help="Create the database schema")
    init_db.set_defaults(func=_init_db)

    create_user = sub.add_parser("create-user", help="Create a user account")
    create_user.add_argument("username")
    create_user.add_argument("--first-name", required=True)
    create_user.add_argument("--last-name", required=True)
    create_user.add_argument("--role", choices=["user", "admin"], default="user")
    create_user.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted; avoid passing it on the command line)",
    )
    create_user.set_defaults(func=_create_user)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
