"""
auth/tokens.py -- Password hashing and session token utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the process-wide
       secret and carry user_id, username, role, iat and exp. Expiry is one
       hour after issuance; tokens are never renewed or revoked server-side.
       decode_access_token() raises InvalidToken on any failure -- bad
       signature, malformed payload and expiry all look the same to the
       caller.

  Passwords: bcrypt directly (no passlib wrapper) at a fixed work factor of
       10 rounds. verify_password() returns False on a mismatch and raises
       PasswordHashError only when the primitive itself fails, so a wrong
       password is a 401 and never a 500. The _DUMMY_HASH constant enables
       timing equalization in authenticate_user() so response time does not
       reveal whether a username exists.

  Secret: sourced from core.config.get_settings() once at module load and
       never mutated afterwards.

Layer rule: no imports from api/ or catalog/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import ROLES, Identity
from core.config import get_settings
from core.errors import InvalidToken, PasswordHashError

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("elibrary.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_SECRET_KEY = _settings.secret_key
_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


# bcrypt only reads the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(plain: str) -> bytes:
    """Encode a password and truncate it to the bcrypt input limit.

    bcrypt 5 raises on input over 72 bytes where bcrypt 4 truncated silently.
    """
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Only the first 72 UTF-8 bytes take part. Raises PasswordHashError if
    bcrypt itself fails.
    """
    try:
        salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(plain), salt).decode("utf-8")
    except (ValueError, TypeError) as exc:
        logger.error("Password hashing failed: %s", exc)
        raise PasswordHashError("Error hashing password") from exc


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A mismatch is False. A hash bcrypt cannot parse raises PasswordHashError.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        logger.error("Password verification failed: %s", exc)
        raise PasswordHashError("Authentication failed") from exc


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("elibrary_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    issued_at: datetime | None = None,
    expire_seconds: int = 0,
) -> str:
    """Encode a signed JWT with user identity and expiry.

    Args:
        user_id:        Numeric user ID stored in the DB.
        username:       Username, also stored as the subject claim.
        role:           "user" or "admin".
        issued_at:      Issue time. Defaults to now (UTC).
        expire_seconds: Lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds (one hour).
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    iat = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "user_id": user_id,
        "username": username,
        "role": role,
        "iat": iat,
        "exp": iat + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _SECRET_KEY, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    """Verify a JWT and return the Identity it carries.

    Raises InvalidToken on a bad signature, a malformed token, a missing or
    mistyped claim, or an expired token.
    """
    try:
        payload = jwt.decode(token, _SECRET_KEY, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.info("Token rejected: %s", exc)
        raise InvalidToken() from exc

    user_id = payload.get("user_id")
    username = payload.get("username") or payload.get("sub")
    role = payload.get("role")
    if not isinstance(user_id, int) or not isinstance(username, str) or role not in ROLES:
        logger.info("Token rejected: missing identity claims")
        raise InvalidToken()

    return Identity(
        user_id=user_id,
        username=username,
        role=role,
        issued_at=_from_timestamp(payload.get("iat")),
        expires_at=_from_timestamp(payload.get("exp")),
    )


def _from_timestamp(value) -> datetime | None:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, username: str, password: str) -> User | None:
    """Authenticate a username/password login with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown username: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on bad credentials. Store failures and
    PasswordHashError propagate to the caller.
    """
    user = store.get_by_username(username)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
