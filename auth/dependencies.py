"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Two dependencies, composed in this order on protected routes:

  verify_token()   Auth middleware. Reads the Authorization header, verifies
                   the session token and attaches the Identity to
                   request.state.identity.
                     no header          -> 403 "Access Denied"
                     token rejected     -> 403 "Invalid Token"

  require_admin()  Role gate. Reads request.state.identity only; it never
                   looks at the header itself. With no identity attached
                   (gate used without verify_token in front of it) or a
                   non-admin identity -> 403 "Access denied: Admins only".

ADMIN_ONLY bundles both in the required order for route decorators:
    @router.post("/book", dependencies=ADMIN_ONLY)

Layer rule: no imports from api/ or catalog/. This module may import from
fastapi because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request

from auth.models import Identity
from auth.tokens import decode_access_token
from core.errors import AuthError

logger = logging.getLogger("elibrary.auth")


def extract_token(header_value: str) -> str:
    """Return the credential part of an "<scheme> <token>" header value.

    Only the second space-delimited field is used; the scheme itself is not
    checked. A value without a space yields "" which then fails verification.
    """
    parts = header_value.split(" ")
    return parts[1] if len(parts) > 1 else ""


def verify_token(request: Request) -> Identity:
    """Require a valid session token and attach its Identity to the request."""
    header = request.headers.get("Authorization")
    if not header:
        raise AuthError("Access Denied", status_code=403)

    identity = decode_access_token(extract_token(header))
    request.state.identity = identity
    return identity


def require_admin(request: Request) -> Identity:
    """Reject the request unless verify_token attached an admin identity."""
    identity: Identity | None = getattr(request.state, "identity", None)
    if identity is None or not identity.is_admin:
        logger.info(
            "Admin gate rejected %s %s (user=%s)",
            request.method,
            request.url.path,
            identity.username if identity else None,
        )
        raise AuthError("Access denied: Admins only", status_code=403)
    return identity


ADMIN_ONLY = [Depends(verify_token), Depends(require_admin)]
