"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


@dataclass
class User:
    """A registered account.

    Created at signup and never deleted by the API. role is the only field
    that may change after creation, and no endpoint exposes that change.
    """

    username: str
    hashed_password: str
    first_name: str
    last_name: str
    role: str = ROLE_USER  # "user" | "admin"
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Identity:
    """Who a verified session token says the caller is.

    Built by auth.tokens.decode_access_token() and attached to
    request.state.identity by the auth middleware. Never persisted.
    """

    user_id: int
    username: str
    role: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
