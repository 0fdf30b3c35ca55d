"""
core/errors.py -- Error taxonomy shared by the auth and catalog layers.

Every failure a request can hit is one of these exceptions. api/main.py
registers a single handler for LibraryError that turns any of them into
the JSON body {"error": <message>} with the class's status_code.

  ValidationError  400  missing or empty required field
  AuthError        401  bad credentials (403 for token/role failures)
  InvalidToken     403  malformed, badly signed, or expired token
  NotFoundError    404  no matching row
  InternalError    500  store failure
  PasswordHashError 500 hashing primitive failed (a mismatch is NOT an error)

Layer rule: core/ is the kernel. No imports from api/, auth/, or catalog/.
"""


class LibraryError(Exception):
    """Base exception for the E-Library API."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(LibraryError):
    status_code = 400


class AuthError(LibraryError):
    """Authentication or authorization failure.

    401 for bad credentials. Token and role failures pass status_code=403.
    """

    status_code = 401


class InvalidToken(AuthError):
    """Token could not be verified.

    Bad signature, malformed payload and expiry are deliberately reported
    with the same message so callers cannot tell them apart.
    """

    status_code = 403

    def __init__(self, message: str = "Invalid Token") -> None:
        super().__init__(message)


class NotFoundError(LibraryError):
    status_code = 404


class InternalError(LibraryError):
    status_code = 500


class PasswordHashError(InternalError):
    """The bcrypt primitive itself failed (malformed stored hash, library error)."""
