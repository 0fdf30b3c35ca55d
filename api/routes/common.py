"""
api/routes/common.py -- Small helpers shared by every router.

require_fields() implements the "400 if any required field is missing" rule
in one place. store_errors() is the handler boundary for data access: any
SQLAlchemy failure is logged with its traceback and surfaces to the client as
a 500 with an operation-specific message, never as a raw driver error.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from core.errors import InternalError, ValidationError

logger = logging.getLogger("elibrary.api")


def require_fields(*values, message: str = "Missing required fields") -> None:
    """Raise ValidationError if any value is None or an empty string."""
    for value in values:
        if value is None or (isinstance(value, str) and not value):
            raise ValidationError(message)


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Translate SQLAlchemyError raised inside the block into InternalError(message)."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store failure: %s", message)
        raise InternalError(message) from exc
