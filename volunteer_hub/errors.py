"""Error taxonomy shared by every handler.

Each error renders as ``{"error": message, "details": ...}`` with its status code;
see the exception handlers registered in ``volunteer_hub.main``.
"""
import logging
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Any = None, **extra: Any):
        super().__init__(message)
        self.message = message
        self.details = details
        self.extra = extra

    def to_dict(self) -> dict:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class AuthorizationError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class RateLimitedError(ApiError):
    status_code = 429


class PersistenceError(ApiError):
    status_code = 500


_MISSING_TABLE = ("no such table", "does not exist")
_UNIQUE = ("unique constraint", "duplicate key")
_FOREIGN_KEY = ("foreign key",)
_BAD_FORMAT = ("invalid input syntax", "datatype mismatch")


def translate_db_error(exc: Exception, action: str) -> ApiError:
    """Map a backing-store failure to the most actionable ApiError."""
    message = str(getattr(exc, "orig", None) or exc)
    lowered = message.lower()

    if any(s in lowered for s in _MISSING_TABLE):
        return PersistenceError(
            "Database tables are missing. Run the /migrate endpoint first.",
            details=message,
        )
    if isinstance(exc, IntegrityError) or any(s in lowered for s in _UNIQUE + _FOREIGN_KEY):
        if any(s in lowered for s in _UNIQUE):
            return ConflictError("A record with this information already exists")
        if any(s in lowered for s in _FOREIGN_KEY):
            return ValidationError("Invalid reference", details=message)
        return ValidationError("Invalid data provided", details=message)
    if any(s in lowered for s in _BAD_FORMAT):
        return ValidationError("Invalid data format provided")
    return PersistenceError(f"Failed to {action}", details=message)


@contextmanager
def persistence_errors(db: Session, action: str):
    """Roll back and re-raise any store failure inside the block as an ApiError."""
    try:
        yield
    except ApiError:
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error while trying to %s", action)
        raise translate_db_error(exc, action) from exc
