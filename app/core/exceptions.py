"""Domain exceptions and their HTTP translation."""
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError


class AuditTrackerError(Exception):
    """Base exception for the safety audit tracker."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ResourceNotFoundError(AuditTrackerError):
    """Raised when a requested record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(AuditTrackerError):
    """Raised when a record with the same unique key already exists."""
    status_code = status.HTTP_409_CONFLICT


class InvalidArgumentError(AuditTrackerError):
    """Raised when a request cannot be acted on as given."""
    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(AuditTrackerError):
    """Raised when the photo object store rejects an operation."""
    status_code = status.HTTP_502_BAD_GATEWAY


def to_http_exception(exc: AuditTrackerError) -> HTTPException:
    """Translate a domain exception into the matching HTTPException."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)


# Driver-level codes for unique constraint violations.
# psycopg2 exposes the SQLSTATE as ``pgcode``; sqlite3 (3.11+) exposes ``sqlite_errorname``.
UNIQUE_VIOLATION_CODES = {
    "pgcode": {"23505"},
    "sqlite_errorname": {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"},
}


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the DBAPI error behind ``exc`` is a unique constraint violation."""
    orig = getattr(exc, "orig", None)
    if orig is None:
        return False
    for attribute, codes in UNIQUE_VIOLATION_CODES.items():
        if getattr(orig, attribute, None) in codes:
            return True
    return False
