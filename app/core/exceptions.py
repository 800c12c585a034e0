from typing import Dict, Any, Optional
from datetime import datetime, timezone
import re
from fastapi import status
from pydantic import BaseModel
import logging

logger = logging.getLogger(__name__)


class BaseCustomException(Exception):
    """Base class for custom exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


class AuthenticationError(BaseCustomException):
    """Exception for authentication errors"""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code=error_code or "AUTHENTICATION_ERROR"
        )


class RowAccessDeniedError(BaseCustomException):
    """Raised when a row is missing or no policy admits the operation.

    Both cases produce the same status, code and message so that a caller
    cannot probe for rows it is not allowed to see.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code=error_code or "NOT_FOUND_ERROR"
        )


class ConstraintViolationError(BaseCustomException):
    """Exception for column-level constraint violations"""

    def __init__(
        self,
        field: str,
        message: str = "Constraint violation",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
        status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY
    ):
        self.field = field
        merged = {"field": field}
        merged.update(details or {})
        super().__init__(
            message=message,
            status_code=status_code,
            details=merged,
            error_code=error_code or "CONSTRAINT_VIOLATION"
        )


class UniqueViolationError(ConstraintViolationError):
    """Exception for duplicate values in unique columns"""

    def __init__(
        self,
        field: str,
        message: str = "Value already exists",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            field=field,
            message=message,
            details=details,
            error_code="UNIQUE_VIOLATION",
            status_code=status.HTTP_409_CONFLICT
        )


class ProvisioningError(BaseCustomException):
    """Exception raised when a profile could not be provisioned at signup"""

    def __init__(
        self,
        message: str = "Profile provisioning failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code=error_code or "PROVISIONING_FAILED"
        )


# Response models for errors
class ErrorResponse(BaseModel):
    """Standard error response model"""
    error: str
    message: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None
    request_id: Optional[str] = None


def create_error_response(
    exception: BaseCustomException,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Create standardized error response"""
    response = {
        "error": exception.__class__.__name__.replace("Error", " Error"),
        "message": exception.message,
        "error_code": exception.error_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id
    }

    if exception.details:
        response["details"] = exception.details

    return response


# SQLite: "NOT NULL constraint failed: vital_signs.heart_rate"
_SQLITE_COLUMN = re.compile(r"constraint failed: (\w+)\.(\w+)")
# PostgreSQL: 'Key (email)=(a@x.com) already exists.'
_PG_KEY = re.compile(r"Key \((\w+)\)")


def translate_integrity_error(error: Exception, table: str) -> ConstraintViolationError:
    """Convert a database IntegrityError into a ConstraintViolationError.

    The field is recovered from the driver message where possible. Most
    violations are caught earlier by repository validation; this covers
    races and anything the validation does not model.
    """
    original = getattr(error, "orig", error)
    text = str(original)
    logger.error(f"Integrity error on {table}: {text}")

    # Check constraints are named ck_<table>_<column>
    check_name = re.compile(rf"ck_{re.escape(table)}_(\w+)")

    field = "unknown"
    constraint_name = getattr(original, "constraint_name", None)
    column_name = getattr(original, "column_name", None)

    if column_name:
        field = column_name
    elif constraint_name:
        match = check_name.search(constraint_name)
        field = match.group(1) if match else constraint_name
    else:
        for pattern in (check_name, _SQLITE_COLUMN, _PG_KEY):
            match = pattern.search(text)
            if match:
                field = match.group(match.lastindex)
                break

    lowered = text.lower()
    if "unique" in lowered or "duplicate key" in lowered or "already exists" in lowered:
        return UniqueViolationError(field=field, details={"table": table})
    if "foreign key" in lowered:
        return ConstraintViolationError(
            field=field,
            message="Referenced row does not exist",
            details={"table": table}
        )
    return ConstraintViolationError(field=field, details={"table": table})
