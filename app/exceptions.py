# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error taxonomy for the API.
# Every error carries a machine-readable code, an HTTP status and, where
# possible, a suggestion telling the user how to fix the problem.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ChantsException(Exception):
    """
    Base exception for the chants API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "CHANTS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# CSV Import Exceptions
# =============================================================================

class CsvFormatError(ChantsException):
    """Raised when the uploaded CSV is structurally unusable (no data, bad header)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="CSV_FORMAT_ERROR",
            status_code=400,
            suggestion="The first line must be a header with at least the columns: title,category",
            details=details,
        )


class RowValidationError(ChantsException):
    """Raised when one data row of an import fails validation."""

    def __init__(self, line: int, message: str):
        super().__init__(
            message=message,
            code="ROW_VALIDATION_ERROR",
            status_code=422,
            suggestion=f"Fix line {line} of the file and import it again",
            details={"line": line},
        )
        self.line = line


# =============================================================================
# Access and Lookup Exceptions
# =============================================================================

class AuthorizationError(ChantsException):
    """Raised when the acting identity may not touch a row (or is anonymous)."""

    def __init__(self, table: str, operation: str):
        super().__init__(
            message=f"Not allowed to {operation} on {table}",
            code="FORBIDDEN",
            status_code=403,
            suggestion="Sign in with the account that owns this data",
            details={"table": table, "operation": operation},
        )


class NotFoundError(ChantsException):
    """Base class for lookups of rows that do not exist."""


class SongNotFoundError(NotFoundError):
    """Raised when a song ID doesn't exist."""

    def __init__(self, song_id: str):
        super().__init__(
            message=f"Song not found: {song_id}",
            code="SONG_NOT_FOUND",
            status_code=404,
            suggestion="Check that the song_id is correct and the song hasn't been deleted",
            details={"song_id": song_id},
        )


class SettingsNotFoundError(NotFoundError):
    """Raised when an owner has no prompter settings row."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"Prompter settings not found for user: {user_id}",
            code="SETTINGS_NOT_FOUND",
            status_code=404,
            details={"user_id": user_id},
        )


class ConstraintViolationError(ChantsException):
    """Raised when a row breaks a storage-level constraint."""

    def __init__(self, table: str, constraint: str, message: str):
        super().__init__(
            message=message,
            code="CONSTRAINT_VIOLATION",
            status_code=409,
            details={"table": table, "constraint": constraint},
        )
        self.constraint = constraint


class ConfirmationRequiredError(ChantsException):
    """Raised when a destructive bulk operation was not explicitly confirmed."""

    def __init__(self, action: str, missing: list[str]):
        super().__init__(
            message=f"Confirmation required to {action}",
            code="CONFIRMATION_REQUIRED",
            status_code=400,
            suggestion=f"Repeat the request with {', '.join(f'{m}=true' for m in missing)}",
            details={"action": action, "missing": missing},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(ChantsException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(ChantsException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


class FileReadError(ChantsException):
    """Raised when the uploaded file cannot be decoded."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Failed to read file: {error}",
            code="FILE_READ_ERROR",
            status_code=400,
            suggestion="Save the file as UTF-8 encoded CSV",
            details={"filename": filename, "error": error},
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageError(ChantsException):
    """Raised when the storage backend fails for reasons unrelated to the request."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Storage operation failed ({operation}): {error}",
            code="STORAGE_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def chants_exception_handler(
    request: Request,
    exc: ChantsException
) -> JSONResponse:
    """
    Convert ChantsException to JSON response.

    Returns structured error with:
    - detail: Human-readable message (newlines preserved)
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle Pydantic request validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
