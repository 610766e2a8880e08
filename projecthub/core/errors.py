"""
Error codes and the API error type raised by services and dependencies.

Every error reaches the client as the standard envelope
``{"success": false, "message": ..., "error": <code>, ...details}``.
"""
from enum import Enum
from typing import Any, Dict, Iterable, Optional
from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    # authentication / authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # resources
    NOT_FOUND = "NOT_FOUND"
    FILE_MISSING = "FILE_MISSING"
    CONFLICT = "CONFLICT"

    # input
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    TOO_MANY_FILES = "TOO_MANY_FILES"

    # server
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(HTTPException):
    """HTTP error with a machine readable code and optional extra payload."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(status_code=status_code, detail=message, headers=headers)

    def to_content(self) -> Dict[str, Any]:
        return {
            "success": False,
            "message": self.message,
            "error": self.code.value,
            **self.details,
        }


def unauthorized_error(message: str = "Access token required") -> APIError:
    return APIError(
        ErrorCode.UNAUTHORIZED,
        message,
        status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def invalid_credentials_error() -> APIError:
    # same message for unknown email and wrong password
    return APIError(ErrorCode.INVALID_CREDENTIALS, "Invalid email or password", status.HTTP_401_UNAUTHORIZED)


def forbidden_error(message: str = "Invalid or expired token") -> APIError:
    return APIError(ErrorCode.FORBIDDEN, message, status.HTTP_403_FORBIDDEN)


def insufficient_permissions_error(allowed_roles: Iterable[str]) -> APIError:
    required = " or ".join(allowed_roles)
    return APIError(
        ErrorCode.INSUFFICIENT_PERMISSIONS,
        f"Access denied. Required role: {required}",
        status.HTTP_403_FORBIDDEN,
    )


def not_found_error(resource: str) -> APIError:
    return APIError(ErrorCode.NOT_FOUND, f"{resource} not found", status.HTTP_404_NOT_FOUND)


def file_missing_error() -> APIError:
    return APIError(
        ErrorCode.FILE_MISSING,
        "File not found on server. It may have been moved or deleted.",
        status.HTTP_404_NOT_FOUND,
    )


def conflict_error(message: str) -> APIError:
    return APIError(ErrorCode.CONFLICT, message, status.HTTP_409_CONFLICT)


def bad_request_error(message: str) -> APIError:
    return APIError(ErrorCode.BAD_REQUEST, message, status.HTTP_400_BAD_REQUEST)


def validation_error(errors: list[dict], message: str = "Validation failed") -> APIError:
    """``errors`` is a list of ``{"field": ..., "message": ...}`` entries."""
    return APIError(ErrorCode.VALIDATION_FAILED, message, status.HTTP_400_BAD_REQUEST, {"errors": errors})


def invalid_file_type_error(filename: str, extension: str, allowed: Iterable[str]) -> APIError:
    return APIError(
        ErrorCode.INVALID_FILE_TYPE,
        f"Invalid file type: {extension or '(none)'}. Allowed types: {', '.join(allowed)}",
        status.HTTP_400_BAD_REQUEST,
        {"filename": filename},
    )


def file_too_large_error(filename: str, max_mb: int) -> APIError:
    return APIError(
        ErrorCode.FILE_TOO_LARGE,
        f"File too large. Maximum size is {max_mb}MB",
        status.HTTP_400_BAD_REQUEST,
        {"filename": filename},
    )


def too_many_files_error(max_files: int) -> APIError:
    return APIError(
        ErrorCode.TOO_MANY_FILES,
        f"Too many files. Maximum {max_files} files allowed",
        status.HTTP_400_BAD_REQUEST,
    )


def internal_error(message: str = "Something went wrong on the server") -> APIError:
    return APIError(ErrorCode.INTERNAL_ERROR, message, status.HTTP_500_INTERNAL_SERVER_ERROR)
