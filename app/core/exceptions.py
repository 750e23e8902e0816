"""
Custom exceptions for the VCard Backend application.
Provides structured error handling for the user record store.
"""

from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class VCardException(Exception):
    """Base exception for VCard Backend application."""

    def __init__(
        self,
        message: str,
        error_code: str = "VCARD_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# Input
class MissingBodyError(VCardException):
    """Raised when a request body is absent or is not a JSON object."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__("missing body", "MISSING_BODY", details)


class InvalidAmountError(VCardException):
    """Raised when a ledger action carries a non-positive or non-numeric amount."""

    def __init__(self, amount: Any = None, details: Optional[Dict[str, Any]] = None):
        super().__init__("invalid amount", "INVALID_AMOUNT", {"amount": amount, **(details or {})})


# Persistence
class PersistenceError(VCardException):
    """Raised when the storage backend did not confirm an explicit write."""

    def __init__(self, username: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("failed to save", "SAVE_FAILED", {"username": username, **(details or {})})


class StorageUnavailableError(VCardException):
    """Raised when no storage backend has been configured for the process."""

    def __init__(self, message: str = "storage unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "STORAGE_UNAVAILABLE", details)


def get_exception_status_code(exc: VCardException) -> int:
    """
    Get the appropriate HTTP status code for a VCardException.

    Args:
        exc: VCardException instance

    Returns:
        int: HTTP status code
    """
    status_mapping = {
        "MISSING_BODY": status.HTTP_400_BAD_REQUEST,
        "INVALID_AMOUNT": status.HTTP_400_BAD_REQUEST,
        "SAVE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "STORAGE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    }

    return status_mapping.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def vcard_exception_handler(request: Request, exc: VCardException) -> JSONResponse:
    """Render a VCardException as ``{"error": message}`` with its mapped status."""
    return JSONResponse(
        status_code=get_exception_status_code(exc),
        content={"error": exc.message},
    )
