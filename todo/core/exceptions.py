"""Custom exception classes for the application."""

from typing import Any


class APIError(Exception):
    """Base exception for errors answered with a structured response."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class StorageError(APIError):
    """Raised when a query against the item store fails."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status_code=500, details=details)


class RenderError(APIError):
    """Raised when the item list page cannot be rendered."""

    def __init__(
        self,
        message: str = "Failed to render page",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status_code=500, details=details)
