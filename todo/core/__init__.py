"""Core utilities and middleware."""

from todo.core.exceptions import APIError, RenderError, StorageError
from todo.core.middleware import correlation_id_var

__all__ = [
    "APIError",
    "RenderError",
    "StorageError",
    "correlation_id_var",
]
