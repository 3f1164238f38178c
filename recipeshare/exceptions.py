from __future__ import annotations

from typing import Dict, Optional


class RecipeShareError(Exception):
    """Base class for errors surfaced to HTTP callers."""

    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RecipeShareError):
    """One or more submitted fields failed validation."""

    status_code = 422
    default_message = "The given data was invalid."

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None) -> None:
        super().__init__(message)
        self.errors = dict(errors)


class AuthorizationError(RecipeShareError):
    status_code = 403
    default_message = "This action is unauthorized."


class NotFoundError(RecipeShareError):
    status_code = 404
    default_message = "Recipe not found."


class StorageError(RecipeShareError):
    """Raised by image storage backends when a file operation fails."""

    default_message = "Image storage failed."


__all__ = [
    "AuthorizationError",
    "NotFoundError",
    "RecipeShareError",
    "StorageError",
    "ValidationError",
]
