"""Domain errors raised by the registry services.

Each error carries the HTTP status it maps to and a message that is safe to
show to clients.
"""

from typing import Any


class RegistryError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class ValidationError(RegistryError):
    """Raised when input is malformed or violates a field constraint."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(RegistryError):
    """Raised when a referenced record does not exist."""

    status_code = 404
    default_message = "Resource not found"


class PersistenceError(RegistryError):
    """Raised when a store operation fails and has been rolled back."""

    status_code = 500
    default_message = "Failed to persist changes"
