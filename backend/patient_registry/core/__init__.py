"""Core configuration and utilities for Patient Registry backend."""

from patient_registry.core.config import settings
from patient_registry.core.exceptions import (
    NotFoundError,
    PersistenceError,
    RegistryError,
    ValidationError,
)
from patient_registry.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)

__all__ = [
    "settings",
    "setup_logging",
    "get_logger",
    "bind_request_context",
    "clear_request_context",
    "RegistryError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
]
