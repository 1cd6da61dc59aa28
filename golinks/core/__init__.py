"""Core types, errors and interfaces shared by every layer."""

from golinks.core.errors import (
    GoLinksError,
    RedirectExistsError,
    RedirectNotFoundError,
    StorageError,
    UnknownBackendError,
)
from golinks.core.interfaces import Backend
from golinks.core.types import RedirectModel, has_more, make_public_ref, normalize_alias

__all__ = [
    # Errors
    "GoLinksError",
    "RedirectExistsError",
    "RedirectNotFoundError",
    "StorageError",
    "UnknownBackendError",
    # Interfaces
    "Backend",
    # Types
    "RedirectModel",
    "has_more",
    "make_public_ref",
    "normalize_alias",
]
