"""Database layer.

Storage backends for redirect records, selected by URL:

    memory://            InMemoryBackend (lost on restart)
    file:///path.json    JsonBackend
    sqlite:///path.db    SqliteBackend
"""

import logging

from golinks.core.errors import UnknownBackendError
from golinks.core.interfaces import Backend
from golinks.database.connection import get_connection, get_db, init_db
from golinks.database.json_file import JsonBackend
from golinks.database.memory import InMemoryBackend
from golinks.database.redirects import (
    SqliteBackend,
    count_redirects,
    create_redirect,
    delete_redirect,
    get_redirect,
    list_redirects,
    update_redirect,
)

logger = logging.getLogger(__name__)


def create_backend(url: str) -> Backend:
    """Create the storage backend for a backend URL.

    Raises:
        UnknownBackendError: If the URL scheme is not supported
    """
    if url.startswith("memory://"):
        logger.info("[DATABASE] Using in-memory storage")
        return InMemoryBackend()

    if url.startswith("file://"):
        path = url[len("file://") :]
        logger.info("[DATABASE] Using JSON file storage at %s", path)
        return JsonBackend(path)

    if url.startswith("sqlite://"):
        path = url[len("sqlite://") :]
        logger.info("[DATABASE] Using SQLite storage at %s", path)
        return SqliteBackend(path)

    raise UnknownBackendError(url)


__all__ = [
    "InMemoryBackend",
    "JsonBackend",
    "SqliteBackend",
    "count_redirects",
    "create_backend",
    "create_redirect",
    "delete_redirect",
    "get_connection",
    "get_db",
    "get_redirect",
    "init_db",
    "list_redirects",
    "update_redirect",
]
