"""In-memory redirect storage.

Also the working set behind JsonBackend, which persists this list to disk
after every mutation.
"""

import logging
import threading

from golinks.core.errors import RedirectExistsError, RedirectNotFoundError
from golinks.core.interfaces import Backend
from golinks.core.types import RedirectModel, normalize_alias

logger = logging.getLogger(__name__)


class InMemoryBackend(Backend):
    """Redirects held in a list, in insertion order.

    Thread-safe: all access goes through one reentrant lock.
    """

    def __init__(self, redirects: list[RedirectModel] | None = None):
        self._redirects: list[RedirectModel] = list(redirects or [])
        self._lock = threading.RLock()

    def snapshot(self) -> list[RedirectModel]:
        """Copy of every stored redirect."""
        with self._lock:
            return list(self._redirects)

    def _index_of(self, reference: str) -> int | None:
        for i, redirect in enumerate(self._redirects):
            if redirect.refers_to(reference):
                return i
        return None

    def get_redirect(self, reference: str) -> RedirectModel | None:
        with self._lock:
            index = self._index_of(reference)
            return self._redirects[index] if index is not None else None

    def create_redirect(
        self,
        alias: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        normalized = normalize_alias(alias)
        with self._lock:
            if any(r.alias == normalized for r in self._redirects):
                raise RedirectExistsError(normalized)

            redirect_id = max((r.redirect_id for r in self._redirects), default=0) + 1
            model = RedirectModel.new(redirect_id, normalized, destination, username)
            self._redirects.append(model)

        logger.debug("[MEMORY] Created %s (id=%d)", model.alias, model.redirect_id)
        return model

    def update_redirect(
        self,
        reference: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        with self._lock:
            index = self._index_of(reference)
            if index is None:
                raise RedirectNotFoundError(reference)

            model = self._redirects[index].with_destination(destination, username)
            self._redirects[index] = model
            return model

    def delete_redirect(self, reference: str) -> int:
        with self._lock:
            index = self._index_of(reference)
            if index is None:
                raise RedirectNotFoundError(reference)

            del self._redirects[index]
            return 1

    def get_all(self, page: int = 0, limit: int = 10000) -> list[RedirectModel]:
        begin = limit * page
        with self._lock:
            return self._redirects[begin : begin + limit]

    def count(self) -> int:
        with self._lock:
            return len(self._redirects)
