"""Registry of compiled redirects backed by a storage backend.

Storage owns the canonical alias/destination strings. The registry keeps
the derived compiled forms, compiling on first lookup and replacing or
dropping them whenever a redirect is written through it.
"""

import logging
import threading

from golinks.core.interfaces import Backend
from golinks.core.types import RedirectModel
from golinks.redirects.compiler import CompiledRedirect, compile_redirect
from golinks.redirects.resolver import decode_input, get_destination

logger = logging.getLogger(__name__)


class RedirectRegistry:
    """Thread-safe lookup of compiled redirects.

    Usage:
        registry = RedirectRegistry(backend)
        registry.create("google", "https://duckduckgo.com/{?q=$1}", "alice")
        registry.resolve("google cats")
        # -> "https://duckduckgo.com/?q=cats"
    """

    def __init__(self, backend: Backend):
        self._backend = backend
        # public_ref -> (destination it was compiled from, compiled form)
        self._compiled: dict[str, tuple[str, CompiledRedirect]] = {}
        self._lock = threading.Lock()

    @property
    def backend(self) -> Backend:
        return self._backend

    def _warn(self, message: str) -> None:
        logger.warning("[COMPILE] %s", message)

    def _compile(self, model: RedirectModel) -> CompiledRedirect:
        """Return the cached compiled form, recompiling if the destination moved."""
        with self._lock:
            cached = self._compiled.get(model.public_ref)
            if cached is not None and cached[0] == model.destination:
                return cached[1]

            compiled = compile_redirect(model.alias, model.destination, warn=self._warn)
            self._compiled[model.public_ref] = (model.destination, compiled)
            return compiled

    def _forget(self, public_ref: str) -> None:
        with self._lock:
            self._compiled.pop(public_ref, None)

    # =========================================================================
    # Lookup
    # =========================================================================

    def get(self, reference: str) -> RedirectModel | None:
        """Get the stored record for a public ref or alias."""
        return self._backend.get_redirect(reference)

    def find(self, reference: str) -> CompiledRedirect | None:
        """Find the compiled redirect for a public ref or alias."""
        model = self._backend.get_redirect(reference)
        if model is None:
            return None
        return self._compile(model)

    def resolve(self, path: str) -> str | None:
        """Resolve a lookup path ("alias arg1 arg2...") to a destination.

        Returns:
            Destination URL, or None if no redirect matches the alias
        """
        parsed = decode_input(path)
        alias = parsed.split(" ")[0]
        if not alias:
            return None

        compiled = self.find(alias)
        if compiled is None:
            return None

        logger.debug("[RESOLVE] %s => %s", alias, compiled.alias)
        return get_destination(compiled, path)

    def list(self, page: int = 0, limit: int = 10000) -> list[RedirectModel]:
        return self._backend.get_all(page, limit)

    def count(self) -> int:
        """Total number of stored redirects."""
        return self._backend.count()

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(self, alias: str, destination: str, username: str | None) -> RedirectModel:
        """Create a redirect and compile it.

        Raises:
            RedirectExistsError: If the alias is taken
        """
        model = self._backend.create_redirect(alias, destination, username)
        self._compile(model)
        logger.info("[REDIRECT] Created %s => %s", model.alias, model.destination)
        return model

    def update(self, reference: str, destination: str, username: str | None) -> RedirectModel:
        """Point a redirect at a new destination, replacing its compiled form.

        Raises:
            RedirectNotFoundError: If nothing matches reference
        """
        model = self._backend.update_redirect(reference, destination, username)
        self._forget(model.public_ref)
        self._compile(model)
        logger.info("[REDIRECT] Updated %s => %s", model.alias, model.destination)
        return model

    def delete(self, reference: str) -> int:
        """Delete a redirect and drop its compiled form.

        Raises:
            RedirectNotFoundError: If nothing matches reference
        """
        model = self._backend.get_redirect(reference)
        removed = self._backend.delete_redirect(reference)
        if model is not None:
            self._forget(model.public_ref)
        logger.info("[REDIRECT] Deleted %s", reference)
        return removed

    def cached_count(self) -> int:
        """Number of compiled redirects currently held."""
        with self._lock:
            return len(self._compiled)
