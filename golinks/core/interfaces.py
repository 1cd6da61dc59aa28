"""Abstract interfaces for golinks.

Defines the contract every storage backend implements.
"""

from abc import ABC, abstractmethod

from golinks.core.types import RedirectModel


class Backend(ABC):
    """Abstract base class for redirect storage.

    Backends own the canonical alias/destination strings. References passed
    to the lookup and mutation methods may be either a record's public ref
    or its alias (matched after normalize_alias).

    Implementations must be safe to call from concurrent request handlers;
    mutations are serialized by the backend itself.
    """

    @abstractmethod
    def get_redirect(self, reference: str) -> RedirectModel | None:
        """Get a redirect by public ref or alias, None if missing."""
        ...

    @abstractmethod
    def create_redirect(
        self,
        alias: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        """Create a redirect.

        Raises:
            RedirectExistsError: If the alias is already taken
        """
        ...

    @abstractmethod
    def update_redirect(
        self,
        reference: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        """Point an existing redirect at a new destination.

        Raises:
            RedirectNotFoundError: If no redirect matches reference
        """
        ...

    @abstractmethod
    def delete_redirect(self, reference: str) -> int:
        """Delete a redirect, returning the number of records removed.

        Raises:
            RedirectNotFoundError: If no redirect matches reference
        """
        ...

    @abstractmethod
    def get_all(self, page: int = 0, limit: int = 10000) -> list[RedirectModel]:
        """Get one page of redirects in insertion order."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Total number of stored redirects."""
        ...

    def close(self) -> None:  # noqa: B027
        """Release any held resources. Default is a no-op."""
