"""Error hierarchy for storage and lookup failures.

Template compilation and resolution never raise; only the storage layer
and its callers use these.
"""


class GoLinksError(Exception):
    """Base for all golinks errors."""


class RedirectExistsError(GoLinksError):
    """Raised when creating a redirect whose alias is already taken."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Redirect {alias} already exists")


class RedirectNotFoundError(GoLinksError):
    """Raised when updating or deleting a redirect that does not exist."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Redirect {reference} does not exist")


class UnknownBackendError(GoLinksError):
    """Raised when a backend URL has no matching storage implementation."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Unknown backend for {url}")


class StorageError(GoLinksError):
    """Raised when the underlying store cannot be read or written."""
