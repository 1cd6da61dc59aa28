"""Core data types for stored redirects."""

import secrets
import string
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

PUBLIC_REF_LENGTH = 10
_PUBLIC_REF_ALPHABET = string.ascii_letters + string.digits


def make_public_ref() -> str:
    """Generate a random 10-character alphanumeric public reference."""
    return "".join(secrets.choice(_PUBLIC_REF_ALPHABET) for _ in range(PUBLIC_REF_LENGTH))


def normalize_alias(alias: str) -> str:
    """Normalize an alias for storage and lookup.

    Aliases are stored lower-case without a leading slash, so that
    "/Google", "google" and "GOOGLE" all refer to the same record.
    """
    return alias.strip().lstrip("/").lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class RedirectModel:
    """A stored alias -> destination record.

    The destination is the raw template text; its compiled form lives in
    golinks.redirects and is derived from this record on demand.
    """

    redirect_id: int
    public_ref: str
    alias: str
    destination: str
    created_on: datetime = field(default_factory=_utcnow)
    created_by: str | None = None

    @classmethod
    def new(
        cls,
        redirect_id: int,
        alias: str,
        destination: str,
        created_by: str | None = None,
    ) -> "RedirectModel":
        """Create a fresh record with a random public reference."""
        return cls(
            redirect_id=redirect_id,
            public_ref=make_public_ref(),
            alias=normalize_alias(alias),
            destination=destination,
            created_by=created_by,
        )

    def with_destination(self, destination: str, username: str | None) -> "RedirectModel":
        """Return a copy pointing at a new destination, owned by username."""
        return replace(self, destination=destination, created_by=username)

    def refers_to(self, reference: str) -> bool:
        """True if reference is this record's public ref or its alias."""
        return self.public_ref == reference or self.alias == normalize_alias(reference)

    def to_dict(self) -> dict:
        return {
            "redirect_id": self.redirect_id,
            "public_ref": self.public_ref,
            "alias": self.alias,
            "destination": self.destination,
            "created_on": self.created_on.isoformat(),
            "created_by": self.created_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RedirectModel":
        created_on = data.get("created_on")
        return cls(
            redirect_id=int(data["redirect_id"]),
            public_ref=data["public_ref"],
            alias=data["alias"],
            destination=data["destination"],
            created_on=datetime.fromisoformat(created_on) if created_on else _utcnow(),
            created_by=data.get("created_by"),
        )


def has_more(page: int, size: int, total: int) -> bool:
    """True if redirects remain after the given page.

    has_more(0, 50, 100) -> True
    has_more(10, 50, 400) -> False
    """
    return (1 + page) * size < total
