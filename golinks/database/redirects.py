"""Database CRUD operations for redirects, and the SQLite backend built on them.

Aliases are stored lower-case without a leading slash; lookups accept
either the public ref or the alias.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from sqlite3 import Connection, IntegrityError, Row

from golinks.core.errors import RedirectExistsError, RedirectNotFoundError
from golinks.core.interfaces import Backend
from golinks.core.types import RedirectModel, make_public_ref, normalize_alias
from golinks.database.connection import get_db, init_db

logger = logging.getLogger(__name__)


def _row_to_redirect(row: Row) -> RedirectModel:
    """Convert a database row to RedirectModel."""
    created_on = row["created_on"]
    return RedirectModel(
        redirect_id=row["id"],
        public_ref=row["public_ref"],
        alias=row["alias"],
        destination=row["destination"],
        created_on=datetime.fromisoformat(created_on) if isinstance(created_on, str) else created_on,
        created_by=row["created_by"],
    )


def get_redirect(conn: Connection, reference: str) -> RedirectModel | None:
    """Get a redirect by public ref or alias."""
    row = conn.execute(
        "SELECT * FROM redirects WHERE public_ref = ? OR alias = ? ORDER BY id LIMIT 1",
        (reference, normalize_alias(reference)),
    ).fetchone()
    return _row_to_redirect(row) if row else None


def list_redirects(conn: Connection, page: int = 0, limit: int = 10000) -> list[RedirectModel]:
    """List one page of redirects in insertion order."""
    rows = conn.execute(
        "SELECT * FROM redirects ORDER BY id LIMIT ? OFFSET ?",
        (limit, limit * page),
    ).fetchall()
    return [_row_to_redirect(row) for row in rows]


def count_redirects(conn: Connection) -> int:
    """Count all stored redirects."""
    return conn.execute("SELECT COUNT(*) FROM redirects").fetchone()[0]


def create_redirect(
    conn: Connection,
    alias: str,
    destination: str,
    created_by: str | None = None,
) -> RedirectModel:
    """Create a new redirect.

    Raises:
        RedirectExistsError: If the alias is already taken
    """
    normalized = normalize_alias(alias)
    created_on = datetime.now(timezone.utc).replace(tzinfo=None)
    try:
        cursor = conn.execute(
            """
            INSERT INTO redirects (public_ref, alias, destination, created_on, created_by)
            VALUES (?, ?, ?, ?, ?)
            """,
            (make_public_ref(), normalized, destination, created_on.isoformat(), created_by),
        )
    except IntegrityError as e:
        raise RedirectExistsError(normalized) from e

    row = conn.execute("SELECT * FROM redirects WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return _row_to_redirect(row)


def update_redirect(
    conn: Connection,
    reference: str,
    destination: str,
    created_by: str | None = None,
) -> RedirectModel:
    """Point a redirect at a new destination.

    Raises:
        RedirectNotFoundError: If no redirect matches reference
    """
    existing = get_redirect(conn, reference)
    if existing is None:
        raise RedirectNotFoundError(reference)

    conn.execute(
        "UPDATE redirects SET destination = ?, created_by = ? WHERE id = ?",
        (destination, created_by, existing.redirect_id),
    )
    return existing.with_destination(destination, created_by)


def delete_redirect(conn: Connection, reference: str) -> int:
    """Delete a redirect, returning the number of rows removed.

    Raises:
        RedirectNotFoundError: If no redirect matches reference
    """
    existing = get_redirect(conn, reference)
    if existing is None:
        raise RedirectNotFoundError(reference)

    cursor = conn.execute("DELETE FROM redirects WHERE id = ?", (existing.redirect_id,))
    return cursor.rowcount


class SqliteBackend(Backend):
    """Redirects stored in a SQLite database.

    Each call opens its own connection via get_db(), so the backend can be
    shared between request threads.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        init_db(self.db_path)

    def get_redirect(self, reference: str) -> RedirectModel | None:
        with get_db(self.db_path) as conn:
            return get_redirect(conn, reference)

    def create_redirect(
        self,
        alias: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        with get_db(self.db_path) as conn:
            return create_redirect(conn, alias, destination, username)

    def update_redirect(
        self,
        reference: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        with get_db(self.db_path) as conn:
            return update_redirect(conn, reference, destination, username)

    def delete_redirect(self, reference: str) -> int:
        with get_db(self.db_path) as conn:
            return delete_redirect(conn, reference)

    def get_all(self, page: int = 0, limit: int = 10000) -> list[RedirectModel]:
        with get_db(self.db_path) as conn:
            return list_redirects(conn, page, limit)

    def count(self) -> int:
        with get_db(self.db_path) as conn:
            return count_redirects(conn)
