"""Tests for the redirect storage backends.

Every backend implements the same contract, so the shared cases run
against all three; file- and database-specific behavior follows.
"""

import json

import pytest

from golinks.core.errors import (
    RedirectExistsError,
    RedirectNotFoundError,
    StorageError,
    UnknownBackendError,
)
from golinks.database import (
    InMemoryBackend,
    JsonBackend,
    SqliteBackend,
    create_backend,
    get_db,
)


@pytest.fixture(params=["memory", "json", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        return InMemoryBackend()
    if request.param == "json":
        return JsonBackend(tmp_path / "redirects.json")
    return SqliteBackend(tmp_path / "golinks.db")


# =============================================================================
# SHARED CONTRACT
# =============================================================================


class TestBackendContract:
    """Test behavior shared by every storage backend."""

    def test_create_and_get_by_alias(self, backend):
        created = backend.create_redirect("jira", "https://jira.example.com{/browse/$1}", "alice")
        found = backend.get_redirect("jira")

        assert found is not None
        assert found.public_ref == created.public_ref
        assert found.destination == "https://jira.example.com{/browse/$1}"
        assert found.created_by == "alice"

    def test_get_by_public_ref(self, backend):
        created = backend.create_redirect("jira", "https://jira.example.com", "alice")
        assert backend.get_redirect(created.public_ref).alias == "jira"

    def test_alias_is_normalized(self, backend):
        created = backend.create_redirect("/Jira", "https://jira.example.com", None)
        assert created.alias == "jira"
        assert backend.get_redirect("JIRA") is not None
        assert backend.get_redirect("/jira") is not None

    def test_public_ref_shape(self, backend):
        created = backend.create_redirect("jira", "https://jira.example.com", None)
        assert len(created.public_ref) == 10
        assert created.public_ref.isalnum()

    def test_missing_returns_none(self, backend):
        assert backend.get_redirect("nothing") is None

    def test_duplicate_alias_rejected(self, backend):
        backend.create_redirect("jira", "https://jira.example.com", "alice")
        with pytest.raises(RedirectExistsError):
            backend.create_redirect("JIRA", "https://other.example.com", "bob")

    def test_ids_increase(self, backend):
        first = backend.create_redirect("a", "https://a.example.com", None)
        second = backend.create_redirect("b", "https://b.example.com", None)
        assert second.redirect_id > first.redirect_id

    def test_update(self, backend):
        backend.create_redirect("jira", "https://jira.example.com", "alice")
        updated = backend.update_redirect("jira", "https://new.example.com", "bob")

        assert updated.destination == "https://new.example.com"
        assert updated.created_by == "bob"
        assert backend.get_redirect("jira").destination == "https://new.example.com"

    def test_update_missing(self, backend):
        with pytest.raises(RedirectNotFoundError):
            backend.update_redirect("nothing", "https://x.example.com", None)

    def test_delete(self, backend):
        created = backend.create_redirect("jira", "https://jira.example.com", None)
        assert backend.delete_redirect(created.public_ref) == 1
        assert backend.get_redirect("jira") is None

    def test_delete_missing(self, backend):
        with pytest.raises(RedirectNotFoundError):
            backend.delete_redirect("nothing")

    def test_get_all_pages(self, backend):
        for name in ["a", "b", "c", "d", "e"]:
            backend.create_redirect(name, f"https://{name}.example.com", None)

        assert [r.alias for r in backend.get_all(0, 2)] == ["a", "b"]
        assert [r.alias for r in backend.get_all(1, 2)] == ["c", "d"]
        assert [r.alias for r in backend.get_all(2, 2)] == ["e"]
        assert backend.get_all(3, 2) == []
        assert len(backend.get_all()) == 5

    def test_count(self, backend):
        assert backend.count() == 0
        backend.create_redirect("a", "https://a.example.com", None)
        backend.create_redirect("b", "https://b.example.com", None)
        assert backend.count() == 2
        backend.delete_redirect("a")
        assert backend.count() == 1


# =============================================================================
# JSON FILE
# =============================================================================


class TestJsonBackend:
    """Test the JSON file backend."""

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "redirects.json"
        JsonBackend(path)
        assert json.loads(path.read_text()) == {"redirects": []}

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "redirects.json"
        JsonBackend(path).create_redirect("jira", "https://jira.example.com", "alice")

        reloaded = JsonBackend(path)
        found = reloaded.get_redirect("jira")
        assert found is not None
        assert found.created_by == "alice"

    def test_saves_after_delete(self, tmp_path):
        path = tmp_path / "redirects.json"
        backend = JsonBackend(path)
        backend.create_redirect("jira", "https://jira.example.com", None)
        backend.delete_redirect("jira")
        assert json.loads(path.read_text()) == {"redirects": []}

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "redirects.json"
        path.write_text("not json")
        with pytest.raises(StorageError):
            JsonBackend(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "redirects.json"
        path.write_text(json.dumps({"links": []}))
        with pytest.raises(StorageError):
            JsonBackend(path)


# =============================================================================
# SQLITE
# =============================================================================


class TestSqliteBackend:
    """Test the SQLite backend."""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "golinks.db"
        SqliteBackend(path).create_redirect("jira", "https://jira.example.com", "alice")
        assert SqliteBackend(path).get_redirect("jira").created_by == "alice"

    def test_failed_create_leaves_no_row(self, tmp_path):
        path = tmp_path / "golinks.db"
        backend = SqliteBackend(path)
        backend.create_redirect("jira", "https://jira.example.com", None)
        with pytest.raises(RedirectExistsError):
            backend.create_redirect("jira", "https://other.example.com", None)

        with get_db(path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM redirects").fetchone()[0]
        assert count == 1


# =============================================================================
# FACTORY
# =============================================================================


class TestCreateBackend:
    """Test picking a backend from a database URL."""

    def test_memory(self):
        assert isinstance(create_backend("memory://"), InMemoryBackend)

    def test_file(self, tmp_path):
        backend = create_backend(f"file://{tmp_path / 'redirects.json'}")
        assert isinstance(backend, JsonBackend)

    def test_sqlite(self, tmp_path):
        backend = create_backend(f"sqlite://{tmp_path / 'golinks.db'}")
        assert isinstance(backend, SqliteBackend)

    def test_unknown(self):
        with pytest.raises(UnknownBackendError):
            create_backend("postgres://localhost/golinks")
