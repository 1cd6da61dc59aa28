"""JSON file redirect storage.

The whole file is loaded into an InMemoryBackend at startup and rewritten
after every mutation:

    {"redirects": [{"redirect_id": 1, "public_ref": "...", ...}]}
"""

import json
import logging
import threading
from pathlib import Path

from golinks.core.errors import StorageError
from golinks.core.interfaces import Backend
from golinks.core.types import RedirectModel
from golinks.database.memory import InMemoryBackend

logger = logging.getLogger(__name__)


def load_redirects(path: Path) -> list[RedirectModel]:
    """Read every redirect from a JSON file.

    Raises:
        StorageError: If the file is not valid JSON in the expected shape
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return [RedirectModel.from_dict(item) for item in data["redirects"]]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.error("[JSON] Unable to read JSON file %s: %s", path, e)
        raise StorageError(f"Unable to read JSON file {path}: {e}") from e


def save_redirects(path: Path, redirects: list[RedirectModel]) -> None:
    """Write every redirect to a JSON file, replacing its contents."""
    payload = {"redirects": [r.to_dict() for r in redirects]}
    try:
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Unable to write JSON file {path}: {e}") from e


class JsonBackend(Backend):
    """Redirects persisted to a single JSON file.

    Mutations are saved even when they fail, so the file always mirrors
    the in-memory state.
    """

    def __init__(self, file_path: Path | str):
        self.file_path = Path(file_path)
        self._save_lock = threading.Lock()

        if not self.file_path.exists():
            logger.warning("[JSON] %s does not exist, creating new file.", self.file_path)
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self._memory = InMemoryBackend()
            save_redirects(self.file_path, [])
        else:
            self._memory = InMemoryBackend(load_redirects(self.file_path))
            logger.info(
                "[JSON] Loaded %d redirects from %s",
                len(self._memory.snapshot()),
                self.file_path,
            )

    def _save(self) -> None:
        with self._save_lock:
            save_redirects(self.file_path, self._memory.snapshot())

    def get_redirect(self, reference: str) -> RedirectModel | None:
        return self._memory.get_redirect(reference)

    def create_redirect(
        self,
        alias: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        try:
            return self._memory.create_redirect(alias, destination, username)
        finally:
            self._save()

    def update_redirect(
        self,
        reference: str,
        destination: str,
        username: str | None,
    ) -> RedirectModel:
        try:
            return self._memory.update_redirect(reference, destination, username)
        finally:
            self._save()

    def delete_redirect(self, reference: str) -> int:
        try:
            return self._memory.delete_redirect(reference)
        finally:
            self._save()

    def get_all(self, page: int = 0, limit: int = 10000) -> list[RedirectModel]:
        return self._memory.get_all(page, limit)

    def count(self) -> int:
        return self._memory.count()
