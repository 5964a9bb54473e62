import json
import logging
import os
import tempfile
from pathlib import Path

from hanmate.core.protocols.storage import StorageError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Key-value string store kept in one JSON file per client origin."""

    def __init__(self, path: str = "./data/local_storage.json"):
        """Initialize file storage.

        Args:
            path: JSON file holding all keys of this origin.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e
        except ValueError:
            logger.warning(f"Storage file {self._path} is corrupt, starting empty")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self._path} has wrong shape, starting empty")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, items: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=".storage-", suffix=".json"
            )
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"Cannot write {self._path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._dump(items)
