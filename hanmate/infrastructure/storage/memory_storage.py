import logging

from hanmate.core.protocols.storage import StorageError

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-process key-value store with an optional byte quota."""

    def __init__(self, quota_bytes: int | None = None):
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        items = dict(self._items)
        items[key] = value
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None and self._size_with(key, value) > self._quota_bytes:
            raise StorageError(f"Quota of {self._quota_bytes} bytes exceeded for '{key}'")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)
