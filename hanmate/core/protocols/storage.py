"""Storage protocol for dependency injection."""
from typing import Protocol, runtime_checkable


class StorageError(Exception):
    """Storage is unavailable, full, or refused the write."""


@runtime_checkable
class StorageProtocol(Protocol):
    """Key-value string store scoped to one client origin."""

    def get_item(self, key: str) -> str | None:
        """Get stored value.

        Args:
            key: Storage key.

        Returns:
            Stored string or None if the key is absent.

        Raises:
            StorageError: If the store cannot be read.
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store value under key.

        Raises:
            StorageError: If the value cannot be stored.
        """
        ...

    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        ...
