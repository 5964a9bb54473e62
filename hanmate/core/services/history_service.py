"""History service - bounded conversation log in client storage."""

import json
import logging

from ..models.chat import ConversationMessage
from ..protocols.storage import StorageError, StorageProtocol

logger = logging.getLogger(__name__)


class HistoryStore:
    """Append-only FIFO log of the most recent messages."""

    def __init__(
        self,
        storage: StorageProtocol,
        key: str = "hanmate-conversation-history",
        max_history: int = 20,
        log: logging.Logger | None = None,
    ):
        """Initialize history store.

        Args:
            storage: Client-local key-value storage.
            key: Storage key owned by this store.
            max_history: Number of most recent messages kept.
            log: Diagnostic sink for swallowed storage errors.
        """
        self._storage = storage
        self._key = key
        self._max_history = max_history
        self._log = log or logger
        # Set when a write failed; then it outranks persisted data
        self._fallback: list[ConversationMessage] | None = None

    @property
    def max_history(self) -> int:
        return self._max_history

    def append(self, message: ConversationMessage) -> None:
        """Append message and evict the oldest entries beyond the cap."""
        history = self.read()
        history.append(message)
        history = history[-self._max_history:]

        try:
            payload = json.dumps(
                [m.to_dict() for m in history], ensure_ascii=False
            )
            self._storage.set_item(self._key, payload)
        except (StorageError, TypeError, ValueError) as e:
            self._log.error(f"Error saving message: {e}")
            self._fallback = history
            return

        self._fallback = None

    def read(self) -> list[ConversationMessage]:
        """Return stored history; corrupt or missing data reads as empty."""
        if self._fallback is not None:
            return list(self._fallback)

        try:
            stored = self._storage.get_item(self._key)
        except StorageError as e:
            self._log.error(f"Error reading conversation history: {e}")
            return []

        if not stored:
            return []

        try:
            data = json.loads(stored)
            if not isinstance(data, list):
                raise ValueError("history payload is not a list")
            history = [ConversationMessage.from_dict(item) for item in data]
        except (ValueError, RecursionError) as e:
            self._log.warning(f"Discarding unreadable conversation history: {e}")
            return []

        return history[-self._max_history:]

    def recent(self, n: int) -> list[ConversationMessage]:
        """Return the last n messages."""
        if n <= 0:
            return []
        return self.read()[-n:]

    def as_reply_history(self, n: int = 10) -> list[dict]:
        """Last n messages as role/content dicts for the reply service."""
        return [m.to_reply_dict() for m in self.recent(n)]

    def clear(self) -> None:
        """Delete all stored history."""
        try:
            self._storage.remove_item(self._key)
        except StorageError as e:
            self._log.error(f"Error clearing conversation history: {e}")
            self._fallback = []
            return
        self._fallback = None
        self._log.info("Conversation history cleared")
