"""Profile service - learns topics/concerns and builds prompt context."""

import json
import logging
from typing import Callable

from ..models.chat import ConversationMessage, now_millis
from ..models.profile import UserProfile
from ..protocols.storage import StorageError, StorageProtocol
from ..strategies.keywords import KeywordTable, contains_any, detect_topics, has_concern
from .history_service import HistoryStore

logger = logging.getLogger(__name__)


class ProfileLearner:
    """Derives a user profile from recent history via keyword matching."""

    def __init__(
        self,
        storage: StorageProtocol,
        history: HistoryStore,
        keywords: KeywordTable | None = None,
        key: str = "hanmate-user-profile",
        learn_window: int = 10,
        concern_window: int = 3,
        max_concerns: int = 5,
        excerpt_length: int = 50,
        summary_history_window: int = 6,
        summary_concerns: int = 2,
        clock: Callable[[], int] = now_millis,
        log: logging.Logger | None = None,
    ):
        """Initialize profile learner.

        Args:
            storage: Client-local key-value storage.
            history: History store read by the context summary.
            keywords: Topic and concern trigger table.
            key: Storage key owned by this learner.
            learn_window: Messages scanned per learn call.
            concern_window: Messages searched for a concern excerpt.
            max_concerns: Concerns kept (oldest dropped first).
            excerpt_length: Characters kept per concern excerpt.
            summary_history_window: Messages rendered in the context summary.
            summary_concerns: Concerns rendered in the context summary.
            clock: Millisecond clock.
            log: Diagnostic sink for swallowed storage errors.
        """
        self._storage = storage
        self._history = history
        self._keywords = keywords or KeywordTable()
        self._key = key
        self._learn_window = learn_window
        self._concern_window = concern_window
        self._max_concerns = max_concerns
        self._excerpt_length = excerpt_length
        self._summary_history_window = summary_history_window
        self._summary_concerns = summary_concerns
        self._clock = clock
        self._log = log or logger
        self._fallback: UserProfile | None = None

    def _default_profile(self) -> UserProfile:
        return UserProfile(last_active=self._clock())

    def profile(self) -> UserProfile:
        """Return stored profile; corrupt or missing data reads as default."""
        if self._fallback is not None:
            return UserProfile.from_dict(self._fallback.to_dict())

        try:
            stored = self._storage.get_item(self._key)
        except StorageError as e:
            self._log.error(f"Error reading user profile: {e}")
            return self._default_profile()

        if not stored:
            return self._default_profile()

        try:
            return UserProfile.from_dict(json.loads(stored))
        except (ValueError, RecursionError) as e:
            self._log.warning(f"Discarding unreadable user profile: {e}")
            return self._default_profile()

    def save(self, profile: UserProfile) -> None:
        try:
            payload = json.dumps(profile.to_dict(), ensure_ascii=False)
            self._storage.set_item(self._key, payload)
        except (StorageError, TypeError, ValueError) as e:
            self._log.error(f"Error saving user profile: {e}")
            self._fallback = profile
            return

        self._fallback = None

    def _find_concern(self, messages: list[ConversationMessage]) -> str | None:
        """Excerpt of the most recent message in the window with a concern trigger."""
        window = messages[-self._concern_window:] if self._concern_window > 0 else []
        for message in reversed(window):
            if contains_any(message.content, self._keywords.concerns):
                return message.content[: self._excerpt_length]
        return None

    def learn(self, history: list[ConversationMessage]) -> None:
        """Update topics, concerns and activity counters from history."""
        profile = self.profile()

        recent = history[-self._learn_window:] if self._learn_window > 0 else []
        blob = " ".join(m.content for m in recent).lower()

        for topic in detect_topics(blob, self._keywords):
            if profile.add_topic(topic):
                logger.info(f"New topic detected: {topic}")

        if has_concern(blob, self._keywords):
            excerpt = self._find_concern(history)
            if excerpt:
                profile.add_concern(excerpt, limit=self._max_concerns)

        # Stored profiles may carry more concerns than the current limit
        profile.concerns = profile.concerns[-self._max_concerns:] if self._max_concerns > 0 else []
        profile.last_active = self._clock()
        profile.conversation_count += 1

        self.save(profile)

    def context_summary(self) -> str:
        """Compress profile and recent history into a prompt-context string."""
        profile = self.profile()
        history = self._history.read()

        if not history and not profile.topics:
            return ""

        parts: list[str] = []

        if profile.topics:
            parts.append(
                f"User has mentioned these topics: {', '.join(profile.topics)}"
            )

        if profile.concerns and self._summary_concerns > 0:
            concerns = profile.concerns[-self._summary_concerns:]
            parts.append(f"Recent concerns: {'; '.join(concerns)}")

        if history:
            recent = history[-self._summary_history_window:]
            rendered = " | ".join(f"{m.role}: {m.content}" for m in recent)
            parts.append(f"Recent conversation context: {rendered}")

        return ". ".join(parts)
