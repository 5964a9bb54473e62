"""User profile domain model."""
import math
from dataclasses import dataclass, field

from .chat import now_millis


def _string_list(value, name: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Profile field '{name}' must be a list of strings")
    return value


@dataclass
class UserProfile:
    """Slow-changing summary of what the user talks about."""
    preferences: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)
    last_active: int = field(default_factory=now_millis)
    conversation_count: int = 0

    def add_topic(self, topic: str) -> bool:
        """Add topic once, keeping first-detection order.

        Returns:
            True if the topic was new.
        """
        if topic in self.topics:
            return False
        self.topics.append(topic)
        return True

    def add_concern(self, excerpt: str, limit: int = 5) -> bool:
        """Append concern excerpt unless already present, keep last `limit`."""
        if excerpt in self.concerns:
            return False
        self.concerns.append(excerpt)
        self.concerns = self.concerns[-limit:]
        return True

    def to_dict(self) -> dict:
        return {
            "preferences": list(self.preferences),
            "topics": list(self.topics),
            "concerns": list(self.concerns),
            "lastActive": self.last_active,
            "conversationCount": self.conversation_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """Build a profile from its stored form.

        Raises:
            ValueError: If the payload does not look like a stored profile.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Profile must be an object, got {type(data).__name__}")

        last_active = data.get("lastActive")
        count = data.get("conversationCount")
        for name, value in (("lastActive", last_active), ("conversationCount", count)):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"Profile field '{name}' must be a number")

        topics: list[str] = []
        for topic in _string_list(data.get("topics"), "topics"):
            if topic not in topics:
                topics.append(topic)

        # Older payloads may lack preferences
        preferences = _string_list(data.get("preferences", []), "preferences")

        return cls(
            preferences=list(dict.fromkeys(preferences)),
            topics=topics,
            concerns=list(_string_list(data.get("concerns"), "concerns")),
            last_active=int(last_active),
            conversation_count=int(count),
        )
