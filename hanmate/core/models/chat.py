"""Chat domain models."""
import math
import time
from dataclasses import dataclass, field
from typing import Literal

Role = Literal["user", "assistant"]

ROLES: tuple[str, ...] = ("user", "assistant")


def now_millis() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ConversationMessage:
    """Single exchanged message."""
    role: Role
    content: str
    timestamp: int = field(default_factory=now_millis)

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}

    def to_reply_dict(self) -> dict:
        """Role/content pair as sent to the reply service."""
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict) -> "ConversationMessage":
        """Build a message from its stored form.

        Raises:
            ValueError: If role, content or timestamp is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Message must be an object, got {type(data).__name__}")

        role = data.get("role")
        content = data.get("content")
        timestamp = data.get("timestamp")

        if role not in ROLES:
            raise ValueError(f"Unknown role: {role!r}")
        if not isinstance(content, str):
            raise ValueError("Message content must be a string")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not math.isfinite(timestamp):
            raise ValueError("Message timestamp must be a number")

        return cls(role=role, content=content, timestamp=int(timestamp))


@dataclass
class ReplyRequest:
    """Payload sent to the reply service."""
    message: str
    conversation_history: list[dict] = field(default_factory=list)
    context: str = ""

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "conversationHistory": self.conversation_history,
            "context": self.context,
        }


@dataclass
class ReplyResponse:
    """Reply service result."""
    reply: str


@dataclass
class TurnResult:
    """Outcome of one user turn."""
    reply: str
    failed: bool
    locale: str
