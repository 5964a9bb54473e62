"""Reply service protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.chat import ReplyRequest, ReplyResponse


class ReplyError(Exception):
    """Reply could not be produced."""


@runtime_checkable
class ReplyProtocol(Protocol):
    """Protocol for the reply-generation service."""

    async def generate_reply(self, request: ReplyRequest) -> ReplyResponse:
        """Generate a reply for the user's message.

        Args:
            request: Message, recent history and context summary.

        Returns:
            Reply text.

        Raises:
            ReplyError: On network failure, non-success response,
                or malformed payload.
        """
        ...
