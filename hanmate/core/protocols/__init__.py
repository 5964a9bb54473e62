"""Protocol interfaces for dependency injection."""
from .storage import StorageProtocol, StorageError
from .llm import ReplyProtocol, ReplyError
from .speech import SpeechProtocol

__all__ = [
    "StorageProtocol",
    "StorageError",
    "ReplyProtocol",
    "ReplyError",
    "SpeechProtocol",
]
