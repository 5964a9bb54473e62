"""Core business services."""
from .history_service import HistoryStore
from .profile_service import ProfileLearner
from .conversation_service import ConversationService

__all__ = [
    "HistoryStore",
    "ProfileLearner",
    "ConversationService",
]
