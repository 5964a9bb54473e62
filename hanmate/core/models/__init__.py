"""Domain models."""
from .chat import (
    ConversationMessage,
    ReplyRequest,
    ReplyResponse,
    TurnResult,
    now_millis,
)
from .locale import LOCALES, LocaleInfo, get_locale
from .profile import UserProfile
from .social import NEARBY_PEOPLE, NearbyPerson

__all__ = [
    "ConversationMessage",
    "ReplyRequest",
    "ReplyResponse",
    "TurnResult",
    "now_millis",
    "LOCALES",
    "LocaleInfo",
    "get_locale",
    "UserProfile",
    "NEARBY_PEOPLE",
    "NearbyPerson",
]
