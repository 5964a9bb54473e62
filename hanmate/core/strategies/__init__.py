"""Keyword detection strategies."""
from .keywords import KeywordTable, contains_any, detect_topics, has_concern

__all__ = [
    "KeywordTable",
    "contains_any",
    "detect_topics",
    "has_concern",
]
