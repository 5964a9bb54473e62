import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


DEFAULT_TOPIC_KEYWORDS: dict[str, list[str]] = {
    "health": ["건강", "병원", "약", "아픔", "통증", "치료", "health", "hospital", "medicine", "pain"],
    "family": ["가족", "자식", "손자", "딸", "아들", "family", "son", "daughter", "grandchild"],
    "loneliness": ["외로움", "혼자", "고독", "lonely", "alone", "loneliness"],
    "money": ["돈", "경제", "생활비", "연금", "money", "economy", "pension", "expenses"],
    "daily": ["일상", "하루", "요리", "산책", "독서", "daily", "cooking", "walking", "reading"],
}

DEFAULT_CONCERN_KEYWORDS: list[str] = [
    "걱정", "불안", "힘들", "어렵", "worried", "anxious", "difficult", "hard",
]


@dataclass
class KeywordTable:
    """Trigger substrings for topic and concern detection."""
    topics: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_TOPIC_KEYWORDS.items()}
    )
    concerns: list[str] = field(default_factory=lambda: list(DEFAULT_CONCERN_KEYWORDS))

    def __post_init__(self) -> None:
        # Scanned text is case-folded, so triggers must be too
        self.topics = {
            str(topic): [str(k).lower() for k in keywords]
            for topic, keywords in self.topics.items()
        }
        self.concerns = [str(k).lower() for k in self.concerns]

    @classmethod
    def from_file(cls, path: str | Path) -> "KeywordTable":
        """Load table from JSON, falling back to built-in defaults."""
        config_file = Path(path)
        if not config_file.exists():
            logger.warning(f"Keyword config {path} not found, using defaults")
            return cls()

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
            table = cls.from_dict(config)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to load keyword config {path}: {e}")
            return cls()

        logger.info(
            f"Keyword config loaded from {path}: "
            f"{len(table.topics)} topics, {len(table.concerns)} concern triggers"
        )
        return table

    @classmethod
    def from_dict(cls, config: dict) -> "KeywordTable":
        if not isinstance(config, dict):
            raise ValueError("Keyword config must be an object")

        topics = config.get("topics", DEFAULT_TOPIC_KEYWORDS)
        concerns = config.get("concerns", DEFAULT_CONCERN_KEYWORDS)
        if not isinstance(topics, dict) or not isinstance(concerns, list):
            raise ValueError("Keyword config has wrong shape")

        return cls(topics=dict(topics), concerns=list(concerns))


def contains_any(text: str, keywords: list[str]) -> bool:
    """Check whether any trigger substring occurs in text (case-folded)."""
    text_lower = text.lower()
    return any(keyword in text_lower for keyword in keywords)


def detect_topics(blob: str, table: KeywordTable) -> list[str]:
    """Return topic labels whose triggers occur in blob, in table order."""
    return [
        topic
        for topic, keywords in table.topics.items()
        if contains_any(blob, keywords)
    ]


def has_concern(blob: str, table: KeywordTable) -> bool:
    return contains_any(blob, table.concerns)
