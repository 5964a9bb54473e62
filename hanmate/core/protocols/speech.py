"""Speech protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class SpeechProtocol(Protocol):
    """Protocol for text-to-speech playback."""

    def speak(self, text: str, lang: str) -> None:
        """Speak text aloud. Fire-and-forget.

        Args:
            text: Text to speak.
            lang: Language tag, e.g. "ko-KR".
        """
        ...
