import logging
from collections import deque

logger = logging.getLogger(__name__)


class LogSpeaker:
    """Speech collaborator that records what would be spoken.

    Playback itself happens in the client (browser speech synthesis);
    the server side only hands over text, language and rate.
    """

    def __init__(self, rate: float = 0.9):
        self._rate = rate
        self.spoken: deque[tuple[str, str]] = deque(maxlen=20)

    @property
    def rate(self) -> float:
        return self._rate

    def speak(self, text: str, lang: str) -> None:
        self.spoken.append((text, lang))
        logger.info(f"[speak] lang={lang} rate={self._rate} '{text[:50]}...'")
