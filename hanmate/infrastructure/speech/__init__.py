"""Speech implementations."""
from .log_speaker import LogSpeaker

__all__ = ["LogSpeaker"]
