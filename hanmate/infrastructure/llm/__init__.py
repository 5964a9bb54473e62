"""Reply service clients."""
from .openai_client import OpenAIReplyClient

__all__ = ["OpenAIReplyClient"]
