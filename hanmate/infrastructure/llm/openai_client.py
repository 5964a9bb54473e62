
import asyncio
import logging
import random
import re

from openai import AsyncOpenAI, OpenAIError

from hanmate.core.models.chat import ReplyRequest, ReplyResponse
from hanmate.core.protocols.llm import ReplyError

logger = logging.getLogger(__name__)

_HANGUL_RE = re.compile(r"[가-힣]")

FALLBACK_REPLY = "죄송합니다. 다시 말씀해주실 수 있나요?"

SYSTEM_PROMPT_KO = """You are 'HanMate', a warm, gentle Korean AI companion for elderly people living alone in Korea.
Your job is to LISTEN first and COMFORT second.
Always reply in natural, simple Korean with 존댓말 but not too formal.
Keep replies short: 2-3 sentences.
If the user talks about loneliness, money, health, or family, first acknowledge the feeling (e.g. '그동안 많이 힘드셨겠어요.'), then offer a small, doable suggestion (e.g. '따뜻한 차 한 잔 하셔도 좋을 것 같아요.').
Do NOT mention that you are an AI or language model.
Sound human, caring, and present."""

SYSTEM_PROMPT_EN = """You are 'HanMate', a warm, gentle AI companion for elderly people living alone.
Your job is to LISTEN first and COMFORT second.
Always reply in natural, simple English.
Keep replies short: 2-3 sentences.
If the user talks about loneliness, money, health, or family, first acknowledge the feeling, then offer a small, doable suggestion.
Do NOT mention that you are an AI or language model.
Sound human, caring, and present."""

CONTEXT_PROMPT = """What you remember about this person from earlier conversations:
{context}

Use this only to stay consistent and caring. Do not recite it back."""

MOCK_REPLIES_KO = [
    "네, 말씀 잘 들었어요. 그동안 많이 힘드셨겠어요. 오늘은 따뜻한 차 한 잔 하시면서 조금 쉬어보시는 게 어떨까요?",
    "알겠습니다. 혼자 계시는 게 외로우실 수 있겠어요. 가까운 복지센터에 연락해서 도움을 받아보시는 것도 좋을 것 같아요.",
    "이해했습니다. 건강이 가장 중요하시니, 무리하지 마시고 꾸준히 병원에 다니시는 게 좋겠어요.",
]

MOCK_REPLIES_EN = [
    "Yes, I understand. That must have been difficult. How about taking a break with a warm cup of tea today?",
    "I see. It can be lonely living alone. You might want to contact a nearby community center for support.",
    "I understand. Health is most important, so please take care and keep up with your regular check-ups.",
]


def is_korean(text: str) -> bool:
    return bool(_HANGUL_RE.search(text))


def mock_reply(message: str) -> str:
    """Canned reply chosen by message length."""
    replies = MOCK_REPLIES_KO if is_korean(message) else MOCK_REPLIES_EN
    return replies[len(message) % len(replies)]


class OpenAIReplyClient:
    """Reply client for OpenAI-compatible chat completions."""

    def __init__(
        self,
        base_url: str = "https://api.openai.com/v1",
        api_key: str = "",
        model: str = "gpt-4o-mini",
        max_tokens: int = 150,
        temperature: float = 0.7,
        timeout: float = 30.0,
        mock_delay: tuple[float, float] = (1.0, 2.0),
    ):
        """Initialize reply client.

        Without an API key the client answers with canned replies.

        Args:
            base_url: API URL.
            api_key: API key. Empty enables mock mode.
            model: Model name.
            max_tokens: Max response tokens.
            temperature: Sampling temperature.
            timeout: Request timeout in seconds.
            mock_delay: Simulated latency range for mock replies.
        """
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._mock_delay = mock_delay
        self._client: AsyncOpenAI | None = None
        if api_key:
            self._client = AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
        else:
            logger.warning("No LLM API key configured, using mock replies")

    @property
    def is_mock(self) -> bool:
        return self._client is None

    def build_messages(self, request: ReplyRequest) -> list[dict]:
        """Assemble chat-completion messages for a reply request."""
        system_prompt = SYSTEM_PROMPT_KO if is_korean(request.message) else SYSTEM_PROMPT_EN
        messages: list[dict] = [{"role": "system", "content": system_prompt}]

        if request.context:
            messages.append(
                {"role": "system", "content": CONTEXT_PROMPT.format(context=request.context)}
            )

        history = list(request.conversation_history)
        # History already ends with the current user message
        if history and history[-1].get("role") == "user" and history[-1].get("content") == request.message:
            history = history[:-1]
        messages.extend(
            {"role": m["role"], "content": m["content"]}
            for m in history
            if m.get("role") in ("user", "assistant") and isinstance(m.get("content"), str)
        )

        messages.append({"role": "user", "content": request.message})
        return messages

    async def generate_reply(self, request: ReplyRequest) -> ReplyResponse:
        """Generate reply.

        Args:
            request: Message, history and context summary.

        Returns:
            Reply text.

        Raises:
            ReplyError: On blank message or any API failure.
        """
        if not request.message or not request.message.strip():
            raise ReplyError("Message is required")

        if self._client is None:
            low, high = self._mock_delay
            if high > 0:
                await asyncio.sleep(low + random.random() * max(0.0, high - low))
            return ReplyResponse(reply=mock_reply(request.message))

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=self.build_messages(request),
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except OpenAIError as e:
            logger.error(f"[reply] API error: {e}")
            raise ReplyError(f"Failed to get AI response: {e}") from e

        try:
            content = response.choices[0].message.content if response.choices else None
        except (AttributeError, IndexError) as e:
            raise ReplyError(f"Malformed response payload: {e}") from e

        reply = (content or "").strip() or FALLBACK_REPLY
        logger.info(f"[reply] {len(reply)} chars for '{request.message[:50]}...'")
        return ReplyResponse(reply=reply)
