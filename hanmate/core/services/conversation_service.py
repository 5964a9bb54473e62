"""Conversation service - coordinates history, profile, reply and speech."""

import logging

from ..models.chat import ConversationMessage, ReplyRequest, TurnResult
from ..models.locale import get_locale
from ..protocols.llm import ReplyError, ReplyProtocol
from ..protocols.speech import SpeechProtocol
from .history_service import HistoryStore
from .profile_service import ProfileLearner

logger = logging.getLogger(__name__)


class ConversationService:
    """Runs one user turn end to end."""

    def __init__(
        self,
        replier: ReplyProtocol,
        history: HistoryStore,
        learner: ProfileLearner,
        speaker: SpeechProtocol | None = None,
        reply_history_window: int = 10,
        learn_every: int = 1,
        default_locale: str = "ko",
        log: logging.Logger | None = None,
    ):
        """Initialize conversation service.

        Args:
            replier: Reply-generation service.
            history: History store.
            learner: Profile learner and context summarizer.
            speaker: Text-to-speech collaborator (optional).
            reply_history_window: History entries sent with each request.
            learn_every: Run profile learning every N completed exchanges.
            default_locale: Locale used when none is given.
            log: Diagnostic sink.
        """
        self._replier = replier
        self._history = history
        self._learner = learner
        self._speaker = speaker
        self._reply_history_window = reply_history_window
        self._learn_every = max(1, learn_every)
        self._default_locale = default_locale
        self._log = log or logger
        self._exchanges = 0

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def learner(self) -> ProfileLearner:
        return self._learner

    def build_request(self, user_message: str) -> ReplyRequest:
        return ReplyRequest(
            message=user_message,
            conversation_history=self._history.as_reply_history(
                self._reply_history_window
            ),
            context=self._learner.context_summary(),
        )

    async def handle_user_message(
        self, text: str, locale: str | None = None
    ) -> TurnResult | None:
        """Process a finalized transcript.

        Flow:
            1. Append user message
            2. Ask the reply service with recent history and context summary
            3. Append the reply (or a localized apology on failure)
            4. Speak the reply, learn from history every N exchanges

        Args:
            text: User transcript.
            locale: Locale code ("ko" or "en").

        Returns:
            Turn result, or None for blank input.
        """
        if not text or not text.strip():
            return None

        locale_info = get_locale(locale or self._default_locale)
        user_message = text.strip()

        self._history.append(ConversationMessage(role="user", content=user_message))
        request = self.build_request(user_message)

        failed = False
        try:
            response = await self._replier.generate_reply(request)
            reply = (response.reply or "").strip()
            if not reply:
                raise ReplyError("Empty reply")
        except ReplyError as e:
            self._log.error(f"AI request error: {e}")
            reply = locale_info.apology
            failed = True

        self._history.append(ConversationMessage(role="assistant", content=reply))

        if not failed:
            self._speak(reply, locale_info.speech_lang)

        self._exchanges += 1
        if self._exchanges % self._learn_every == 0:
            self._learner.learn(self._history.read())

        return TurnResult(reply=reply, failed=failed, locale=locale_info.code)

    def _speak(self, text: str, lang: str) -> None:
        if self._speaker is None:
            return
        try:
            self._speaker.speak(text, lang)
        except Exception as e:
            self._log.error(f"Speech playback failed: {e}")

    def clear_history(self) -> None:
        self._history.clear()
        self._exchanges = 0
