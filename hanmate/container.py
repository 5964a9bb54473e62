import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def configure_container(settings: Settings, target: Container | None = None) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.
        target: Container to fill (defaults to the module-level one).

    Returns:
        Configured container.
    """
    from .core.protocols.llm import ReplyProtocol
    from .core.protocols.speech import SpeechProtocol
    from .core.protocols.storage import StorageProtocol
    from .core.services.conversation_service import ConversationService
    from .core.services.history_service import HistoryStore
    from .core.services.profile_service import ProfileLearner
    from .core.strategies.keywords import KeywordTable
    from .infrastructure.llm.openai_client import OpenAIReplyClient
    from .infrastructure.speech.log_speaker import LogSpeaker
    from .infrastructure.storage.json_file_storage import JsonFileStorage

    c = target if target is not None else container

    c.register(
        StorageProtocol,
        lambda: JsonFileStorage(settings.storage_path),
        singleton=True,
    )

    c.register(
        KeywordTable,
        lambda: KeywordTable.from_file(settings.keywords_config_path),
        singleton=True,
    )

    c.register(
        ReplyProtocol,
        lambda: OpenAIReplyClient(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout,
            mock_delay=(settings.mock_delay_min, settings.mock_delay_max),
        ),
        singleton=True,
    )

    c.register(
        SpeechProtocol,
        lambda: LogSpeaker(rate=settings.speech_rate),
        singleton=True,
    )

    c.register(
        HistoryStore,
        lambda: HistoryStore(
            storage=c.resolve(StorageProtocol),
            key=settings.history_key,
            max_history=settings.max_history,
        ),
        singleton=True,
    )

    c.register(
        ProfileLearner,
        lambda: ProfileLearner(
            storage=c.resolve(StorageProtocol),
            history=c.resolve(HistoryStore),
            keywords=c.resolve(KeywordTable),
            key=settings.profile_key,
            learn_window=settings.learn_window,
            concern_window=settings.concern_window,
            max_concerns=settings.max_concerns,
            excerpt_length=settings.concern_excerpt_length,
            summary_history_window=settings.summary_history_window,
            summary_concerns=settings.summary_concerns,
        ),
        singleton=True,
    )

    c.register(
        ConversationService,
        lambda: ConversationService(
            replier=c.resolve(ReplyProtocol),
            history=c.resolve(HistoryStore),
            learner=c.resolve(ProfileLearner),
            speaker=c.resolve(SpeechProtocol),
            reply_history_window=settings.reply_history_window,
            learn_every=settings.learn_every,
            default_locale=settings.default_locale,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return c
