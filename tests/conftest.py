import pytest

from hanmate.core.models.chat import ConversationMessage, ReplyRequest, ReplyResponse
from hanmate.core.protocols.llm import ReplyError
from hanmate.core.services.history_service import HistoryStore
from hanmate.core.services.profile_service import ProfileLearner
from hanmate.infrastructure.storage.memory_storage import MemoryStorage


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class FakeReplier:
    def __init__(self, replies: list[str] | None = None, error: Exception | None = None):
        self.replies = list(replies or ["네, 말씀 잘 들었어요."])
        self.error = error
        self.requests: list[ReplyRequest] = []

    async def generate_reply(self, request: ReplyRequest) -> ReplyResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        reply = self.replies[(len(self.requests) - 1) % len(self.replies)]
        return ReplyResponse(reply=reply)


class FakeSpeaker:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.spoken: list[tuple[str, str]] = []

    def speak(self, text: str, lang: str) -> None:
        if self.fail:
            raise RuntimeError("audio device busy")
        self.spoken.append((text, lang))


def user(content: str, ts: int = 0) -> ConversationMessage:
    return ConversationMessage(role="user", content=content, timestamp=ts)


def assistant(content: str, ts: int = 0) -> ConversationMessage:
    return ConversationMessage(role="assistant", content=content, timestamp=ts)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def history(storage) -> HistoryStore:
    return HistoryStore(storage)


@pytest.fixture
def learner(storage, history, clock) -> ProfileLearner:
    return ProfileLearner(storage, history, clock=clock)


@pytest.fixture
def reply_error() -> ReplyError:
    return ReplyError("Failed to get AI response")
