import pytest

from conftest import FakeReplier, FakeSpeaker

from hanmate.core.models.locale import LOCALES
from hanmate.core.services.conversation_service import ConversationService


def make_service(history, learner, replier=None, speaker=None, **kwargs):
    return ConversationService(
        replier=replier or FakeReplier(),
        history=history,
        learner=learner,
        speaker=speaker,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_turn_appends_user_and_reply(history, learner):
    service = make_service(history, learner, FakeReplier(["반가워요"]))

    result = await service.handle_user_message("  안녕하세요  ", "ko")

    assert result.reply == "반가워요"
    assert not result.failed
    assert [(m.role, m.content) for m in history.read()] == [
        ("user", "안녕하세요"),
        ("assistant", "반가워요"),
    ]


@pytest.mark.asyncio
async def test_blank_input_is_ignored(history, learner):
    replier = FakeReplier()
    service = make_service(history, learner, replier)

    assert await service.handle_user_message("   ", "ko") is None
    assert history.read() == []
    assert replier.requests == []


@pytest.mark.asyncio
async def test_request_carries_recent_history_and_context(history, learner):
    replier = FakeReplier(["ok"])
    service = make_service(history, learner, replier)
    for i in range(7):
        await service.handle_user_message(f"message {i}", "en")

    request = replier.requests[-1]

    assert request.message == "message 6"
    assert len(request.conversation_history) == 10
    assert request.conversation_history[-1] == {"role": "user", "content": "message 6"}
    assert "Recent conversation context:" in request.context


@pytest.mark.asyncio
async def test_first_request_context_includes_current_message(history, learner):
    replier = FakeReplier()
    service = make_service(history, learner, replier)

    await service.handle_user_message("hello", "en")

    assert replier.requests[0].context == "Recent conversation context: user: hello"


@pytest.mark.asyncio
async def test_reply_failure_appends_localized_apology(history, learner, reply_error):
    speaker = FakeSpeaker()
    service = make_service(history, learner, FakeReplier(error=reply_error), speaker)

    ko = await service.handle_user_message("안녕하세요", "ko")
    en = await service.handle_user_message("hello", "en")

    assert ko.failed and ko.reply == LOCALES["ko"].apology
    assert en.failed and en.reply == LOCALES["en"].apology
    assert history.read()[-1].content == LOCALES["en"].apology
    assert history.read()[-1].role == "assistant"
    assert speaker.spoken == []


@pytest.mark.asyncio
async def test_empty_reply_counts_as_failure(history, learner):
    service = make_service(history, learner, FakeReplier(["   "]))

    result = await service.handle_user_message("hello", "en")

    assert result.failed
    assert result.reply == LOCALES["en"].apology


@pytest.mark.asyncio
async def test_reply_is_spoken_with_language_tag(history, learner):
    speaker = FakeSpeaker()
    service = make_service(history, learner, FakeReplier(["좋아요"]), speaker)

    await service.handle_user_message("산책 다녀왔어요", "ko")

    assert speaker.spoken == [("좋아요", "ko-KR")]


@pytest.mark.asyncio
async def test_speech_failure_does_not_break_turn(history, learner):
    service = make_service(history, learner, FakeReplier(["ok"]), FakeSpeaker(fail=True))

    result = await service.handle_user_message("hello", "en")

    assert result.reply == "ok"
    assert len(history.read()) == 2


@pytest.mark.asyncio
async def test_profile_learned_after_each_exchange(history, learner):
    service = make_service(history, learner, FakeReplier(["그러셨군요"]))

    await service.handle_user_message("병원에 다녀왔는데 걱정이에요", "ko")

    profile = learner.profile()
    assert profile.topics == ["health"]
    assert profile.concerns == ["병원에 다녀왔는데 걱정이에요"]
    assert profile.conversation_count == 1


@pytest.mark.asyncio
async def test_learn_every_n_exchanges(history, learner):
    service = make_service(history, learner, learn_every=3)

    for _ in range(7):
        await service.handle_user_message("hello", "en")

    assert learner.profile().conversation_count == 2


@pytest.mark.asyncio
async def test_history_bounded_over_long_session(history, learner):
    service = make_service(history, learner)

    for i in range(25):
        await service.handle_user_message(f"turn {i}", "en")

    messages = history.read()
    assert len(messages) == 20
    assert messages[0].content == "turn 15"


@pytest.mark.asyncio
async def test_clear_history(history, learner):
    service = make_service(history, learner)
    await service.handle_user_message("hello", "en")

    service.clear_history()

    assert history.read() == []
    assert learner.profile().conversation_count == 1
