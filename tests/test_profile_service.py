import json

from conftest import assistant, user

from hanmate.core.models.profile import UserProfile
from hanmate.core.services.profile_service import ProfileLearner
from hanmate.core.strategies.keywords import KeywordTable
from hanmate.infrastructure.storage.memory_storage import MemoryStorage


def test_default_profile_when_nothing_stored(learner, clock):
    profile = learner.profile()

    assert profile.topics == []
    assert profile.concerns == []
    assert profile.preferences == []
    assert profile.conversation_count == 0
    assert profile.last_active == clock.now


def test_corrupt_profile_reads_as_default(learner, storage):
    storage.set_item("hanmate-user-profile", "[1, 2")
    assert learner.profile().conversation_count == 0

    storage.set_item("hanmate-user-profile", json.dumps({"topics": "health"}))
    assert learner.profile().topics == []


def test_non_finite_counters_read_as_default(learner, storage):
    storage.set_item(
        "hanmate-user-profile",
        '{"preferences": [], "topics": ["health"], "concerns": [],'
        ' "lastActive": Infinity, "conversationCount": 3}',
    )
    assert learner.profile().topics == []

    storage.set_item(
        "hanmate-user-profile",
        '{"preferences": [], "topics": [], "concerns": [],'
        ' "lastActive": 1, "conversationCount": -Infinity}',
    )
    assert learner.profile().conversation_count == 0


def test_deeply_nested_profile_reads_as_default(learner, storage):
    storage.set_item("hanmate-user-profile", "{\"a\": " + "[" * 100000 + "]" * 100000 + "}")

    assert learner.profile().conversation_count == 0

    learner.learn([user("hello")])
    assert learner.profile().conversation_count == 1


def test_health_and_worry_scenario(learner):
    history = [user("요즘 건강이 안 좋아서 걱정이 많아요")]

    learner.learn(history)
    profile = learner.profile()

    assert "health" in profile.topics
    assert len(profile.concerns) == 1
    assert 0 < len(profile.concerns[0]) <= 50


def test_topic_added_once_across_repeated_learns(learner):
    history = [user("I went to the hospital today")]

    learner.learn(history)
    learner.learn(history)

    assert learner.profile().topics.count("health") == 1


def test_topics_keep_first_detection_order(learner):
    learner.learn([user("My son called me")])
    learner.learn([user("I feel lonely"), user("my medicine is expensive")])

    assert learner.profile().topics == ["family", "health", "loneliness"]


def test_only_last_ten_messages_are_scanned(learner):
    history = [user("돈이 없어요")] + [user("그냥 그래요") for _ in range(10)]

    learner.learn(history)

    assert "money" not in learner.profile().topics


def test_matching_is_case_insensitive(learner):
    learner.learn([user("FAMILY dinner tonight")])

    assert learner.profile().topics == ["family"]


def test_concern_excerpt_is_first_fifty_chars_of_most_recent_match(learner):
    long_text = "I am worried " + "x" * 100
    history = [
        user("I am anxious about the bill"),
        assistant("That sounds hard."),
        user(long_text),
    ]

    learner.learn(history)

    assert learner.profile().concerns == [long_text[:50]]


def test_concern_searched_only_in_last_three_messages(learner):
    history = [
        user("걱정이 많아요"),
        assistant("괜찮으세요"),
        user("네"),
        assistant("좋아요"),
    ]

    learner.learn(history)

    assert learner.profile().concerns == []


def test_duplicate_concern_not_added(learner):
    history = [user("I am worried about my knee")]

    learner.learn(history)
    learner.learn(history)

    assert learner.profile().concerns == ["I am worried about my knee"]


def test_concerns_capped_at_five(learner):
    for i in range(12):
        learner.learn([user(f"worry {i}: it is hard")])

        assert len(learner.profile().concerns) <= 5

    assert learner.profile().concerns == [f"worry {i}: it is hard" for i in range(7, 12)]


def test_stored_overlong_concerns_trimmed_on_learn(learner):
    learner.save(
        UserProfile(
            concerns=[f"c{i}" for i in range(7)],
            last_active=1,
            conversation_count=4,
        )
    )

    learner.learn([user("hello")])

    assert learner.profile().concerns == ["c2", "c3", "c4", "c5", "c6"]


def test_learn_updates_activity(learner, clock):
    learner.learn([user("hello")])
    first = learner.profile()
    learner.learn([user("hello")])
    second = learner.profile()

    assert first.conversation_count == 1
    assert second.conversation_count == 2
    assert second.last_active > first.last_active


def test_learn_with_empty_history_still_counts(learner):
    learner.learn([])

    profile = learner.profile()
    assert profile.conversation_count == 1
    assert profile.topics == []


def test_profile_round_trip(learner):
    profile = UserProfile(
        preferences=["tea"],
        topics=["health", "family"],
        concerns=["knee pain worries me"],
        last_active=123,
        conversation_count=7,
    )

    learner.save(profile)

    assert learner.profile() == profile


def test_save_failure_keeps_profile_in_memory(history, clock):
    storage = MemoryStorage(quota_bytes=5)
    learner = ProfileLearner(storage, history, clock=clock)

    learner.learn([user("my daughter visited")])

    assert learner.profile().topics == ["family"]
    assert learner.profile().conversation_count == 1


def test_custom_keyword_table(storage, history, clock):
    table = KeywordTable(topics={"garden": ["tomato"]}, concerns=["sad"])
    learner = ProfileLearner(storage, history, keywords=table, clock=clock)

    learner.learn([user("The tomatoes are ripe but I am sad")])

    profile = learner.profile()
    assert profile.topics == ["garden"]
    assert profile.concerns == ["The tomatoes are ripe but I am sad"]


class TestContextSummary:

    def test_empty_when_no_topics_and_no_history(self, learner):
        assert learner.context_summary() == ""

    def test_history_only(self, learner, history):
        history.append(user("hi"))
        history.append(assistant("hello"))

        assert learner.context_summary() == (
            "Recent conversation context: user: hi | assistant: hello"
        )

    def test_topics_without_history(self, learner):
        learner.learn([user("my pension is small")])

        assert learner.context_summary() == "User has mentioned these topics: money"

    def test_all_fragments_in_order(self, learner, history):
        for i in range(8):
            history.append(user(f"m{i}"))
        learner.save(
            UserProfile(
                topics=["health", "family"],
                concerns=["c1", "c2", "c3"],
                last_active=1,
                conversation_count=3,
            )
        )

        assert learner.context_summary() == (
            "User has mentioned these topics: health, family. "
            "Recent concerns: c2; c3. "
            "Recent conversation context: "
            "user: m2 | user: m3 | user: m4 | user: m5 | user: m6 | user: m7"
        )

    def test_includes_recent_context_whenever_history_exists(self, learner, history):
        history.append(user("oneline"))

        summary = learner.context_summary()

        assert summary
        assert "Recent conversation context:" in summary
