#!/usr/bin/env python3
"""
Smoke test of the conversation memory with a scripted dialogue.

Run:
  python scripts/smoke_dialog.py

Options:
  --storage         JSON storage file (default: in-memory)
  --use-llm         Use the configured reply model instead of mock replies
  --print-answers   Print every reply
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from hanmate.config.settings import Settings
from hanmate.container import Container, configure_container
from hanmate.core.protocols.llm import ReplyProtocol
from hanmate.core.protocols.storage import StorageProtocol
from hanmate.core.services.conversation_service import ConversationService
from hanmate.infrastructure.llm.openai_client import OpenAIReplyClient
from hanmate.infrastructure.storage.memory_storage import MemoryStorage

DIALOGUE = [
    ("ko", "안녕하세요, 오늘은 좀 피곤하네요."),
    ("ko", "요즘 무릎 통증 때문에 병원에 자주 가요."),
    ("ko", "약값이 많이 들어서 생활비가 걱정이에요."),
    ("ko", "아들은 바빠서 연락이 잘 안 돼요."),
    ("en", "I feel lonely in the evenings."),
    ("en", "Tomorrow I will go walking in the park."),
]

EXPECT_TOPICS = ["health", "money", "family", "loneliness", "daily"]


def build(args) -> Container:
    settings = Settings(storage_path=args.storage or "./data/smoke_storage.json")
    target = Container()
    configure_container(settings, target)

    if not args.storage:
        target.register(StorageProtocol, MemoryStorage, singleton=True)
    if not args.use_llm:
        target.register(
            ReplyProtocol,
            lambda: OpenAIReplyClient(api_key="", mock_delay=(0.0, 0.0)),
            singleton=True,
        )
    return target


async def run(args) -> int:
    target = build(args)
    service = target.resolve(ConversationService)
    failures: list[str] = []

    for locale, text in DIALOGUE:
        result = await service.handle_user_message(text, locale)
        if result is None or not result.reply:
            failures.append(f"no reply for '{text}'")
            continue
        if args.print_answers:
            print(f"[{locale}] {text}\n  -> {result.reply}")

    history = service.history.read()
    expected_len = min(len(DIALOGUE) * 2, service.history.max_history)
    if len(history) != expected_len:
        failures.append(f"history length {len(history)} != {expected_len}")

    profile = service.learner.profile()
    missing = [t for t in EXPECT_TOPICS if t not in profile.topics]
    if missing:
        failures.append(f"topics missing: {missing} (got {profile.topics})")
    if not profile.concerns:
        failures.append("no concern recorded")
    if profile.conversation_count != len(DIALOGUE):
        failures.append(
            f"conversation count {profile.conversation_count} != {len(DIALOGUE)}"
        )

    context = service.learner.context_summary()
    if "Recent conversation context:" not in context:
        failures.append("context summary lacks recent conversation")

    print(f"Topics: {', '.join(profile.topics)}")
    print(f"Concerns: {profile.concerns}")
    print(f"Context: {context[:200]}...")

    if failures:
        for f in failures:
            print(f"FAIL: {f}")
        return 1

    print("OK")
    return 0


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--storage", default=None)
    parser.add_argument("--use-llm", action="store_true")
    parser.add_argument("--print-answers", action="store_true")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
