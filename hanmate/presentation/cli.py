
import asyncio
import json
import logging
import subprocess
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import httpx

from hanmate.config.settings import settings
from hanmate.container import configure_container, container
from hanmate.core.services.conversation_service import ConversationService
from hanmate.core.services.history_service import HistoryStore
from hanmate.core.services.profile_service import ProfileLearner

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def check_llm() -> bool:
    """Check that the reply model endpoint answers.

    Returns:
        True if endpoint reachable or mock mode, False otherwise.
    """
    if not settings.llm_api_key:
        logger.info("No API key configured, replies will be mocked")
        return True

    url = settings.llm_base_url.rstrip("/") + "/models"
    logger.info(f"Checking reply model endpoint: {url}")

    try:
        resp = httpx.get(
            url,
            headers={"Authorization": f"Bearer {settings.llm_api_key}"},
            timeout=10,
        )
    except httpx.HTTPError as e:
        logger.error(f"Model endpoint not reachable: {e}")
        return False

    if resp.status_code != 200:
        logger.error(f"Model endpoint returned {resp.status_code}: {resp.text[:200]}")
        return False

    try:
        models = [m.get("id") for m in resp.json().get("data", [])]
    except (ValueError, AttributeError):
        models = []
    if models and settings.llm_model not in models:
        logger.warning(f"Model {settings.llm_model} not listed by endpoint")
    else:
        logger.info(f"Model {settings.llm_model} is available")
    return True


def cmd_startup():
    """Startup command - check model, run web UI."""
    logger.info("Starting HanMate...")

    if not check_llm():
        sys.exit(1)

    logger.info("Starting Chainlit...")
    subprocess.run(
        [
            sys.executable,
            "-m",
            "chainlit",
            "run",
            "hanmate/presentation/chainlit_app.py",
            "--host",
            "0.0.0.0",
            "--port",
            "8000",
        ]
    )


def cmd_check():
    if not check_llm():
        sys.exit(1)


async def _chat_loop(locale: str) -> None:
    service = container.resolve(ConversationService)
    print("Type a message, empty line to quit.")
    while True:
        try:
            text = input("> ")
        except EOFError:
            break
        if not text.strip():
            break
        result = await service.handle_user_message(text, locale)
        if result:
            print(result.reply)


def cmd_chat(locale: str):
    """Chat command - talk in the terminal."""
    configure_container(settings)
    asyncio.run(_chat_loop(locale))


def cmd_history():
    configure_container(settings)
    for message in container.resolve(HistoryStore).read():
        print(f"{message.role}: {message.content}")


def cmd_profile():
    configure_container(settings)
    profile = container.resolve(ProfileLearner).profile()
    print(json.dumps(profile.to_dict(), ensure_ascii=False, indent=2))


def cmd_context():
    configure_container(settings)
    print(container.resolve(ProfileLearner).context_summary())


def cmd_clear():
    configure_container(settings)
    container.resolve(HistoryStore).clear()


def main():
    """CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: python -m hanmate.presentation.cli <command>")
        print("Commands: startup, check, chat [ko|en], history, profile, context, clear")
        sys.exit(1)

    command = sys.argv[1]

    if command == "startup":
        cmd_startup()
    elif command == "check":
        cmd_check()
    elif command == "chat":
        cmd_chat(sys.argv[2] if len(sys.argv) > 2 else settings.default_locale)
    elif command == "history":
        cmd_history()
    elif command == "profile":
        cmd_profile()
    elif command == "context":
        cmd_context()
    elif command == "clear":
        cmd_clear()
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
