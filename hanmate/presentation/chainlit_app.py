import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import chainlit as cl
from chainlit.input_widget import Select

from hanmate.config.settings import settings
from hanmate.container import configure_container, container
from hanmate.core.models.locale import LOCALES, get_locale
from hanmate.core.models.social import NEARBY_PEOPLE
from hanmate.core.services.conversation_service import ConversationService

configure_container(settings)

# Messages restored into the chat view on start
_RESTORED_MESSAGES = 5

_CLEAR_LABELS = {"ko": "대화 기록 지우기", "en": "Clear history"}
_CLEARED_TEXT = {
    "ko": "대화 기록을 지웠어요. 새로 이야기를 시작해 보세요.",
    "en": "History cleared. Feel free to start a new conversation.",
}
_NEARBY_TITLE = {"ko": "오늘 대화하고 싶은 분들", "en": "People who'd like to chat today"}


def _session_locale() -> str:
    locale = cl.user_session.get("locale")
    if locale:
        return locale
    # Browser Accept-Language, e.g. "ko-KR,ko;q=0.9"
    languages = cl.user_session.get("languages") or ""
    first = languages.split(",")[0].strip() if languages else settings.default_locale
    return get_locale(first).code


def _nearby_people_text(locale: str) -> str:
    lines = [f"**{_NEARBY_TITLE.get(locale, _NEARBY_TITLE['ko'])}**", ""]
    for person in NEARBY_PEOPLE:
        if locale == "ko":
            lines.append(f"- {person.name} 님 · {person.age}세 · {person.area} · {person.interest}")
        else:
            lines.append(f"- {person.name} · {person.age} · {person.area} · {person.interest}")
    return "\n".join(lines)


def _clear_action(locale: str) -> cl.Action:
    return cl.Action(
        name="clear_history",
        payload={"locale": locale},
        label=_CLEAR_LABELS.get(locale, _CLEAR_LABELS["ko"]),
    )


@cl.on_chat_start
async def start():
    locale = _session_locale()
    cl.user_session.set("locale", locale)

    await cl.ChatSettings(
        [
            Select(
                id="locale",
                label="Language / 언어",
                values=list(LOCALES),
                initial_index=list(LOCALES).index(locale),
            )
        ]
    ).send()

    service = container.resolve(ConversationService)
    restored = service.history.recent(_RESTORED_MESSAGES)

    if restored:
        for message in restored:
            author = "user" if message.role == "user" else "HanMate"
            await cl.Message(content=message.content, author=author).send()
    else:
        info = get_locale(locale)
        await cl.Message(content=f"{info.greeting}\n\n{info.empty_prompt}").send()

    await cl.Message(
        content=_nearby_people_text(locale),
        actions=[_clear_action(locale)],
    ).send()


@cl.on_settings_update
async def on_settings_update(new_settings: dict):
    locale = get_locale(new_settings.get("locale")).code
    cl.user_session.set("locale", locale)


@cl.action_callback("clear_history")
async def on_clear_history(action: cl.Action):
    locale = action.payload.get("locale") or _session_locale()
    container.resolve(ConversationService).clear_history()
    await cl.Message(content=_CLEARED_TEXT.get(locale, _CLEARED_TEXT["ko"])).send()


@cl.on_message
async def main(message: cl.Message):
    locale = _session_locale()
    service = container.resolve(ConversationService)

    msg = cl.Message(content=get_locale(locale).thinking)
    await msg.send()

    result = await service.handle_user_message(message.content, locale)
    if result is None:
        await msg.remove()
        return

    msg.content = result.reply
    await msg.update()
