"""Locale models."""
from dataclasses import dataclass


@dataclass(frozen=True)
class LocaleInfo:
    """Per-locale strings the core needs."""
    code: str
    name: str
    speech_lang: str
    apology: str
    empty_prompt: str
    thinking: str
    greeting: str


LOCALES: dict[str, LocaleInfo] = {
    "ko": LocaleInfo(
        code="ko",
        name="한국어",
        speech_lang="ko-KR",
        apology="응답을 받는 중 오류가 발생했습니다. 다시 시도해주세요.",
        empty_prompt="말씀을 시작해주세요. 제가 들어드리겠습니다.",
        thinking="생각 중이에요...",
        greeting="안녕하세요! 저는 한메이트예요. 오늘 하루는 어떠셨어요?",
    ),
    "en": LocaleInfo(
        code="en",
        name="English",
        speech_lang="en-US",
        apology="An error occurred while getting a response. Please try again.",
        empty_prompt="Please start speaking. I'm here to listen.",
        thinking="Thinking...",
        greeting="Hello! I'm HanMate. How has your day been?",
    ),
}

DEFAULT_LOCALE = "ko"


def get_locale(code: str | None) -> LocaleInfo:
    """Resolve locale code, falling back to Korean for unknown codes."""
    if code:
        base = code.split("-")[0].lower()
        if base in LOCALES:
            return LOCALES[base]
    return LOCALES[DEFAULT_LOCALE]
