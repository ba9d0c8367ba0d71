from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

GENERIC_CAPTURE_ERROR = (
    "Speech recognition error: {code}. Please check your internet connection and try again."
)
SPEECH_UNAVAILABLE_MESSAGE = (
    "Speech recognition is not available on this system. "
    "Install the speech extras (faster-whisper, sounddevice) or type your text instead."
)


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    # capture error code -> user-facing message for known engine limitations
    capture_limitations: Mapping[str, str] = field(default_factory=dict)


LANGUAGES: dict[str, Language] = {
    lang.code: lang
    for lang in (
        Language("en", "English"),
        Language("es", "Spanish"),
        Language("fr", "French"),
        Language("de", "German"),
        Language("it", "Italian"),
        Language("pt", "Portuguese"),
        Language("ru", "Russian"),
        Language("zh", "Chinese"),
        Language("ja", "Japanese"),
        Language("ar", "Arabic"),
        Language(
            "bn",
            "Bengali",
            capture_limitations={
                "network": (
                    "Speech recognition for Bengali is not available right now. "
                    "Please type your text instead."
                ),
            },
        ),
    )
}


def language_name(code: str) -> str:
    lang = LANGUAGES.get(code)
    return lang.name if lang is not None else code


def capture_error_message(code: str, error: str) -> str:
    """Message shown when a capture session for `code` fails with `error`."""
    lang = LANGUAGES.get(code)
    if lang is not None and error in lang.capture_limitations:
        return lang.capture_limitations[error]
    return GENERIC_CAPTURE_ERROR.format(code=error)
