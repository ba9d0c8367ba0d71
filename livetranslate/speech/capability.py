"""Speech-to-text capability consumed by the input coordinator.

A capability is resolved once at start-up and handed to the coordinator.
Each ``open_session`` call yields one capture session that reports exactly
one of {transcript, error} and then ``on_end``. Error codes use the Web
Speech API vocabulary so user-facing messages stay engine independent.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from livetranslate.app.diagnostics import hint_for_exception, summarize_exception
from livetranslate.errors import CaptureError

ERROR_NO_SPEECH = "no-speech"
ERROR_ABORTED = "aborted"
ERROR_AUDIO_CAPTURE = "audio-capture"
ERROR_NETWORK = "network"
ERROR_LANGUAGE_NOT_SUPPORTED = "language-not-supported"
ERROR_SERVICE_NOT_ALLOWED = "service-not-allowed"
ERROR_NOT_SUPPORTED = "not-supported"

OnTranscript = Callable[[str], None]
OnError = Callable[[str], None]
OnEnd = Callable[[], None]


class CaptureSession(ABC):
    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None:
        """Stop listening and deliver whatever was heard."""

    @abstractmethod
    def abort(self) -> None:
        """Stop listening and discard the audio; reports ``aborted``."""


class SpeechCapability(ABC):
    @property
    @abstractmethod
    def available(self) -> bool: ...

    @abstractmethod
    def open_session(
        self,
        language: str,
        *,
        on_transcript: OnTranscript,
        on_error: OnError,
        on_end: OnEnd,
    ) -> CaptureSession: ...


class UnavailableSpeech(SpeechCapability):
    def __init__(self, reason: str = "speech capture disabled") -> None:
        self.reason = reason

    @property
    def available(self) -> bool:
        return False

    def open_session(self, language, *, on_transcript, on_error, on_end) -> CaptureSession:
        raise CaptureError(ERROR_NOT_SUPPORTED, self.reason)


def _preload_speech_runtime() -> None:
    import faster_whisper  # noqa: F401
    import sounddevice  # noqa: F401


def resolve_speech_capability(args: Any, logger: logging.Logger | None = None) -> SpeechCapability:
    if not bool(getattr(args, "speech", True)):
        return UnavailableSpeech("speech capture disabled by configuration")

    try:
        _preload_speech_runtime()
    except (ImportError, OSError) as e:
        summary = summarize_exception(f"{type(e).__name__}: {e}")
        if logger is not None:
            logger.warning(
                "speech_unavailable",
                extra={"reason": summary, "hint": hint_for_exception(summary)},
            )
        return UnavailableSpeech(summary)

    from livetranslate.speech.whisper_session import WhisperSpeechCapability

    return WhisperSpeechCapability.from_args(args, logger=logger)
