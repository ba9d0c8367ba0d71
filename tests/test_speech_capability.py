from __future__ import annotations

from argparse import Namespace

import pytest

from livetranslate.errors import CaptureError
from livetranslate.speech import capability as speech_capability
from livetranslate.speech.capability import ERROR_NOT_SUPPORTED, UnavailableSpeech, resolve_speech_capability
from livetranslate.speech.whisper_session import WhisperCaptureSession, WhisperSpeechCapability


def _args(speech: bool = True) -> Namespace:
    return Namespace(
        speech=speech,
        model="tiny",
        chunk_sec=0.25,
        sr=16000,
        channels=1,
        device=None,
        rms_th=300.0,
        silence_chunks=3,
        max_listen_sec=8.0,
        debug=False,
    )


def test_unavailable_speech_refuses_sessions() -> None:
    speech = UnavailableSpeech("no engine")
    assert not speech.available
    with pytest.raises(CaptureError) as exc:
        speech.open_session("en", on_transcript=print, on_error=print, on_end=print)
    assert exc.value.code == ERROR_NOT_SUPPORTED


def test_resolve_speech_disabled_by_config() -> None:
    speech = resolve_speech_capability(_args(speech=False))
    assert isinstance(speech, UnavailableSpeech)


def test_resolve_speech_missing_runtime(monkeypatch) -> None:
    def _missing() -> None:
        raise ModuleNotFoundError("No module named 'faster_whisper'")

    monkeypatch.setattr(speech_capability, "_preload_speech_runtime", _missing)
    speech = resolve_speech_capability(_args())
    assert isinstance(speech, UnavailableSpeech)
    assert "faster_whisper" in speech.reason


def test_resolve_speech_builds_whisper_engine(monkeypatch) -> None:
    monkeypatch.setattr(speech_capability, "_preload_speech_runtime", lambda: None)
    speech = resolve_speech_capability(_args())
    assert isinstance(speech, WhisperSpeechCapability)
    assert speech.available
    assert speech.rms_threshold == 300.0
    assert speech.max_listen_sec == 8.0

    session = speech.open_session("bn", on_transcript=print, on_error=print, on_end=print)
    assert isinstance(session, WhisperCaptureSession)
    assert session.language == "bn"
    assert session.mic.sample_rate == 16000
