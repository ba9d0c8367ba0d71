from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from livetranslate.app.coordinator import FAILED_TRANSLATION_TEXT, InputCoordinator
from livetranslate.contracts import TranslationRequest, TranslationResult
from livetranslate.errors import CaptureError, TranslationError
from livetranslate.languages import GENERIC_CAPTURE_ERROR, SPEECH_UNAVAILABLE_MESSAGE
from livetranslate.nlp.translator.base import Translator
from livetranslate.speech.capability import CaptureSession, SpeechCapability, UnavailableSpeech


# --- fakes ---

class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, sec: float) -> None:
        self.now += sec


class FakeView:
    def __init__(self) -> None:
        self.renders = []
        self.scrolls = 0

    def render(self, state) -> None:
        self.renders.append(replace(state))

    def scroll_output_to_bottom(self) -> None:
        self.scrolls += 1


class FakeTranslator(Translator):
    def __init__(self) -> None:
        self.calls: list[TranslationRequest] = []
        self.fail = False

    @property
    def name(self) -> str:
        return "fake"

    def translate(self, req: TranslationRequest) -> TranslationResult:
        self.calls.append(req)
        if self.fail:
            raise TranslationError("Translation failed with status: 500")
        return TranslationResult(source_text=req.text, translated_text=f"T({req.text})", provider=self.name)


class FakeSession(CaptureSession):
    def __init__(self, language, on_transcript, on_error, on_end, start_error: str | None = None) -> None:
        self.start_error = start_error
        self.language = language
        self.on_transcript = on_transcript
        self.on_error = on_error
        self.on_end = on_end
        self.started = False
        self.stopped = False
        self.aborted = False

    def start(self) -> None:
        if self.start_error:
            raise CaptureError(self.start_error)
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def abort(self) -> None:
        self.aborted = True


class FakeSpeech(SpeechCapability):
    def __init__(self, open_error: str | None = None, start_error: str | None = None) -> None:
        self.sessions: list[FakeSession] = []
        self.open_error = open_error
        self.start_error = start_error

    @property
    def available(self) -> bool:
        return True

    def open_session(self, language, *, on_transcript, on_error, on_end) -> FakeSession:
        if self.open_error:
            raise CaptureError(self.open_error)
        session = FakeSession(language, on_transcript, on_error, on_end, start_error=self.start_error)
        self.sessions.append(session)
        return session


class Harness:
    def __init__(self, speech: SpeechCapability | None = None, logger: logging.Logger | None = None) -> None:
        self.clock = FakeClock()
        self.view = FakeView()
        self.translator = FakeTranslator()
        self.speech = speech or FakeSpeech()
        self.jobs: list[Callable[[], None]] = []
        self.coord = InputCoordinator(
            translator=self.translator,
            speech=self.speech,
            view=self.view,
            clock=self.clock,
            submit=self.jobs.append,
            debounce_sec=0.5,
            logger=logger,
        )

    @property
    def state(self):
        return self.coord.state

    def settle(self) -> None:
        """Let the debounce elapse and fire."""
        self.clock.advance(0.5)
        self.coord.tick()

    def run_jobs(self) -> None:
        jobs, self.jobs[:] = list(self.jobs), []
        for job in jobs:
            job()
        self.coord.tick()


# --- debounce / translation ---

def test_translation_fires_only_after_quiet_period() -> None:
    h = Harness()
    h.coord.set_input_text("Hello")
    h.clock.advance(0.25)
    h.coord.tick()
    assert h.jobs == []

    h.clock.advance(0.25)
    h.coord.tick()
    assert len(h.jobs) == 1
    assert h.state.is_loading

    h.run_jobs()
    assert h.state.translated_text == "T(Hello)"
    assert not h.state.is_loading
    assert h.view.scrolls == 1
    assert h.translator.calls == [TranslationRequest(text="Hello", source_lang="en", target_lang="es")]


def test_new_input_supersedes_pending_timer() -> None:
    h = Harness()
    h.coord.set_input_text("He")
    h.clock.advance(0.25)
    h.coord.set_input_text("Hello")
    h.clock.advance(0.25)
    h.coord.tick()
    assert h.jobs == []

    h.clock.advance(0.25)
    h.coord.tick()
    h.run_jobs()
    assert [req.text for req in h.translator.calls] == ["Hello"]


def test_whitespace_input_clears_output_without_request() -> None:
    h = Harness()
    h.coord.set_input_text("Hello")
    h.settle()
    h.run_jobs()
    assert h.state.translated_text == "T(Hello)"

    h.coord.set_input_text("   ")
    h.settle()
    assert h.jobs == []
    assert h.state.translated_text == ""
    assert not h.state.is_loading
    assert len(h.translator.calls) == 1
    assert h.view.scrolls == 2


def test_stale_response_is_discarded() -> None:
    h = Harness()
    h.coord.set_input_text("a")
    h.settle()
    slow = h.jobs.pop()
    h.coord.set_input_text("ab")
    h.settle()
    h.run_jobs()
    assert h.state.translated_text == "T(ab)"

    slow()
    h.coord.tick()
    assert h.state.translated_text == "T(ab)"
    assert not h.state.is_loading


def test_older_response_arriving_first_keeps_loading() -> None:
    h = Harness()
    h.coord.set_input_text("a")
    h.settle()
    first = h.jobs.pop()
    h.coord.set_input_text("ab")
    h.settle()

    first()
    h.coord.tick()
    assert h.state.translated_text == ""
    assert h.state.is_loading

    h.run_jobs()
    assert h.state.translated_text == "T(ab)"
    assert not h.state.is_loading


def test_in_flight_response_ignored_after_input_cleared() -> None:
    h = Harness()
    h.coord.set_input_text("a")
    h.settle()
    h.coord.set_input_text("")
    h.settle()
    h.run_jobs()
    assert h.state.translated_text == ""


def test_translation_failure_shows_fallback_text() -> None:
    h = Harness()
    h.translator.fail = True
    h.coord.set_input_text("Hello")
    h.settle()
    h.run_jobs()
    assert h.state.translated_text == FAILED_TRANSLATION_TEXT
    assert not h.state.is_loading


def test_target_language_change_retranslates() -> None:
    h = Harness()
    h.coord.set_input_text("Hello")
    h.settle()
    h.run_jobs()

    h.coord.set_target_lang("fr")
    h.settle()
    h.run_jobs()
    assert h.translator.calls[-1] == TranslationRequest(text="Hello", source_lang="en", target_lang="fr")


def test_same_language_selection_is_noop() -> None:
    h = Harness()
    h.coord.set_source_lang("en")
    h.coord.set_target_lang("es")
    assert not h.coord.debouncer.pending
    assert h.view.renders == []


# --- voice capture ---

def test_start_listening_without_capability_sets_error() -> None:
    h = Harness(speech=UnavailableSpeech())
    h.coord.start_listening()
    assert h.state.error_message == SPEECH_UNAVAILABLE_MESSAGE
    assert not h.state.is_listening


def test_transcript_replaces_input_and_triggers_translation() -> None:
    h = Harness()
    h.coord.set_input_text("old")
    h.coord.start_listening()
    session = h.speech.sessions[0]
    assert session.started
    assert session.language == "en"
    assert h.state.is_listening

    session.on_transcript("good morning")
    session.on_end()
    h.coord.tick()
    assert h.state.input_text == "good morning"
    assert not h.state.is_listening
    assert h.state.error_message == ""

    h.settle()
    h.run_jobs()
    assert h.state.translated_text == "T(good morning)"


def test_bengali_network_error_message() -> None:
    h = Harness()
    h.coord.set_source_lang("bn")
    h.coord.start_listening()
    session = h.speech.sessions[0]
    assert session.language == "bn"

    session.on_error("network")
    session.on_end()
    h.coord.tick()
    assert not h.state.is_listening
    assert h.state.error_message.startswith("Speech recognition for Bengali is not available")


def test_network_error_for_other_language_is_generic() -> None:
    h = Harness()
    h.coord.set_source_lang("fr")
    h.coord.start_listening()
    h.speech.sessions[0].on_error("network")
    h.coord.tick()
    assert h.state.error_message == GENERIC_CAPTURE_ERROR.format(code="network")


def test_source_change_without_session_does_not_capture_or_error() -> None:
    h = Harness()
    h.coord.set_source_lang("de")
    h.coord.tick()
    assert h.speech.sessions == []
    assert h.state.error_message == ""
    assert not h.state.is_listening


def test_source_change_aborts_active_session_and_ignores_its_events() -> None:
    h = Harness()
    h.coord.start_listening()
    old = h.speech.sessions[0]

    h.coord.set_source_lang("ja")
    assert old.aborted
    assert not h.state.is_listening

    old.on_error("aborted")
    old.on_end()
    h.coord.tick()
    assert h.state.error_message == ""

    h.coord.start_listening()
    assert h.speech.sessions[1].language == "ja"
    assert h.state.is_listening


def test_restart_listening_releases_previous_session() -> None:
    h = Harness()
    h.coord.start_listening()
    h.coord.start_listening()
    first, second = h.speech.sessions
    assert first.aborted
    assert second.started and not second.aborted

    first.on_transcript("late")
    h.coord.tick()
    assert h.state.input_text == ""
    assert h.state.is_listening


def test_toggle_listening_stops_active_session() -> None:
    h = Harness()
    h.coord.toggle_listening()
    session = h.speech.sessions[0]
    h.coord.toggle_listening()
    assert session.stopped
    assert len(h.speech.sessions) == 1


def test_capture_open_failure_maps_to_message() -> None:
    h = Harness(speech=FakeSpeech(open_error="audio-capture"))
    h.coord.start_listening()
    assert not h.state.is_listening
    assert h.state.error_message == GENERIC_CAPTURE_ERROR.format(code="audio-capture")


def test_shutdown_aborts_session_and_drops_pending_work() -> None:
    h = Harness()
    h.coord.set_input_text("Hello")
    h.settle()
    h.coord.start_listening()
    session = h.speech.sessions[0]
    h.coord.set_input_text("Hello again")

    h.coord.shutdown()
    assert session.aborted
    assert not h.coord.debouncer.pending

    h.run_jobs()
    assert h.state.translated_text == ""


def test_session_failing_to_start_is_aborted_and_silenced() -> None:
    h = Harness(speech=FakeSpeech(start_error="audio-capture"))
    h.coord.start_listening()
    session = h.speech.sessions[0]
    assert session.aborted
    assert not h.state.is_listening
    assert h.state.error_message == GENERIC_CAPTURE_ERROR.format(code="audio-capture")

    session.on_error("aborted")
    session.on_end()
    h.coord.tick()
    assert h.state.error_message == GENERIC_CAPTURE_ERROR.format(code="audio-capture")


def test_translation_failure_log_carries_hint(caplog) -> None:
    h = Harness(logger=logging.getLogger("livetranslate.test.coordinator"))
    h.translator.fail = True
    h.coord.set_input_text("Hello")
    h.settle()
    with caplog.at_level(logging.ERROR, logger="livetranslate.test.coordinator"):
        h.run_jobs()

    failed = [r for r in caplog.records if r.getMessage() == "translate_failed"]
    assert len(failed) == 1
    assert failed[0].reason == "TranslationError: Translation failed with status: 500"
    assert "TRANSLATE_PROVIDER_URL" in failed[0].hint
