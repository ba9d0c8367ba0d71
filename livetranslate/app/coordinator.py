"""Input coordinator: owns the translator window's state.

All state changes happen on the UI thread, either in the public event
methods or in ``tick()``. Translation requests and capture sessions run on
worker threads and report back only through the ``EventBus``.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Protocol

from livetranslate.app.debounce import Debouncer
from livetranslate.app.diagnostics import hint_for_exception, summarize_exception
from livetranslate.app.state import GenerationCounter, UIState
from livetranslate.contracts import TranslationRequest
from livetranslate.errors import CaptureError
from livetranslate.languages import SPEECH_UNAVAILABLE_MESSAGE, capture_error_message
from livetranslate.nlp.translator.base import Translator
from livetranslate.speech.capability import CaptureSession, SpeechCapability
from livetranslate.ui.bridge import (
    CaptureEnded,
    CaptureFailed,
    CaptureTranscript,
    CoordinatorEvent,
    EventBus,
    TranslationFinished,
)

FAILED_TRANSLATION_TEXT = "Translation failed. Please try again later."


class CoordinatorView(Protocol):
    def render(self, state: UIState) -> None: ...

    def scroll_output_to_bottom(self) -> None: ...


def _log_event(logger: logging.Logger | None, level: int, event: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, event, extra=fields)


def _spawn_thread(job: Callable[[], None]) -> None:
    threading.Thread(target=job, name="livetranslate-translate", daemon=True).start()


class InputCoordinator:
    def __init__(
        self,
        *,
        translator: Translator,
        speech: SpeechCapability,
        view: CoordinatorView | None = None,
        bus: EventBus | None = None,
        source_lang: str = "en",
        target_lang: str = "es",
        debounce_sec: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        submit: Callable[[Callable[[], None]], None] = _spawn_thread,
        logger: logging.Logger | None = None,
    ) -> None:
        self.translator = translator
        self.speech = speech
        self.view = view
        self.bus = bus or EventBus()
        self.state = UIState(source_lang=source_lang, target_lang=target_lang)
        self.debouncer = Debouncer(debounce_sec, clock=clock)
        self.generations = GenerationCounter()
        self.submit = submit
        self.logger = logger

        self._session: CaptureSession | None = None
        self._session_id = 0
        self._session_lang = source_lang

    # --- user events ---

    def set_input_text(self, text: str) -> None:
        self.state.input_text = text
        self.debouncer.touch()
        self._notify()

    def set_source_lang(self, code: str) -> None:
        if code == self.state.source_lang:
            return
        self._release_session("source_lang_changed")
        self.state.source_lang = code
        self.debouncer.touch()
        self._notify()

    def set_target_lang(self, code: str) -> None:
        if code == self.state.target_lang:
            return
        self.state.target_lang = code
        self.debouncer.touch()
        self._notify()

    def start_listening(self) -> None:
        if not self.speech.available:
            self.state.error_message = SPEECH_UNAVAILABLE_MESSAGE
            _log_event(self.logger, logging.INFO, "capture_unavailable")
            self._notify()
            return

        self._release_session("restart")
        self._session_id += 1
        session_id = self._session_id
        lang = self.state.source_lang
        session: CaptureSession | None = None
        try:
            session = self.speech.open_session(
                lang,
                on_transcript=lambda text: self.bus.push(CaptureTranscript(session_id, text)),
                on_error=lambda error: self.bus.push(CaptureFailed(session_id, error)),
                on_end=lambda: self.bus.push(CaptureEnded(session_id)),
            )
            session.start()
        except CaptureError as e:
            if session is not None:
                session.abort()
            # Retire the id so anything the failed session still reports is ignored.
            self._session_id += 1
            _log_event(self.logger, logging.WARNING, "capture_start_failed", language=lang, code=e.code)
            self.state.is_listening = False
            self.state.error_message = capture_error_message(lang, e.code)
            self._notify()
            return

        self._session = session
        self._session_lang = lang
        self.state.is_listening = True
        self.state.error_message = ""
        _log_event(self.logger, logging.INFO, "capture_started", language=lang, session=session_id)
        self._notify()

    def stop_listening(self) -> None:
        if self._session is not None:
            self._session.stop()

    def toggle_listening(self) -> None:
        if self.state.is_listening:
            self.stop_listening()
        else:
            self.start_listening()

    def shutdown(self) -> None:
        self._release_session("shutdown")
        self.debouncer.cancel()
        self.generations.issue()

    # --- UI timer ---

    def tick(self) -> int:
        """Apply pending worker events, then fire the debounce if due."""
        applied = 0
        while True:
            event = self.bus.pop()
            if event is None:
                break
            self._apply(event)
            applied += 1
        if self.debouncer.due():
            self._translate_now()
        return applied

    # --- internals ---

    def _release_session(self, reason: str) -> None:
        if self._session is None:
            return
        session = self._session
        self._session = None
        # Bumping the id turns any late events from the old session into no-ops.
        self._session_id += 1
        self.state.is_listening = False
        session.abort()
        _log_event(self.logger, logging.INFO, "capture_released", reason=reason)

    def _translate_now(self) -> None:
        text = self.state.input_text
        if not text.strip():
            self.generations.issue()
            self.state.is_loading = False
            self._notify(scroll=self._set_translated(""))
            return

        token = self.generations.issue()
        req = TranslationRequest(
            text=text,
            source_lang=self.state.source_lang,
            target_lang=self.state.target_lang,
        )
        self.state.is_loading = True
        _log_event(
            self.logger,
            logging.INFO,
            "translate_dispatched",
            token=token,
            source_lang=req.source_lang,
            target_lang=req.target_lang,
            chars=len(req.text),
        )
        self._notify()
        self.submit(lambda: self._run_translation(token, req))

    def _run_translation(self, token: int, req: TranslationRequest) -> None:
        # Worker thread: never touches self.state.
        t0 = time.perf_counter()
        try:
            res = self.translator.translate(req)
        except Exception as e:
            reason = summarize_exception(f"{type(e).__name__}: {e}")
            _log_event(
                self.logger,
                logging.ERROR,
                "translate_failed",
                token=token,
                provider=self.translator.name,
                reason=reason,
                hint=hint_for_exception(reason),
            )
            self.bus.push(TranslationFinished(token, FAILED_TRANSLATION_TEXT, ok=False))
            return
        _log_event(
            self.logger,
            logging.INFO,
            "translate_done",
            token=token,
            provider=res.provider,
            ms=round((time.perf_counter() - t0) * 1000.0, 2),
        )
        self.bus.push(TranslationFinished(token, res.translated_text))

    def _apply(self, event: CoordinatorEvent) -> None:
        if isinstance(event, TranslationFinished):
            if not self.generations.is_current(event.token):
                _log_event(self.logger, logging.INFO, "translate_stale_dropped", token=event.token)
                return
            self.state.is_loading = False
            self._notify(scroll=self._set_translated(event.text))
            return

        if event.session_id != self._session_id:
            return
        if isinstance(event, CaptureTranscript):
            self.state.input_text = event.text
            self.state.is_listening = False
            self.state.error_message = ""
            self.debouncer.touch()
        elif isinstance(event, CaptureFailed):
            self.state.is_listening = False
            self.state.error_message = capture_error_message(self._session_lang, event.error)
            _log_event(
                self.logger,
                logging.WARNING,
                "capture_failed",
                language=self._session_lang,
                code=event.error,
            )
        elif isinstance(event, CaptureEnded):
            self.state.is_listening = False
            self._session = None
        self._notify()

    def _set_translated(self, text: str) -> bool:
        if text == self.state.translated_text:
            return False
        self.state.translated_text = text
        return True

    def _notify(self, *, scroll: bool = False) -> None:
        if self.view is None:
            return
        self.view.render(self.state)
        if scroll:
            self.view.scroll_output_to_bottom()
