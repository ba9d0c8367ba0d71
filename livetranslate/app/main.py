from __future__ import annotations

import signal
import sys

from livetranslate.app.config import resolve_args
from livetranslate.app.coordinator import InputCoordinator
from livetranslate.app.logging_setup import setup_app_logger
from livetranslate.audio.mic import SoundDeviceMicSource
from livetranslate.nlp.translator.factory import get_translator
from livetranslate.speech.capability import resolve_speech_capability


def main(argv: list[str] | None = None) -> int:
    args = resolve_args(argv)
    logger, _log_dir, log_path = setup_app_logger()
    logger.info("app_start", extra={"config_path": str(getattr(args, "config", "")), "argv": argv or []})

    if args.list_devices:
        print(SoundDeviceMicSource.list_devices())
        return 0

    # Resolve the speech engine before Qt starts; it is fixed for the app's lifetime.
    speech = resolve_speech_capability(args, logger=logger)
    translator = get_translator(
        str(args.translator),
        server_url=str(args.server_url),
        timeout=float(args.request_timeout_sec),
    )
    logger.info(
        "services_ready",
        extra={"translator": translator.name, "speech_available": speech.available},
    )

    from PyQt6 import QtCore, QtWidgets
    from livetranslate.app.main_window_qt import TranslatorWindow

    app = QtWidgets.QApplication(sys.argv)
    window = TranslatorWindow()
    coordinator = InputCoordinator(
        translator=translator,
        speech=speech,
        view=window,
        source_lang=str(args.source_lang),
        target_lang=str(args.target_lang),
        debounce_sec=max(0, int(args.debounce_ms)) / 1000.0,
        logger=logger,
    )

    window.text_edited.connect(coordinator.set_input_text)
    window.speak_requested.connect(coordinator.toggle_listening)
    window.source_lang_selected.connect(coordinator.set_source_lang)
    window.target_lang_selected.connect(coordinator.set_target_lang)

    timer = QtCore.QTimer()
    timer.timeout.connect(coordinator.tick)
    timer.start(max(10, int(args.poll_ms)))

    def _on_about_to_quit() -> None:
        logger.info("app_quit")
        timer.stop()
        coordinator.shutdown()

    app.aboutToQuit.connect(_on_about_to_quit)
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    window.render(coordinator.state)
    window.show()

    print(f"LiveTranslate ready. Gateway: {args.server_url}")
    print(f"Logs: {log_path}")
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
