from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Iterator

from livetranslate.asr.faster_whisper_pcm16 import FasterWhisperPCM16Transcriber
from livetranslate.audio.mic import MicError, SoundDeviceMicSource
from livetranslate.audio.vad import EnergyVAD, pcm16_rms
from livetranslate.contracts import AudioChunk
from livetranslate.errors import CaptureError
from livetranslate.speech.capability import (
    ERROR_ABORTED,
    ERROR_AUDIO_CAPTURE,
    ERROR_LANGUAGE_NOT_SUPPORTED,
    ERROR_NETWORK,
    ERROR_NO_SPEECH,
    ERROR_SERVICE_NOT_ALLOWED,
    CaptureSession,
    OnEnd,
    OnError,
    OnTranscript,
    SpeechCapability,
)


def _log_event(logger: logging.Logger | None, level: int, event: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, event, extra=fields)


class WhisperCaptureSession(CaptureSession):
    """
    One single-utterance capture: mic -> energy VAD -> faster-whisper.
    Runs on its own thread; callbacks fire from that thread.
    """

    def __init__(
        self,
        *,
        mic: SoundDeviceMicSource,
        vad: EnergyVAD,
        transcriber: FasterWhisperPCM16Transcriber,
        language: str,
        on_transcript: OnTranscript,
        on_error: OnError,
        on_end: OnEnd,
        silence_chunks_to_finalize: int = 3,
        max_listen_sec: float = 10.0,
        debug: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        if silence_chunks_to_finalize <= 0:
            raise ValueError("silence_chunks_to_finalize must be > 0")
        if max_listen_sec <= 0:
            raise ValueError("max_listen_sec must be > 0")
        self.mic = mic
        self.vad = vad
        self.transcriber = transcriber
        self.language = language
        self.on_transcript = on_transcript
        self.on_error = on_error
        self.on_end = on_end
        self.silence_chunks_to_finalize = int(silence_chunks_to_finalize)
        self.max_listen_sec = float(max_listen_sec)
        self.debug = debug
        self.logger = logger
        self._stop_event = threading.Event()
        self._aborted = False
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise CaptureError(ERROR_SERVICE_NOT_ALLOWED, "capture session already started")
        self._thread = threading.Thread(
            target=self._run,
            name="livetranslate-capture",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def abort(self) -> None:
        self._aborted = True
        self._stop_event.set()

    def capture(self, chunks: Iterable[AudioChunk]) -> tuple[bytes, int, int]:
        """Collect one utterance; returns (pcm16, sample_rate, channels)."""
        parts: list[bytes] = []
        sample_rate = 0
        channels = 0
        heard_speech = False
        trailing_silence = 0
        listened = 0.0

        for i, chunk in enumerate(chunks, start=1):
            if self._stop_event.is_set():
                break
            sample_rate = int(chunk.sample_rate)
            channels = int(chunk.channels)
            listened += float(chunk.duration)
            is_speech = self.vad.is_speech(chunk.pcm16)
            if self.debug:
                _log_event(
                    self.logger,
                    logging.DEBUG,
                    "capture_chunk",
                    chunk=i,
                    rms=round(pcm16_rms(chunk.pcm16), 1),
                    speech=is_speech,
                )

            if is_speech:
                heard_speech = True
                trailing_silence = 0
                parts.append(chunk.pcm16)
            elif heard_speech:
                trailing_silence += 1
                parts.append(chunk.pcm16)
                if trailing_silence >= self.silence_chunks_to_finalize:
                    break
            if listened >= self.max_listen_sec:
                break

        if not heard_speech:
            return b"", sample_rate, channels
        return b"".join(parts), sample_rate, channels

    def _transcribe(self, pcm16: bytes, sample_rate: int, channels: int) -> str:
        try:
            self.transcriber.load_model()
        except OSError as e:
            # Model weights are fetched from the hub on first use.
            raise CaptureError(ERROR_NETWORK, f"speech model could not be loaded: {e}") from e
        try:
            segments = self.transcriber.transcribe_utterance(
                pcm16,
                sample_rate=sample_rate,
                channels=channels,
                language=self.language,
            )
        except ValueError as e:
            raise CaptureError(ERROR_LANGUAGE_NOT_SUPPORTED, str(e)) from e
        return " ".join(seg.text.strip() for seg in segments if seg.text.strip())

    def _run(self) -> None:
        chunks: Iterator[AudioChunk] = self.mic.chunks()
        try:
            try:
                pcm16, sample_rate, channels = self.capture(chunks)
            finally:
                chunks.close()
            if self._aborted:
                raise CaptureError(ERROR_ABORTED)
            if not pcm16:
                raise CaptureError(ERROR_NO_SPEECH)
            text = self._transcribe(pcm16, sample_rate, channels)
            if self._aborted:
                raise CaptureError(ERROR_ABORTED)
            if not text:
                raise CaptureError(ERROR_NO_SPEECH)
            _log_event(self.logger, logging.INFO, "capture_transcript", language=self.language, chars=len(text))
            self.on_transcript(text)
        except CaptureError as e:
            _log_event(self.logger, logging.INFO, "capture_error", language=self.language, code=e.code)
            self.on_error(e.code)
        except MicError:
            if self.logger is not None:
                self.logger.exception("capture_mic_failed", extra={"language": self.language})
            self.on_error(ERROR_AUDIO_CAPTURE)
        except Exception:
            if self.logger is not None:
                self.logger.exception("capture_session_crash", extra={"language": self.language})
            self.on_error(ERROR_SERVICE_NOT_ALLOWED)
        finally:
            self.on_end()


class WhisperSpeechCapability(SpeechCapability):
    def __init__(
        self,
        *,
        transcriber: FasterWhisperPCM16Transcriber,
        chunk_sec: float = 0.25,
        sample_rate: int = 16000,
        channels: int = 1,
        device: int | None = None,
        rms_threshold: float = 250.0,
        silence_chunks: int = 3,
        max_listen_sec: float = 10.0,
        debug: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transcriber = transcriber
        self.chunk_sec = float(chunk_sec)
        self.sample_rate = int(sample_rate)
        self.channels = int(channels)
        self.device = device
        self.rms_threshold = float(rms_threshold)
        self.silence_chunks = int(silence_chunks)
        self.max_listen_sec = float(max_listen_sec)
        self.debug = debug
        self.logger = logger

    @classmethod
    def from_args(cls, args: Any, logger: logging.Logger | None = None) -> "WhisperSpeechCapability":
        return cls(
            transcriber=FasterWhisperPCM16Transcriber(model_size=str(args.model)),
            chunk_sec=float(args.chunk_sec),
            sample_rate=int(args.sr),
            channels=int(args.channels),
            device=args.device,
            rms_threshold=float(args.rms_th),
            silence_chunks=max(1, int(args.silence_chunks)),
            max_listen_sec=float(args.max_listen_sec),
            debug=bool(args.debug),
            logger=logger,
        )

    @property
    def available(self) -> bool:
        return True

    def open_session(self, language, *, on_transcript, on_error, on_end) -> WhisperCaptureSession:
        mic = SoundDeviceMicSource(
            chunk_seconds=self.chunk_sec,
            sample_rate=self.sample_rate,
            channels=self.channels,
            device=self.device,
        )
        return WhisperCaptureSession(
            mic=mic,
            vad=EnergyVAD(rms_threshold=self.rms_threshold),
            transcriber=self.transcriber,
            language=language,
            on_transcript=on_transcript,
            on_error=on_error,
            on_end=on_end,
            silence_chunks_to_finalize=self.silence_chunks,
            max_listen_sec=self.max_listen_sec,
            debug=self.debug,
            logger=self.logger,
        )
