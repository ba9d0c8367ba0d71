from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TranslationFinished:
    token: int
    text: str
    ok: bool = True


@dataclass(frozen=True)
class CaptureTranscript:
    session_id: int
    text: str


@dataclass(frozen=True)
class CaptureFailed:
    session_id: int
    error: str


@dataclass(frozen=True)
class CaptureEnded:
    session_id: int


CoordinatorEvent = Union[TranslationFinished, CaptureTranscript, CaptureFailed, CaptureEnded]


class EventBus:
    """
    Thread-safe handoff from worker threads -> UI thread.
    Workers push events. UI polls (non-blocking) from its timer tick.
    Unbounded: every event is terminal for some request or session.
    """
    def __init__(self) -> None:
        self.q: "queue.Queue[CoordinatorEvent]" = queue.Queue()

    def push(self, event: CoordinatorEvent) -> None:
        self.q.put_nowait(event)

    def pop(self) -> Optional[CoordinatorEvent]:
        try:
            return self.q.get_nowait()
        except queue.Empty:
            return None
