from __future__ import annotations

from dataclasses import dataclass


@dataclass
class UIState:
    input_text: str = ""
    translated_text: str = ""
    source_lang: str = "en"
    target_lang: str = "es"
    is_loading: bool = False
    is_listening: bool = False
    error_message: str = ""


@dataclass
class GenerationCounter:
    """Request tokens: only the most recently issued one may apply a result."""

    issued: int = 0

    def issue(self) -> int:
        self.issued += 1
        return self.issued

    def is_current(self, token: int) -> bool:
        return token == self.issued
