from __future__ import annotations
from .base import Translator
from livetranslate.contracts import TranslationRequest, TranslationResult

class StubTranslator(Translator):
    @property
    def name(self) -> str:
        return "stub"

    def translate(self, req: TranslationRequest) -> TranslationResult:
        # Deterministic, works without a running gateway
        out = f"[{req.source_lang}->{req.target_lang}] {req.text}"
        return TranslationResult(source_text=req.text, translated_text=out, provider=self.name)
