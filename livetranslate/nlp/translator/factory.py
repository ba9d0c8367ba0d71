from __future__ import annotations
import os
from .base import Translator
from .gateway import GatewayTranslator
from .stub import StubTranslator

def get_translator(
    provider: str | None = None,
    *,
    server_url: str = "http://127.0.0.1:8000",
    timeout: float = 10.0,
) -> Translator:
    provider = (provider or os.getenv("LIVETRANSLATE_TRANSLATOR", "gateway")).lower().strip()

    if provider == "gateway":
        return GatewayTranslator(server_url, timeout=timeout)
    if provider == "stub":
        return StubTranslator()

    raise ValueError(f"Unknown translator provider: {provider}")
