from __future__ import annotations

import httpx

from .base import Translator
from livetranslate.contracts import TranslationRequest, TranslationResult
from livetranslate.errors import TranslationError


class GatewayTranslator(Translator):
    """Client for the gateway's ``POST /translate`` route."""

    def __init__(
        self,
        server_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.timeout = float(timeout)
        self.transport = transport

    @property
    def name(self) -> str:
        return "gateway"

    def translate(self, req: TranslationRequest) -> TranslationResult:
        body = {"text": req.text, "input_lang": req.source_lang, "target_lang": req.target_lang}
        # Called from short-lived worker threads, so one client per call.
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(f"{self.server_url}/translate", json=body)
        except httpx.HTTPError as e:
            raise TranslationError(f"Translation request failed: {e}") from e

        if not resp.is_success:
            raise TranslationError(f"Translation failed with status: {resp.status_code}")
        try:
            translated = resp.json()["translatedText"]
        except (ValueError, KeyError, TypeError) as e:
            raise TranslationError("Gateway returned an unexpected body") from e
        if not isinstance(translated, str):
            raise TranslationError("Gateway returned an unexpected body")
        return TranslationResult(source_text=req.text, translated_text=translated, provider=self.name)
