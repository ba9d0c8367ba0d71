"""Outbound call to the translation provider.

The provider is the unofficial Google endpoint
(``https://translate.googleapis.com/translate_a/single``) or anything that
answers in the same shape::

    [[["Hola", "Hello", ...], ["Mundo", "World", ...]], ...]

Only the first element of each segment in ``payload[0]`` is used.
"""

from __future__ import annotations

from typing import Any

import httpx

from livetranslate.contracts import TranslationRequest, TranslationResult
from livetranslate.errors import ConfigurationError, ProviderError

PROVIDER_NAME = "gtx"


def flatten_segments(payload: Any) -> str:
    """Concatenate the translated fragment of every segment, in order."""
    if not isinstance(payload, list):
        raise ProviderError(f"unexpected provider body type: {type(payload).__name__}")
    if not payload or not payload[0]:
        return ""
    segments = payload[0]
    if not isinstance(segments, list):
        raise ProviderError("provider segment list is not an array")

    parts: list[str] = []
    for seg in segments:
        if not isinstance(seg, list):
            raise ProviderError("provider segment is not an array")
        if not seg or seg[0] is None:
            continue
        parts.append(str(seg[0]))
    return "".join(parts)


class TranslationGateway:
    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    def build_url(self, req: TranslationRequest) -> httpx.URL:
        if not self.base_url:
            raise ConfigurationError("translation provider base URL is not configured")
        return httpx.URL(
            self.base_url,
            params={
                "client": "gtx",
                "sl": req.source_lang,
                "tl": req.target_lang,
                "dt": "t",
                "q": req.text,
            },
        )

    async def translate(self, req: TranslationRequest) -> TranslationResult:
        url = self.build_url(req)
        resp = await self._client.get(url)
        if not resp.is_success:
            raise ProviderError(
                f"provider responded with status {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            payload = resp.json()
        except ValueError as e:
            raise ProviderError("provider returned a non-JSON body") from e

        translated = flatten_segments(payload) or req.text
        return TranslationResult(source_text=req.text, translated_text=translated, provider=self.name)

    async def aclose(self) -> None:
        await self._client.aclose()
