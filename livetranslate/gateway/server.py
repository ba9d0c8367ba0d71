from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from livetranslate.contracts import TranslationRequest
from livetranslate.gateway.provider import TranslationGateway
from livetranslate.gateway.settings import GatewaySettings

GENERIC_ERROR = "Translation service unavailable. Please try again later."
SERVICE_NAME = "livetranslate-gateway"

logger = logging.getLogger("livetranslate.gateway")


class TranslatePayload(BaseModel):
    text: str
    input_lang: str = Field(min_length=1)
    target_lang: str = Field(min_length=1)


def create_app(
    settings: GatewaySettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or GatewaySettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        gateway = TranslationGateway(
            settings.provider_url,
            timeout=settings.timeout_sec,
            transport=transport,
        )
        app.state.gateway = gateway
        logger.info(
            "gateway_start",
            extra={"provider_configured": bool(settings.provider_url), "timeout_sec": settings.timeout_sec},
        )
        yield
        await gateway.aclose()
        logger.info("gateway_stop")

    app = FastAPI(
        title="LiveTranslate Gateway",
        description="Proxy between the translator app and the translation provider",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": SERVICE_NAME}

    @app.post("/translate")
    async def translate(request: Request):
        # Every failure, body parsing included, becomes the same generic 500.
        try:
            payload = TranslatePayload.model_validate(await request.json())
            if not payload.text.strip():
                return {"translatedText": payload.text}
            req = TranslationRequest(
                text=payload.text,
                source_lang=payload.input_lang,
                target_lang=payload.target_lang,
            )
            gateway: TranslationGateway = request.app.state.gateway
            result = await gateway.translate(req)
        except Exception:
            logger.exception("translate_failed")
            return JSONResponse({"error": GENERIC_ERROR}, status_code=500)

        logger.info(
            "translate_ok",
            extra={
                "input_lang": req.source_lang,
                "target_lang": req.target_lang,
                "chars_in": len(req.text),
                "chars_out": len(result.translated_text),
            },
        )
        return {"translatedText": result.translated_text}

    return app
