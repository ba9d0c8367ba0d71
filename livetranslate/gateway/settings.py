from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_TIMEOUT_SEC = 10.0
DEFAULT_ORIGINS = "http://localhost:3000,http://localhost:8000"


@dataclass(frozen=True)
class GatewaySettings:
    # None means "not configured"; this only fails when a request needs it.
    provider_url: str | None = None
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    allowed_origins: list[str] = field(default_factory=lambda: DEFAULT_ORIGINS.split(","))
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GatewaySettings":
        env = os.environ if environ is None else environ
        provider_url = (env.get("TRANSLATE_PROVIDER_URL") or "").strip() or None
        origins = [o.strip() for o in env.get("ALLOWED_ORIGINS", DEFAULT_ORIGINS).split(",") if o.strip()]
        return cls(
            provider_url=provider_url,
            timeout_sec=float(env.get("TRANSLATE_TIMEOUT", DEFAULT_TIMEOUT_SEC)),
            allowed_origins=origins,
            host=env.get("GATEWAY_HOST", "127.0.0.1"),
            port=int(env.get("GATEWAY_PORT", 8000)),
        )
