from __future__ import annotations

from livetranslate.gateway.settings import DEFAULT_TIMEOUT_SEC, GatewaySettings


def test_settings_from_env() -> None:
    settings = GatewaySettings.from_env(
        {
            "TRANSLATE_PROVIDER_URL": "https://translate.googleapis.com/translate_a/single",
            "TRANSLATE_TIMEOUT": "4.5",
            "ALLOWED_ORIGINS": "http://a.test, http://b.test,",
            "GATEWAY_PORT": "9001",
        }
    )
    assert settings.provider_url == "https://translate.googleapis.com/translate_a/single"
    assert settings.timeout_sec == 4.5
    assert settings.allowed_origins == ["http://a.test", "http://b.test"]
    assert settings.port == 9001


def test_settings_missing_provider_url_is_none() -> None:
    settings = GatewaySettings.from_env({"TRANSLATE_PROVIDER_URL": "  "})
    assert settings.provider_url is None
    assert settings.timeout_sec == DEFAULT_TIMEOUT_SEC
