from __future__ import annotations


class LiveTranslateError(RuntimeError):
    """Base class for failures raised by livetranslate components."""


class ConfigurationError(LiveTranslateError):
    """A required setting (e.g. the provider base URL) is missing."""


class ProviderError(LiveTranslateError):
    """The external translation provider failed or answered with a bad body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TranslationError(LiveTranslateError):
    """Raised client-side when the gateway could not produce a translation."""


class CaptureError(LiveTranslateError):
    """A voice capture session could not be opened or failed."""

    def __init__(self, code: str, message: str | None = None) -> None:
        super().__init__(message or f"speech capture failed: {code}")
        self.code = code
