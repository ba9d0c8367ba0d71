import pytest

from livetranslate.contracts import TranslationRequest
from livetranslate.nlp.translator.factory import get_translator
from livetranslate.nlp.translator.gateway import GatewayTranslator
from livetranslate.nlp.translator.stub import StubTranslator

def test_stub_translator_deterministic():
    tr = StubTranslator()
    out = tr.translate(TranslationRequest(text="Hello world.", source_lang="en", target_lang="bn"))
    assert out.provider == "stub"
    assert out.translated_text == "[en->bn] Hello world."

def test_factory_builds_known_providers():
    tr = get_translator("gateway", server_url="http://gateway.test:8000/", timeout=3.0)
    assert isinstance(tr, GatewayTranslator)
    assert tr.server_url == "http://gateway.test:8000"
    assert isinstance(get_translator(" STUB "), StubTranslator)

def test_factory_uses_env_default(monkeypatch):
    monkeypatch.setenv("LIVETRANSLATE_TRANSLATOR", "stub")
    assert isinstance(get_translator(), StubTranslator)

def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError):
        get_translator("argos")
