from __future__ import annotations

from typing import Any

import pytest

from core.trans.engines.trans_google_cloud import DEFAULT_API_URL, GoogleCloudTranslation
from core.trans.interface import MalformedResponseError, TransInterface
from models.config_models import Config
from models.translation_models import StructuredResponse, TranslationPayload, UpstreamRequest


@pytest.fixture
def config() -> Config:
    config = Config()
    config.TRANSLATION.ENGINE = "google_cloud"
    config.TRANSLATION.API_KEY = "config-key"
    return config


@pytest.fixture
def engine(config: Config) -> GoogleCloudTranslation:
    instance = GoogleCloudTranslation()
    instance.initialize(config)
    return instance


def test_engine_is_registered() -> None:
    assert TransInterface.registered["google_cloud"] is GoogleCloudTranslation


def test_initialize_sets_attributes(engine: GoogleCloudTranslation) -> None:
    assert engine.engine_name == "google_cloud"
    assert engine.supports_batch is True
    assert engine.url == DEFAULT_API_URL


def test_api_key_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch, config: Config) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_API_OAUTH", "env-key")
    config.TRANSLATION.API_KEY = ""
    instance = GoogleCloudTranslation()

    instance.initialize(config)
    request: UpstreamRequest = instance.build_request(TranslationPayload(source="es", target="en", q="Hola"))

    assert request.params == {"key": "env-key"}


def test_missing_api_key_logs_warning(
    monkeypatch: pytest.MonkeyPatch, config: Config, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("GOOGLE_CLOUD_API_OAUTH", raising=False)
    config.TRANSLATION.API_KEY = ""

    GoogleCloudTranslation().initialize(config)

    assert any("No API key" in rec.message for rec in caplog.records)


def test_build_request_posts_json_body(engine: GoogleCloudTranslation) -> None:
    request: UpstreamRequest = engine.build_request(TranslationPayload(source="es", target="en", q=["Hola", "Adiós"]))

    assert request.method == "POST"
    assert request.url == DEFAULT_API_URL
    assert request.params == {"key": "config-key"}
    assert request.json == {"q": ["Hola", "Adiós"], "source": "es", "target": "en", "format": "text"}


def test_parse_response_returns_texts_in_order(engine: GoogleCloudTranslation) -> None:
    body: dict[str, Any] = {
        "data": {
            "translations": [
                {"translatedText": "Hello", "detectedSourceLanguage": "es"},
                {"translatedText": "Goodbye", "detectedSourceLanguage": "es"},
            ]
        }
    }

    parsed: StructuredResponse = engine.parse_response(body)

    assert engine.extract_texts(parsed) == ["Hello", "Goodbye"]
    assert engine.extract_detected_language(parsed) == "es"


def test_detected_language_absent(engine: GoogleCloudTranslation) -> None:
    parsed: StructuredResponse = engine.parse_response({"data": {"translations": [{"translatedText": "Hello"}]}})

    assert engine.extract_detected_language(parsed) is None


@pytest.mark.parametrize(
    "body",
    [
        None,
        [],
        {},
        {"data": None},
        {"data": {"translations": []}},
        {"data": {"translations": [{"detectedSourceLanguage": "es"}]}},
    ],
)
def test_parse_response_rejects_malformed_bodies(engine: GoogleCloudTranslation, body: Any) -> None:
    with pytest.raises(MalformedResponseError):
        engine.parse_response(body)
