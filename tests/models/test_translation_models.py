from __future__ import annotations

from models.cache_models import CacheStatistics
from models.translation_models import (
    NestedArrayResponse,
    StructuredResponse,
    TranslationItem,
    TranslationPayload,
)


def test_payload_size_and_batch_flag() -> None:
    single = TranslationPayload(source="es", target="en", q="Hola")
    batch = TranslationPayload(source="es", target="en", q=["Hola", "Adiós"])

    assert single.is_batch is False
    assert single.size == 1
    assert batch.is_batch is True
    assert batch.size == 2


def test_nested_array_response_joins_sentences() -> None:
    parsed = NestedArrayResponse(sentences=["Hello.", "How are you?"], detected_source_lang="es")

    assert parsed.text == "Hello. How are you?"


def test_structured_response_decodes_camel_case() -> None:
    parsed: StructuredResponse = StructuredResponse.from_dict(
        {
            "translations": [
                {"translatedText": "Hello", "detectedSourceLanguage": "es"},
                {"translatedText": "Goodbye"},
            ]
        }
    )

    assert parsed.texts == ["Hello", "Goodbye"]
    assert parsed.translations[0] == TranslationItem(translated_text="Hello", detected_source_language="es")
    assert parsed.translations[1].detected_source_language is None


def test_structured_response_encodes_camel_case() -> None:
    item = TranslationItem(translated_text="Hello", detected_source_language="es")

    assert item.to_dict() == {"translatedText": "Hello", "detectedSourceLanguage": "es"}


def test_cache_statistics_defaults_to_zero() -> None:
    stats = CacheStatistics()

    assert (stats.total_entries, stats.hits, stats.misses, stats.evictions, stats.expirations) == (0, 0, 0, 0, 0)
