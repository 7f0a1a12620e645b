"""Models for upstream translation requests and responses.

The upstream answers in one of two shapes, selected by the configured engine:
the nested-array form of the free endpoint and the structured JSON form of the v2 API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = [
    "NestedArrayResponse",
    "ParsedResponse",
    "StructuredResponse",
    "TranslationItem",
    "TranslationPayload",
    "UpstreamRequest",
]

type HTTPMethod = Literal["GET", "POST"]


@dataclass
class TranslationPayload:
    """Logical parameters of one upstream call.

    Attributes:
        source (str): Source language code, or "auto" for detection.
        target (str): Target language code.
        q (str | list[str]): A single text, or a list of texts for a combined call.
    """

    source: str
    target: str
    q: str | list[str]

    @property
    def is_batch(self) -> bool:
        return isinstance(self.q, list)

    @property
    def size(self) -> int:
        return len(self.q) if isinstance(self.q, list) else 1


@dataclass
class UpstreamRequest:
    """Concrete HTTP request built by an engine for one attempt."""

    method: HTTPMethod
    url: str
    params: dict[str, str] = field(default_factory=dict)
    json: dict[str, Any] | None = None


@dataclass
class NestedArrayResponse:
    """Parsed nested-array response: ``[[[fragment, ...], ...], ..., detected_lang]``."""

    sentences: list[str]
    detected_source_lang: str | None = None

    @property
    def text(self) -> str:
        return " ".join(self.sentences)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class TranslationItem(DataClassJsonMixin):
    """One entry of ``data.translations`` in the structured response."""

    translated_text: str
    detected_source_language: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class StructuredResponse(DataClassJsonMixin):
    """Parsed structured response: ``{"data": {"translations": [{"translatedText": ...}]}}``."""

    translations: list[TranslationItem] = field(default_factory=list)

    @property
    def texts(self) -> list[str]:
        return [item.translated_text for item in self.translations]


type ParsedResponse = NestedArrayResponse | StructuredResponse
