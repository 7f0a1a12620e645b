"""Free Google Translate endpoint (``translate_a/single``, ``client=gtx``).

The endpoint needs no key and answers with a nested array:
``[[["Hello world", "Hola mundo", ...], ...], None, "es", ...]``. Element 0 holds one entry per
translated sentence whose first item is the translated fragment, element 2 the detected source
language. One request carries exactly one text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from core.trans.interface import (
    EngineAttributes,
    MalformedResponseError,
    TransInterface,
    TranslateExceptionError,
)
from models.translation_models import NestedArrayResponse, TranslationPayload, UpstreamRequest
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import ParsedResponse

__all__: list[str] = ["GoogleTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_API_URL: Final[str] = "https://translate.googleapis.com/translate_a/single"
DETECTED_LANGUAGE_INDEX: Final[int] = 2


class GoogleTranslation(TransInterface):
    @staticmethod
    def fetch_engine_name() -> str:
        return "google"

    def initialize(self, config: Config) -> None:
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        self.engine_attributes = EngineAttributes(name="google", supports_batch=False)
        self.url = config.TRANSLATION.API_URL or DEFAULT_API_URL

    def build_request(self, payload: TranslationPayload) -> UpstreamRequest:
        if isinstance(payload.q, list):
            msg = "The free Google endpoint accepts a single text per request"
            raise TranslateExceptionError(msg)
        return UpstreamRequest(
            method="GET",
            url=self.url,
            params={
                "client": "gtx",
                "sl": payload.source,
                "tl": payload.target,
                "dt": "t",
                "q": payload.q,
            },
        )

    def parse_response(self, body: Any) -> NestedArrayResponse:
        if not isinstance(body, list) or len(body) < 1:
            msg = "invalid response format: expected a non-empty array"
            raise MalformedResponseError(msg)

        sentences: Any = body[0]
        if not isinstance(sentences, list):
            msg = "invalid translation format: element 0 is not an array"
            raise MalformedResponseError(msg)

        fragments: list[str] = [
            sentence[0].strip()
            for sentence in sentences
            if isinstance(sentence, list) and sentence and isinstance(sentence[0], str)
        ]
        if not fragments:
            msg = "no translation found in response"
            raise MalformedResponseError(msg)

        detected: Any = body[DETECTED_LANGUAGE_INDEX] if len(body) > DETECTED_LANGUAGE_INDEX else None
        return NestedArrayResponse(
            sentences=fragments,
            detected_source_lang=detected if isinstance(detected, str) else None,
        )

    def extract_texts(self, parsed: ParsedResponse) -> list[str]:
        if not isinstance(parsed, NestedArrayResponse):
            msg = f"unexpected response model: {type(parsed).__name__}"
            raise MalformedResponseError(msg)
        return [parsed.text]

    def extract_detected_language(self, parsed: ParsedResponse) -> str | None:
        if not isinstance(parsed, NestedArrayResponse):
            return None
        return parsed.detected_source_lang
