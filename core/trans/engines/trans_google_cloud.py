"""Google Cloud Translation API Basic (v2) implementation.

Requests are POSTed with the API key in the query string and a JSON body whose ``q`` may be a list,
so several texts can share one call. The answer is
``{"data": {"translations": [{"translatedText": ..., "detectedSourceLanguage": ...}, ...]}}``
with one entry per requested text, in request order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from core.trans.interface import EngineAttributes, MalformedResponseError, TransInterface
from models.translation_models import StructuredResponse, TranslationPayload, UpstreamRequest
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import ParsedResponse

__all__: list[str] = ["GoogleCloudTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_API_URL: Final[str] = "https://translation.googleapis.com/language/translate/v2"


class GoogleCloudTranslation(TransInterface):
    """Google Cloud Translation API Basic (v2) engine.

    The API key comes from TRANSLATION.API_KEY, or from the GOOGLE_CLOUD_API_OAUTH environment
    variable when the setting is empty.
    """

    def __init__(self) -> None:
        super().__init__()
        self._api_key: str = ""

    @staticmethod
    def fetch_engine_name() -> str:
        return "google_cloud"

    def initialize(self, config: Config) -> None:
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        self.engine_attributes = EngineAttributes(name="google_cloud", supports_batch=True)
        self.url = config.TRANSLATION.API_URL or DEFAULT_API_URL
        self._api_key = config.TRANSLATION.API_KEY or self.get_authentication_key()
        if not self._api_key:
            logger.warning("No API key configured for '%s'; requests will likely be rejected", self.engine_name)

    def build_request(self, payload: TranslationPayload) -> UpstreamRequest:
        return UpstreamRequest(
            method="POST",
            url=self.url,
            params={"key": self._api_key},
            json={
                "q": payload.q,
                "source": payload.source,
                "target": payload.target,
                "format": "text",
            },
        )

    def parse_response(self, body: Any) -> StructuredResponse:
        data: Any = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            msg = "invalid response format: missing 'data' object"
            raise MalformedResponseError(msg)

        try:
            parsed: StructuredResponse = StructuredResponse.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as err:
            msg = f"invalid response format: {err}"
            raise MalformedResponseError(msg) from err

        if not parsed.translations:
            msg = "no translation found in response"
            raise MalformedResponseError(msg)
        if any(not isinstance(item.translated_text, str) for item in parsed.translations):
            msg = "invalid response format: 'translatedText' is not a string"
            raise MalformedResponseError(msg)
        return parsed

    def extract_texts(self, parsed: ParsedResponse) -> list[str]:
        if not isinstance(parsed, StructuredResponse):
            msg = f"unexpected response model: {type(parsed).__name__}"
            raise MalformedResponseError(msg)
        return parsed.texts

    def extract_detected_language(self, parsed: ParsedResponse) -> str | None:
        if not isinstance(parsed, StructuredResponse) or not parsed.translations:
            return None
        detected: Any = parsed.translations[0].detected_source_language
        return detected if isinstance(detected, str) else None
