"""This module defines the abstract base class for upstream translation engines and the error taxonomy.

An engine knows how to shape one request for its endpoint and how to parse the answer into one of
the response models; it performs no I/O itself. Transport, retries and concurrency are handled by
the call executor, caching and chunking by the translation manager.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config
    from models.translation_models import ParsedResponse, TranslationPayload, UpstreamRequest

__all__: list[str] = [
    "EmptyInputError",
    "EngineAttributes",
    "LanguageDetectionError",
    "MalformedResponseError",
    "NonRetryableTransportError",
    "RetryableTransportError",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationFailedError",
    "TranslationRateLimitError",
    "TransportError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class EngineAttributes:
    """Engine-specific capabilities and behavior flags.

    Attributes:
        name (str): Name of the translation engine.
        supports_batch (bool): Whether one request may carry a list of texts.
    """

    name: str
    supports_batch: bool = False


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""


class EmptyInputError(TranslateExceptionError):
    """The text to translate is empty after normalization."""


class TransportError(TranslateExceptionError):
    """The upstream call failed at the transport level.

    Attributes:
        status (int | None): HTTP status of the failed response, None for timeouts and connection failures.
    """

    def __init__(self, msg: str, *, status: int | None = None) -> None:
        super().__init__(msg)
        self.status: int | None = status


class RetryableTransportError(TransportError):
    """Timeout, connection failure, HTTP 429 or HTTP 5xx.

    Attributes:
        attempts (int): Number of attempts made when the error became terminal, 0 while still retrying.
    """

    def __init__(self, msg: str, *, status: int | None = None, attempts: int = 0) -> None:
        super().__init__(msg, status=status)
        self.attempts: int = attempts


class TranslationRateLimitError(RetryableTransportError):
    """The translation request was rate-limited by the API (HTTP 429)."""


class NonRetryableTransportError(TransportError):
    """Any other HTTP error status, surfaced without retrying."""


class MalformedResponseError(TranslateExceptionError):
    """The upstream answered successfully but the body does not match the expected shape."""


class LanguageDetectionError(TranslateExceptionError):
    """The upstream response does not carry a detected language code."""


class TranslationFailedError(TranslateExceptionError):
    """A public operation failed; wraps the underlying cause with context.

    Attributes:
        operation (str): Name of the public operation that failed.
        text (str): Preview of the text involved.
    """

    def __init__(self, operation: str, text: str, cause: Exception) -> None:
        self.operation: str = operation
        self.text: str = text
        super().__init__(f"{operation} failed for '{text}': {cause}")


class TransInterface(ABC):
    """Abstract base class for upstream translation engines.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Registered engine classes,
            keyed by their distinguished names.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its distinguished name.

        Raises:
            ValueError: If another engine already uses the same name.
        """
        super().__init_subclass__(**kwargs)
        name: Any = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return  # nameless engines (test doubles, abstract helpers) are not registered

        if name in cls.registered:
            msg: str = f"A translation engine with the name '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls

    def __init__(self) -> None:
        self._engine_attributes: EngineAttributes | None = None
        self.url: str = ""

    @property
    def engine_attributes(self) -> EngineAttributes:
        if self._engine_attributes is None:
            msg = "Engine attributes have not been set."
            raise RuntimeError(msg)
        return self._engine_attributes

    @engine_attributes.setter
    def engine_attributes(self, attributes: EngineAttributes) -> None:
        if self._engine_attributes is not None:
            msg = "Engine attributes can only be set once during initialization."
            raise RuntimeError(msg)
        self._engine_attributes = attributes

    @property
    def engine_name(self) -> str:
        return self.engine_attributes.name

    @property
    def supports_batch(self) -> bool:
        return self.engine_attributes.supports_batch

    @classmethod
    def create(cls, config: Config) -> TransInterface:
        """Instantiate and initialize the engine named by TRANSLATION.ENGINE.

        Raises:
            TranslateExceptionError: If no engine with that name is registered.
        """
        name: str = config.TRANSLATION.ENGINE
        engine_cls: type[TransInterface] | None = cls.registered.get(name)
        if engine_cls is None:
            msg: str = f"Translation engine not found: '{name}' (registered: {sorted(cls.registered)})"
            raise TranslateExceptionError(msg)
        engine: TransInterface = engine_cls()
        engine.initialize(config)
        logger.info("Translation engine initialized: '%s'", name)
        return engine

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the engine, used for registration and configuration."""
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the engine with the given configuration."""
        raise NotImplementedError

    @abstractmethod
    def build_request(self, payload: TranslationPayload) -> UpstreamRequest:
        """Build the HTTP request for one upstream call.

        Raises:
            TranslateExceptionError: If the payload cannot be expressed for this endpoint.
        """
        raise NotImplementedError

    @abstractmethod
    def parse_response(self, body: Any) -> ParsedResponse:
        """Parse a decoded response body.

        Raises:
            MalformedResponseError: If the body does not match this engine's response shape.
        """
        raise NotImplementedError

    @abstractmethod
    def extract_texts(self, parsed: ParsedResponse) -> list[str]:
        """Return one translated text per requested text, in request order."""
        raise NotImplementedError

    @abstractmethod
    def extract_detected_language(self, parsed: ParsedResponse) -> str | None:
        """Return the detected source language code, or None if the response has none."""
        raise NotImplementedError

    def get_authentication_key(self) -> str:
        """Retrieve the API key from the environment.

        The variable is named after the engine with the suffix "_API_OAUTH",
        e.g. "GOOGLE_CLOUD_API_OAUTH".

        Returns:
            str: The key, or an empty string if the variable is not set.
        """
        return os.getenv(f"{self.fetch_engine_name().upper()}_API_OAUTH", "")
