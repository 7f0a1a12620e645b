from __future__ import annotations

from typing import Final

__all__: list[str] = ["StringUtils"]

CACHE_KEY_SEPARATOR: Final[str] = "|"  # never part of a language code ("-" is, e.g. zh-CN)
PREVIEW_LENGTH: Final[int] = 50


class StringUtils:
    """Utility class for the text handling shared by the translation client.

    Provides static methods for type coercion, whitespace normalization, cache key construction
    and log-friendly previews.
    """

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def normalize_text(value: str | None) -> str:
        """Remove leading and trailing whitespace and collapse internal runs to a single space.

        Args:
            value (str | None): Raw input, possibly empty or whitespace only.

        Returns:
            str: Normalized text. Empty when the input holds no visible characters.
        """
        return " ".join(StringUtils.ensure_str(value).split())

    @staticmethod
    def generate_cache_key(source_lang: str, target_lang: str, normalized_text: str) -> str:
        """Build the opaque cache key for a translation request.

        Args:
            source_lang (str): The source language code.
            target_lang (str): The target language code.
            normalized_text (str): Text already passed through normalize_text().

        Returns:
            str: Deterministic key identifying the request.
        """
        return CACHE_KEY_SEPARATOR.join((source_lang, target_lang, normalized_text))

    @staticmethod
    def preview(value: str, limit: int = PREVIEW_LENGTH) -> str:
        """Shorten text for log and error messages."""
        value = StringUtils.ensure_str(value)
        if len(value) <= limit:
            return value
        return f"{value[:limit]}..."
