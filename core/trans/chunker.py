"""Splitting of oversized text into pieces the upstream accepts.

Pieces are cut at sentence ends (``.``, ``!`` or ``?`` followed by whitespace) where possible,
otherwise at whitespace, and only as a last resort in the middle of a word.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

__all__: list[str] = ["TextChunker"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SENTENCE_BOUNDARY_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?<=[.!?])\s+")


class TextChunker:
    """Split text into ordered pieces no longer than ``max_length``.

    Sentences are accumulated, joined by single spaces, until the next one would overflow; then the
    accumulated piece is flushed. A sentence that alone exceeds the limit is split the same way on
    word boundaries, and a single word that exceeds it is hard-cut. Whitespace inside a piece is
    normalized to single spaces, so joining the pieces with spaces keeps every visible character in
    its original order.

    Args:
        max_length (int): Maximum length of a piece, in characters.

    Raises:
        ValueError: If max_length is smaller than 1.
    """

    def __init__(self, max_length: int) -> None:
        if max_length < 1:
            msg: str = f"max_length must be at least 1: {max_length}"
            raise ValueError(msg)
        self.max_length: int = max_length

    def split(self, text: str) -> list[str]:
        """Split text into pieces.

        Args:
            text (str): Text to split, usually already normalized.

        Returns:
            list[str]: The pieces in input order. Text at or below the limit, blank text included, is
            returned unchanged as the only element.
        """
        if len(text) <= self.max_length:
            return [text]

        sentences: list[str] = [s for s in SENTENCE_BOUNDARY_PATTERN.split(text.strip()) if s]
        chunks: list[str] = self._accumulate(sentences, self._split_sentence)
        logger.debug("Split %d characters into %d chunks (limit %d)", len(text), len(chunks), self.max_length)
        return chunks

    def _split_sentence(self, sentence: str) -> list[str]:
        return self._accumulate(sentence.split(), self._hard_cut)

    def _hard_cut(self, word: str) -> list[str]:
        return [word[i : i + self.max_length] for i in range(0, len(word), self.max_length)]

    def _accumulate(self, units: Iterable[str], split_oversized) -> list[str]:
        """Join units with single spaces, flushing before the limit would be exceeded.

        Units longer than the limit are handed to split_oversized and their parts are emitted
        as pieces of their own, except the last part, which keeps accumulating.
        """
        chunks: list[str] = []
        current: str = ""

        for raw_unit in units:
            unit: str = " ".join(raw_unit.split())
            if not unit:
                continue

            if len(unit) > self.max_length:
                if current:
                    chunks.append(current)
                parts: list[str] = split_oversized(unit)
                chunks.extend(parts[:-1])
                current = parts[-1]
                continue

            if not current:
                current = unit
            elif len(current) + 1 + len(unit) <= self.max_length:
                current = f"{current} {unit}"
            else:
                chunks.append(current)
                current = unit

        if current:
            chunks.append(current)
        return chunks
