"""Translation orchestration.

TransManager is the public entry point: it normalizes input, consults the result cache, coalesces
identical requests that are in flight, chunks oversized text and hands the actual upstream calls
to the call executor.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from core.trans.interface import (
    EmptyInputError,
    LanguageDetectionError,
    MalformedResponseError,
    TranslateExceptionError,
    TranslationFailedError,
)
from models.translation_models import TranslationPayload
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Iterable

    from core.cache.inflight_manager import InFlightManager
    from core.cache.manager import TranslationCacheManager
    from core.trans.chunker import TextChunker
    from core.trans.executor import UpstreamCallExecutor
    from core.trans.interface import TransInterface
    from models.translation_models import ParsedResponse


__all__: list[str] = ["DETECT_SOURCE_LANG", "TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DETECT_SOURCE_LANG: str = "auto"


class TransManager:
    """Translate text through one configured upstream engine.

    Short texts (up to the chunker's maximum length) are translated with a single upstream call
    and cached under their normalized key. Longer texts are split into chunks that are translated
    concurrently and cached one by one; the reassembled text is not cached under its own key.

    Args:
        engine (TransInterface): Initialized engine selected by the configuration.
        executor (UpstreamCallExecutor): Executor performing the upstream calls.
        cache (TranslationCacheManager): Result cache.
        inflight (InFlightManager): Registry coalescing identical concurrent requests.
        chunker (TextChunker): Splitter for oversized text.
        detect_text_limit (int): Number of characters sent for language detection.
        detect_target_lang (str): Target language used for the detection call.
    """

    def __init__(
        self,
        engine: TransInterface,
        executor: UpstreamCallExecutor,
        cache: TranslationCacheManager,
        inflight: InFlightManager,
        chunker: TextChunker,
        *,
        detect_text_limit: int = 1000,
        detect_target_lang: str = "en",
    ) -> None:
        self.engine: TransInterface = engine
        self.executor: UpstreamCallExecutor = executor
        self.cache: TranslationCacheManager = cache
        self.inflight: InFlightManager = inflight
        self.chunker: TextChunker = chunker
        self.detect_text_limit: int = detect_text_limit
        self.detect_target_lang: str = detect_target_lang

    @property
    def max_chunk_length(self) -> int:
        return self.chunker.max_length

    async def translate(self, tgt_lang: str, src_lang: str, text: str) -> str:
        """Translate one text.

        Args:
            tgt_lang (str): Target language code.
            src_lang (str): Source language code.
            text (str): Text to translate; whitespace is normalized first.

        Returns:
            str: The translated text.

        Raises:
            EmptyInputError: If the text is empty after normalization.
            TranslationFailedError: If the translation failed for any other reason.
        """
        normalized: str = StringUtils.normalize_text(text)
        if not normalized:
            msg = "Text to translate is empty"
            raise EmptyInputError(msg)

        logger.debug("Translate '%s' -> '%s': '%s'", src_lang, tgt_lang, StringUtils.preview(normalized))
        try:
            return await self._translate_normalized(normalized, tgt_lang, src_lang)
        except TranslateExceptionError as err:
            logger.error("Translation failed: %s", err)
            raise TranslationFailedError("translate", StringUtils.preview(normalized), err) from err

    async def translate_multiple(self, texts: list[str], tgt_lang: str, src_lang: str) -> list[str]:
        """Translate several texts, keeping their order.

        Entries that are empty after normalization translate to "". Cached entries are served from
        the cache, identical entries share one translation. When the engine supports batching, the
        remaining short entries are sent in one combined call; otherwise each is translated on its own.

        Args:
            texts (list[str]): Texts to translate.
            tgt_lang (str): Target language code.
            src_lang (str): Source language code.

        Returns:
            list[str]: One translation per input text, in input order.

        Raises:
            TranslationFailedError: If any entry failed; wraps the first failure.
        """
        if not texts:
            return []

        results: list[str] = [""] * len(texts)
        short_pending: dict[str, list[int]] = {}
        long_pending: dict[str, list[int]] = {}

        for index, raw in enumerate(texts):
            normalized: str = StringUtils.normalize_text(raw)
            if not normalized:
                continue
            if len(normalized) > self.max_chunk_length:
                long_pending.setdefault(normalized, []).append(index)
                continue
            cached: str | None = self.cache.get(StringUtils.generate_cache_key(src_lang, tgt_lang, normalized))
            if cached is not None:
                results[index] = cached
                continue
            short_pending.setdefault(normalized, []).append(index)

        logger.debug(
            "Translate multiple: %d texts, %d short uncached, %d long",
            len(texts),
            len(short_pending),
            len(long_pending),
        )

        # each job is paired with the text it reports on failure
        jobs: list[tuple[str, Awaitable[None]]] = [
            (text, self._translate_into(results, indexes, text, tgt_lang, src_lang))
            for text, indexes in long_pending.items()
        ]
        if short_pending and self.engine.supports_batch:
            batch: Awaitable[None] = self._translate_batch_into(results, short_pending, tgt_lang, src_lang)
            jobs.append((next(iter(short_pending)), batch))
        else:
            jobs.extend(
                (text, self._translate_into(results, indexes, text, tgt_lang, src_lang))
                for text, indexes in short_pending.items()
            )

        outcomes: list[None | BaseException] = await asyncio.gather(*(job for _, job in jobs), return_exceptions=True)
        for (text, _), outcome in zip(jobs, outcomes, strict=True):
            if isinstance(outcome, TranslateExceptionError):
                logger.error("Batch translation failed: %s", outcome)
                raise TranslationFailedError("translate_multiple", StringUtils.preview(text), outcome) from outcome
            if isinstance(outcome, BaseException):
                raise outcome
        return results

    async def detect_language(self, text: str) -> str:
        """Detect the source language of a text.

        Only the first ``detect_text_limit`` characters are sent.

        Raises:
            EmptyInputError: If the text is empty after normalization.
            TranslationFailedError: If detection failed, including responses without a language code.
        """
        normalized: str = StringUtils.normalize_text(text)
        if not normalized:
            msg = "Text for language detection is empty"
            raise EmptyInputError(msg)

        sample: str = normalized[: self.detect_text_limit]
        try:
            detected: str = await self._detect(sample)
        except TranslateExceptionError as err:
            logger.error("Language detection failed: %s", err)
            raise TranslationFailedError("detect_language", StringUtils.preview(sample), err) from err
        logger.debug("Detected language: '%s'", detected)
        return detected

    async def close(self) -> None:
        """Release in-flight state and close the HTTP session."""
        self.inflight.teardown()
        await self.executor.http.close()
        logger.info("TransManager closed")

    async def _translate_normalized(self, text: str, tgt_lang: str, src_lang: str) -> str:
        if len(text) <= self.max_chunk_length:
            return await self._translate_chunk(text, tgt_lang, src_lang)

        chunks: list[str] = self.chunker.split(text)
        logger.debug("Text of %d chars split into %d chunks", len(text), len(chunks))
        translated: list[str] = await self._gather_all(
            [self._translate_chunk(chunk, tgt_lang, src_lang) for chunk in chunks]
        )
        return " ".join(translated)

    async def _translate_chunk(self, text: str, tgt_lang: str, src_lang: str) -> str:
        cache_key: str = StringUtils.generate_cache_key(src_lang, tgt_lang, text)
        cached: str | None = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Translation cache hit: '%s'", StringUtils.preview(text))
            return cached

        shared: str | None = await self.inflight.mark_inflight_start(cache_key)
        if shared is not None:
            return shared

        try:
            translated: str = (await self._call_texts(TranslationPayload(src_lang, tgt_lang, text)))[0]
        except asyncio.CancelledError:
            self.inflight.discard(cache_key)
            raise
        except Exception as err:
            self.inflight.store_inflight_exception(cache_key, err)
            raise

        self.cache.set(cache_key, translated)
        self.inflight.store_inflight_result(cache_key, translated)
        return translated

    async def _translate_into(
        self, results: list[str], indexes: list[int], text: str, tgt_lang: str, src_lang: str
    ) -> None:
        translated: str = await self._translate_normalized(text, tgt_lang, src_lang)
        for index in indexes:
            results[index] = translated

    async def _translate_batch_into(
        self, results: list[str], pending: dict[str, list[int]], tgt_lang: str, src_lang: str
    ) -> None:
        unique: list[str] = list(pending)
        translated: list[str] = await self._call_texts(TranslationPayload(src_lang, tgt_lang, unique))
        for text, value in zip(unique, translated, strict=True):
            self.cache.set(StringUtils.generate_cache_key(src_lang, tgt_lang, text), value)
            for index in pending[text]:
                results[index] = value

    async def _request(self, payload: TranslationPayload) -> ParsedResponse:
        body: Any = await self.executor.call(self.engine, payload)
        return self.engine.parse_response(body)

    async def _call_texts(self, payload: TranslationPayload) -> list[str]:
        texts: list[str] = self.engine.extract_texts(await self._request(payload))
        if len(texts) != payload.size:
            msg: str = f"expected {payload.size} translations, received {len(texts)}"
            raise MalformedResponseError(msg)
        return texts

    async def _detect(self, sample: str) -> str:
        parsed: ParsedResponse = await self._request(
            TranslationPayload(DETECT_SOURCE_LANG, self.detect_target_lang, sample)
        )
        detected: Any = self.engine.extract_detected_language(parsed)
        if not isinstance(detected, str) or not detected:
            msg = "No detected language in response"
            raise LanguageDetectionError(msg)
        return detected

    @staticmethod
    async def _gather_all[T](jobs: Iterable[Awaitable[T]]) -> list[T]:
        """Run all jobs to completion, then raise the first failure in job order."""
        outcomes: list[T | BaseException] = await asyncio.gather(*jobs, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return outcomes  # type: ignore[return-value]
