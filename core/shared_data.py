"""Shared data management for the translation client.

SharedData builds the process-wide singletons (HTTP session, result cache, in-flight registry,
concurrency limiter, identity rotator, call executor and engine) once from the configuration and
injects them into the translation manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cache.inflight_manager import InFlightManager
from core.cache.manager import TranslationCacheManager
from core.trans.chunker import TextChunker
from core.trans.executor import UpstreamCallExecutor
from core.trans.identity import IdentityRotator
from core.trans.interface import TransInterface
from core.trans.limiter import ConcurrencyLimiter
from core.trans.live import LiveTranslation
from core.trans.manager import TransManager
from handlers.async_comm import AsyncHttp
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.trans.live import ResultCallback
    from models.config_models import Config


__all__: list[str] = ["SharedData"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class SharedData:
    _config: Config = field()
    _http: AsyncHttp = field(init=False)
    _cache_manager: TranslationCacheManager = field(init=False)
    _inflight_manager: InFlightManager = field(init=False)
    _limiter: ConcurrencyLimiter = field(init=False)
    _rotator: IdentityRotator | None = field(init=False, default=None)
    _engine: TransInterface = field(init=False)
    _trans_manager: TransManager = field(init=False)

    async def async_init(self) -> None:
        LoggerUtils.from_general(self.config.GENERAL)
        self._http = AsyncHttp()
        self._cache_manager = TranslationCacheManager.from_config(self.config)
        self._inflight_manager = InFlightManager()
        self._limiter = ConcurrencyLimiter(self.config.CONCURRENCY.MAX_REQUESTS)
        if self.config.IDENTITY.SEND_HEADERS:
            self._rotator = IdentityRotator(self.config.IDENTITY.USER_AGENTS)
        self._engine = TransInterface.create(self.config)
        executor: UpstreamCallExecutor = UpstreamCallExecutor.from_config(
            self.config, self._http, self._limiter, self._rotator
        )
        self._trans_manager = TransManager(
            self._engine,
            executor,
            self._cache_manager,
            self._inflight_manager,
            TextChunker(self.config.TRANSLATION.MAX_CHUNK_LENGTH),
            detect_text_limit=self.config.TRANSLATION.DETECT_TEXT_LIMIT,
            detect_target_lang=self.config.TRANSLATION.DETECT_TARGET_LANG,
        )
        logger.info("Shared data initialized (engine: '%s')", self._engine.engine_name)

    async def close(self) -> None:
        await self._trans_manager.close()

    def create_live_translation(self, on_result: ResultCallback | None = None) -> LiveTranslation:
        return LiveTranslation(self._trans_manager, on_result)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def http(self) -> AsyncHttp:
        return self._http

    @property
    def cache_manager(self) -> TranslationCacheManager:
        return self._cache_manager

    @property
    def inflight_manager(self) -> InFlightManager:
        return self._inflight_manager

    @property
    def limiter(self) -> ConcurrencyLimiter:
        return self._limiter

    @property
    def rotator(self) -> IdentityRotator | None:
        return self._rotator

    @property
    def engine(self) -> TransInterface:
        return self._engine

    @property
    def trans_manager(self) -> TransManager:
        return self._trans_manager
