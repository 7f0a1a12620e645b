"""Configuration data models for the translation client.

Each data class represents one section of the INI file. Field names match the INI keys and the
default values double as type declarations for the config loader, which coerces the INI strings
to the type of the default.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Cache",
    "Concurrency",
    "Config",
    "General",
    "Identity",
    "Retry",
    "Translation",
]

DEFAULT_USER_AGENTS: list[str] = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/92.0.4515.107 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/14.1.2 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:90.0) Gecko/20100101 Firefox/90.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.164 Safari/537.36 Edg/91.0.864.71",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/92.0.4515.107 Safari/537.36",
]


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    LOG_LEVEL: str = "INFO"


@dataclass
class Translation:
    ENGINE: str = "google"
    API_URL: str = ""  # empty: the engine's own endpoint
    API_KEY: str = ""
    TIMEOUT: float = 8.0
    MAX_CHUNK_LENGTH: int = 5000
    DETECT_TEXT_LIMIT: int = 1000
    DETECT_TARGET_LANG: str = "en"


@dataclass
class Retry:
    MAX_RETRIES: int = 5
    BASE_DELAY: float = 0.5
    JITTER: float = 0.3


@dataclass
class Cache:
    MAX_SIZE: int = 2000
    TTL: float = 24 * 60 * 60.0  # 0 disables expiry


@dataclass
class Concurrency:
    MAX_REQUESTS: int = 3


@dataclass
class Identity:
    SEND_HEADERS: bool = True
    USER_AGENTS: list[str] = field(default_factory=lambda: DEFAULT_USER_AGENTS.copy())


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    RETRY: Retry = field(default_factory=Retry)
    CACHE: Cache = field(default_factory=Cache)
    CONCURRENCY: Concurrency = field(default_factory=Concurrency)
    IDENTITY: Identity = field(default_factory=Identity)
