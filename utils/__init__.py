"""Utility modules for the translation client.

This package provides the logging setup and the string helpers (normalization, cache keys)
used throughout the application.
"""

from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

__all__: list[str] = ["LoggerUtils", "StringUtils"]
