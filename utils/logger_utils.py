from __future__ import annotations

import logging
import sys
import warnings
from logging import Formatter, Handler, NullHandler, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, ClassVar, Final, Literal, Self, TextIO

if TYPE_CHECKING:
    from pathlib import Path

    from models.config_models import General

__all__: list[str] = ["LoggerUtils"]

type LevelType = Literal["NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LOG_FILE_SIZE: Final[int] = 2 * 1024 * 1024  # 2MB
_LOG_BACKUP_COUNT: Final[int] = 2
_CONSOLE_FORMAT: Final[str] = "%(message)s"
_FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(lineno)4d %(name)-40s\t%(funcName)s\t%(message)s"

DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_NAMESPACE: Final[str] = "TransClient"


class LoggerUtils:
    """Process-wide logging setup for the translation client.

    Every module obtains its logger through ``LoggerUtils.get_logger(__name__)`` so that all
    records end up below a single namespace. Instantiating the class attaches the console handler
    (WARNING and above) and, when a file name is given, a rotating file handler (DEBUG and above).
    Only the first instantiation configures anything; later ones return the same object untouched.

    Attributes:
        _LOGGER_NAMESPACE (str): Namespace prefixed to every logger name.
        _configured (bool): Whether handlers have already been attached.
        _instance (LoggerUtils | None): The singleton instance.
    """

    _LOGGER_NAMESPACE: ClassVar[str] = DEFAULT_NAMESPACE
    _configured: ClassVar[bool] = False
    _instance: ClassVar[Self | None] = None

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path = "", *, use_null_console: bool = False) -> None:
        """Attach handlers to the namespace root logger.

        Args:
            filename (str | Path): Log file path. If empty, nothing is written to a file.
            use_null_console (bool): Discard console output instead of writing it to stderr.
        """
        if LoggerUtils._configured:
            return

        self.root_logger: logging.Logger = logging.getLogger(self._LOGGER_NAMESPACE)
        # must be lower than the handler levels, otherwise nothing reaches them
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)

        console: Handler = NullHandler() if use_null_console or sys.stderr is None else self._console_handler()
        self._attach(console)
        if str(filename).strip():
            file_handler: Handler | None = self._file_handler(str(filename))
            if file_handler is not None:
                self._attach(file_handler)

        warnings.showwarning = self.warning_to_log
        LoggerUtils._configured = True

    @classmethod
    def from_general(cls, general: General) -> LoggerUtils:
        """Configure logging from the GENERAL config section.

        DEBUG=True forces the DEBUG level; otherwise LOG_LEVEL applies.
        """
        instance: LoggerUtils = cls(general.LOG_FILE)
        instance.set_level("DEBUG" if general.DEBUG else general.LOG_LEVEL)
        return instance

    def warning_to_log(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        """Redirect ``warnings.warn`` output to the logger (signature required by warnings.showwarning)."""
        _ = file, line
        self.root_logger.warning("%s:%d: %s: %s", filename, lineno, category.__name__, message)

    @staticmethod
    def _console_handler() -> Handler:
        handler: StreamHandler[TextIO] = StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(Formatter(_CONSOLE_FORMAT))
        return handler

    def _file_handler(self, filename: str) -> Handler | None:
        try:
            handler = RotatingFileHandler(
                filename=filename,
                maxBytes=_LOG_FILE_SIZE,
                backupCount=_LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except (FileNotFoundError, PermissionError):
            self.root_logger.error("Incorrect log file name: %s\nLogging to the file is not performed.", filename)
            return None
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(Formatter(_FILE_FORMAT))
        return handler

    def _attach(self, handler: Handler) -> None:
        if any(type(existing) is type(handler) for existing in self.root_logger.handlers):
            self.root_logger.warning("%s is already attached.", type(handler).__name__)
            handler.close()
            return
        self.root_logger.addHandler(handler)

    def set_level(self, level: LevelType | str) -> None:
        """Set the namespace log level, falling back to INFO for unknown names."""
        level_map: dict[str, int] = logging.getLevelNamesMapping()
        try:
            self.root_logger.setLevel(level_map[level.upper()])
        except KeyError:
            self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
            self.root_logger.warning("Unknown logging level '%s' specified.\nLogging level set to 'INFO'.", level)

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Get a logger below the configured namespace.

        Args:
            name (str | None): Logger name, usually ``__name__``. None returns the namespace root logger.

        Returns:
            logging.Logger: The logger instance.
        """
        namespace: str = LoggerUtils._LOGGER_NAMESPACE
        if not namespace:
            return logging.getLogger(name or None)
        return logging.getLogger(f"{namespace}.{name}" if name else namespace)
