"""Loading of the translation client settings from an INI file.

Every section of the file maps onto one dataclass of models.config_models; keys the file leaves out
keep their defaults. Values are coerced to the type of the default and then range-checked.
"""

from __future__ import annotations

import ast
import configparser
import logging
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from models.config_models import Config
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Callable
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "Config",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ALLOWED_TRANSLATION_ENGINES: list[str] = ["google", "google_cloud"]


class ConfigLoaderError(Exception):
    """Base class for every configuration problem."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """No file exists at the given configuration path."""


class ConfigFormatError(ConfigLoaderError):
    """The file could not be parsed, or one of its values is unusable."""


class ConfigValueError(ConfigFormatError):
    """A value is out of range or cannot be converted."""


class ConfigTypeError(ConfigFormatError):
    """A value has the wrong Python type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    Reads the INI file, coerces every known key to the type of its dataclass default, applies
    keyword overrides and validates the result. Keys missing from the file keep their defaults,
    so an absent file name (None) yields a fully default configuration.

    Args:
        config_filename (str | None): INI file name to load, or None to use defaults only.
        **args: Optional overrides. ``debug=True`` forces GENERAL.DEBUG.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(self, *, config_filename: str | None = None, **args) -> None:
        self.config = Config()
        parser: ConfigParser = ConfigParser()
        # keep INI keys upper case so they match the dataclass field names
        parser.optionxform = str  # type: ignore[assignment, method-assign]
        msg: str

        if config_filename is not None:
            if not Path(config_filename).exists():
                msg = f"Configuration file '{config_filename}' not found."
                raise ConfigFileNotFoundError(msg)
            try:
                parser.read(config_filename, encoding="utf-8")
            except configparser.Error as err:
                msg = f"Failed to parse configuration file '{config_filename}': {err}"
                raise ConfigFormatError(msg) from None

        self._convert_settings(parser)
        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        """Copy every defined INI value into the Config object, coerced to the field type."""
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Skipping undefined section: '%s'", section.name)
                continue
            for key in fields(getattr(self.config, section.name)):
                if not parser.has_option(section.name, key.name):
                    logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                    continue
                formatted_value = formatter.apply_format(section, key)
                setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _validate_settings(self) -> None:
        """Validate ranges and types of the loaded settings.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        self._inspect_defined_item("TRANSLATION", "ENGINE", ALLOWED_TRANSLATION_ENGINES)
        self._validate_minimum("TRANSLATION", "TIMEOUT", 0.0, inclusive=False)
        self._validate_minimum("TRANSLATION", "MAX_CHUNK_LENGTH", 1)
        self._validate_minimum("TRANSLATION", "DETECT_TEXT_LIMIT", 1)
        self._validate_minimum("RETRY", "MAX_RETRIES", 0)
        self._validate_minimum("RETRY", "BASE_DELAY", 0.0)
        self._validate_minimum("RETRY", "JITTER", 0.0)
        self._validate_minimum("CACHE", "MAX_SIZE", 1)
        self._validate_minimum("CONCURRENCY", "MAX_REQUESTS", 1)
        self._validate_user_agents()
        self._validate_log_level()

    def _validate_minimum(
        self, section_name: str, key_name: str, minimum: float, *, inclusive: bool = True
    ) -> None:
        value: int | float = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"
        if value < minimum or (not inclusive and value == minimum):
            bound: str = ">=" if inclusive else ">"
            msg: str = f"'{field_name}' must be {bound} {minimum}: {value}"
            raise ConfigValueError(msg)

    def _inspect_defined_item(self, section_name: str, key_name: str, defined_list: list[str]) -> None:
        """Verify that a configuration value is one of the allowed options.

        Unknown values are only logged; the engine registry rejects them later.

        Raises:
            ConfigTypeError: If the configured value is not a str.
        """
        value: Any = getattr(getattr(self.config, section_name), key_name)
        field_name: str = f"{section_name}.{key_name}"

        if not isinstance(value, str):
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)
        if value not in defined_list:
            logger.warning("Unknown value '%s' is set for '%s'", value, field_name)

    def _validate_user_agents(self) -> None:
        agents: Any = self.config.IDENTITY.USER_AGENTS
        if not isinstance(agents, list) or not all(isinstance(agent, str) for agent in agents):
            msg: str = f"'IDENTITY.USER_AGENTS' must be a list of strings: {agents!r}"
            raise ConfigTypeError(msg)
        if self.config.IDENTITY.SEND_HEADERS and not agents:
            msg = "'IDENTITY.USER_AGENTS' must not be empty while 'IDENTITY.SEND_HEADERS' is enabled"
            raise ConfigValueError(msg)

    def _validate_log_level(self) -> None:
        level: str = self.config.GENERAL.LOG_LEVEL
        if level.upper() not in logging.getLevelNamesMapping():
            msg: str = f"Unsupported log level used for 'GENERAL.LOG_LEVEL': {level}"
            raise ConfigValueError(msg)


class _ConfigFormatter:
    """Coerces raw INI strings to the type of the matching Config default.

    bool, int and float values are read as plain scalars (surrounding quotes tolerated);
    str and list values must be Python literals.
    """

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser
        self._scalar_parsers: dict[type, Callable[[str, str], bool | int | float]] = {
            bool: self.parser.getboolean,
            int: lambda section, key: int(float(self._unquoted(section, key))),
            float: lambda section, key: float(self._unquoted(section, key)),
        }

    def _unquoted(self, section: str, key: str) -> str:
        raw: str = self.parser.get(section, key).strip()
        for quote in ("'", '"'):
            raw = raw.removeprefix(quote).removesuffix(quote)
        return raw

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Return the INI value of ``section.key`` coerced to the declared type.

        Raises:
            ConfigValueError: If a scalar cannot be converted or the literal is not a plain value.
            ConfigFormatError: If the literal has invalid syntax.
            ConfigTypeError: If the literal evaluates to another type than the default's.
        """
        setting: str = f"{section.name}.{key.name}"
        default: Any = getattr(getattr(self.config, section.name), key.name)

        scalar_parser = self._scalar_parsers.get(type(default))
        if scalar_parser is not None:
            try:
                return scalar_parser(section.name, key.name)
            except ValueError as err:
                msg = f"Invalid value for {setting}: {err}"
                raise ConfigValueError(msg) from err

        raw: str = self.parser.get(section.name, key.name)
        try:
            value: Any = ast.literal_eval(raw)
        except SyntaxError as err:
            msg = f"Malformed literal for {setting}: {raw}"
            raise ConfigFormatError(msg) from err
        except ValueError as err:
            msg = f"Not a literal value for {setting} (strings must be quoted): {raw}"
            raise ConfigValueError(msg) from err

        if not isinstance(value, type(default)):
            msg = f"{setting} must be a {type(default).__name__}, got {type(value).__name__}: {raw}"
            raise ConfigTypeError(msg)
        return value
