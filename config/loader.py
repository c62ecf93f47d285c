"""Configuration file loader and validator.

Handles reading, formatting, and validating settings from the INI configuration file.
Raises exceptions for any issues encountered during loading.
"""

from __future__ import annotations

import ast
import configparser
from configparser import ConfigParser
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from models.config_models import Config
from models.re_models import LANGUAGE_CODE_PATTERN
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable
    from dataclasses import Field as DataclassField

__all__: list[str] = [
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "ConfigLoaderError",
    "ConfigTypeError",
    "ConfigValueError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MAX_VOLUME: int = 200


class ConfigLoaderError(Exception):
    """An error occurred while processing the configuration file."""


class ConfigFileNotFoundError(ConfigLoaderError):
    """The specified configuration file does not exist."""


class ConfigFormatError(ConfigLoaderError):
    """The configuration file is not formatted correctly."""


class ConfigValueError(ConfigFormatError):
    """The configuration file contains an invalid value."""


class ConfigTypeError(ConfigFormatError):
    """The configuration file contains an invalid type."""


class ConfigLoader:
    """Handles loading and validation of configuration settings.

    This class reads the configuration file, applies formatting rules, applies command-line
    overrides and validates the result. Keys missing from the file keep their defaults.

    Args:
        config_filename (str): INI file name to load.
        script_name (str): Executing script name, used in error messaging.
        **args: Command-line overrides; ``debug``, ``language`` and ``backend`` are recognised.

    Raises:
        ConfigFileNotFoundError: If the configuration file does not exist.
        ConfigFormatError: If the file cannot be parsed or contains invalid values/types.
    """

    def __init__(
        self,
        *,
        config_filename: str,
        script_name: str,
        **args,
    ) -> None:
        config_path = Path(config_filename)
        msg: str
        if not config_path.exists():
            msg = (
                f"Configuration file '{config_filename}' not found. "
                f"Please create '{config_filename}' in the same directory as '{script_name}'."
            )
            raise ConfigFileNotFoundError(msg)

        # No interpolation: values such as VOLUME = "150%" are read literally.
        parser: ConfigParser = ConfigParser(interpolation=None)

        try:
            parser.read(config_filename, encoding="utf-8")
        except configparser.Error as err:
            msg = f"Failed to parse configuration file '{config_filename}': {err}"
            raise ConfigFormatError(msg) from None

        self.config = Config()
        self._convert_settings(parser)

        if args.get("debug", False):
            self.config.GENERAL.DEBUG = True
        if args.get("language"):
            self.config.SPEECH.DEFAULT_LANGUAGE = str(args["language"]).lower()
        if args.get("backend"):
            self.config.SPEECH.DEFAULT_BACKEND = str(args["backend"])
        self._validate_settings()

    def _convert_settings(self, parser: ConfigParser) -> None:
        formatter = _ConfigFormatter(self.config, parser)
        for section in fields(self.config):
            if not parser.has_section(section.name):
                logger.debug("Skipping undefined section: '%s'", section.name)
                continue
            self._convert_section_field(parser, formatter, section)

    def _convert_section_field(
        self, parser: ConfigParser, formatter: _ConfigFormatter, section: DataclassField[Any]
    ) -> None:
        """Convert all fields in a configuration section.

        Raises:
            ConfigFormatError: If a value fails to format correctly.
        """
        for key in fields(getattr(self.config, section.name)):
            if not parser.has_option(section.name, key.name):
                logger.debug("Skipping undefined setting: '%s.%s'", section.name, key.name)
                continue

            formatted_value = formatter.apply_format(section, key)
            setattr(getattr(self.config, section.name), key.name, formatted_value)

    def _validate_settings(self) -> None:
        """Validate languages, backends, buffers and player settings.

        Raises:
            ConfigFormatError: If validation fails for any setting.
        """
        try:
            self._normalize_languages()
            self._validate_backends()
            self._validate_buffers()
            self._validate_player()
        except ConfigLoaderError:
            raise
        except (AttributeError, TypeError, ValueError) as err:
            msg: str = f"Invalid configuration value: {err}"
            raise ConfigFormatError(msg) from None

    def _normalize_languages(self) -> None:
        speech = self.config.SPEECH
        speech.DEFAULT_LANGUAGE = self._check_language("SPEECH.DEFAULT_LANGUAGE", speech.DEFAULT_LANGUAGE)
        speech.LANGUAGES = [self._check_language("SPEECH.LANGUAGES", lang) for lang in self._as_list(speech.LANGUAGES)]
        if not speech.LANGUAGES:
            msg = "'SPEECH.LANGUAGES' must contain at least one language"
            raise ConfigValueError(msg)
        if speech.DEFAULT_LANGUAGE not in speech.LANGUAGES:
            msg: str = f"'SPEECH.DEFAULT_LANGUAGE' ({speech.DEFAULT_LANGUAGE}) is not listed in 'SPEECH.LANGUAGES'"
            raise ConfigValueError(msg)

        cached = self.config.CACHED_AUDIO
        cached.LANGUAGES = [
            self._check_language("CACHED_AUDIO.LANGUAGES", lang) for lang in self._as_list(cached.LANGUAGES)
        ]

        native = self.config.NATIVE
        if not isinstance(native.VOICES, dict):
            msg = f"Unsupported type used for 'NATIVE.VOICES': {type(native.VOICES)}"
            raise ConfigTypeError(msg)
        native.VOICES = {
            self._check_language("NATIVE.VOICES", lang): str(voice) for lang, voice in native.VOICES.items()
        }

    def _validate_backends(self) -> None:
        speech = self.config.SPEECH
        known: list[str] = [self.config.CACHED_AUDIO.NAME, self.config.NATIVE.NAME]
        if len(set(known)) != len(known):
            msg: str = f"Backend names must be unique: {known}"
            raise ConfigValueError(msg)

        speech.BACKENDS = self._as_list(speech.BACKENDS)
        if not speech.BACKENDS:
            msg = "'SPEECH.BACKENDS' must name at least one backend"
            raise ConfigValueError(msg)
        for name in speech.BACKENDS:
            if name not in known:
                msg = f"Unknown backend '{name}' in 'SPEECH.BACKENDS'. Known backends: {known}"
                raise ConfigValueError(msg)
        if len(set(speech.BACKENDS)) != len(speech.BACKENDS):
            msg = f"Duplicate backend in 'SPEECH.BACKENDS': {speech.BACKENDS}"
            raise ConfigValueError(msg)
        if speech.DEFAULT_BACKEND and speech.DEFAULT_BACKEND not in speech.BACKENDS:
            msg = f"'SPEECH.DEFAULT_BACKEND' ({speech.DEFAULT_BACKEND}) is not listed in 'SPEECH.BACKENDS'"
            raise ConfigValueError(msg)

        if self.config.CACHED_AUDIO.TIMEOUT <= 0:
            logger.warning("Invalid 'CACHED_AUDIO.TIMEOUT'; using default value 10.0")
            self.config.CACHED_AUDIO.TIMEOUT = 10.0

    def _validate_buffers(self) -> None:
        if self.config.BUFFERS.COUNT < 1:
            msg: str = f"'BUFFERS.COUNT' must be at least 1, got {self.config.BUFFERS.COUNT}"
            raise ConfigValueError(msg)

    def _validate_player(self) -> None:
        volume: int = self.config.PLAYER.VOLUME
        if not 0 <= volume <= MAX_VOLUME:
            msg: str = f"'PLAYER.VOLUME' must be in range 0-{MAX_VOLUME}, got {volume}"
            raise ConfigValueError(msg)

    @staticmethod
    def _check_language(field_name: str, value: Any) -> str:
        if not isinstance(value, str):
            msg: str = f"Unsupported type used for '{field_name}': {type(value)}"
            raise ConfigTypeError(msg)
        code: str = value.strip().lower()
        if not LANGUAGE_CODE_PATTERN.match(code):
            msg = f"Invalid language code '{value}' in '{field_name}'"
            raise ConfigValueError(msg)
        return code

    @staticmethod
    def _as_list(value: Any) -> list[str]:
        """Accept a single string where a list is expected."""
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        msg: str = f"Expected a list, got {type(value)}"
        raise ConfigTypeError(msg)


class _ConfigFormatter:
    """Converts INI string values to typed Python objects (bool, int, float, list, dict)."""

    def __init__(self, config: Config, parser: ConfigParser) -> None:
        self.config: Config = config
        self.parser: ConfigParser = parser

    def apply_format(self, section: DataclassField[Any], key: DataclassField[Any]) -> Any:
        """Convert INI value to the expected Python type based on the Config field type.

        Raises:
            ConfigValueError: If a value cannot be coerced to the expected type.
            ConfigFormatError: If literal evaluation fails due to invalid syntax.
            ConfigTypeError: If an unexpected type is encountered during coercion.
        """
        formatters: dict[
            type[bool | int | float], Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float]
        ] = {
            bool: self.parse_as_boolean,
            int: self.parse_as_integer,
            float: self.parse_as_float,
        }

        default_value: Any = getattr(getattr(self.config, section.name), key.name)
        formatter: Callable[[DataclassField[Any], DataclassField[Any]], bool | int | float] | None = formatters.get(
            type(default_value)
        )
        if formatter:
            try:
                return formatter(section, key)
            except ValueError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigValueError(msg) from err
            except TypeError as err:
                msg = f"Invalid value for {section.name}.{key.name}: {err}"
                raise ConfigTypeError(msg) from err

        value_str: str = self.parser[section.name][key.name]
        try:
            value: Any = ast.literal_eval(value_str)
        except ValueError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigValueError(msg) from err
        except SyntaxError as err:
            msg = f"Invalid literal for {section.name}.{key.name}: {value_str}"
            raise ConfigFormatError(msg) from err

        if isinstance(default_value, str) and not isinstance(value, str):
            msg = f"Expected a quoted string for {section.name}.{key.name}, got {type(value).__name__}"
            raise ConfigTypeError(msg)
        return value

    def parse_as_float(self, section: DataclassField[Any], key: DataclassField[Any]) -> float:
        """Convert INI string to float."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"', "%"):
            value = value.removeprefix(char).removesuffix(char)
        return float(value)

    def parse_as_integer(self, section: DataclassField[Any], key: DataclassField[Any]) -> int:
        """Convert INI string to integer."""
        value: str = self.parser.get(section.name, key.name)
        for char in ("'", '"', "%"):
            value = value.removeprefix(char).removesuffix(char)
        return int(float(value))

    def parse_as_boolean(self, section: DataclassField[Any], key: DataclassField[Any]) -> bool:
        """Convert INI string to boolean."""
        return self.parser.getboolean(section.name, key.name)
