"""
Manages loading and validation of the INI configuration file, merged with
environment variable overrides.
"""

import configparser
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gd_audio_cache.exceptions import ConfigurationError
from gd_audio_cache.models.config import ProxyConfig

log = logging.getLogger(__name__)

ENV_PREFIX = "GDAC_"


class ConfigManager:
    """
    Builds the application's configuration from, in increasing precedence:
    model defaults, the INI file, the process environment and CLI options.
    """

    def __init__(
        self, config_file_path: Path, environ: Mapping[str, str] | None = None
    ):
        self.config_file_path = config_file_path
        self._environ = os.environ if environ is None else environ
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ProxyConfig:
        """
        Loads configuration from the INI file, applies environment and CLI
        overrides, and validates the result.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated ProxyConfig object.

        Raises:
            ConfigurationError: If the config file cannot be parsed or validation
            fails.
        """
        settings: dict[str, Any] = {}

        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            settings.update(self._get_config_as_dict())
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults."
            )

        env_overrides = self._get_env_overrides()
        if env_overrides:
            log.debug(
                f"Environment overrides applied for: {', '.join(sorted(env_overrides))}"
            )
        settings.update(env_overrides)

        if cli_options:
            settings.update({k: v for k, v in cli_options.items() if v is not None})

        try:
            return ProxyConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> None:
        """
        Creates and saves a new configuration file filled with default values.

        Args:
            settings: Values that should replace the defaults.
        """
        try:
            config = ProxyConfig(**(settings or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        parser = configparser.ConfigParser(interpolation=None)
        parser["DEFAULT"] = {}
        for key in sorted(ProxyConfig.get_ini_keys()):
            value = getattr(config, key)
            if isinstance(value, bool):
                parser["DEFAULT"][key] = "true" if value else "false"
            else:
                parser["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, str]:
        """Reads the known keys of the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        known = ProxyConfig.get_ini_keys()
        unknown = [key for key in section if key not in known]
        if unknown:
            log.warning(
                f"[yellow]Ignoring unknown configuration keys: {', '.join(unknown)}"
                "[/yellow]"
            )
        return {key: section[key] for key in section if key in known}

    def _get_env_overrides(self) -> dict[str, str]:
        """
        Collects overrides from the environment. Both ``GDAC_PORT`` and a bare
        ``PORT`` are accepted; the prefixed name wins.
        """
        overrides = {}
        for key in ProxyConfig.get_ini_keys():
            for name in (f"{ENV_PREFIX}{key.upper()}", key.upper()):
                value = self._environ.get(name)
                if value is not None and value != "":
                    overrides[key] = value
                    break
        return overrides
