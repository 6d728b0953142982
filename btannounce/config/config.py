"""Configuration management for btannounce.

Configuration is loaded hierarchically: defaults → TOML file → environment →
explicit overrides (the command line). Only the command line layer reads
files and the environment; library code receives a :class:`Config`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import toml

from btannounce.models import Config
from btannounce.utils.exceptions import ConfigurationError
from btannounce.utils.logging_config import setup_logging

CONFIG_FILENAME = "btannounce.toml"

ENV_MAPPINGS: dict[str, str] = {
    # Network
    "BTANNOUNCE_LISTEN_PORT": "network.listen_port",
    "BTANNOUNCE_TRACKER_TIMEOUT": "network.tracker_timeout",
    "BTANNOUNCE_USER_AGENT": "network.user_agent",
    "BTANNOUNCE_REQUEST_COMPACT": "network.request_compact",
    # Observability
    "BTANNOUNCE_LOG_LEVEL": "observability.log_level",
    "BTANNOUNCE_LOG_FILE": "observability.log_file",
    "BTANNOUNCE_STRUCTURED_LOGGING": "observability.structured_logging",
}
_TEXT_SETTINGS = frozenset({"network.user_agent", "observability.log_file"})

logger = logging.getLogger(__name__)


def _parse_env_value(raw: str) -> bool | int | float | str:
    low = raw.lower()
    if low in {"true", "yes", "on"}:
        return True
    if low in {"false", "no", "off"}:
        return False
    try:
        if "." in raw:
            return float(raw)
        return int(raw)
    except ValueError:
        return raw


def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = d
    for p in parts[:-1]:
        cur = cur.setdefault(p, {})
    cur[parts[-1]] = value


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries recursively."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_config(result[key], value)
        else:
            result[key] = value
    return result


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(
        self,
        config_file: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
        env: dict[str, str] | None = None,
    ):
        """Initialize configuration manager.

        Args:
            config_file: Path to TOML config file. If None, searches for btannounce.toml
            overrides: Nested values applied last, e.g. from command line options
            env: Environment to read overrides from (defaults to ``os.environ``)

        """
        self.env = os.environ if env is None else env
        self.overrides = overrides or {}
        self.config_file = self._find_config_file(config_file)
        self.config = self._load_config()

    def _find_config_file(self, config_file: str | Path | None) -> Path | None:
        """Find configuration file in standard locations."""
        if config_file:
            path = Path(config_file)
            if not path.exists():
                msg = f"Config file not found: {path}"
                raise ConfigurationError(msg)
            return path

        search_paths = [
            Path.cwd() / CONFIG_FILENAME,
            Path.home() / ".config" / "btannounce" / CONFIG_FILENAME,
        ]
        for path in search_paths:
            if path.exists():
                return path
        return None

    def _load_config(self) -> Config:
        """Load configuration from file, environment and overrides."""
        config_data: dict[str, Any] = {}

        if self.config_file is not None:
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    config_data = toml.load(f)
            except (OSError, toml.TomlDecodeError) as e:
                msg = f"Failed to load config file {self.config_file}: {e}"
                raise ConfigurationError(msg) from e
            logger.debug("Loaded configuration from %s", self.config_file)

        config_data = _merge_config(config_data, self._get_env_config())
        config_data = _merge_config(config_data, self.overrides)

        try:
            return Config(**config_data)
        except Exception as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

    def _get_env_config(self) -> dict[str, Any]:
        """Get configuration from environment variables."""
        env_config: dict[str, Any] = {}
        for env_name, cfg_path in ENV_MAPPINGS.items():
            raw = self.env.get(env_name)
            if raw is None:
                continue
            if cfg_path in _TEXT_SETTINGS:
                value: Any = raw
            elif cfg_path == "observability.log_level":
                value = raw.upper()
            else:
                value = _parse_env_value(raw)
            _set_nested(env_config, cfg_path, value)
        return env_config

    def setup_logging(self) -> None:
        """Set up logging from the observability section."""
        setup_logging(self.config.observability)

