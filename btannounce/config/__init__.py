"""Configuration loading."""

from __future__ import annotations

from btannounce.config.config import ConfigManager

__all__ = ["ConfigManager"]
