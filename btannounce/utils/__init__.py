"""Shared utilities: exceptions, logging and peer IDs."""

from __future__ import annotations

from btannounce.utils.exceptions import (
    BTAnnounceError,
    BencodeError,
    ConfigurationError,
    DescriptorParseError,
    TorrentError,
    TrackerError,
)
from btannounce.utils.logging_config import setup_logging, tag_client
from btannounce.utils.peer_id import generate_peer_id

__all__ = [
    "BTAnnounceError",
    "BencodeError",
    "ConfigurationError",
    "DescriptorParseError",
    "TorrentError",
    "TrackerError",
    "generate_peer_id",
    "tag_client",
    "setup_logging",
]
