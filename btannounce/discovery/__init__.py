"""Tracker announce and compact peer list decoding."""

from __future__ import annotations

from btannounce.discovery.compact import decode_compact_peers, encode_compact_peers
from btannounce.discovery.tracker import AsyncTrackerClient, TrackerResponse

__all__ = [
    "AsyncTrackerClient",
    "TrackerResponse",
    "decode_compact_peers",
    "encode_compact_peers",
]
