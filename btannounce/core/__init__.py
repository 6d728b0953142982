"""Torrent descriptors and the bencode codec facade."""

from __future__ import annotations

from btannounce.core.bencode import decode, encode
from btannounce.core.torrent import TorrentDescriptor, load_descriptor

__all__ = [
    "TorrentDescriptor",
    "decode",
    "encode",
    "load_descriptor",
]
