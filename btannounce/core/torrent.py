"""Torrent descriptor loading.

A :class:`TorrentDescriptor` wraps the decoded value tree of a ``.torrent``
file and derives what an announce needs from it: the tracker URLs and the
SHA-1 info-hash of the bencoded ``info`` dictionary.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any

from btannounce.core.bencode import (
    decode,
    encode,
    get_bytes,
    get_dict,
    get_int,
    get_list,
    get_text,
)
from btannounce.utils.exceptions import BencodeError, DescriptorParseError

logger = logging.getLogger(__name__)


class TorrentDescriptor:
    """Immutable view of one parsed torrent file."""

    def __init__(self, raw: bytes, data: dict[bytes, Any], path: Path | None = None):
        """Wrap an already validated value tree; use :meth:`load` or :meth:`from_bytes`."""
        self.path = path
        self.raw = raw
        self.data = data
        self._info_hash: bytes | None = None

    @classmethod
    def load(cls, torrent_path: str | Path) -> TorrentDescriptor:
        """Read and validate a torrent file.

        Raises:
            DescriptorParseError: If the file is unreadable, is not a bencoded
                dictionary, or has no ``info`` dictionary

        """
        path = Path(torrent_path)
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except OSError as e:
            msg = f"Cannot read torrent file {path}: {e}"
            raise DescriptorParseError(msg, {"path": str(path)}) from e
        return cls.from_bytes(raw, path)

    @classmethod
    def from_bytes(cls, raw: bytes, path: str | Path | None = None) -> TorrentDescriptor:
        """Decode and validate torrent bytes."""
        source = Path(path) if path is not None else None
        details = {"path": str(source)} if source else None
        try:
            data = decode(raw)
        except BencodeError as e:
            msg = f"Failed to decode torrent: {e.message}"
            raise DescriptorParseError(msg, details) from e

        if not isinstance(data, dict):
            msg = f"Torrent must be a dictionary, got {type(data).__name__}"
            raise DescriptorParseError(msg, details)

        descriptor = cls(raw, data, source)
        try:
            get_dict(data, b"info")
        except BencodeError as e:
            msg = f"Invalid torrent: {e.message}"
            raise DescriptorParseError(msg, details) from e
        return descriptor

    @property
    def info(self) -> dict[bytes, Any]:
        """The ``info`` dictionary."""
        return get_dict(self.data, b"info")

    @property
    def info_hash(self) -> bytes:
        """SHA-1 digest of the bencoded ``info`` dictionary."""
        if self._info_hash is None:
            self._info_hash = hashlib.sha1(encode(self.info)).digest()  # nosec B324 - protocol mandated
        return self._info_hash

    def identity(self) -> bytes:
        """Return the 20-byte info-hash identifying this torrent."""
        return self.info_hash

    def announce_endpoints(self) -> list[str]:
        """Return every tracker URL, flattening ``announce-list`` tiers in order.

        Tier priority and in-tier fallback are not honored: all URLs are
        announced to uniformly. ``announce`` is used only when there is no
        ``announce-list``.
        """
        tiers = get_list(self.data, b"announce-list", None)
        if tiers is not None:
            urls = []
            for tier in tiers:
                if not isinstance(tier, list):
                    msg = "announce-list tiers must be lists"
                    raise BencodeError(msg)
                for url in tier:
                    urls.append(_url_text(url))
            return urls

        announce = get_bytes(self.data, b"announce", None)
        if announce is not None:
            return [_url_text(announce)]
        return []

    @property
    def name(self) -> str:
        """Torrent name, falling back to the file stem."""
        try:
            return get_text(self.info, b"name")
        except BencodeError:
            return self.path.stem if self.path else self.info_hash.hex()

    @property
    def total_length(self) -> int:
        """Total payload size in bytes, 0 when the info dictionary does not say."""
        info = self.info
        try:
            if b"length" in info:
                return get_int(info, b"length")
            files = get_list(info, b"files", [])
            return sum(get_int(f, b"length") for f in files)
        except BencodeError:
            logger.debug("Cannot compute total length for %s", self.path)
            return 0

    def __repr__(self) -> str:
        """Debug representation."""
        return f"TorrentDescriptor(path={self.path!s}, info_hash={self.info_hash.hex()})"


def _url_text(value: Any) -> str:
    if not isinstance(value, bytes):
        msg = f"Tracker URL must be a byte string, got {type(value).__name__}"
        raise BencodeError(msg)
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as e:
        msg = "Tracker URL is not valid UTF-8"
        raise BencodeError(msg) from e


def load_descriptor(torrent_path: str | Path) -> TorrentDescriptor:
    """Load a torrent descriptor from ``torrent_path``."""
    return TorrentDescriptor.load(torrent_path)
