"""Compact peer lists (BEP 23).

Trackers answering ``compact=1`` pack each IPv4 peer into six bytes: four
address octets followed by a big-endian 16-bit port.
"""

from __future__ import annotations

import socket
import struct
from typing import Iterable

from btannounce.models import PeerInfo

COMPACT_PEER_SIZE = 6


def decode_compact_peers(data: bytes) -> list[PeerInfo]:
    """Decode a compact IPv4 peer string.

    Trailing bytes that do not fill a whole six-byte record are ignored, so a
    short or ragged blob yields fewer peers rather than an error.
    """
    usable = len(data) - len(data) % COMPACT_PEER_SIZE
    peers = []
    for start in range(0, usable, COMPACT_PEER_SIZE):
        record = data[start : start + COMPACT_PEER_SIZE]
        ip = ".".join(str(octet) for octet in record[:4])
        port = record[4] * 256 + record[5]
        peers.append(PeerInfo(ip=ip, port=port))
    return peers


def encode_compact_peers(peers: Iterable[PeerInfo]) -> bytes:
    """Encode peers into the compact IPv4 format."""
    return b"".join(
        struct.pack("!4sH", socket.inet_aton(peer.ip), peer.port) for peer in peers
    )
