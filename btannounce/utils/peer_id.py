"""Peer ID generation.

A peer ID identifies this client to trackers for the duration of one run. It
is not a security token, so the module-level ``random`` generator is enough;
callers that need reproducible IDs pass their own ``random.Random`` or inject
a different :data:`PeerIdFactory` altogether.
"""

from __future__ import annotations

import random
from typing import Callable

PEER_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
PEER_ID_LENGTH = 20

PeerIdFactory = Callable[[], bytes]


def generate_peer_id(rng: random.Random | None = None) -> bytes:
    """Generate a 20-byte peer ID from lowercase letters and digits."""
    chooser = rng or random
    return "".join(
        chooser.choice(PEER_ID_ALPHABET) for _ in range(PEER_ID_LENGTH)
    ).encode("ascii")
