"""btannounce - announce torrents to their HTTP trackers and collect peers."""

from __future__ import annotations

__version__ = "0.1.0"

from btannounce.core.torrent import TorrentDescriptor, load_descriptor
from btannounce.discovery.compact import decode_compact_peers
from btannounce.discovery.tracker import AsyncTrackerClient, TrackerResponse
from btannounce.models import (
    AnnounceResult,
    AnnounceStatus,
    ClientReport,
    Config,
    PeerInfo,
)
from btannounce.session.orchestrator import Orchestrator, run, run_clients
from btannounce.utils.peer_id import generate_peer_id

__all__ = [
    "AnnounceResult",
    "AnnounceStatus",
    "AsyncTrackerClient",
    "ClientReport",
    "Config",
    "Orchestrator",
    "PeerInfo",
    "TorrentDescriptor",
    "TrackerResponse",
    "__version__",
    "decode_compact_peers",
    "generate_peer_id",
    "load_descriptor",
    "run",
    "run_clients",
]
