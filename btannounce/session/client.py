"""Per-torrent announce client.

A :class:`TorrentClient` announces one descriptor to every tracker it lists,
concurrently, and hands back every endpoint's result.
"""

from __future__ import annotations

import asyncio
import logging

from btannounce.core.torrent import TorrentDescriptor
from btannounce.discovery.tracker import AsyncTrackerClient
from btannounce.models import AnnounceResult

DEFAULT_PORT = 6881


class TorrentClient:
    """Announces a single torrent to all of its trackers."""

    def __init__(
        self,
        descriptor: TorrentDescriptor,
        tracker: AsyncTrackerClient,
        peer_id: bytes,
        port: int = DEFAULT_PORT,
    ):
        """Initialize the client.

        Args:
            descriptor: Torrent to announce
            tracker: Started tracker client used for every endpoint
            peer_id: 20-byte peer ID for this run
            port: Listen port advertised to trackers

        """
        self.descriptor = descriptor
        self.tracker = tracker
        self.peer_id = peer_id
        self.port = port
        self.logger = logging.getLogger(__name__)

    async def run(self) -> list[AnnounceResult]:
        """Announce to every endpoint concurrently.

        Returns:
            One result per endpoint, in endpoint order

        """
        endpoints = self.descriptor.announce_endpoints()
        if not endpoints:
            self.logger.info("No trackers listed in %s", self.descriptor.path)
            return []

        self.logger.debug(
            "Announcing %s to %d trackers",
            self.descriptor.info_hash.hex(),
            len(endpoints),
        )
        tasks = [
            asyncio.create_task(self.get_peers(url), name=f"announce:{url}")
            for url in endpoints
        ]
        return list(await asyncio.gather(*tasks))

    async def get_peers(self, announce_url: str) -> AnnounceResult:
        """Announce to a single tracker endpoint."""
        return await self.tracker.announce(
            announce_url,
            self.peer_id,
            self.descriptor.info_hash,
            self.port,
            uploaded=0,
            downloaded=0,
            left=0,
            event="started",
        )
