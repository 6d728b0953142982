"""Fan-out over many torrent files.

:class:`Orchestrator` runs one client task per descriptor path and joins them
all. Each task owns its descriptor, peer ID and HTTP session, so tasks share
no mutable state. A descriptor that fails to load is reported on its own path
and does not affect the others.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from btannounce.core.torrent import TorrentDescriptor
from btannounce.discovery.tracker import AsyncTrackerClient
from btannounce.models import ClientReport, Config
from btannounce.session.client import TorrentClient
from btannounce.utils.exceptions import BencodeError, DescriptorParseError
from btannounce.utils.logging_config import tag_client, timed_announce
from btannounce.utils.peer_id import PeerIdFactory, generate_peer_id

ERROR_DESCRIPTOR = "descriptor"
ERROR_INTERNAL = "internal"


class Orchestrator:
    """Runs announce clients for a set of torrent files."""

    def __init__(
        self,
        config: Config | None = None,
        peer_id_factory: PeerIdFactory = generate_peer_id,
    ):
        """Initialize the orchestrator.

        Args:
            config: Settings; network options go to every tracker client
            peer_id_factory: Called once per client task to make its peer ID

        """
        self.config = config or Config()
        self.peer_id_factory = peer_id_factory
        self.logger = logging.getLogger(__name__)

    async def run(self, paths: Sequence[str | Path]) -> list[ClientReport]:
        """Announce every torrent in ``paths`` concurrently.

        Returns:
            One report per path, in input order

        """
        tasks = [
            asyncio.create_task(self._run_client(Path(p)), name=f"client:{p}")
            for p in paths
        ]
        return list(await asyncio.gather(*tasks))

    async def _run_client(self, path: Path) -> ClientReport:
        tag_client(path.name)
        try:
            descriptor = TorrentDescriptor.load(path)
        except DescriptorParseError as e:
            self.logger.error("Skipping %s: %s", path, e)  # noqa: TRY400
            return ClientReport(
                path=str(path),
                error=str(e),
                error_code=ERROR_DESCRIPTOR,
            )

        report = ClientReport(
            path=str(path),
            name=descriptor.name,
            info_hash_hex=descriptor.info_hash.hex(),
        )
        try:
            descriptor.announce_endpoints()
        except BencodeError as e:
            self.logger.error("Skipping %s: invalid tracker list: %s", path, e.message)  # noqa: TRY400
            report.error = f"Invalid tracker list: {e.message}"
            report.error_code = ERROR_DESCRIPTOR
            return report

        try:
            with timed_announce(self.logger, str(path)):
                async with AsyncTrackerClient(self.config.network) as tracker:
                    client = TorrentClient(
                        descriptor,
                        tracker,
                        self.peer_id_factory(),
                        self.config.network.listen_port,
                    )
                    report.results = await client.run()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            report.error = f"Announce failed: {e}"
            report.error_code = ERROR_INTERNAL
        return report


async def run_clients(
    paths: Sequence[str | Path],
    config: Config | None = None,
    peer_id_factory: PeerIdFactory = generate_peer_id,
) -> list[ClientReport]:
    """Announce every torrent in ``paths`` and return their reports."""
    return await Orchestrator(config, peer_id_factory).run(paths)


def run(
    paths: Sequence[str | Path],
    config: Config | None = None,
    peer_id_factory: PeerIdFactory = generate_peer_id,
) -> list[ClientReport]:
    """Blocking wrapper around :func:`run_clients`."""
    return asyncio.run(run_clients(paths, config, peer_id_factory))
