"""Async HTTP tracker communication.

This module announces to BitTorrent HTTP trackers and turns their responses
into peer lists. :meth:`AsyncTrackerClient.announce_raw` raises a typed
:class:`~btannounce.utils.exceptions.TrackerError` for every failure kind;
:meth:`AsyncTrackerClient.announce` maps those onto an
:class:`~btannounce.models.AnnounceResult` status so one broken tracker never
interrupts the others.
"""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from yarl import URL

from btannounce.core.bencode import decode, get_bytes, get_int
from btannounce.discovery.compact import decode_compact_peers
from btannounce.models import AnnounceResult, AnnounceStatus, NetworkConfig, PeerInfo
from btannounce.utils.exceptions import (
    BencodeError,
    MalformedResponseError,
    TrackerError,
    TrackerFailureResponse,
    TrackerTransportError,
    UnsupportedTrackerError,
)

HTTP_SCHEMES = ("http", "https")


@dataclass
class TrackerResponse:
    """Tracker response data."""

    peers: list[PeerInfo] = field(default_factory=list)
    interval: int | None = None
    min_interval: int | None = None
    complete: int | None = None
    incomplete: int | None = None
    tracker_id: str | None = None
    warning_message: str | None = None


class AsyncTrackerClient:
    """Async client for announcing to HTTP trackers."""

    def __init__(self, config: NetworkConfig | None = None):
        """Initialize the async tracker client.

        Args:
            config: Network settings; defaults are used when omitted

        """
        self.config = config or NetworkConfig()
        self.session: aiohttp.ClientSession | None = None
        self.logger = logging.getLogger(__name__)

    async def start(self) -> None:
        """Open the HTTP session."""
        if self.session is not None:
            return
        timeout = aiohttp.ClientTimeout(total=self.config.tracker_timeout)
        self.session = aiohttp.ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
        )
        self.logger.debug("Async tracker client started")

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self.session is not None:
            await self.session.close()
            self.session = None
        self.logger.debug("Async tracker client stopped")

    async def __aenter__(self) -> AsyncTrackerClient:
        """Start the client on context entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Stop the client on context exit."""
        await self.stop()

    async def announce(
        self,
        url: str,
        peer_id: bytes,
        info_hash: bytes,
        port: int,
        uploaded: int = 0,
        downloaded: int = 0,
        left: int = 0,
        event: str = "started",
    ) -> AnnounceResult:
        """Announce to one tracker and classify the outcome.

        Returns:
            AnnounceResult whose ``peers`` is empty unless ``status`` is ``ok``

        """
        try:
            response = await self.announce_raw(
                url,
                peer_id,
                info_hash,
                port,
                uploaded,
                downloaded,
                left,
                event,
            )
        except UnsupportedTrackerError as e:
            self.logger.debug("Skipping %s: %s", url, e)
            return AnnounceResult(url=url, status=AnnounceStatus.UNSUPPORTED, error=str(e))
        except TrackerFailureResponse as e:
            self.logger.warning("Tracker %s declined announce: %s", url, e.reason)
            return AnnounceResult(url=url, status=AnnounceStatus.DECLINED, error=e.reason)
        except MalformedResponseError as e:
            self.logger.warning("Malformed response from %s: %s", url, e)
            return AnnounceResult(url=url, status=AnnounceStatus.MALFORMED, error=str(e))
        except TrackerError as e:
            self.logger.warning("Failed to announce to %s: %s", url, e)
            return AnnounceResult(url=url, status=AnnounceStatus.UNREACHABLE, error=str(e))

        self.logger.info("Tracker %s returned %d peers", url, len(response.peers))
        return AnnounceResult(
            url=url,
            status=AnnounceStatus.OK,
            peers=response.peers,
            interval=response.interval,
            complete=response.complete,
            incomplete=response.incomplete,
            warning_message=response.warning_message,
        )

    async def announce_raw(
        self,
        url: str,
        peer_id: bytes,
        info_hash: bytes,
        port: int,
        uploaded: int = 0,
        downloaded: int = 0,
        left: int = 0,
        event: str = "started",
    ) -> TrackerResponse:
        """Announce to one tracker.

        Raises:
            UnsupportedTrackerError: If the URL is not HTTP(S), e.g. ``udp://``
            TrackerTransportError: If the request fails or returns non-200
            TrackerFailureResponse: If the tracker sends ``failure reason``
            MalformedResponseError: If the body is not a usable bencoded map

        """
        scheme = urllib.parse.urlsplit(url).scheme.lower()
        if scheme not in HTTP_SCHEMES:
            msg = f"Unsupported tracker scheme: {scheme or url}"
            raise UnsupportedTrackerError(msg, {"url": url})

        tracker_url = self._build_tracker_url(
            url,
            info_hash,
            peer_id,
            port,
            uploaded,
            downloaded,
            left,
            event,
        )
        response_data = await self._make_request_async(tracker_url)
        return self._parse_response(response_data)

    def _build_tracker_url(
        self,
        base_url: str,
        info_hash: bytes,
        peer_id: bytes,
        port: int,
        uploaded: int,
        downloaded: int,
        left: int,
        event: str,
    ) -> str:
        """Build the announce URL with percent-encoded query parameters.

        Byte values are quoted verbatim, so every non-printable byte of the
        info-hash and peer ID survives as ``%XX``.
        """
        params: dict[str, Any] = {
            "info_hash": info_hash,
            "peer_id": peer_id,
            "port": port,
            "uploaded": uploaded,
            "downloaded": downloaded,
            "left": left,
        }
        if event:
            params["event"] = event
        if self.config.request_compact:
            params["compact"] = 1

        query_string = urllib.parse.urlencode(params, quote_via=urllib.parse.quote)
        parts = urllib.parse.urlsplit(base_url)
        query = f"{parts.query}&{query_string}" if parts.query else query_string
        return urllib.parse.urlunsplit(parts._replace(query=query))

    async def _make_request_async(self, url: str) -> bytes:
        """Make async HTTP GET request to tracker.

        A non-200 answer whose body carries a bencoded ``failure reason`` is
        the tracker declining, not a transport problem.
        """
        if self.session is None:
            msg = "HTTP session not initialized"
            raise RuntimeError(msg)
        try:
            # encoded=True keeps yarl from re-quoting the binary parameters
            async with self.session.get(URL(url, encoded=True)) as response:
                body = await response.read()
                if response.status != 200:
                    _raise_for_status(response.status, response.reason, body, url)
                return body
        except aiohttp.ClientError as e:
            msg = f"Network error: {e}"
            raise TrackerTransportError(msg, {"url": url}) from e
        except asyncio.TimeoutError as e:
            msg = "Tracker request timed out"
            raise TrackerTransportError(msg, {"url": url}) from e
        except ValueError as e:
            msg = f"Invalid tracker URL: {e}"
            raise TrackerTransportError(msg, {"url": url}) from e

    def _parse_response(self, response_data: bytes) -> TrackerResponse:
        """Parse a bencoded tracker response.

        Raises:
            TrackerFailureResponse: If the tracker reported a failure
            MalformedResponseError: If the response cannot be interpreted

        """
        try:
            decoded = decode(response_data)
        except BencodeError as e:
            msg = f"Undecodable tracker response: {e.message}"
            raise MalformedResponseError(msg) from e

        if not isinstance(decoded, dict):
            msg = f"Tracker response is a {type(decoded).__name__}, expected a dictionary"
            raise MalformedResponseError(msg)

        reason = _failure_reason(decoded)
        if reason is not None:
            raise TrackerFailureResponse(reason)

        try:
            peers_data = get_bytes(decoded, b"peers")
        except BencodeError as e:
            msg = f"Tracker response has no compact peer list: {e.message}"
            raise MalformedResponseError(msg) from e

        return TrackerResponse(
            peers=decode_compact_peers(peers_data),
            interval=_optional_int(decoded, b"interval"),
            min_interval=_optional_int(decoded, b"min interval"),
            complete=_optional_int(decoded, b"complete"),
            incomplete=_optional_int(decoded, b"incomplete"),
            tracker_id=_optional_text(decoded, b"tracker id"),
            warning_message=_optional_text(decoded, b"warning message"),
        )


def _failure_reason(decoded: dict) -> str | None:
    reason = decoded.get(b"failure reason")
    if reason is None:
        return None
    if isinstance(reason, bytes):
        return reason.decode("utf-8", errors="replace")
    return str(reason)


def _raise_for_status(status: int, reason: str | None, body: bytes, url: str) -> None:
    try:
        decoded = decode(body)
    except BencodeError:
        decoded = None
    if isinstance(decoded, dict):
        failure = _failure_reason(decoded)
        if failure is not None:
            raise TrackerFailureResponse(failure, {"url": url, "status": status})
    msg = f"HTTP {status}: {reason}"
    raise TrackerTransportError(msg, {"url": url})


def _optional_int(decoded: dict, key: bytes) -> int | None:
    try:
        return get_int(decoded, key, None)
    except BencodeError:
        return None


def _optional_text(decoded: dict, key: bytes) -> str | None:
    try:
        value = get_bytes(decoded, key, None)
    except BencodeError:
        return None
    return value.decode("utf-8", errors="replace") if value is not None else None
