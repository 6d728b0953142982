"""Tests for the per-torrent announce client."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from btannounce.core.torrent import TorrentDescriptor
from btannounce.models import AnnounceResult, AnnounceStatus, PeerInfo
from btannounce.session.client import TorrentClient

pytestmark = [pytest.mark.unit, pytest.mark.session]

PEER_ID = b"p" * 20


def _result(url: str, status: AnnounceStatus = AnnounceStatus.OK, peers=()) -> AnnounceResult:
    return AnnounceResult(url=url, status=status, peers=list(peers))


@pytest.mark.asyncio
async def test_announces_every_endpoint_in_order(make_torrent):
    """Test one announce per endpoint and results in endpoint order."""
    descriptor = TorrentDescriptor.load(
        make_torrent(announce_list=[[b"http://a"], [b"http://b", b"udp://c:1"]]),
    )
    tracker = MagicMock()
    tracker.announce = AsyncMock(side_effect=lambda url, *a, **kw: _result(url))

    results = await TorrentClient(descriptor, tracker, PEER_ID, 51413).run()

    assert [r.url for r in results] == ["http://a", "http://b", "udp://c:1"]
    assert tracker.announce.await_count == 3
    for call in tracker.announce.await_args_list:
        assert call.args[1:] == (PEER_ID, descriptor.info_hash, 51413)
        assert call.kwargs == {
            "uploaded": 0,
            "downloaded": 0,
            "left": 0,
            "event": "started",
        }


@pytest.mark.asyncio
async def test_no_endpoints_returns_empty(make_torrent):
    """Test a torrent without trackers makes no announces."""
    descriptor = TorrentDescriptor.load(make_torrent())
    tracker = MagicMock()
    tracker.announce = AsyncMock()

    assert await TorrentClient(descriptor, tracker, PEER_ID).run() == []
    tracker.announce.assert_not_called()


@pytest.mark.asyncio
async def test_announces_run_concurrently(make_torrent):
    """Test every announce is in flight before any completes."""
    descriptor = TorrentDescriptor.load(
        make_torrent(announce_list=[[b"http://a", b"http://b", b"http://c"]]),
    )
    started = 0
    all_started = asyncio.Event()

    async def announce(url, *args, **kwargs):
        nonlocal started
        started += 1
        if started == 3:
            all_started.set()
        await all_started.wait()
        return _result(url, peers=[PeerInfo(ip="1.1.1.1", port=started)])

    tracker = MagicMock()
    tracker.announce = announce

    results = await asyncio.wait_for(TorrentClient(descriptor, tracker, PEER_ID).run(), 5)

    assert len(results) == 3
    assert all(r.ok for r in results)


@pytest.mark.asyncio
async def test_failures_are_kept_per_endpoint(make_torrent):
    """Test a declined tracker does not hide another tracker's peers."""
    descriptor = TorrentDescriptor.load(
        make_torrent(announce_list=[[b"http://good"], [b"http://bad"]]),
    )
    peer = PeerInfo(ip="10.0.0.5", port=51413)

    async def announce(url, *args, **kwargs):
        if url == "http://bad":
            return _result(url, AnnounceStatus.DECLINED)
        return _result(url, peers=[peer])

    tracker = MagicMock()
    tracker.announce = announce

    results = await TorrentClient(descriptor, tracker, PEER_ID).run()

    assert [r.status for r in results] == [AnnounceStatus.OK, AnnounceStatus.DECLINED]
    assert results[0].peers == [peer]
    assert results[1].peers == []
