"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from btannounce.utils.exceptions import (
    BencodeError,
    BTAnnounceError,
    ConfigurationError,
    DescriptorParseError,
    MalformedResponseError,
    NetworkError,
    TorrentError,
    TrackerError,
    TrackerFailureResponse,
    TrackerTransportError,
    UnsupportedTrackerError,
    ValidationError,
)

pytestmark = [pytest.mark.unit]


def test_str_without_details():
    """Test plain message rendering."""
    assert str(BTAnnounceError("boom")) == "boom"


def test_str_with_details():
    """Test details are appended."""
    error = DescriptorParseError("bad file", {"path": "x.torrent"})

    assert error.message == "bad file"
    assert error.details == {"path": "x.torrent"}
    assert str(error) == "bad file (Details: {'path': 'x.torrent'})"


def test_failure_response_keeps_reason():
    """Test the tracker reason is kept separately from the message."""
    error = TrackerFailureResponse("torrent not registered")

    assert error.reason == "torrent not registered"
    assert str(error) == "Tracker failure: torrent not registered"


@pytest.mark.parametrize(
    ("child", "parent"),
    [
        (DescriptorParseError, TorrentError),
        (TorrentError, ValidationError),
        (BencodeError, ValidationError),
        (ConfigurationError, ValidationError),
        (TrackerTransportError, TrackerError),
        (TrackerFailureResponse, TrackerError),
        (MalformedResponseError, TrackerError),
        (UnsupportedTrackerError, TrackerError),
        (TrackerError, NetworkError),
        (NetworkError, BTAnnounceError),
        (ValidationError, BTAnnounceError),
    ],
)
def test_hierarchy(child, parent):
    """Test each error sits under its family."""
    assert issubclass(child, parent)


def test_tracker_failures_are_distinct():
    """Test declined and unreachable are different kinds."""
    assert not issubclass(TrackerFailureResponse, TrackerTransportError)
    assert not issubclass(TrackerTransportError, TrackerFailureResponse)
