"""Exception hierarchy for btannounce.

Every error raised by the library derives from :class:`BTAnnounceError` so
callers can catch the whole family at a boundary, while the leaf classes keep
descriptor, codec, configuration and tracker failures distinguishable.
"""

from __future__ import annotations

from typing import Any


class BTAnnounceError(Exception):
    """Base exception for all btannounce errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize btannounce error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(BTAnnounceError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class TorrentError(ValidationError):
    """Torrent file validation errors."""


class DescriptorParseError(TorrentError):
    """Torrent descriptor could not be read, decoded or validated."""


class BencodeError(ValidationError):
    """Bencode encoding/decoding errors."""


class NetworkError(BTAnnounceError):
    """Network-related errors."""


class TrackerError(NetworkError):
    """Tracker communication errors."""


class TrackerTransportError(TrackerError):
    """Connection, DNS, timeout or HTTP status failure talking to a tracker."""


class TrackerFailureResponse(TrackerError):
    """Tracker answered with a ``failure reason``."""

    def __init__(
        self,
        reason: str,
        details: dict[str, Any] | None = None,
    ):
        """Initialize with the tracker supplied reason."""
        super().__init__(f"Tracker failure: {reason}", details)
        self.reason = reason


class MalformedResponseError(TrackerError):
    """Tracker response body is not a map or lacks a compact ``peers`` string."""


class UnsupportedTrackerError(TrackerError):
    """Announce URL uses a transport this client does not speak (e.g. UDP)."""
