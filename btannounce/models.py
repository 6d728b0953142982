"""Data models for btannounce.

Peers, announce results and configuration are pydantic models so they are
validated on construction and serialize cleanly for the CLI's JSON output.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AnnounceStatus(str, Enum):
    """Outcome of one announce to one tracker endpoint."""

    OK = "ok"
    DECLINED = "declined"  # tracker sent a failure reason
    UNREACHABLE = "unreachable"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"


class PeerInfo(BaseModel):
    """Peer address as returned by a tracker."""

    model_config = ConfigDict(frozen=True)

    ip: str = Field(..., description="Dotted-decimal IPv4 address")
    port: int = Field(..., ge=0, le=65535, description="Peer port number")

    @field_validator("ip")
    @classmethod
    def validate_ip(cls, v: str) -> str:
        """Validate dotted-decimal IPv4 format."""
        parts = v.split(".")
        if len(parts) != 4 or not all(
            p.isdigit() and 0 <= int(p) <= 255 for p in parts
        ):
            msg = f"Invalid IPv4 address: {v!r}"
            raise ValueError(msg)
        return v

    @property
    def octets(self) -> tuple[int, int, int, int]:
        """The four address octets."""
        a, b, c, d = (int(p) for p in self.ip.split("."))
        return (a, b, c, d)

    def __str__(self) -> str:
        """String representation of peer info."""
        return f"{self.ip}:{self.port}"


class AnnounceResult(BaseModel):
    """Result of announcing to a single tracker endpoint."""

    url: str = Field(..., description="Announce URL")
    status: AnnounceStatus = Field(..., description="Announce outcome")
    peers: list[PeerInfo] = Field(default_factory=list, description="Peers returned")
    interval: int | None = Field(None, description="Re-announce interval (seconds)")
    complete: int | None = Field(None, description="Seeders reported by tracker")
    incomplete: int | None = Field(None, description="Leechers reported by tracker")
    warning_message: str | None = Field(None, description="Tracker warning message")
    error: str | None = Field(None, description="Failure description")

    @property
    def ok(self) -> bool:
        """Whether the tracker returned a peer list."""
        return self.status is AnnounceStatus.OK


class ClientReport(BaseModel):
    """Everything one client task learned about one descriptor file."""

    path: str = Field(..., description="Descriptor file path")
    name: str | None = Field(None, description="Torrent name")
    info_hash_hex: str | None = Field(None, description="Hex info-hash")
    results: list[AnnounceResult] = Field(
        default_factory=list,
        description="Per-endpoint announce results, in endpoint order",
    )
    error: str | None = Field(None, description="Why the descriptor was skipped")
    error_code: str | None = Field(None, description="Error kind (descriptor/internal)")

    @property
    def ok(self) -> bool:
        """Whether the descriptor loaded and its trackers were queried."""
        return self.error is None

    @property
    def peers(self) -> list[PeerInfo]:
        """Peers from every successful announce, de-duplicated in first-seen order."""
        seen: dict[PeerInfo, None] = {}
        for result in self.results:
            for peer in result.peers:
                seen.setdefault(peer, None)
        return list(seen)


class NetworkConfig(BaseModel):
    """Network configuration."""

    listen_port: int = Field(
        default=6881,
        ge=0,
        le=65535,
        description="Port advertised to trackers",
    )
    tracker_timeout: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Total timeout for one tracker request in seconds",
    )
    user_agent: str = Field(
        default="btannounce/0.1.0",
        description="HTTP User-Agent sent to trackers",
    )
    request_compact: bool = Field(
        default=True,
        description="Send compact=1 so trackers answer with compact peer lists",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Emit JSON log lines instead of colored text",
    )
    log_client_tags: bool = Field(
        default=True,
        description="Prefix log lines with the client tag",
    )


class Config(BaseModel):
    """Main configuration model."""

    network: NetworkConfig = Field(
        default_factory=NetworkConfig,
        description="Network configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
