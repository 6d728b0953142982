"""Concurrent announce orchestration."""

from __future__ import annotations

from btannounce.session.client import TorrentClient
from btannounce.session.orchestrator import Orchestrator, run, run_clients

__all__ = ["Orchestrator", "TorrentClient", "run", "run_clients"]
