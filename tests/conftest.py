"""Pytest configuration and shared fixtures for btannounce tests."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable

import bencodepy
import pytest

INFO_DICT = {
    b"length": 1024,
    b"name": b"sample.bin",
    b"piece length": 16384,
    b"pieces": b"\x01" * 20,
}


def pytest_configure(config):
    """Register project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("core", "marks tests as core functionality tests"),
        ("tracker", "marks tests as tracker tests"),
        ("session", "marks tests as session management tests"),
        ("config", "marks tests as configuration tests"),
        ("cli", "marks tests as CLI tests"),
        ("observability", "marks tests as observability tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Keep tests from picking up a developer's config or environment."""
    for name in list(os.environ):
        if name.startswith("BTANNOUNCE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # setup_logging stops propagation; caplog relies on it
    package_logger = logging.getLogger("btannounce")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def info_dict() -> dict[bytes, Any]:
    """A minimal single-file info dictionary."""
    return dict(INFO_DICT)


@pytest.fixture
def make_torrent(tmp_path) -> Callable[..., Path]:
    """Write a bencoded torrent file and return its path."""
    counter = {"n": 0}

    def _make(
        announce: bytes | None = None,
        announce_list: list[list[bytes]] | None = None,
        info: dict[bytes, Any] | None = None,
        name: str | None = None,
    ) -> Path:
        data: dict[bytes, Any] = {b"info": info if info is not None else dict(INFO_DICT)}
        if announce is not None:
            data[b"announce"] = announce
        if announce_list is not None:
            data[b"announce-list"] = announce_list
        counter["n"] += 1
        path = tmp_path / (name or f"t{counter['n']}.torrent")
        path.write_bytes(bencodepy.encode(data))
        return path

    return _make
