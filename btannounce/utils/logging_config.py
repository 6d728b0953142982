"""Logging setup for btannounce.

Every client task tags its log records with a short client tag so that
interleaved output from concurrent announces can be told apart. Console output
goes through rich; ``structured_logging`` switches every handler to one JSON
object per line.
"""

from __future__ import annotations

import contextlib
import json
import logging
import logging.config
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from btannounce.models import ObservabilityConfig

NO_TAG = "-"

# asyncio tasks copy the context, so a tag set inside a task stays in that task
_client_tag: ContextVar[str | None] = ContextVar("btannounce_client_tag", default=None)

# Attributes every LogRecord has; anything else came in through ``extra=``
_STANDARD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__,
) | {"message", "asctime", "client", "taskName"}


def tag_client(label: str | None = None) -> str:
    """Tag log records of the current task.

    Args:
        label: Readable prefix, usually the torrent file name

    Returns:
        The tag, ``label`` plus a random suffix so equal labels stay distinct

    """
    suffix = uuid.uuid4().hex[:6]
    tag = f"{label}#{suffix}" if label else suffix
    _client_tag.set(tag)
    return tag


class ClientTagFilter(logging.Filter):
    """Stamp ``record.client`` with the current task's tag."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.client = _client_tag.get() or NO_TAG
        return True


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, extras included."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "client": getattr(record, "client", NO_TAG),
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRIBUTES:
                entry[key] = value
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _rich_console_handler(**kwargs: Any) -> RichHandler:
    # Console(stderr=True) resolves sys.stderr on every write
    return RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        **kwargs,
    )


def setup_logging(config: ObservabilityConfig) -> None:
    """Configure the ``btannounce`` logger from the observability settings."""
    level = config.log_level.value
    tagged = "[%(client)s] %(message)s" if config.log_client_tags else "%(message)s"

    formatters: dict[str, Any] = {
        "console": {"format": f"%(name)s {tagged}"},
        "file": {
            "format": f"%(asctime)s %(levelname)s %(name)s {tagged}",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {"()": JsonLineFormatter},
    }
    if config.structured_logging:
        console: dict[str, Any] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "json",
        }
    else:
        console = {"()": _rich_console_handler, "formatter": "console"}
    console.update(level=level, filters=["client_tag"])

    handlers: dict[str, Any] = {"console": console}
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": config.log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf-8",
            "level": level,
            "formatter": "json" if config.structured_logging else "file",
            "filters": ["client_tag"],
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "filters": {"client_tag": {"()": ClientTagFilter}},
            "handlers": handlers,
            "loggers": {
                "btannounce": {
                    "level": level,
                    "handlers": list(handlers),
                    "propagate": False,
                },
            },
            # aiohttp and friends only when something goes wrong
            "root": {"level": "WARNING", "handlers": ["console"]},
        },
    )


@contextlib.contextmanager
def timed_announce(logger: logging.Logger, torrent: str) -> Iterator[None]:
    """Log how long announcing ``torrent`` took, or how it failed."""
    started = time.perf_counter()
    logger.debug("Announcing %s", torrent, extra={"torrent": torrent})
    try:
        yield
    except Exception:
        logger.exception(
            "Announcing %s failed after %.3fs",
            torrent,
            time.perf_counter() - started,
            extra={"torrent": torrent},
        )
        raise
    logger.info(
        "Announced %s in %.3fs",
        torrent,
        time.perf_counter() - started,
        extra={"torrent": torrent},
    )
