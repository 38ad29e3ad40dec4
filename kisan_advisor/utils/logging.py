"""
Logging setup for the kisan-advisor CLI.

``configure_logging`` runs once per command, before any provider is queried;
library modules only ever call ``logging.getLogger(__name__)``.  Output goes
to stderr so command output on stdout stays pipeable.

Records about one location or data source pass ``extra=log_context(...)``,
and both formatters show that context::

    2026-10-18T06:00:00Z WARNING kisan_advisor.ingestion.loader [soil @ 28.6139,77.2090] soil fetch failed (ConnectError: ...); showing demo values

    {"ts": "2026-10-18T06:00:00Z", "level": "WARNING", "logger": "kisan_advisor.ingestion.loader",
     "source": "soil", "lat": 28.6139, "lon": 77.209, "msg": "soil fetch failed (...)"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from kisan_advisor.config import LoggingConfig
    from kisan_advisor.models.readings import Coordinates

TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
CONTEXT_FIELDS = ("source", "lat", "lon")
QUIET_LOGGERS = ("httpx", "httpcore")


def log_context(coords: Optional["Coordinates"] = None, source: Optional[str] = None) -> dict[str, Any]:
    """``extra=`` payload naming the data source and location a record is about."""
    context: dict[str, Any] = {}
    if source is not None:
        context["source"] = source
    if coords is not None:
        context["lat"] = coords.lat
        context["lon"] = coords.lon
    return context


def _utc_timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(TIME_FORMAT)


def _context_tag(record: logging.LogRecord) -> str:
    """``[soil @ 28.6139,77.2090] `` style prefix, or "" without context."""
    parts = []
    source = getattr(record, "source", None)
    if source is not None:
        parts.append(str(source))
    lat, lon = getattr(record, "lat", None), getattr(record, "lon", None)
    if lat is not None and lon is not None:
        parts.append(f"@ {lat:.4f},{lon:.4f}")
    return f"[{' '.join(parts)}] " if parts else ""


class ContextFormatter(logging.Formatter):
    """Single-line text records with the source/location tag before the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_utc_timestamp(record)} {record.levelname} {record.name} "
            f"{_context_tag(record)}{record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; context fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _utc_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        payload["msg"] = record.getMessage()
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Replaces any handlers from an earlier call.
    """
    formatter: logging.Formatter = (
        JsonLineFormatter() if config.json_format else ContextFormatter()
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=config.level_number, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
