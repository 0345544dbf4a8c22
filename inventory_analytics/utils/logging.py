"""
Root-logger setup for the ``inventory-analytics`` CLI.

The analytics functions are quiet library code: each module logs through
``logging.getLogger(__name__)`` and only emits per-call DEBUG lines (fitted
slope, chosen price band, anomaly counts).  Nothing here is imported by the
engine itself; only ``cli._configure_logging`` calls ``configure_logging``.

Stream split
------------
Command results (ASCII tables, ``--json`` payloads) go to stdout.  Log lines
always go to stderr, plus an optional file, so ``--json`` output can be piped
straight into ``jq`` at any log level.

Line formats
------------
    text:  2026-03-15T09:30:00Z DEBUG inventory_analytics.forecasting.trend | predict_demand: ...
    json:  {"ts": "2026-03-15T09:30:00Z", "level": "DEBUG", "logger": "...", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from inventory_analytics.config import LoggingConfig

TEXT_LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class _UtcFormatter(logging.Formatter):
    converter = time.gmtime


class _JsonLineFormatter(_UtcFormatter):
    """One compact JSON object per record; tracebacks go under ``exc``."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, separators=(", ", ": "))


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonLineFormatter()
    return _UtcFormatter(TEXT_LINE_FORMAT, datefmt=TIMESTAMP_FORMAT)


def _build_handlers(log_file: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def configure_logging(config: "LoggingConfig") -> None:
    """Point the root logger at stderr (and ``config.log_file``, if set).

    Replaces any handlers already installed, so calling it again (as the CLI
    test runner does per command) does not duplicate output.

    Args:
        config: ``[logging]`` section; ``level`` is already validated upper-case.
    """
    level = logging.getLevelName(config.level)
    formatter = _build_formatter(config.json_format)

    handlers = _build_handlers(config.log_file)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
