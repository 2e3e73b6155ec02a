"""Structured event logging for Rulesmith services.

Each event is one line: ``key=value`` pairs by default, or a compact JSON
object when ``RULESMITH_LOG_JSON`` is on. Events carry a level, a unix
timestamp and the logger name; errors go to stderr, everything else to stdout.

Usage:
    from rulesmith.logging_utils import get_logger
    log = get_logger("tables")
    log.info(event="table_built", levels=20, formulas=2)

    # context shared by several events
    build_log = log.bind(kind="quadratic", levels=20)
    build_log.debug(event="table_cache_hit")

Fields set to None are dropped. In key=value output non-numeric values are
str()'d with spaces turned into underscores. Reserved keys: level, ts, logger.

Environment:
    RULESMITH_LOG_LEVEL  debug | info | warn | error (default info)
    RULESMITH_LOG_JSON   1/true/yes/on for JSON lines
"""

from __future__ import annotations

import json
import os
import sys
import time
from typing import Any, Dict, Mapping, Optional

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
RESERVED_KEYS = ("level", "ts", "logger")


def level_threshold(name: Optional[str], default: int = LEVELS["info"]) -> int:
    """Return the numeric threshold for a level name; unknown names give ``default``."""
    if not name:
        return default
    return LEVELS.get(name.strip().lower(), default)


CURRENT_LEVEL = level_threshold(os.getenv("RULESMITH_LOG_LEVEL"))
JSON_MODE = os.getenv("RULESMITH_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _render_kv(record: Mapping[str, Any]) -> str:
    parts = []
    for k, v in record.items():
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


def _render_json(record: Mapping[str, Any]) -> str:
    return json.dumps(record, separators=(",", ":"), default=str)


def render(level: str, logger: str, fields: Mapping[str, Any]) -> str:
    """Build the output line for one event.

    Reserved keys always lead and cannot be overridden by caller fields.
    """
    record: Dict[str, Any] = {"level": level, "ts": int(time.time()), "logger": logger}
    for k, v in fields.items():
        if v is None or k in RESERVED_KEYS:
            continue
        record[k] = v
    return _render_json(record) if JSON_MODE else _render_kv(record)


class StructuredLogger:
    """Named event logger with optional bound context fields."""

    def __init__(self, name: str, context: Optional[Mapping[str, Any]] = None):
        self.name = name
        self.context = dict(context or {})

    def bind(self, **fields) -> "StructuredLogger":
        """Return a child logger that adds ``fields`` to every event.

        Fields passed at the call site win over bound ones.
        """
        return StructuredLogger(self.name, {**self.context, **fields})

    def enabled_for(self, level: str) -> bool:
        return LEVELS[level] >= CURRENT_LEVEL

    def log(self, level: str, **fields) -> None:
        if not self.enabled_for(level):
            return
        line = render(level, self.name, {**self.context, **fields})
        print(line, file=sys.stderr if level == "error" else sys.stdout)

    def debug(self, **fields) -> None:
        self.log("debug", **fields)

    def info(self, **fields) -> None:
        self.log("info", **fields)

    def warn(self, **fields) -> None:
        self.log("warn", **fields)

    def error(self, **fields) -> None:
        self.log("error", **fields)


_LOGGERS: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Return the shared, context-free logger for ``name``."""
    logger = _LOGGERS.get(name)
    if logger is None:
        logger = _LOGGERS.setdefault(name, StructuredLogger(name))
    return logger


__all__ = ["LEVELS", "StructuredLogger", "get_logger", "level_threshold", "render"]
