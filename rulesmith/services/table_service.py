"""Progression table building service.

``build_table`` walks levels 1..N, pulling XP from the curve, a preview stat
snapshot for the level, and one evaluation per formula slot. It has no state
and performs no I/O; the same arguments always produce an equal tuple of rows.

``get_cached_table`` wraps it with a small insert-only memo for editing
surfaces that rebuild the preview on every keystroke.
"""

from __future__ import annotations

import threading
import time
from types import MappingProxyType
from typing import Dict, Optional, Tuple

from rulesmith.config import Settings
from rulesmith.formula import EvalError, evaluate
from rulesmith.logging_utils import get_logger
from rulesmith.models.curve import CurveConfig, experience_for
from rulesmith.models.formula_set import FormulaSet
from rulesmith.models.row import ProgressionRow
from rulesmith.models.stats import snapshot_for

log = get_logger("tables")

Table = Tuple[ProgressionRow, ...]
CacheKey = Tuple[CurveConfig, FormulaSet, int]


def build_table(cfg: CurveConfig, formulas: FormulaSet, level_count: int) -> Table:
    """Return one ProgressionRow per level from 1 to ``level_count`` inclusive.

    ``xp_total`` is a running sum of ``xp_needed``. A formula that fails to
    evaluate leaves an EvalError in its own cell and nothing else changes.
    Non-positive ``level_count`` gives an empty table.
    """
    rows = []
    xp_total = 0
    for level in range(1, int(level_count) + 1):
        xp_needed = experience_for(level, cfg)
        # Exact running sum; only per-level values saturate at XP_CEILING
        xp_total += xp_needed
        snapshot = snapshot_for(level)
        derived = {name: evaluate(expr, snapshot) for name, expr in formulas}
        rows.append(
            ProgressionRow(
                level=level,
                xp_needed=xp_needed,
                xp_total=xp_total,
                derived=MappingProxyType(derived),
            )
        )
    return tuple(rows)


_table_cache: Dict[CacheKey, Table] = {}
_table_cache_lock = threading.Lock()


def get_cached_table(
    cfg: CurveConfig,
    formulas: FormulaSet,
    level_count: int,
    settings: Optional[Settings] = None,
) -> Table:
    """Return the table for the given inputs, reusing an earlier build if present.

    Entries are never modified once stored. When the cache grows past
    ``settings.table_cache_max`` the oldest entry is dropped.
    """
    settings = settings or Settings.from_env()
    key = (cfg, formulas, int(level_count))
    if settings.disable_cache or settings.table_cache_max == 0:
        return build_table(*key)
    build_log = log.bind(levels=key[2], kind=cfg.kind.value)
    table = _table_cache.get(key)
    if table is not None:
        build_log.debug(event="table_cache_hit")
        return table
    started = time.perf_counter()
    table = build_table(*key)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
    with _table_cache_lock:
        table = _table_cache.setdefault(key, table)
        if len(_table_cache) > settings.table_cache_max:
            # Oldest first, never the entry being returned
            excess = len(_table_cache) - settings.table_cache_max
            stale = [k for k in _table_cache if k != key][:excess]
            for k in stale:
                del _table_cache[k]
    errors = sum(1 for row in table for v in row.derived.values() if isinstance(v, EvalError))
    build_log.debug(
        event="table_built",
        formulas=len(formulas),
        cell_errors=errors,
        runtime_ms=elapsed_ms,
    )
    return table


def clear_table_cache() -> None:
    with _table_cache_lock:
        _table_cache.clear()


def table_cache_size() -> int:
    return len(_table_cache)


__all__ = ["build_table", "clear_table_cache", "get_cached_table", "table_cache_size"]
