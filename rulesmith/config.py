"""Runtime settings and starting-project defaults.

Environment variables (all optional):

  RULESMITH_DEFAULT_LEVELS    Preview length when a request omits ``levels`` (20)
  RULESMITH_MAX_LEVELS        Largest ``levels`` a request may ask for (100)
  RULESMITH_TABLE_CACHE_MAX   Built tables kept in memory (32)
  RULESMITH_DISABLE_CACHE     "1" to rebuild every table (0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from rulesmith.models.curve import CurveConfig, CurveKind
from rulesmith.models.formula_set import FormulaSet

DEFAULT_CURVE = CurveConfig(kind=CurveKind.QUADRATIC, base=100, factor=1.5)
DEFAULT_FORMULAS = FormulaSet.from_mapping(
    {
        "hp": "VIT * 10 + 50",
        "mp": "INT * 10 + WIS * 5",
    }
)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    default_levels: int = 20
    max_levels: int = 100
    table_cache_max: int = 32
    disable_cache: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        max_levels = max(1, _env_int("RULESMITH_MAX_LEVELS", cls.max_levels))
        default_levels = _env_int("RULESMITH_DEFAULT_LEVELS", cls.default_levels)
        return cls(
            default_levels=min(max(1, default_levels), max_levels),
            max_levels=max_levels,
            table_cache_max=max(0, _env_int("RULESMITH_TABLE_CACHE_MAX", cls.table_cache_max)),
            disable_cache=_env_flag("RULESMITH_DISABLE_CACHE"),
        )

    def to_flask_config(self) -> dict:
        return {
            "RULESMITH_DEFAULT_LEVELS": self.default_levels,
            "RULESMITH_MAX_LEVELS": self.max_levels,
            "RULESMITH_TABLE_CACHE_MAX": self.table_cache_max,
            "RULESMITH_DISABLE_CACHE": self.disable_cache,
        }


__all__ = ["DEFAULT_CURVE", "DEFAULT_FORMULAS", "Settings"]
