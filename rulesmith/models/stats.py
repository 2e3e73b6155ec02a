"""Synthetic stat snapshots for formula previews.

These values are a preview fiction: every canonical stat grows at the same
rate so an author can see how a formula scales with level. They are not the
per-character stat blocks a campaign would track.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple, Union

Number = Union[int, float]
StatSnapshot = Mapping[str, Number]

STAT_NAMES: Tuple[str, ...] = ("STR", "VIT", "AGI", "INT", "WIS")
STAT_BASE = 10
STAT_PER_LEVEL = 5


def snapshot_for(level: int) -> StatSnapshot:
    """Return a read-only ``{stat: 10 + level * 5}`` mapping for ``level``."""
    value = STAT_BASE + level * STAT_PER_LEVEL
    return MappingProxyType({name: value for name in STAT_NAMES})


__all__ = ["Number", "STAT_NAMES", "StatSnapshot", "snapshot_for"]
