"""Experience point (XP) curve utilities.

Implements the three author-selectable growth shapes (linear, quadratic,
exponential) plus the low-level floor ramp. Import `experience_for` anywhere
per-level XP requirements are needed (progression previews, level gating, UI
progress bars, etc.).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

# Raw values strictly below this are replaced by the level-scaled floor.
XP_FLOOR_THRESHOLD = 100
XP_FLOOR_PER_LEVEL = 100
# Largest integer a JSON consumer can represent exactly; overflowing curves saturate here.
XP_CEILING = 2**53 - 1


class CurveKind(str, Enum):
    LINEAR = "linear"
    QUADRATIC = "quadratic"
    EXPONENTIAL = "exponential"

    @property
    def label(self) -> str:
        return _CURVE_LABELS[self]

    @classmethod
    def parse(cls, value) -> "CurveKind":
        """Return the kind named by ``value`` (case-insensitive).

        Raises ValueError for unknown names so request adapters can report them.
        """
        if isinstance(value, CurveKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown curve kind: {value!r}") from None


_CURVE_LABELS = {
    CurveKind.LINEAR: "Linear (Slow)",
    CurveKind.QUADRATIC: "Quadratic (Standard RPG)",
    CurveKind.EXPONENTIAL: "Exponential (Cultivation)",
}


@dataclass(frozen=True)
class CurveConfig:
    kind: CurveKind = CurveKind.QUADRATIC
    base: float = 100
    factor: float = 1.5


def _raw_experience(level: int, cfg: CurveConfig) -> float:
    base, factor = cfg.base, cfg.factor
    try:
        if cfg.kind is CurveKind.LINEAR:
            return base * level * factor
        if cfg.kind is CurveKind.QUADRATIC:
            return base * level**2 * factor / 10
        return base * factor**level
    except OverflowError:
        if base != base or factor != factor:
            return math.nan
        if base == 0 or factor == 0:
            # zero times an overflowing magnitude
            return 0.0
        # Too large for a float; only the sign matters to the clamp.
        odd_power = cfg.kind is not CurveKind.EXPONENTIAL or level % 2 == 1
        negative = (base < 0) != (factor < 0 and odd_power)
        return -math.inf if negative else math.inf
    except ZeroDivisionError:
        # 0.0 ** negative level
        return math.inf


def experience_for(level: int, cfg: CurveConfig) -> int:
    """Return the XP needed to advance through ``level`` under ``cfg``.

    Args:
        level: 1-based character level.
        cfg: Curve shape and its base/factor parameters.

    Returns:
        ``floor(raw)`` where raw follows the curve kind, except that a raw
        value below 100 becomes ``100 * level`` (the floor ramp) and values
        beyond ``XP_CEILING`` saturate there.

    Notes:
        The floor compares against a flat 100 while the replacement grows with
        the level. Never raises: NaN takes the floor path and infinities
        saturate or clamp like any other out-of-range value.
    """
    raw = _raw_experience(level, cfg)
    if isinstance(raw, float):
        if math.isnan(raw) or raw < XP_FLOOR_THRESHOLD:
            return XP_FLOOR_PER_LEVEL * level
        if raw >= XP_CEILING:
            return XP_CEILING
        return math.floor(raw)
    needed = math.floor(raw)
    if needed < XP_FLOOR_THRESHOLD:
        return XP_FLOOR_PER_LEVEL * level
    return min(needed, XP_CEILING)


__all__ = [
    "CurveConfig",
    "CurveKind",
    "XP_CEILING",
    "XP_FLOOR_PER_LEVEL",
    "XP_FLOOR_THRESHOLD",
    "experience_for",
]
