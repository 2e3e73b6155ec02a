"""Progression table rows and their JSON shape."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Union

from rulesmith.formula.errors import EvalError
from rulesmith.models.stats import Number

Cell = Union[Number, EvalError]


@dataclass(frozen=True)
class ProgressionRow:
    level: int
    xp_needed: int
    xp_total: int
    derived: Mapping[str, Cell] = field(default_factory=lambda: MappingProxyType({}))

    def values(self) -> Dict[str, Number]:
        """Derived cells that evaluated to a number."""
        return {k: v for k, v in self.derived.items() if not isinstance(v, EvalError)}

    def errors(self) -> Dict[str, EvalError]:
        return {k: v for k, v in self.derived.items() if isinstance(v, EvalError)}


def row_to_dict(row: ProgressionRow) -> Dict[str, Any]:
    """Serialize a row for JSON responses.

    Failed cells move to ``errors`` keyed by slot with the error code, so
    ``derived`` only ever holds numbers.
    """
    return {
        "level": row.level,
        "xp_needed": row.xp_needed,
        "xp_total": row.xp_total,
        "derived": row.values(),
        "errors": {k: v.code for k, v in row.errors().items()},
    }


def table_to_dicts(rows: Iterable[ProgressionRow]) -> List[Dict[str, Any]]:
    return [row_to_dict(r) for r in rows]


__all__ = ["Cell", "ProgressionRow", "row_to_dict", "table_to_dicts"]
