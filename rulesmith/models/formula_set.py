"""Author-entered formula collections.

A FormulaSet maps slot names (``hp``, ``mp``, or anything else the author
adds) to raw expression text. Expressions are stored exactly as typed; nothing
here validates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple


@dataclass(frozen=True)
class FormulaSet:
    slots: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, formulas: Mapping[str, str]) -> "FormulaSet":
        """Freeze ``formulas`` keeping the caller's slot order."""
        return cls(tuple((str(name), str(expr)) for name, expr in formulas.items()))

    @property
    def hp(self) -> Optional[str]:
        return self.get("hp")

    @property
    def mp(self) -> Optional[str]:
        return self.get("mp")

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for slot, expr in self.slots:
            if slot == name:
                return expr
        return default

    def names(self) -> Tuple[str, ...]:
        return tuple(slot for slot, _ in self.slots)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self.slots)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def to_dict(self) -> dict:
        return dict(self.slots)


__all__ = ["FormulaSet"]
