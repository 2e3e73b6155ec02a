# Model package init
from .curve import CurveConfig, CurveKind, experience_for  # noqa: F401 re-export
from .formula_set import FormulaSet  # noqa: F401 re-export
from .row import ProgressionRow, row_to_dict, table_to_dicts  # noqa: F401 re-export
from .stats import STAT_NAMES, StatSnapshot, snapshot_for  # noqa: F401 re-export

__all__ = [
    "CurveConfig",
    "CurveKind",
    "FormulaSet",
    "ProgressionRow",
    "STAT_NAMES",
    "StatSnapshot",
    "experience_for",
    "row_to_dict",
    "snapshot_for",
    "table_to_dicts",
]
