"""
Shared enums and report models.
"""

from gridsearch.schemas.pattern import Pattern, DIRECTION_LABELS, direction_label
from gridsearch.schemas.report import SearchReport, StageReport

__all__ = [
    "Pattern",
    "DIRECTION_LABELS",
    "direction_label",
    "SearchReport",
    "StageReport",
]
