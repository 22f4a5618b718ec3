"""Signature modes and direction labels."""

from enum import Enum
from typing import Dict


class Pattern(str, Enum):
    """Which observable signature the search matches on."""
    CONTINGENCY = "contingency"
    SLOPES = "slopes"


# Share of changing units that move upward -> label
DIRECTION_LABELS: Dict[float, str] = {
    0.0: "100% Down",
    0.25: "75% Down-25% Up",
    0.5: "50% Down-50% Up",
    0.75: "25% Down-75% Up",
    1.0: "100% Up",
}


def direction_label(direction: float) -> str:
    """Human-readable label for a direction level."""
    try:
        return DIRECTION_LABELS[round(float(direction), 2)]
    except KeyError:
        raise ValueError(f"Unsupported direction level: {direction}") from None
