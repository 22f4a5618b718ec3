"""
Candidate DGP grid.

The grid is the cross product of the varying axes (rate, strength, direction)
with the structural constants of the observed panel (unit count, wave count,
mean outcome). The triple (rate, strength, direction) identifies a tuple
across stages.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, astuple
from typing import Iterator, Optional

import pandas as pd

from gridsearch.panel.preprocess import PanelDimensions
from .schema import GridAxes

KEY = ["rate", "strength", "direction"]
GRID_COLUMNS = ["n", "t", "rate", "strength", "direction", "base_rate"]


@dataclass(frozen=True)
class ParameterTuple:
    n: int
    t: int
    rate: float
    strength: float
    direction: float
    base_rate: float

    @property
    def key(self):
        return (self.rate, self.strength, self.direction)


def build_grid(dims: PanelDimensions, axes: Optional[GridAxes] = None) -> pd.DataFrame:
    """
    Full cross product of candidate parameter values.

    Rows are enumerated with rate outermost and direction innermost.

    Args:
        dims: Unit count, wave count and mean outcome of the observed panel
        axes: Axis levels (defaults to 21 rates x 20 strengths x 5 directions)

    Returns:
        DataFrame with columns n, t, rate, strength, direction, base_rate
    """
    axes = axes or GridAxes()
    rows = [
        ParameterTuple(
            n=dims.n_units,
            t=dims.n_waves,
            rate=round(rate, 2),
            strength=round(strength, 1),
            direction=direction,
            base_rate=dims.base_rate,
        )
        for rate, strength, direction in itertools.product(axes.rates, axes.strengths, axes.directions)
    ]
    grid = pd.DataFrame([astuple(r) for r in rows], columns=GRID_COLUMNS)
    if grid.duplicated(subset=KEY).any():
        raise ValueError("Grid axes contain duplicate levels after rounding")
    return grid


def iter_tuples(grid: pd.DataFrame) -> Iterator[ParameterTuple]:
    """Yield grid rows as ParameterTuple in row order."""
    for row in grid[GRID_COLUMNS].itertuples(index=False):
        yield ParameterTuple(
            n=int(row.n),
            t=int(row.t),
            rate=float(row.rate),
            strength=float(row.strength),
            direction=float(row.direction),
            base_rate=float(row.base_rate),
        )
