from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from gridsearch.panel.patterns import count_patterns
from gridsearch.panel.slopes import slopes_from_matrix
from gridsearch.schemas.pattern import Pattern

from .model import DGPParams, simulate_outcomes

Signature = Union[pd.Series, np.ndarray]


def simulate(
    n: int,
    t: int,
    strength: float,
    rate: float,
    direction: float,
    base_rate: float,
    reliability: float,
    mode: Pattern,
    rng: np.random.Generator,
    times: Optional[Sequence[float]] = None,
) -> Signature:
    """
    Draw one synthetic panel and return its signature.

    Contingency mode returns simulated unit counts per change pattern
    (a Series indexed by pattern). Slopes mode returns one trend estimate
    per simulated unit. `times` places the waves (evenly spaced on [0, 1]
    when omitted); slopes are regressed on the same times.
    """
    params = DGPParams(
        n=int(n),
        t=int(t),
        strength=float(strength),
        rate=float(rate),
        direction=float(direction),
        base_rate=float(base_rate),
        reliability=float(reliability),
    )
    y, times = simulate_outcomes(params, rng, times)

    if Pattern(mode) is Pattern.CONTINGENCY:
        return count_patterns(y).rename("sim_counts")
    return slopes_from_matrix(y, times)


def simulate_panel(
    params: DGPParams,
    rng: np.random.Generator,
    times: Optional[Sequence[float]] = None,
) -> pd.DataFrame:
    """Long-format synthetic panel with columns pid, t, y."""
    y, times = simulate_outcomes(params, rng, times)
    return pd.DataFrame({
        "pid": np.repeat(np.arange(1, params.n + 1), params.t),
        "t": np.tile(times, params.n),
        "y": y.ravel(),
    })
