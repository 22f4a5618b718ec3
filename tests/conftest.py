"""
Shared fixtures: a small synthetic panel and a small search grid.
"""

import numpy as np
import pandas as pd
import pytest

from gridsearch.dgp import DGPParams, simulate_panel
from gridsearch.search import GridAxes, SearchConfig


@pytest.fixture
def small_panel() -> pd.DataFrame:
    """60 units x 3 waves in raw (user-facing) column names."""
    params = DGPParams(n=60, t=3, strength=1.0, rate=0.4, direction=0.75, base_rate=0.4, reliability=0.9)
    panel = simulate_panel(params, np.random.default_rng(7))
    panel["t"] = (panel["t"] * 2).round().astype(int) + 2010
    return panel.rename(columns={"pid": "id", "t": "wave", "y": "outcome"})


@pytest.fixture
def small_axes() -> GridAxes:
    """12-tuple grid: 3 rates x 2 strengths x 2 directions."""
    return GridAxes(rates=[0.0, 0.5, 1.0], strengths=[0.5, 1.5], directions=[0.0, 1.0])


@pytest.fixture
def small_config(small_axes) -> SearchConfig:
    return SearchConfig(step1=4, step2=8, step3=12, seed=3, grid=small_axes)
