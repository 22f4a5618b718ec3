"""
Tests for draw-weighted aggregation across stages.
"""

import numpy as np
import pandas as pd
import pytest

from gridsearch.search import aggregate_stage, weighted_error


def _history():
    return pd.DataFrame({
        "n": [10, 10, 10],
        "t": [3, 3, 3],
        "rate": [0.0, 0.5, 1.0],
        "strength": [1.0, 1.0, 1.0],
        "direction": [0.0, 0.0, 0.0],
        "base_rate": [0.5, 0.5, 0.5],
    })


def _means(rates, values):
    return pd.DataFrame({
        "rate": rates,
        "strength": [1.0] * len(rates),
        "direction": [0.0] * len(rates),
        "mean": values,
    })


def test_weighted_error_example():
    """m1=2.0 over 30 draws, m2=3.0 over 90 more draws -> 2.75."""
    assert weighted_error(2.0, 3.0, 30, 90) == pytest.approx(2.75)


def test_first_stage_is_the_stage_mean():
    assert weighted_error(None, 4.5, 0, 30) == 4.5


def test_zero_draw_stage_rejected():
    with pytest.raises(ValueError):
        weighted_error(1.0, 2.0, 30, 0)


def test_aggregate_weights_and_missing_propagation():
    history = aggregate_stage(_history(), _means([0.0, 0.5, 1.0], [2.0, np.nan, 1.0]), 1, 0, 30)
    assert history["error_1"].tolist()[0] == 2.0
    assert np.isnan(history["error_1"].iloc[1])

    # stage 2 evaluates the first two tuples only
    history = aggregate_stage(history, _means([0.0, 0.5], [3.0, 7.0]), 2, 30, 90)
    assert history["error_2"].iloc[0] == pytest.approx(2.75)
    assert np.isnan(history["error_2"].iloc[1]), "Missing upstream error stays missing"
    assert np.isnan(history["error_2"].iloc[2]), "Pruned tuple gains no stage-2 error"
    assert history["error_1"].iloc[2] == 1.0, "Pruned tuple keeps its stage-1 error"
    assert {"mean_1", "mean_2"} <= set(history.columns)
    assert len(history) == 3
