"""
Tests for the per-draw scorers.
"""

import numpy as np
import pandas as pd
import pytest

from gridsearch.dgp import DGPParams, SimulationError, simulate_outcomes
from gridsearch.schemas.pattern import Pattern
from gridsearch.search import ContingencyScorer, SlopesScorer, ParameterTuple, make_scorer
from gridsearch.panel import prepare_panel

PARAMS = ParameterTuple(n=10, t=2, rate=0.25, strength=0.7, direction=0.5, base_rate=0.4)


def test_contingency_deviation_example():
    """|4-5| + |3-3| + |1-0| + |2-2| = 2."""
    scorer = ContingencyScorer(pd.Series({"00": 5, "01": 3, "11": 2}), reliability=0.9)
    assert scorer.distance({"00": 4, "01": 3, "10": 1, "11": 2}) == 2.0


def test_contingency_only_counts_simulated_patterns():
    """Reference patterns the draw never produced do not add to the deviation."""
    scorer = ContingencyScorer(pd.Series({"00": 5, "01": 3, "11": 2}), reliability=0.9)
    assert scorer.distance(pd.Series({"00": 5})) == 0.0


def test_slopes_distance_bounds():
    reference = np.array([0.0, 0.1, 0.2, 0.3])
    scorer = SlopesScorer(reference, reliability=0.9)
    assert scorer.distance(reference.copy()) == pytest.approx(0.0)
    assert scorer.distance(reference + 10.0) == pytest.approx(1.0)


def test_score_passes_parameters_to_simulator():
    seen = {}

    def recording_simulator(**kwargs):
        seen.update(kwargs)
        return {"01": 7}

    scorer = ContingencyScorer(pd.Series({"01": 3}), reliability=0.8, simulator=recording_simulator)
    assert scorer.score(PARAMS, np.random.SeedSequence(1)) == 4.0
    assert seen["n"] == 10 and seen["t"] == 2
    assert seen["rate"] == 0.25 and seen["strength"] == 0.7 and seen["direction"] == 0.5
    assert seen["base_rate"] == 0.4 and seen["reliability"] == 0.8
    assert seen["mode"] is Pattern.CONTINGENCY
    assert isinstance(seen["rng"], np.random.Generator)


@pytest.mark.parametrize("error", [
    SimulationError("degenerate"),
    ValueError("bad draw"),
    ZeroDivisionError("degenerate draw"),
    KeyError("n"),
    FloatingPointError("overflow"),
    RuntimeError("simulator crashed"),
])
def test_failed_draw_becomes_missing(error):
    """A failing draw is NaN, never an exception."""
    def failing_simulator(**kwargs):
        raise error

    scorer = ContingencyScorer(pd.Series({"01": 3}), reliability=0.9, simulator=failing_simulator)
    assert np.isnan(scorer.score(PARAMS, np.random.SeedSequence(1)))


def test_empty_slope_draw_becomes_missing():
    scorer = SlopesScorer(np.array([0.1, 0.2]), reliability=0.9, simulator=lambda **kw: np.array([]))
    assert np.isnan(scorer.score(PARAMS, np.random.SeedSequence(1)))


def test_score_is_reproducible_per_seed():
    scorer = ContingencyScorer(pd.Series({"00": 4, "11": 4}), reliability=0.9)
    a = scorer.score(PARAMS, np.random.SeedSequence(42))
    b = scorer.score(PARAMS, np.random.SeedSequence(42))
    assert a == b
    assert a >= 0


def test_make_scorer_dispatches_on_pattern(small_panel):
    panel = prepare_panel(small_panel, yname="outcome", tname="wave", pname="id")

    contingency = make_scorer(Pattern.CONTINGENCY, panel, reliability=0.9)
    assert isinstance(contingency, ContingencyScorer)
    assert int(contingency.reference.sum()) == 60

    slopes = make_scorer("slopes", panel, reliability=0.9, ks_method="asymp")
    assert isinstance(slopes, SlopesScorer)
    assert slopes.reference.shape == (60,)
    assert slopes.ks_method == "asymp"


def test_default_simulator_uses_observed_wave_times():
    """With waves in 2000, 2001 and 2010, simulated slopes use the same uneven axis."""
    params = DGPParams(n=30, t=3, strength=2.0, rate=0.5, direction=0.5, base_rate=0.5, reliability=0.9)
    uneven = [0.0, 0.1, 1.0]
    y, _ = simulate_outcomes(params, np.random.default_rng(8), times=uneven)
    observed = pd.DataFrame({
        "id": np.repeat(np.arange(30), 3),
        "year": np.tile([2000, 2001, 2010], 30),
        "y": y.ravel(),
    })
    panel = prepare_panel(observed, yname="y", tname="year", pname="id")

    scorer = make_scorer("slopes", panel, reliability=0.9)
    np.testing.assert_allclose(scorer.simulator.keywords["times"], uneven)

    simulated = scorer.simulator(
        n=30, t=3, strength=2.0, rate=0.5, direction=0.5, base_rate=0.5,
        reliability=0.9, mode=Pattern.SLOPES, rng=np.random.default_rng(8),
    )
    np.testing.assert_allclose(np.sort(simulated), np.sort(scorer.reference), atol=1e-12)
