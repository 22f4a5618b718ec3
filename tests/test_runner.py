"""
Tests for per-stage evaluation.
"""

import numpy as np
import pandas as pd

from gridsearch.dgp import SimulationError
from gridsearch.panel import PanelDimensions, prepare_panel
from gridsearch.search import ContingencyScorer, build_grid, make_scorer, run_stage
from gridsearch.search.runner import build_tasks

DIMS = PanelDimensions(n_units=40, n_waves=3, base_rate=0.5)


def rate_simulator(n, t, strength, rate, direction, base_rate, reliability, mode, rng):
    """Deterministic stand-in: the draw's deviation is 10 * rate."""
    if rate == 0.5:
        raise SimulationError("unlucky tuple")
    return pd.Series({"zz": 10 * rate})


def test_build_tasks_one_seed_per_draw(small_axes):
    grid = build_grid(DIMS, small_axes)
    tasks = build_tasks(grid, 3, np.random.SeedSequence(9))
    assert len(tasks) == 36
    assert [p.key for p, _ in tasks[:3]] == [(0.0, 0.5, 0.0)] * 3
    keys = {seed.spawn_key for _, seed in tasks}
    assert len(keys) == 36, "Every task needs its own stream"

    again = build_tasks(grid, 3, np.random.SeedSequence(9))
    assert [s.spawn_key for _, s in again] == [s.spawn_key for _, s in tasks]


def test_stage_means_skip_failed_draws(small_axes):
    grid = build_grid(DIMS, small_axes)
    scorer = ContingencyScorer(pd.Series({"01": 5}), reliability=0.9, simulator=rate_simulator)
    outcome = run_stage(scorer, grid, 4, np.random.SeedSequence(1))

    assert list(outcome.means.columns) == ["rate", "strength", "direction", "mean"]
    assert len(outcome.means) == 12
    assert outcome.n_draws == 48
    assert outcome.n_failed == 16, "All draws of the four rate=0.5 tuples fail"

    by_rate = outcome.means.groupby("rate")["mean"]
    assert by_rate.apply(lambda s: s.isna().all()).loc[0.5]
    assert (outcome.means.loc[outcome.means["rate"] == 0.0, "mean"] == 0.0).all()
    assert (outcome.means.loc[outcome.means["rate"] == 1.0, "mean"] == 10.0).all()


def test_empty_stage(small_axes):
    grid = build_grid(DIMS, small_axes).iloc[0:0]
    scorer = ContingencyScorer(pd.Series({"01": 5}), reliability=0.9, simulator=rate_simulator)
    outcome = run_stage(scorer, grid, 4, np.random.SeedSequence(1))
    assert outcome.means.empty
    assert outcome.n_draws == 0


def test_worker_count_does_not_change_results(small_panel, small_axes):
    panel = prepare_panel(small_panel, yname="outcome", tname="wave", pname="id")
    scorer = make_scorer("contingency", panel, reliability=0.9)
    grid = build_grid(PanelDimensions(60, 3, float(panel["y"].mean())), small_axes)

    serial = run_stage(scorer, grid, 3, np.random.SeedSequence(11), n_workers=1)
    parallel = run_stage(scorer, grid, 3, np.random.SeedSequence(11), n_workers=2)
    pd.testing.assert_frame_equal(serial.means, parallel.means)
    assert (serial.means["mean"] >= 0).all()


def dividing_simulator(n, t, strength, rate, direction, base_rate, reliability, mode, rng):
    """Stand-in that breaks with an arbitrary error on the rate=0.5 tuples."""
    if rate == 0.5:
        raise ZeroDivisionError("degenerate draw")
    return pd.Series({"zz": 10 * rate})


def test_any_draw_error_is_contained(small_axes):
    grid = build_grid(DIMS, small_axes)
    scorer = ContingencyScorer(pd.Series({"01": 5}), reliability=0.9, simulator=dividing_simulator)
    outcome = run_stage(scorer, grid, 2, np.random.SeedSequence(5))

    assert outcome.n_draws == 24
    assert outcome.n_failed == 8, "Both draws of the four rate=0.5 tuples fail"
    failed = outcome.means["rate"] == 0.5
    assert outcome.means.loc[failed, "mean"].isna().all()
    assert outcome.means.loc[~failed, "mean"].notna().all()
