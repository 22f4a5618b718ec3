"""
Tests for the parameter grid.
"""

import pytest

from gridsearch.panel import PanelDimensions
from gridsearch.search import GridAxes, build_grid, KEY
from gridsearch.search.grid import iter_tuples

DIMS = PanelDimensions(n_units=150, n_waves=4, base_rate=0.37)


def test_default_grid_size_and_constants():
    grid = build_grid(DIMS)
    assert len(grid) == 21 * 20 * 5 == 2100
    assert not grid.duplicated(subset=KEY).any(), "Join keys must be unique"
    assert (grid["n"] == 150).all()
    assert (grid["t"] == 4).all()
    assert (grid["base_rate"] == 0.37).all()


def test_default_axes_levels():
    grid = build_grid(DIMS)
    assert sorted(grid["rate"].unique()) == [round(0.05 * i, 2) for i in range(21)]
    assert sorted(grid["strength"].unique()) == [round(0.1 * i, 1) for i in range(1, 21)]
    assert sorted(grid["direction"].unique()) == [0.0, 0.25, 0.5, 0.75, 1.0]


def test_enumeration_order():
    """Rate outermost, strength in the middle, direction innermost."""
    grid = build_grid(DIMS)
    first = grid.iloc[:6][KEY].values.tolist()
    assert first[:5] == [[0.0, 0.1, d] for d in (0.0, 0.25, 0.5, 0.75, 1.0)]
    assert first[5] == [0.0, 0.2, 0.0]
    assert grid.iloc[-1][KEY].tolist() == [1.0, 2.0, 1.0]
    assert grid.iloc[100][KEY].tolist() == [0.05, 0.1, 0.0]


def test_custom_axes(small_axes):
    grid = build_grid(DIMS, small_axes)
    assert len(grid) == small_axes.size == 12


def test_unlabelled_direction_rejected():
    with pytest.raises(ValueError, match="Unsupported direction"):
        GridAxes(directions=[0.3])


def test_duplicate_levels_after_rounding_rejected():
    with pytest.raises(ValueError, match="duplicate"):
        build_grid(DIMS, GridAxes(rates=[0.1, 0.101], strengths=[1.0], directions=[0.0]))


def test_iter_tuples_follow_rows(small_axes):
    grid = build_grid(DIMS, small_axes)
    tuples = list(iter_tuples(grid))
    assert len(tuples) == 12
    assert tuples[0].key == (0.0, 0.5, 0.0)
    assert tuples[0].n == 150 and tuples[0].t == 4
