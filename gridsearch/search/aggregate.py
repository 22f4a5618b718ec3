"""
Draw-weighted running mean of stage errors.

After stage k a tuple's cumulative error is

    w_prev / (w_prev + w_k) * error_{k-1} + w_k / (w_prev + w_k) * mean_k

where w_prev is the number of draws completed before the stage and w_k the
draws the stage added. A missing error_{k-1} or mean_k leaves error_k missing,
so a tuple dropped from the search keeps its last completed error and never
gains a later one.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
import pandas as pd

from .grid import KEY

ArrayLike = Union[float, np.ndarray, pd.Series]


def weighted_error(
    previous: Optional[ArrayLike],
    stage_mean: ArrayLike,
    w_prev: int,
    w_k: int,
) -> ArrayLike:
    """Combine a previous cumulative error with a new stage mean."""
    if w_k <= 0:
        raise ValueError("A stage must add at least one draw")
    if previous is None or w_prev == 0:
        return stage_mean
    total = w_prev + w_k
    return (w_prev / total) * previous + (w_k / total) * stage_mean


def aggregate_stage(
    history: pd.DataFrame,
    means: pd.DataFrame,
    stage: int,
    w_prev: int,
    w_k: int,
) -> pd.DataFrame:
    """
    Join a stage's per-tuple means onto the history and add `error_{stage}`.

    Args:
        history: One row per grid tuple with earlier error columns
        means: KEY + "mean" for the tuples evaluated this stage
        stage: Stage number (1-based)
        w_prev: Draws per tuple completed before this stage
        w_k: Draws per tuple added by this stage

    Returns:
        History with `mean_{stage}` and `error_{stage}` columns
    """
    mean_col = f"mean_{stage}"
    history = history.merge(
        means[KEY + ["mean"]].rename(columns={"mean": mean_col}),
        on=KEY,
        how="left",
        validate="one_to_one",
    )
    previous = history[f"error_{stage - 1}"] if stage > 1 else None
    history[f"error_{stage}"] = weighted_error(previous, history[mean_col], w_prev, w_k)
    return history
