"""
Per-unit linear trend estimation.

Each unit's slope is the OLS coefficient of its binary outcome regressed on
rescaled time (a linear probability trend). The same estimator summarises the
observed panel and every simulated panel in slopes mode.
"""

from __future__ import annotations

import numpy as np
import pandas as pd


def estimate_slopes(panel: pd.DataFrame) -> np.ndarray:
    """
    Estimate one linear-trend coefficient per unit of a long-format panel.

    Units observed at fewer than two distinct times carry no trend and are
    skipped.

    Args:
        panel: Prepared panel with columns pid, t, y

    Returns:
        Array of slopes ordered by unit identifier
    """
    grouped = panel.groupby("pid", sort=True)
    t_dev = panel["t"] - grouped["t"].transform("mean")
    y_dev = panel["y"] - grouped["y"].transform("mean")

    sums = pd.DataFrame({
        "pid": panel["pid"],
        "sxy": t_dev * y_dev,
        "sxx": t_dev * t_dev,
    }).groupby("pid", sort=True)[["sxy", "sxx"]].sum()

    sums = sums[sums["sxx"] > 0]
    return (sums["sxy"] / sums["sxx"]).to_numpy(dtype=float)


def slopes_from_matrix(outcomes: np.ndarray, times: np.ndarray) -> np.ndarray:
    """
    Slopes for a balanced panel held as a units x waves matrix.

    Args:
        outcomes: Array of shape (n_units, n_waves)
        times: Wave times of shape (n_waves,)

    Returns:
        Array of shape (n_units,)
    """
    times = np.asarray(times, dtype=float)
    t_dev = times - times.mean()
    sxx = float(np.dot(t_dev, t_dev))
    if sxx == 0:
        raise ValueError("Slopes need at least two distinct time values")
    y = np.asarray(outcomes, dtype=float)
    y_dev = y - y.mean(axis=1, keepdims=True)
    return y_dev @ t_dev / sxx
