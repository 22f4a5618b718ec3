"""Quantile-based survivor selection between stages."""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd

from gridsearch.utils.logging_utils import get_logger

logger = get_logger(__name__)


def quantile_threshold(errors: pd.Series, q: float) -> float:
    """Empirical `q` quantile of the non-missing errors (linear interpolation)."""
    errors = pd.Series(errors, dtype=float).dropna()
    if errors.empty:
        return float("nan")
    return float(np.quantile(errors.to_numpy(), q))


def prune(candidates: pd.DataFrame, column: str, q: float) -> Tuple[pd.DataFrame, float]:
    """
    Keep candidates whose `column` is at or below its `q` quantile.

    Ties at the threshold are kept. When every error is missing the threshold
    is missing too, and all candidates are kept.

    Returns:
        (survivors, threshold)
    """
    threshold = quantile_threshold(candidates[column], q)
    if np.isnan(threshold):
        logger.warning(f"All {column} values are missing; keeping all {len(candidates)} candidates")
        return candidates.copy(), threshold

    survivors = candidates[candidates[column] <= threshold].copy()
    logger.info(
        f"Kept {len(survivors)} of {len(candidates)} tuples with {column} <= {threshold:.6g} (q={q})"
    )
    return survivors, threshold
