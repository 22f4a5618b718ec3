"""
Observable signatures of the observed panel.

A contingency signature counts units per change pattern. A slopes signature
is the set of per-unit trend estimates.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
import pandas as pd

from gridsearch.panel.patterns import count_patterns
from gridsearch.utils.logging_utils import get_logger

logger = get_logger(__name__)


def contingency_reference(panel: pd.DataFrame) -> pd.Series:
    """
    Pattern counts of the observed panel.

    Units missing any wave are left out of the table.
    """
    wide = panel.pivot(index="pid", columns="t", values="y").sort_index(axis=1)
    complete = wide.dropna()
    if len(complete) < len(wide):
        logger.info(f"{len(wide) - len(complete)} units with incomplete waves left out of the pattern table")
    reference = count_patterns(complete.to_numpy(dtype=np.int64))
    logger.info(f"Reference table: {len(reference)} distinct patterns over {int(reference.sum())} units")
    return reference.rename("reference")


def slopes_reference(
    panel: pd.DataFrame,
    estimator: Callable[[pd.DataFrame], np.ndarray],
) -> np.ndarray:
    """Per-unit trend estimates of the observed panel."""
    slopes = np.asarray(estimator(panel), dtype=float)
    slopes = slopes[~np.isnan(slopes)]
    if slopes.size == 0:
        raise ValueError("No unit has enough waves to estimate a slope")
    logger.info(f"Reference slopes: {slopes.size} units, mean {slopes.mean():.4f}")
    return slopes
