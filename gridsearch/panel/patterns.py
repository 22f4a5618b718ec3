"""
Change-pattern coding for balanced binary panels.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

# Widest panel whose patterns fit an int64 bit code
_MAX_CODED_WAVES = 62


def count_patterns(outcomes: np.ndarray) -> pd.Series:
    """
    Count units per change pattern in a units x waves 0/1 matrix.

    A pattern is the unit's outcome sequence written one character per wave,
    so a four-wave unit that switches on at the third wave reads "0011".

    Returns:
        Series of counts indexed by pattern string, sorted by pattern
    """
    outcomes = np.asarray(outcomes, dtype=np.int64)
    n_waves = outcomes.shape[1]

    if n_waves <= _MAX_CODED_WAVES:
        weights = np.left_shift(1, np.arange(n_waves - 1, -1, -1, dtype=np.int64))
        codes, counts = np.unique(outcomes @ weights, return_counts=True)
        patterns = [np.binary_repr(int(code), width=n_waves) for code in codes]
    else:
        strings = ["".join(map(str, row)) for row in outcomes.tolist()]
        patterns, counts = np.unique(strings, return_counts=True)

    counts = pd.Series(
        np.asarray(counts, dtype=np.int64),
        index=pd.Index(list(patterns), name="patterns", dtype=object),
        name="count",
    )
    return counts.sort_index()
