"""
Input checks for long-format binary panels.

Every check raises ValueError with a message aimed at the person who supplied
the data; nothing is coerced silently here.
"""

from typing import Iterable, Sequence
import numpy as np
import pandas as pd


def require_columns(df: pd.DataFrame, columns: Sequence[str], source: str = "data") -> None:
    """
    Fail unless `df` is a DataFrame holding every name in `columns`.

    Args:
        df: Candidate input
        columns: Names that must be present, reported in the given order
        source: What `df` is, for the error message (e.g. a file name)
    """
    if not isinstance(df, pd.DataFrame):
        raise ValueError(f"Expected a pandas DataFrame for {source}, got {type(df).__name__}")
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns in {source}: {missing}. Available: {list(df.columns)}"
        )


def validate_binary_outcome(values: Iterable) -> bool:
    """
    Check that an outcome column holds exactly the two levels 0 and 1.

    Raises:
        ValueError: If any other value is present or one level is missing
    """
    levels = np.unique(np.asarray(list(values), dtype=float))
    if len(levels) != 2 or levels[0] != 0 or levels[1] != 1:
        raise ValueError("The outcome needs to be binary and coded as 0 and 1.")
    return True


def validate_time_periods(values: Iterable) -> bool:
    """Require at least two distinct time values."""
    if len(pd.unique(np.asarray(list(values)))) <= 1:
        raise ValueError("There needs to be at least two time periods.")
    return True
