"""
Panel cleaning and validation ahead of the grid search.
"""

from dataclasses import dataclass
import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_datetime64_any_dtype, is_numeric_dtype

from gridsearch.utils.logging_utils import get_logger
from gridsearch.utils.data_validation import (
    require_columns,
    validate_binary_outcome,
    validate_time_periods,
)

logger = get_logger(__name__)

PANEL_COLUMNS = ["pid", "t", "y"]


@dataclass(frozen=True)
class PanelDimensions:
    """Structural constants shared by every candidate DGP."""
    n_units: int
    n_waves: int
    base_rate: float


def _time_as_numeric(t: pd.Series) -> pd.Series:
    """Map an orderable time column onto floats that preserve its order."""
    if isinstance(t.dtype, pd.CategoricalDtype):
        # declared category order, not lexical order
        return t.cat.codes.astype(float)
    if is_datetime64_any_dtype(t):
        return (t - t.min()).dt.total_seconds()
    if is_numeric_dtype(t) and not is_bool_dtype(t):
        return t.astype(float)
    return t.rank(method="dense").astype(float)


def _outcome_as_numeric(y: pd.Series) -> pd.Series:
    if is_bool_dtype(y):
        return y.astype(int)
    try:
        return pd.to_numeric(y)
    except (TypeError, ValueError) as exc:
        raise ValueError("The outcome needs to be binary and coded as 0 and 1.") from exc


def rescale(values: pd.Series) -> pd.Series:
    """Min-max rescale to the unit interval."""
    lo, hi = values.min(), values.max()
    if hi == lo:
        return values * 0.0
    return (values - lo) / (hi - lo)


def prepare_panel(
    data: pd.DataFrame,
    yname: str,
    tname: str,
    pname: str,
) -> pd.DataFrame:
    """
    Select, clean and validate a long-format binary panel.

    Rows with any missing unit, time or outcome value are dropped. Time is
    rescaled to [0, 1] over the cleaned panel.

    Args:
        data: Long-format panel, one row per unit and wave
        yname: Outcome column (coercible to 0/1)
        tname: Time column (numeric, datetime or any orderable type)
        pname: Unit identifier column

    Returns:
        DataFrame with columns pid, t, y sorted by unit and time

    Raises:
        ValueError: If columns are missing, the outcome is not binary,
            fewer than two time periods remain, or a unit repeats a wave
    """
    require_columns(data, [pname, tname, yname], source="panel")

    df = data[[pname, tname, yname]].copy()
    df.columns = PANEL_COLUMNS

    logger.warning("This function drops missing values. Tread carefully.")
    initial_rows = len(df)
    df = df.dropna()
    dropped = initial_rows - len(df)
    if dropped > 0:
        logger.warning(f"Dropped {dropped} rows with missing values")

    df["y"] = _outcome_as_numeric(df["y"])
    validate_binary_outcome(df["y"])
    validate_time_periods(df["t"])

    if df.duplicated(subset=["pid", "t"]).any():
        raise ValueError("Each unit can only have one record per time period.")

    df["y"] = df["y"].astype(int)
    df["t"] = rescale(_time_as_numeric(df["t"]))

    df = df.sort_values(["pid", "t"], kind="mergesort").reset_index(drop=True)
    logger.info(
        f"Prepared panel: {df['pid'].nunique()} units, "
        f"{df['t'].nunique()} waves, {len(df)} records"
    )
    return df


def panel_dimensions(panel: pd.DataFrame) -> PanelDimensions:
    """Unit count, wave count and mean outcome of a prepared panel."""
    return PanelDimensions(
        n_units=int(panel["pid"].nunique()),
        n_waves=int(panel["t"].nunique()),
        base_rate=float(np.mean(panel["y"])),
    )


def observed_wave_times(panel: pd.DataFrame) -> np.ndarray:
    """Distinct rescaled wave times of a prepared panel, ascending."""
    return np.sort(panel["t"].unique()).astype(float)
