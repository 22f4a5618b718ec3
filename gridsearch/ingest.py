"""
Loading long-format panels from disk.
"""

from pathlib import Path
from typing import List, Optional
import pandas as pd
from gridsearch.utils.logging_utils import get_logger
from gridsearch.utils.data_validation import require_columns

logger = get_logger(__name__)

READERS = {
    "csv": pd.read_csv,
    "parquet": pd.read_parquet,
    "json": pd.read_json,
}


def load_dataset(
    file_path: str,
    file_type: Optional[str] = None,
    columns: Optional[List[str]] = None,
    **kwargs
) -> pd.DataFrame:
    """
    Read a panel file into a DataFrame.

    Args:
        file_path: CSV, Parquet or JSON file
        file_type: Override for the type inferred from the suffix
        columns: Columns that must be present (e.g. unit, time, outcome)
        **kwargs: Passed through to the pandas reader

    Returns:
        Loaded DataFrame

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the type is unsupported or required columns are absent
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {file_path}")

    file_type = (file_type or path.suffix.lstrip(".")).lower()
    reader = READERS.get(file_type)
    if reader is None:
        raise ValueError(f"Unsupported file type: {file_type}")

    df = reader(path, **kwargs)
    logger.info(f"Loaded {path.name}: {len(df)} rows, {len(df.columns)} columns")

    if columns:
        require_columns(df, columns, source=path.name)
    return df
