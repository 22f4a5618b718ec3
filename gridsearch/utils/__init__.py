"""
Utility modules for the panel grid search.
"""

from .logging_utils import configure_logging, get_logger, set_log_level
from .data_validation import (
    require_columns,
    validate_binary_outcome,
    validate_time_periods,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "set_log_level",
    "require_columns",
    "validate_binary_outcome",
    "validate_time_periods",
]
