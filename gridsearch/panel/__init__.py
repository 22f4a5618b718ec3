"""
Panel preparation: cleaning, validation, pattern coding and trend estimation.
"""

from gridsearch.panel.preprocess import (
    prepare_panel,
    panel_dimensions,
    observed_wave_times,
    PanelDimensions,
)
from gridsearch.panel.patterns import count_patterns
from gridsearch.panel.slopes import estimate_slopes, slopes_from_matrix

__all__ = [
    "prepare_panel",
    "panel_dimensions",
    "observed_wave_times",
    "PanelDimensions",
    "count_patterns",
    "estimate_slopes",
    "slopes_from_matrix",
]
