"""
Panel grid search: find the synthetic DGP that best reproduces the pattern of
change in a binary panel.
"""

from gridsearch.schemas.pattern import Pattern
from gridsearch.search import GridSearch, SearchConfig, SearchResult, grid_search

__version__ = "0.1.0"

__all__ = ["Pattern", "GridSearch", "SearchConfig", "SearchResult", "grid_search", "__version__"]
