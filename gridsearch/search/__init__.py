"""Staged pruning grid search over candidate DGPs."""
from .schema import SearchConfig, GridAxes, load_search_config
from .grid import ParameterTuple, build_grid, KEY
from .scoring import ContingencyScorer, SlopesScorer, make_scorer
from .runner import run_stage, StageOutcome
from .aggregate import aggregate_stage, weighted_error
from .prune import prune, quantile_threshold
from .orchestrator import GridSearch, SearchResult, SearchState, grid_search

__all__ = [
    "SearchConfig",
    "GridAxes",
    "load_search_config",
    "ParameterTuple",
    "build_grid",
    "KEY",
    "ContingencyScorer",
    "SlopesScorer",
    "make_scorer",
    "run_stage",
    "StageOutcome",
    "aggregate_stage",
    "weighted_error",
    "prune",
    "quantile_threshold",
    "GridSearch",
    "SearchResult",
    "SearchState",
    "grid_search",
]
