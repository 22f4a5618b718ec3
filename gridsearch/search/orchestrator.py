"""
Three-stage pruning grid search.

The search evaluates the full grid with `step1` draws per tuple, keeps the
tuples at or below the median cumulative error, runs `step2 - step1` more
draws on those, keeps the best fifth, and finishes them with `step3 - step2`
draws. Each tuple reports its most refined cumulative error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np
import pandas as pd

from gridsearch.panel.preprocess import PanelDimensions, panel_dimensions, prepare_panel
from gridsearch.schemas.pattern import DIRECTION_LABELS, Pattern, direction_label
from gridsearch.schemas.report import SearchReport, StageReport
from gridsearch.utils.logging_utils import get_logger

from .aggregate import aggregate_stage
from .grid import GRID_COLUMNS, KEY, build_grid
from .prune import prune
from .runner import run_stage
from .schema import SearchConfig
from .scoring import Simulator, SlopeEstimator, make_scorer

logger = get_logger(__name__)

N_STAGES = 3
RESULT_COLUMNS = ["rate", "strength", "direction", "error", "pattern"]


class SearchState(Enum):
    INIT = 0
    STAGE1 = 1
    STAGE2 = 2
    STAGE3 = 3
    DONE = 4


@dataclass
class SearchResult:
    """Final error table plus the per-stage history behind it."""
    table: pd.DataFrame
    history: pd.DataFrame
    stages: List[StageReport]
    dims: PanelDimensions
    config: SearchConfig

    def best(self, k: int = 10) -> pd.DataFrame:
        """The k configurations with the lowest error."""
        return self.table.dropna(subset=["error"]).nsmallest(k, "error")

    def to_report(self, k: int = 10, artifacts: Optional[List[str]] = None) -> SearchReport:
        best = self.best(k).astype({"direction": str})
        return SearchReport(
            pattern=self.config.pattern.value,
            n_units=self.dims.n_units,
            n_waves=self.dims.n_waves,
            base_rate=self.dims.base_rate,
            config=self.config.model_dump(mode="json"),
            stages=self.stages,
            best=best.to_dict(orient="records"),
            artifacts=artifacts or [],
        )


def finalize(history: pd.DataFrame, pattern: Pattern) -> pd.DataFrame:
    """
    Collapse the stage history into the result table.

    Each tuple takes error_3 if it reached stage 3, else error_2, else error_1.
    """
    error = history["error_3"].combine_first(history["error_2"]).combine_first(history["error_1"])
    direction = pd.Categorical(
        [direction_label(d) for d in history["direction"]],
        categories=list(DIRECTION_LABELS.values()),
        ordered=True,
    )
    return pd.DataFrame({
        "rate": history["rate"].to_numpy(dtype=float),
        "strength": history["strength"].to_numpy(dtype=float),
        "direction": direction,
        "error": error.to_numpy(dtype=float),
        "pattern": Pattern(pattern).value,
    })[RESULT_COLUMNS]


class GridSearch:
    """
    Staged simulate-and-prune search over candidate DGPs.

    Args:
        config: Search configuration (defaults to SearchConfig())
        simulator: Callable following the `gridsearch.dgp.simulate` signature
        slope_estimator: Callable mapping a panel to per-unit slopes
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        simulator: Optional[Simulator] = None,
        slope_estimator: Optional[SlopeEstimator] = None,
    ):
        self.config = config or SearchConfig()
        self.simulator = simulator
        self.slope_estimator = slope_estimator
        self._state = SearchState.INIT

    @property
    def state(self) -> SearchState:
        return self._state

    def _advance(self, target: SearchState) -> None:
        if target.value != self._state.value + 1:
            raise RuntimeError(f"Cannot move from {self._state.name} to {target.name}")
        self._state = target

    def run(self, data: pd.DataFrame, yname: str, tname: str, pname: str) -> SearchResult:
        """
        Run the three stages on a long-format panel.

        Args:
            data: Panel with one row per unit and wave
            yname: Binary outcome column
            tname: Time column
            pname: Unit identifier column

        Returns:
            SearchResult

        Raises:
            ValueError: If the panel fails validation
            RuntimeError: If this instance has already run
        """
        if self._state is not SearchState.INIT:
            raise RuntimeError("A GridSearch instance can only run once")

        cfg = self.config
        panel = prepare_panel(data, yname=yname, tname=tname, pname=pname)
        dims = panel_dimensions(panel)
        scorer = make_scorer(
            cfg.pattern,
            panel,
            reliability=cfg.reliability,
            simulator=self.simulator,
            slope_estimator=self.slope_estimator,
            ks_method=cfg.ks_method,
        )
        grid = build_grid(dims, cfg.grid)
        history = grid.copy()
        survivors = grid
        stage_seeds = np.random.SeedSequence(cfg.seed).spawn(N_STAGES)
        stages: List[StageReport] = []

        logger.info(f"We now start the calculations. There will be {N_STAGES} steps ({len(grid)} tuples, pattern={cfg.pattern.value}).")

        for idx, state in enumerate([SearchState.STAGE1, SearchState.STAGE2, SearchState.STAGE3]):
            self._advance(state)
            stage = idx + 1
            n_draws = cfg.increments[idx]
            logger.info(f"Step {stage} for grid search: {len(survivors)} tuples x {n_draws} draws")

            outcome = run_stage(scorer, survivors, n_draws, stage_seeds[idx], n_workers=cfg.n_workers)
            history = aggregate_stage(history, outcome.means, stage, cfg.cumulative[idx], n_draws)

            threshold = None
            n_candidates = len(survivors)
            if stage < N_STAGES:
                evaluated = history.set_index(KEY).index.isin(survivors.set_index(KEY).index)
                kept, threshold = prune(history.loc[evaluated], f"error_{stage}", cfg.prune_quantiles[idx])
                survivors = kept[GRID_COLUMNS].reset_index(drop=True)
                if np.isnan(threshold):
                    threshold = None

            stages.append(StageReport(
                stage=stage,
                candidates=n_candidates,
                survivors=len(survivors),
                draws_per_tuple=n_draws,
                total_draws=outcome.n_draws,
                failed_draws=outcome.n_failed,
                threshold=threshold,
                seconds=outcome.seconds,
            ))

        self._advance(SearchState.DONE)
        table = finalize(history, cfg.pattern)
        logger.info(f"Grid search done: best error {table['error'].min():.6g}")

        return SearchResult(table=table, history=history, stages=stages, dims=dims, config=cfg)


def grid_search(
    data: pd.DataFrame,
    yname: str,
    tname: str,
    pname: str,
    pattern: str = "contingency",
    step1: int = 30,
    step2: int = 120,
    step3: int = 480,
    reliability: float = 0.9,
    seed: int = 11235,
    n_workers: int = 1,
    simulator: Optional[Simulator] = None,
    slope_estimator: Optional[SlopeEstimator] = None,
) -> pd.DataFrame:
    """
    Three-step grid search for the DGP that best reproduces a binary panel.

    Returns:
        DataFrame with columns rate, strength, direction, error, pattern;
        one row per grid tuple, lower error meaning a closer fit
    """
    config = SearchConfig(
        pattern=pattern,
        step1=step1,
        step2=step2,
        step3=step3,
        reliability=reliability,
        seed=seed,
        n_workers=n_workers,
    )
    search = GridSearch(config, simulator=simulator, slope_estimator=slope_estimator)
    return search.run(data, yname=yname, tname=tname, pname=pname).table
