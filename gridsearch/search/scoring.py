"""Distance between a simulated signature and the observed one."""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Callable, Dict, Optional, Type

import numpy as np
import pandas as pd
from scipy.stats import ks_2samp

from gridsearch.dgp import simulate as default_simulate
from gridsearch.panel.preprocess import observed_wave_times
from gridsearch.panel.slopes import estimate_slopes
from gridsearch.schemas.pattern import Pattern
from gridsearch.utils.logging_utils import get_logger

from .grid import ParameterTuple
from .reference import contingency_reference, slopes_reference

logger = get_logger(__name__)

Simulator = Callable[..., Any]
SlopeEstimator = Callable[[pd.DataFrame], np.ndarray]


class BaseScorer(ABC):
    """
    Simulate-and-score for one signature mode.

    A scorer owns the observed reference signature, the simulator it compares
    against, and the measurement reliability passed to every draw.
    """

    pattern: Pattern

    def __init__(
        self,
        reference: Any,
        reliability: float,
        simulator: Optional[Simulator] = None,
    ):
        self.reference = reference
        self.reliability = reliability
        self.simulator = simulator or default_simulate

    @classmethod
    @abstractmethod
    def build_reference(cls, panel: pd.DataFrame, slope_estimator: SlopeEstimator) -> Any:
        """Signature of the observed panel."""

    @abstractmethod
    def distance(self, signature: Any) -> float:
        """Nonnegative distance from a simulated signature to the reference."""

    def score(self, params: ParameterTuple, seed: np.random.SeedSequence) -> float:
        """
        One simulated draw for `params`, scored against the reference.

        Any error raised while simulating or scoring the draw turns it into
        NaN, so one bad draw never takes down the stage.
        """
        rng = np.random.default_rng(seed)
        try:
            signature = self.simulator(
                n=params.n,
                t=params.t,
                strength=params.strength,
                rate=params.rate,
                direction=params.direction,
                base_rate=params.base_rate,
                reliability=self.reliability,
                mode=self.pattern,
                rng=rng,
            )
            return float(self.distance(signature))
        except Exception as exc:
            logger.debug(f"Draw failed for {params.key}: {type(exc).__name__}: {exc}")
            return float("nan")


class ContingencyScorer(BaseScorer):
    """Summed absolute deviation of pattern counts."""

    pattern = Pattern.CONTINGENCY

    @classmethod
    def build_reference(cls, panel: pd.DataFrame, slope_estimator: SlopeEstimator) -> pd.Series:
        return contingency_reference(panel)

    def distance(self, signature: Any) -> float:
        sim_counts = pd.Series(signature, dtype=float)
        # patterns the reference never shows count as zero observed units
        reference = self.reference.reindex(sim_counts.index, fill_value=0).astype(float)
        return float(np.abs(sim_counts.to_numpy() - reference.to_numpy()).sum())


class SlopesScorer(BaseScorer):
    """Two-sample Kolmogorov-Smirnov statistic between slope distributions."""

    pattern = Pattern.SLOPES

    def __init__(
        self,
        reference: Any,
        reliability: float,
        simulator: Optional[Simulator] = None,
        ks_method: str = "exact",
    ):
        super().__init__(reference, reliability, simulator)
        self.ks_method = ks_method

    @classmethod
    def build_reference(cls, panel: pd.DataFrame, slope_estimator: SlopeEstimator) -> np.ndarray:
        return slopes_reference(panel, slope_estimator)

    def distance(self, signature: Any) -> float:
        simulated = np.asarray(signature, dtype=float)
        simulated = simulated[~np.isnan(simulated)]
        return float(ks_2samp(simulated, self.reference, method=self.ks_method).statistic)


SCORERS: Dict[Pattern, Type[BaseScorer]] = {
    Pattern.CONTINGENCY: ContingencyScorer,
    Pattern.SLOPES: SlopesScorer,
}


def make_scorer(
    pattern: Pattern,
    panel: pd.DataFrame,
    reliability: float,
    simulator: Optional[Simulator] = None,
    slope_estimator: Optional[SlopeEstimator] = None,
    ks_method: str = "exact",
) -> BaseScorer:
    """
    Build the reference for `pattern` and wrap it in the matching scorer.

    Without a custom simulator, the default one draws its waves at the
    observed rescaled times so simulated and observed signatures share a
    time axis.
    """
    scorer_cls = SCORERS[Pattern(pattern)]
    if simulator is None:
        simulator = partial(default_simulate, times=observed_wave_times(panel))
    reference = scorer_cls.build_reference(panel, slope_estimator or estimate_slopes)
    if scorer_cls is SlopesScorer:
        return SlopesScorer(reference, reliability, simulator, ks_method=ks_method)
    return scorer_cls(reference, reliability, simulator)
