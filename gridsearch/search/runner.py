"""
Per-stage simulate-and-score evaluation.

A stage expands the surviving grid by its incremental draw count, scores every
(tuple, draw) task, waits for all of them, and reduces to one mean error per
tuple. Each task carries its own SeedSequence child, spawned in grid order x
draw order, so the numbers do not depend on how tasks are spread over workers.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from multiprocessing import Pool
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from gridsearch.utils.logging_utils import get_logger

from .grid import KEY, ParameterTuple, iter_tuples
from .scoring import BaseScorer

logger = get_logger(__name__)

Task = Tuple[ParameterTuple, np.random.SeedSequence]

# Set once per worker process by the pool initializer
_WORKER_SCORER: Optional[BaseScorer] = None


def _init_worker(scorer: BaseScorer) -> None:
    global _WORKER_SCORER
    _WORKER_SCORER = scorer


def _score_task(task: Task) -> float:
    params, seed = task
    return _WORKER_SCORER.score(params, seed)


@dataclass
class StageOutcome:
    """Mean error per evaluated tuple plus bookkeeping for the stage."""
    means: pd.DataFrame  # KEY columns + "mean"
    n_tuples: int
    n_draws: int
    n_failed: int
    seconds: float


def build_tasks(grid: pd.DataFrame, n_draws: int, seed: np.random.SeedSequence) -> List[Task]:
    """Expand every grid row into `n_draws` independently seeded tasks."""
    tuples = list(iter_tuples(grid))
    children = seed.spawn(len(tuples) * n_draws)
    return [
        (params, children[i * n_draws + draw])
        for i, params in enumerate(tuples)
        for draw in range(n_draws)
    ]


def _chunksize(n_tasks: int, n_workers: int) -> int:
    return max(1, n_tasks // (n_workers * 8))


def run_stage(
    scorer: BaseScorer,
    grid: pd.DataFrame,
    n_draws: int,
    seed: np.random.SeedSequence,
    n_workers: int = 1,
) -> StageOutcome:
    """
    Score every surviving tuple `n_draws` times and average per tuple.

    Failed draws are NaN and left out of the mean; a tuple whose draws all
    failed gets a NaN mean.

    Args:
        scorer: Simulate-and-score strategy holding the reference signature
        grid: Surviving tuples
        n_draws: Draws per tuple in this stage
        seed: Stage seed; one child is spawned per task
        n_workers: Worker processes (1 runs in-process)

    Returns:
        StageOutcome with a KEY + "mean" frame in grid order
    """
    start = time.perf_counter()
    tasks = build_tasks(grid, n_draws, seed)

    if not tasks:
        scores: List[float] = []
    elif n_workers > 1:
        with Pool(processes=n_workers, initializer=_init_worker, initargs=(scorer,)) as pool:
            scores = list(pool.imap(_score_task, tasks, chunksize=_chunksize(len(tasks), n_workers)))
    else:
        scores = [scorer.score(params, task_seed) for params, task_seed in tasks]

    draws = pd.DataFrame(
        [params.key for params, _ in tasks],
        columns=KEY,
        dtype=float,
    )
    draws["score"] = np.asarray(scores, dtype=float)

    means = (
        draws.groupby(KEY, sort=False)["score"]
        .mean()
        .rename("mean")
        .reset_index()
    )
    n_failed = int(draws["score"].isna().sum())
    seconds = time.perf_counter() - start

    if n_failed:
        logger.info(f"{n_failed} of {len(tasks)} draws failed and were left out of the means")

    return StageOutcome(
        means=means,
        n_tuples=len(grid),
        n_draws=len(tasks),
        n_failed=n_failed,
        seconds=seconds,
    )
