from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.stats import norm


class SimulationError(RuntimeError):
    """A single synthetic draw could not produce a usable panel."""


@dataclass(frozen=True)
class DGPParams:
    n: int  # units
    t: int  # waves
    strength: float  # latent drift of a changing unit across the full window (SD units)
    rate: float  # share of units that change
    direction: float  # share of changing units that drift upward
    base_rate: float  # outcome rate at the first wave
    reliability: float  # probability an observation is measured without error


def _clip(x: float, lo: float, hi: float) -> float:
    return float(min(max(x, lo), hi))


def wave_times(t: int) -> np.ndarray:
    """Evenly spaced wave times on the unit interval."""
    return np.linspace(0.0, 1.0, t)


def simulate_outcomes(
    p: DGPParams,
    rng: np.random.Generator,
    times: Optional[Sequence[float]] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Draw one synthetic binary panel.

    Each unit holds a latent propensity u ~ N(Phi^-1(base_rate), 1) and reports
    1 whenever its propensity is positive. A share `rate` of units drift by
    `strength` over the observation window, upward with probability
    `direction` and downward otherwise; the rest stay put. Each observation is
    then kept with probability `reliability` and otherwise replaced by a
    Bernoulli(base_rate) draw.

    Waves sit at `times` on the unit interval, evenly spaced unless given.
    Pass the observed rescaled wave times when the real waves are unevenly
    spaced; otherwise simulated slopes live on a different time axis from the
    observed ones and even the true DGP scores above zero in slopes mode.

    Returns:
        (outcomes, times) with outcomes of shape (n, t) and times of shape (t,)

    Raises:
        SimulationError: If the simulated outcome takes a single value
        ValueError: If `times` does not hold one value per wave
    """
    if p.n < 1 or p.t < 2:
        raise SimulationError(f"Need at least one unit and two waves, got n={p.n}, t={p.t}")

    if times is None:
        times = wave_times(p.t)
    else:
        times = np.asarray(times, dtype=float)
        if times.shape != (p.t,):
            raise ValueError(f"Expected {p.t} wave times, got {times.size}")

    base = _clip(p.base_rate, 1e-6, 1.0 - 1e-6)

    # 1) latent starting points
    u = rng.normal(norm.ppf(base), 1.0, size=p.n)

    # 2) who changes, and which way
    changer = rng.random(p.n) < p.rate
    upward = rng.random(p.n) < p.direction
    drift = np.where(changer, np.where(upward, 1.0, -1.0) * p.strength, 0.0)

    # 3) latent trajectories and true outcomes
    latent = u[:, None] + drift[:, None] * times[None, :]
    true_y = (latent > 0).astype(np.int64)

    # 4) measurement error
    kept = rng.random((p.n, p.t)) < p.reliability
    noise = (rng.random((p.n, p.t)) < base).astype(np.int64)
    y = np.where(kept, true_y, noise)

    if y.min() == y.max():
        raise SimulationError(f"Simulated outcome is constant at {int(y.min())}")

    return y, times
