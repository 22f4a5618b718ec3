"""Default synthetic data-generating process for binary panels."""
from .model import DGPParams, SimulationError, simulate_outcomes
from .simulate import simulate, simulate_panel

__all__ = ["DGPParams", "SimulationError", "simulate_outcomes", "simulate", "simulate_panel"]
