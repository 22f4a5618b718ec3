"""Schema validation for grid search configuration."""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Tuple
from pathlib import Path
import numpy as np
import yaml

from gridsearch.schemas.pattern import Pattern, DIRECTION_LABELS


def _default_rates() -> List[float]:
    return [round(float(x), 2) for x in np.linspace(0.0, 1.0, 21)]


def _default_strengths() -> List[float]:
    return [round(float(x), 1) for x in np.linspace(0.1, 2.0, 20)]


def _default_directions() -> List[float]:
    return list(DIRECTION_LABELS.keys())


class GridAxes(BaseModel):
    """Levels of the three varying DGP parameters."""
    rates: List[float] = Field(default_factory=_default_rates, min_length=1, description="Share of changing units")
    strengths: List[float] = Field(default_factory=_default_strengths, min_length=1, description="Drift of changing units")
    directions: List[float] = Field(default_factory=_default_directions, min_length=1, description="Share of changers moving up")

    @field_validator("rates")
    @classmethod
    def validate_rates(cls, v: List[float]) -> List[float]:
        """Rates are probabilities, rounded to 2 decimals."""
        if any(r < 0 or r > 1 for r in v):
            raise ValueError("rates must lie in [0, 1]")
        return [round(float(r), 2) for r in v]

    @field_validator("strengths")
    @classmethod
    def validate_strengths(cls, v: List[float]) -> List[float]:
        """Strengths are rounded to 1 decimal."""
        return [round(float(s), 1) for s in v]

    @field_validator("directions")
    @classmethod
    def validate_directions(cls, v: List[float]) -> List[float]:
        """Directions must be one of the labelled levels."""
        v = [round(float(d), 2) for d in v]
        unknown = [d for d in v if d not in DIRECTION_LABELS]
        if unknown:
            raise ValueError(f"Unsupported direction levels: {unknown}. Use {list(DIRECTION_LABELS)}")
        return v

    @property
    def size(self) -> int:
        return len(self.rates) * len(self.strengths) * len(self.directions)


class SearchConfig(BaseModel):
    """Configuration of a three-stage grid search."""

    pattern: Pattern = Field(default=Pattern.CONTINGENCY, description="Signature to match on")
    step1: int = Field(default=30, gt=0, description="Cumulative draws per tuple after stage 1")
    step2: int = Field(default=120, gt=0, description="Cumulative draws per tuple after stage 2")
    step3: int = Field(default=480, gt=0, description="Cumulative draws per tuple after stage 3")
    reliability: float = Field(default=0.9, ge=0, le=1, description="Probability an outcome is measured without error")
    seed: int = Field(default=11235, description="Random seed for reproducibility")
    n_workers: int = Field(default=1, ge=1, description="Worker processes per stage")
    prune_quantiles: Tuple[float, float] = Field(
        default=(0.5, 0.2), description="Survivor quantiles after stages 1 and 2"
    )
    ks_method: Literal["exact", "asymp", "auto"] = Field(
        default="exact", description="Kolmogorov-Smirnov variant for slopes mode"
    )
    grid: GridAxes = Field(default_factory=GridAxes, description="Parameter grid levels")

    @field_validator("prune_quantiles")
    @classmethod
    def validate_quantiles(cls, v: Tuple[float, float]) -> Tuple[float, float]:
        """Quantiles must be probabilities."""
        if any(q <= 0 or q > 1 for q in v):
            raise ValueError("prune_quantiles must lie in (0, 1]")
        return v

    @model_validator(mode="after")
    def validate_steps(self):
        """Each stage must add draws."""
        if not (self.step1 < self.step2 < self.step3):
            raise ValueError("Each `step` should have higher runs than the previous ones.")
        return self

    @property
    def increments(self) -> List[int]:
        """Draws added per tuple in each stage."""
        return [self.step1, self.step2 - self.step1, self.step3 - self.step2]

    @property
    def cumulative(self) -> List[int]:
        """Draws per tuple completed before each stage starts."""
        return [0, self.step1, self.step2]


def load_search_config(path: str) -> SearchConfig:
    """Load and validate a search configuration from a YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    if "grid" in data and isinstance(data["grid"], dict):
        data["grid"] = GridAxes(**data["grid"])

    return SearchConfig(**data)
