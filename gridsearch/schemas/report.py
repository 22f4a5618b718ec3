"""Run report schema for grid search results."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class StageReport(BaseModel):
    """Bookkeeping for one search stage."""

    stage: int = Field(..., ge=1, le=3, description="Stage number")
    candidates: int = Field(..., ge=0, description="Tuples evaluated in the stage")
    survivors: int = Field(..., ge=0, description="Tuples carried to the next stage")
    draws_per_tuple: int = Field(..., gt=0, description="Draws added per tuple")
    total_draws: int = Field(..., ge=0, description="Draws run in the stage")
    failed_draws: int = Field(..., ge=0, description="Draws that came back missing")
    threshold: Optional[float] = Field(default=None, description="Pruning threshold (None when not pruned)")
    seconds: float = Field(..., ge=0, description="Wall-clock time")


class SearchReport(BaseModel):
    """Report of a grid search run with panel constants, stages and best fits."""

    pattern: str = Field(..., description="Signature mode")
    n_units: int = Field(..., description="Units in the observed panel")
    n_waves: int = Field(..., description="Waves in the observed panel")
    base_rate: float = Field(..., description="Mean observed outcome")
    config: Dict[str, Any] = Field(..., description="Search configuration")
    stages: List[StageReport] = Field(default_factory=list, description="Per-stage summaries")
    best: List[Dict[str, Any]] = Field(default_factory=list, description="Lowest-error configurations")
    artifacts: List[str] = Field(default_factory=list, description="List of artifact file paths")
