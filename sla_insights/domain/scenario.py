"""
What-if scenario models for SLA Insights.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ScenarioParameters(BaseModel):
    """Hypothetical operating point a case is re-projected under."""

    model_config = ConfigDict(frozen=True)

    active_agents: int = Field(..., gt=0, description="Agents on shift")
    queue_depth: int = Field(..., ge=0, description="Cases waiting")
    automation_level_pct: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Share of handling automated (%)",
    )


class SimulationResult(BaseModel):
    """Projection of one case under one set of scenario parameters."""

    model_config = ConfigDict(frozen=True)

    simulated_load_index: float
    simulated_risk_pct: float
    risk_reduction_pct: float  # negative when the scenario is worse
    projected_time_to_breach_minutes: Optional[int] = None


class ActionOption(BaseModel):
    """A canned intervention evaluated against a case."""

    model_config = ConfigDict(frozen=True)

    name: str
    parameters: ScenarioParameters
    result: SimulationResult
    confidence: str

    @property
    def risk_reduction_pct(self) -> float:
        return self.result.risk_reduction_pct
