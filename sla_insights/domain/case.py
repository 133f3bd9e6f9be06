"""
Case domain model for SLA Insights.

A Case is the joined view of one state row and its insight row. Instances are
frozen: once the normalizer builds them they are only read.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sla_insights.domain.enums import RiskLevel

NO_ACTION_LABEL = "No action needed"


class Case(BaseModel):
    """One service-queue work item with operational and risk attributes."""

    model_config = ConfigDict(frozen=True)

    case_id: str = Field(..., min_length=1)
    case_type: str = ""
    queue_name: str = ""

    timestamp: Optional[datetime] = None
    timestamp_raw: str = ""  # as supplied, kept when it does not parse
    arrival_hour: int = 0
    day_of_week: int = 0

    sla_limit_minutes: int = Field(default=0, ge=0)
    queue_depth: int = Field(default=0, ge=0)
    active_agents: int = Field(default=0, ge=0)
    avg_handle_time_minutes: int = Field(default=0, ge=0)
    complexity_score: float = 0.0
    load_index: float = 0.0

    agent_skill_level: Optional[str] = None
    automation_level: Optional[str] = None

    predicted_sla_risk: float = 0.0
    risk_level: RiskLevel
    estimated_time_to_breach_minutes: Optional[int] = Field(default=None, ge=0)
    operational_bottleneck: Optional[str] = None
    recommended_action: Optional[str] = None
    expected_risk_after_action: float = 0.0

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level is RiskLevel.HIGH

    @property
    def has_action(self) -> bool:
        """True when an actual intervention is recommended."""
        return bool(self.recommended_action) and self.recommended_action != NO_ACTION_LABEL

    @property
    def expected_risk_reduction(self) -> float:
        """Risk points removed if the recommended action is taken."""
        return self.predicted_sla_risk - self.expected_risk_after_action
