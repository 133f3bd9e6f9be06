"""
Domain models for SLA Insights.

Pydantic models representing cases and what-if scenarios.
"""

from sla_insights.domain.enums import (
    RiskLevel,
    SortDirection,
    ActionGroupBy,
    Weekday,
)
from sla_insights.domain.case import Case, NO_ACTION_LABEL
from sla_insights.domain.scenario import (
    ScenarioParameters,
    SimulationResult,
    ActionOption,
)

__all__ = [
    "RiskLevel",
    "SortDirection",
    "ActionGroupBy",
    "Weekday",
    "Case",
    "NO_ACTION_LABEL",
    "ScenarioParameters",
    "SimulationResult",
    "ActionOption",
]
