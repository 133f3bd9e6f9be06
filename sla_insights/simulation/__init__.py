"""
What-if simulation for SLA Insights.

Provides the risk projection model and intervention ranking.
"""

from sla_insights.simulation.model import (
    InvalidScenarioParameters,
    RiskProjectionModel,
    simulate,
)
from sla_insights.simulation.actions import (
    ActionAdvisor,
    action_confidence,
    baseline_parameters,
    best_action,
    compare_options,
    confidence_label,
    rank_actions,
    scenario_sample,
)

__all__ = [
    "InvalidScenarioParameters",
    "RiskProjectionModel",
    "simulate",
    "ActionAdvisor",
    "action_confidence",
    "baseline_parameters",
    "best_action",
    "compare_options",
    "confidence_label",
    "rank_actions",
    "scenario_sample",
]
