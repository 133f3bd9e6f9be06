"""
Intervention ranking for SLA Insights.

Evaluates three canned changes to a case's operating point (more agents, full
automation, a shorter queue) and ranks them by the risk they remove.
"""

from collections.abc import Callable, Iterable, Sequence

import structlog

from sla_insights.domain.case import Case
from sla_insights.domain.enums import RiskLevel
from sla_insights.domain.scenario import ActionOption, ScenarioParameters, SimulationResult
from sla_insights.simulation.model import (
    InvalidScenarioParameters,
    RiskProjectionModel,
)

logger = structlog.get_logger()

HIGH_CONFIDENCE_REDUCTION = 40.0
MEDIUM_CONFIDENCE_REDUCTION = 20.0

ADD_AGENTS = "Add Agents"
INCREASE_AUTOMATION = "Increase Automation"
REDUCE_QUEUE_DEPTH = "Reduce Queue Depth"

EXTRA_AGENTS = 2
QUEUE_REDUCTION = 50
MIN_QUEUE_DEPTH = 10
MAX_AUTOMATION_PCT = 100.0


def confidence_label(risk_reduction: float) -> str:
    """High above 40 points of reduction, Medium above 20, otherwise Low."""
    if risk_reduction > HIGH_CONFIDENCE_REDUCTION:
        return "High"
    if risk_reduction > MEDIUM_CONFIDENCE_REDUCTION:
        return "Medium"
    return "Low"


def action_confidence(case: Case) -> str:
    """Confidence in the case's own recommended action."""
    return confidence_label(case.expected_risk_reduction)


def baseline_parameters(case: Case) -> ScenarioParameters:
    """
    The case's current operating point, with no automation.

    Raises:
        InvalidScenarioParameters: If the case has no active agents
    """
    if case.active_agents <= 0:
        raise InvalidScenarioParameters(
            f"Case {case.case_id} has no active agents to build a baseline from"
        )
    return ScenarioParameters(
        active_agents=case.active_agents,
        queue_depth=case.queue_depth,
        automation_level_pct=0.0,
    )


PERTURBATIONS: list[tuple[str, Callable[[ScenarioParameters], ScenarioParameters]]] = [
    (
        ADD_AGENTS,
        lambda p: p.model_copy(update={"active_agents": p.active_agents + EXTRA_AGENTS}),
    ),
    (
        INCREASE_AUTOMATION,
        lambda p: p.model_copy(update={"automation_level_pct": MAX_AUTOMATION_PCT}),
    ),
    (
        REDUCE_QUEUE_DEPTH,
        lambda p: p.model_copy(
            update={"queue_depth": max(MIN_QUEUE_DEPTH, p.queue_depth - QUEUE_REDUCTION)}
        ),
    ),
]


class ActionAdvisor:
    """
    Ranks canned interventions for a case.

    Usage:
        advisor = ActionAdvisor()
        best = advisor.best_action(case)
        print(best.name, best.risk_reduction_pct, best.confidence)
    """

    def __init__(self, model: RiskProjectionModel | None = None):
        self.model = model or RiskProjectionModel()

    def rank_actions(
        self,
        case: Case,
        baseline: ScenarioParameters | None = None,
    ) -> list[ActionOption]:
        """
        Evaluate every intervention and order them by risk reduction.

        Args:
            case: Case to advise on
            baseline: Operating point to perturb; defaults to the case's own

        Returns:
            All options, largest reduction first (ties keep listing order)
        """
        baseline = baseline or baseline_parameters(case)
        options = []
        for name, perturb in PERTURBATIONS:
            params = perturb(baseline)
            result = self.model.simulate(case, params)
            options.append(
                ActionOption(
                    name=name,
                    parameters=params,
                    result=result,
                    confidence=confidence_label(result.risk_reduction_pct),
                )
            )
        return sorted(options, key=lambda o: o.risk_reduction_pct, reverse=True)

    def best_action(
        self,
        case: Case,
        baseline: ScenarioParameters | None = None,
    ) -> ActionOption:
        """The intervention with the largest risk reduction."""
        best = self.rank_actions(case, baseline)[0]
        logger.debug(
            "best_action_selected",
            case_id=case.case_id,
            action=best.name,
            risk_reduction_pct=round(best.risk_reduction_pct, 2),
        )
        return best


def scenario_sample(
    cases: Iterable[Case],
    params: ScenarioParameters,
    size: int = 10,
    model: RiskProjectionModel | None = None,
) -> list[tuple[Case, SimulationResult]]:
    """
    The first ``size`` high-risk cases, each projected under ``params``.

    Used to populate the what-if case picker.
    """
    model = model or RiskProjectionModel()
    sample: list[tuple[Case, SimulationResult]] = []
    for case in cases:
        if len(sample) >= size:
            break
        if case.risk_level is RiskLevel.HIGH:
            sample.append((case, model.simulate(case, params)))
    return sample


def rank_actions(case: Case, baseline: ScenarioParameters | None = None) -> list[ActionOption]:
    return ActionAdvisor().rank_actions(case, baseline)


def best_action(case: Case, baseline: ScenarioParameters | None = None) -> ActionOption:
    return ActionAdvisor().best_action(case, baseline)


def compare_options(options: Sequence[ActionOption]) -> list[dict[str, object]]:
    """Flatten ranked options into rows for display."""
    return [
        {
            "action": o.name,
            "simulated_risk_pct": o.result.simulated_risk_pct,
            "risk_reduction_pct": o.risk_reduction_pct,
            "confidence": o.confidence,
        }
        for o in options
    ]
