"""
What-if risk projection for SLA Insights.

Re-projects a case's SLA-breach risk under hypothetical staffing, queue and
automation levels:

1. Projected load = (queue depth / agents) x (handle time / 60)
2. Automation removes up to 30% of that load
3. A piecewise curve maps load to risk, steepest above a load of 50
4. Complexity adds up to 10 points; the result is held within [5, 95]
"""

from sla_insights.domain.case import Case
from sla_insights.domain.scenario import ScenarioParameters, SimulationResult


class InvalidScenarioParameters(ValueError):
    """Raised when scenario parameters cannot be simulated."""

    pass


class RiskProjectionModel:
    """
    Deterministic load-to-risk model.

    Usage:
        model = RiskProjectionModel()
        result = model.simulate(case, ScenarioParameters(active_agents=10, queue_depth=80))
    """

    # Largest share of load automation can remove
    MAX_AUTOMATION_DISCOUNT = 0.3

    # Risk curve: (lower load bound, base risk, slope) per segment
    HIGH_LOAD_THRESHOLD = 50.0
    HIGH_LOAD_BASE_RISK = 50.0
    HIGH_LOAD_SLOPE = 0.9
    MODERATE_LOAD_THRESHOLD = 20.0
    MODERATE_LOAD_BASE_RISK = 30.0
    MODERATE_LOAD_SLOPE = 0.67
    LOW_LOAD_SLOPE = 1.5

    COMPLEXITY_WEIGHT = 10.0
    MIN_RISK = 5.0
    MAX_RISK = 95.0

    # Above this adjusted load a breach is projected at 30% of the SLA
    BREACH_LOAD_THRESHOLD = 40.0
    BREACH_SLA_FRACTION = 0.3

    def projected_load(self, case: Case, params: ScenarioParameters) -> float:
        """Load index implied by the scenario's staffing and queue."""
        if params.active_agents <= 0:
            raise InvalidScenarioParameters(
                f"active_agents must be positive, got {params.active_agents}"
            )
        return (params.queue_depth / params.active_agents) * (case.avg_handle_time_minutes / 60)

    def automation_factor(self, automation_level_pct: float) -> float:
        """Multiplier applied to load for a given automation percentage."""
        return 1 - (automation_level_pct / 100) * self.MAX_AUTOMATION_DISCOUNT

    def risk_for_load(self, load: float) -> float:
        """Risk (%) implied by an adjusted load, before complexity."""
        if load > self.HIGH_LOAD_THRESHOLD:
            return min(
                self.MAX_RISK,
                self.HIGH_LOAD_BASE_RISK + (load - self.HIGH_LOAD_THRESHOLD) * self.HIGH_LOAD_SLOPE,
            )
        if load > self.MODERATE_LOAD_THRESHOLD:
            return (
                self.MODERATE_LOAD_BASE_RISK
                + (load - self.MODERATE_LOAD_THRESHOLD) * self.MODERATE_LOAD_SLOPE
            )
        return load * self.LOW_LOAD_SLOPE

    def simulate(self, case: Case, params: ScenarioParameters) -> SimulationResult:
        """
        Project a case under scenario parameters.

        Args:
            case: Case supplying handle time, complexity, SLA and current risk
            params: Hypothetical operating point

        Returns:
            SimulationResult; ``risk_reduction_pct`` is negative when the
            scenario raises the risk

        Raises:
            InvalidScenarioParameters: If ``params.active_agents`` is not positive
        """
        adjusted_load = self.projected_load(case, params) * self.automation_factor(
            params.automation_level_pct
        )

        risk = self.risk_for_load(adjusted_load)
        risk += case.complexity_score * self.COMPLEXITY_WEIGHT
        risk = min(self.MAX_RISK, max(self.MIN_RISK, risk))

        time_to_breach = None
        if adjusted_load > self.BREACH_LOAD_THRESHOLD:
            time_to_breach = round(case.sla_limit_minutes * self.BREACH_SLA_FRACTION)

        return SimulationResult(
            simulated_load_index=adjusted_load,
            simulated_risk_pct=risk,
            risk_reduction_pct=case.predicted_sla_risk - risk,
            projected_time_to_breach_minutes=time_to_breach,
        )


_default_model = RiskProjectionModel()


def simulate(case: Case, params: ScenarioParameters) -> SimulationResult:
    """Project a case with the default model."""
    return _default_model.simulate(case, params)
