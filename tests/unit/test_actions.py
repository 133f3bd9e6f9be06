"""
Unit tests for intervention ranking and confidence labels.
"""

import pytest

from sla_insights.domain.enums import RiskLevel
from sla_insights.domain.scenario import ScenarioParameters
from sla_insights.simulation.actions import (
    ADD_AGENTS,
    INCREASE_AUTOMATION,
    REDUCE_QUEUE_DEPTH,
    ActionAdvisor,
    action_confidence,
    baseline_parameters,
    best_action,
    compare_options,
    confidence_label,
    rank_actions,
    scenario_sample,
)
from sla_insights.simulation.model import InvalidScenarioParameters


class TestConfidenceLabel:
    """Tests for reduction-based confidence tiers."""

    @pytest.mark.parametrize(
        "reduction, label",
        [(40.1, "High"), (40.0, "Medium"), (20.1, "Medium"), (20.0, "Low"), (-5.0, "Low")],
    )
    def test_thresholds(self, reduction, label):
        assert confidence_label(reduction) == label

    def test_action_confidence_uses_expected_reduction(self, case_factory):
        case = case_factory(predicted_sla_risk=90.0, expected_risk_after_action=30.0)

        assert action_confidence(case) == "High"


class TestRanking:
    """Tests for the canned interventions."""

    def test_baseline_from_case(self, reference_case):
        baseline = baseline_parameters(reference_case)

        assert baseline == ScenarioParameters(active_agents=10, queue_depth=100, automation_level_pct=0.0)

    def test_perturbations(self, reference_case):
        """+2 agents, automation at 100%, queue down by 50."""
        options = {o.name: o.parameters for o in rank_actions(reference_case)}

        assert options[ADD_AGENTS].active_agents == 12
        assert options[INCREASE_AUTOMATION].automation_level_pct == 100.0
        assert options[REDUCE_QUEUE_DEPTH].queue_depth == 50

    def test_queue_reduction_floored_at_ten(self, reference_case):
        options = rank_actions(
            reference_case, ScenarioParameters(active_agents=10, queue_depth=30)
        )
        queue_option = next(o for o in options if o.name == REDUCE_QUEUE_DEPTH)

        assert queue_option.parameters.queue_depth == 10

    def test_ranked_by_reduction(self, reference_case):
        """Queue 50 -> 69.5 reduction; automation -> 66.5; agents -> 64.5."""
        options = rank_actions(reference_case)

        assert [o.name for o in options] == [REDUCE_QUEUE_DEPTH, INCREASE_AUTOMATION, ADD_AGENTS]
        assert options[0].risk_reduction_pct == pytest.approx(69.5)
        assert options[0].confidence == "High"

    def test_ties_keep_listing_order(self, case_factory):
        """When every option ends at the floor, Add Agents stays first."""
        case = case_factory(avg_handle_time_minutes=0, complexity_score=0.0, active_agents=3)

        assert [o.name for o in rank_actions(case)] == [ADD_AGENTS, INCREASE_AUTOMATION, REDUCE_QUEUE_DEPTH]

    def test_best_action(self, reference_case):
        assert best_action(reference_case).name == REDUCE_QUEUE_DEPTH

    def test_case_without_agents_fails_fast(self, case_factory):
        with pytest.raises(InvalidScenarioParameters):
            ActionAdvisor().best_action(case_factory(active_agents=0))

    def test_compare_options_rows(self, reference_case):
        rows = compare_options(rank_actions(reference_case))

        assert rows[0]["action"] == REDUCE_QUEUE_DEPTH
        assert set(rows[0]) == {"action", "simulated_risk_pct", "risk_reduction_pct", "confidence"}


class TestScenarioSample:
    """Tests for the what-if case picker."""

    def test_first_high_risk_cases(self, case_factory):
        cases = [
            case_factory(case_id=f"S{i}", risk_level=RiskLevel.HIGH if i % 2 else RiskLevel.LOW)
            for i in range(10)
        ]
        sample = scenario_sample(cases, ScenarioParameters(active_agents=8, queue_depth=100), size=3)

        assert [case.case_id for case, _ in sample] == ["S1", "S3", "S5"]
        assert all(5.0 <= result.simulated_risk_pct <= 95.0 for _, result in sample)
