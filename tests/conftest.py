"""
Shared test fixtures for SLA Insights tests.
"""

from datetime import datetime

import pytest

from sla_insights.domain.case import Case
from sla_insights.domain.enums import RiskLevel
from sla_insights.repository import CaseRepository


# =============================================================================
# Case Factories
# =============================================================================


def make_case(**overrides) -> Case:
    """Build a Case with sensible defaults for the fields a test doesn't care about."""
    values = {
        "case_id": "CASE-0001",
        "case_type": "Billing",
        "queue_name": "Tier 1",
        "timestamp": datetime(2024, 3, 4, 9, 15),
        "timestamp_raw": "2024-03-04T09:15:00",
        "arrival_hour": 9,
        "day_of_week": 1,
        "sla_limit_minutes": 120,
        "queue_depth": 40,
        "active_agents": 5,
        "avg_handle_time_minutes": 30,
        "complexity_score": 0.3,
        "load_index": 4.0,
        "agent_skill_level": "Intermediate",
        "automation_level": "Manual",
        "predicted_sla_risk": 50.0,
        "risk_level": RiskLevel.MEDIUM,
        "estimated_time_to_breach_minutes": None,
        "operational_bottleneck": None,
        "recommended_action": None,
        "expected_risk_after_action": 50.0,
    }
    values.update(overrides)
    return Case(**values)


@pytest.fixture
def case_factory():
    """Factory fixture for building cases."""
    return make_case


@pytest.fixture
def reference_case() -> Case:
    """The worked example: 60 minute handle time, complexity 0.3."""
    return make_case(
        case_id="CASE-REF",
        avg_handle_time_minutes=60,
        complexity_score=0.3,
        sla_limit_minutes=240,
        predicted_sla_risk=80.0,
        risk_level=RiskLevel.HIGH,
        active_agents=10,
        queue_depth=100,
    )


# =============================================================================
# Raw Row Fixtures
# =============================================================================


@pytest.fixture
def state_rows() -> list[dict[str, str]]:
    """State extract rows, including one with no insight and one with no id."""
    return [
        {
            "Case_ID": "C1",
            "Case_Type": "Billing",
            "Queue_Name": "Tier 1",
            "Timestamp": "2024-03-04T09:15:00",
            "Arrival_Hour": "9",
            "Day_Of_Week": "1",
            "SLA_Limit_Mins": "120",
            "Queue_Depth": "45",
            "Active_Agents": "6",
            "Avg_Handle_Time_Mins": "25",
            "Complexity_Score": "0.72",
            "Load_Index": "3.125",
            "Agent_Skill_Level": "Junior",
            "Automation_Level": "Manual",
        },
        {
            "Case_ID": "C2",
            "Case_Type": "Technical",
            "Queue_Name": "Tier 2",
            "Timestamp": "2024-03-05T14:40:00Z",
            "Arrival_Hour": "14",
            "Day_Of_Week": "2",
            "SLA_Limit_Mins": "240",
            "Queue_Depth": "abc",
            "Active_Agents": "",
            "Avg_Handle_Time_Mins": "40.9",
            "Complexity_Score": "0.35",
            "Load_Index": "1.5",
            "Agent_Skill_Level": "Expert",
            "Automation_Level": "Auto",
        },
        {
            "Case_ID": "C3",
            "Case_Type": "Billing",
            "Queue_Name": "Tier 1",
            "Timestamp": "not a date",
            "Arrival_Hour": "9",
            "Day_Of_Week": "1",
            "SLA_Limit_Mins": "60",
            "Queue_Depth": "10",
            "Active_Agents": "4",
            "Avg_Handle_Time_Mins": "15",
            "Complexity_Score": "0.1",
            "Load_Index": "0.6",
            "Agent_Skill_Level": "Intermediate",
            "Automation_Level": "Hybrid",
        },
        {
            "Case_ID": "C4",
            "Case_Type": "Account",
            "Queue_Name": "Tier 3",
            "Timestamp": "2024-03-05T08:00:00",
            "Arrival_Hour": "8",
            "Day_Of_Week": "2",
            "SLA_Limit_Mins": "90",
            "Queue_Depth": "5",
            "Active_Agents": "2",
            "Avg_Handle_Time_Mins": "20",
            "Complexity_Score": "0.5",
            "Load_Index": "0.8",
            "Agent_Skill_Level": "Junior",
            "Automation_Level": "Manual",
        },
        {
            "Case_ID": "",
            "Case_Type": "Billing",
            "Queue_Name": "Tier 1",
        },
    ]


@pytest.fixture
def insight_rows() -> list[dict[str, str]]:
    """Insight extract rows; C4 has none, X9 has no state row."""
    return [
        {
            "Case_ID": "C2",
            "Predicted_SLA_Risk_%": "35.5%",
            "Risk_Level": "Medium",
            "Estimated_Time_To_Breach_Mins": "NA",
            "Operational_Bottleneck": "",
            "Recommended_Action": "",
            "Expected_Risk_After_Action_%": "35.5%",
        },
        {
            "Case_ID": "C1",
            "Predicted_SLA_Risk_%": "82.4%",
            "Risk_Level": "High",
            "Estimated_Time_To_Breach_Mins": "35",
            "Operational_Bottleneck": "Staffing Shortage",
            "Recommended_Action": "Reassign to senior agent",
            "Expected_Risk_After_Action_%": "41.0%",
        },
        {
            "Case_ID": "C3",
            "Predicted_SLA_Risk": "12",
            "Risk_Level": "low",
            "Estimated_Time_To_Breach_Mins": "",
            "Operational_Bottleneck": "Workload Spike",
            "Recommended_Action": "No action needed",
            "Expected_Risk_After_Action": "12",
        },
        {
            "Case_ID": "X9",
            "Predicted_SLA_Risk_%": "90%",
            "Risk_Level": "High",
        },
    ]


@pytest.fixture
def repository(state_rows, insight_rows) -> CaseRepository:
    """Repository joined from the sample rows."""
    return CaseRepository.from_rows(state_rows, insight_rows)


@pytest.fixture
def bottleneck_cases() -> list[Case]:
    """Two high-risk staffing cases and one low-risk case with no bottleneck."""
    return [
        make_case(case_id="B1", operational_bottleneck="Staffing", risk_level=RiskLevel.HIGH, load_index=6.0),
        make_case(case_id="B2", operational_bottleneck="Staffing", risk_level=RiskLevel.HIGH, load_index=4.0),
        make_case(case_id="B3", operational_bottleneck=None, risk_level=RiskLevel.LOW, load_index=1.0),
    ]
