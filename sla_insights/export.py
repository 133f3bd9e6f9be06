"""
Report export for SLA Insights.

Formats cases as flat string rows for CSV reports: percentages to one
decimal place, absent values as "N/A".
"""

from collections.abc import Iterable
from pathlib import Path

import pandas as pd
import structlog

from sla_insights.domain.case import Case

logger = structlog.get_logger()

MISSING = "N/A"

EXPORT_COLUMNS = [
    "Case ID",
    "Case Type",
    "Queue",
    "Timestamp",
    "SLA Limit (min)",
    "Queue Depth",
    "Active Agents",
    "Load Index",
    "Complexity",
    "Predicted Risk %",
    "Risk Level",
    "Time to Breach (min)",
    "Bottleneck",
    "Recommended Action",
    "Expected Risk After Action %",
    "Risk Reduction %",
]


def _pct(value: float) -> str:
    return f"{value:.1f}"


def _or_missing(value: object) -> str:
    return MISSING if value is None else str(value)


def export_row(case: Case) -> dict[str, str]:
    """One case as an ordered row of display strings."""
    values = [
        case.case_id,
        case.case_type,
        case.queue_name,
        case.timestamp.isoformat() if case.timestamp else case.timestamp_raw or MISSING,
        str(case.sla_limit_minutes),
        str(case.queue_depth),
        str(case.active_agents),
        f"{case.load_index:.2f}",
        f"{case.complexity_score:.2f}",
        _pct(case.predicted_sla_risk),
        case.risk_level.value,
        _or_missing(case.estimated_time_to_breach_minutes),
        _or_missing(case.operational_bottleneck),
        _or_missing(case.recommended_action),
        _pct(case.expected_risk_after_action),
        _pct(case.expected_risk_reduction),
    ]
    return dict(zip(EXPORT_COLUMNS, values))


def export_rows(cases: Iterable[Case], actionable_only: bool = False) -> list[dict[str, str]]:
    """
    Format cases for export.

    Args:
        cases: Cases to export
        actionable_only: Keep only cases with a recommended action

    Returns:
        List of rows keyed by EXPORT_COLUMNS
    """
    return [export_row(c) for c in cases if c.has_action or not actionable_only]


def write_csv(rows: list[dict[str, str]], path: str | Path) -> Path:
    """Write export rows to a CSV file, header included even when empty."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=EXPORT_COLUMNS).to_csv(path, index=False)
    logger.info("report_exported", path=str(path), rows=len(rows))
    return path
