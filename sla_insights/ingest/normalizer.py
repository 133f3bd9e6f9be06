"""
Case normalizer for SLA Insights.

Turns one state row and its matching insight row (both string-keyed maps from
the CSV reader) into a typed Case. Numeric fields never fail a row: values that
do not parse fall back to zero. Rows that cannot form a Case at all are dropped
and counted in a NormalizationReport.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog

from sla_insights.domain.case import Case
from sla_insights.domain.enums import RiskLevel

logger = structlog.get_logger()

Row = Mapping[str, str]

CASE_ID = "Case_ID"

# Percentage columns arrive as "<name>_%" from the export, or with the "%"
# stripped by some CSV tooling.
PREDICTED_RISK_FIELDS = ("Predicted_SLA_Risk_%", "Predicted_SLA_Risk_", "Predicted_SLA_Risk")
EXPECTED_RISK_FIELDS = (
    "Expected_Risk_After_Action_%",
    "Expected_Risk_After_Action_",
    "Expected_Risk_After_Action",
)

BREACH_NOT_APPLICABLE = "NA"


@dataclass
class NormalizationReport:
    """Counts of what happened to the source rows during a join."""

    state_rows: int = 0
    insight_rows: int = 0
    cases: int = 0
    missing_case_id: int = 0
    unmatched_state: int = 0
    unmatched_insight: int = 0
    duplicate_case_id: int = 0
    insight_duplicate_case_id: int = 0
    unknown_risk_level: int = 0

    @property
    def dropped(self) -> int:
        """State rows that did not become a Case."""
        return self.state_rows - self.cases

    def as_dict(self) -> dict[str, int]:
        return {
            "state_rows": self.state_rows,
            "insight_rows": self.insight_rows,
            "cases": self.cases,
            "missing_case_id": self.missing_case_id,
            "unmatched_state": self.unmatched_state,
            "unmatched_insight": self.unmatched_insight,
            "duplicate_case_id": self.duplicate_case_id,
            "insight_duplicate_case_id": self.insight_duplicate_case_id,
            "unknown_risk_level": self.unknown_risk_level,
        }


def _text(row: Row, field: str) -> str:
    value = row.get(field)
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(row: Row, field: str) -> Optional[str]:
    return _text(row, field) or None


def _first_present(row: Row, fields: Iterable[str]) -> str:
    """Return the first non-empty value among alias column names."""
    for field in fields:
        value = _text(row, field)
        if value:
            return value
    return ""


def parse_float(value: str | None, default: float = 0.0) -> float:
    """
    Parse a float, falling back to a default for anything unusable.

    Args:
        value: Raw text from the source row
        default: Value returned for missing, unparsable or non-finite input

    Returns:
        Parsed float or the default
    """
    if value is None:
        return default
    text = str(value).strip()
    # float() reads "1_000" as 1000.0
    if "_" in text:
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    if not math.isfinite(number):
        return default
    return number


def parse_int(value: str | None, default: int = 0) -> int:
    """
    Parse a non-negative integer, truncating decimal text.

    Negative and unparsable values fall back to the default.
    """
    number = parse_float(value, default=float("nan"))
    if math.isnan(number) or number < 0:
        return default
    return int(number)


def parse_percentage(value: str | None) -> float:
    """Parse a percentage that may carry a trailing '%'."""
    if value is None:
        return 0.0
    text = str(value).strip()
    if text.endswith("%"):
        text = text[:-1]
    return parse_float(text, default=0.0)


def parse_breach_minutes(value: str | None) -> Optional[int]:
    """
    Parse the estimated time to breach.

    The literal "NA" and empty values mean no breach is imminent; anything else
    that does not parse is treated the same way.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == BREACH_NOT_APPLICABLE:
        return None
    number = parse_float(text, default=float("nan"))
    if math.isnan(number) or number < 0:
        return None
    return int(number)


def parse_timestamp(value: str | None) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp, accepting a trailing 'Z'.

    Offset-qualified values are converted to UTC and returned naive, so every
    parsed timestamp compares with every other.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class CaseNormalizer:
    """
    Builds typed Case records from raw state and insight rows.

    Usage:
        normalizer = CaseNormalizer()
        case = normalizer.normalize(state_row, insight_row)
        cases, report = normalizer.join(state_rows, insight_rows)
    """

    def normalize(self, state: Row, insight: Row | None) -> Case | None:
        """
        Convert one state row and its insight row into a Case.

        Args:
            state: Operational attributes for the case
            insight: Risk attributes sharing the same Case_ID, or None

        Returns:
            The Case, or None when the pair cannot form one (no insight,
            no case id, or a risk level outside High/Medium/Low)
        """
        if insight is None:
            return None

        case_id = _text(state, CASE_ID)
        if not case_id:
            return None

        risk_level = RiskLevel.parse(_text(insight, "Risk_Level"))
        if risk_level is None:
            return None

        timestamp_raw = _text(state, "Timestamp")

        return Case(
            case_id=case_id,
            case_type=_text(state, "Case_Type"),
            queue_name=_text(state, "Queue_Name"),
            timestamp=parse_timestamp(timestamp_raw),
            timestamp_raw=timestamp_raw,
            arrival_hour=parse_int(_text(state, "Arrival_Hour")),
            day_of_week=parse_int(_text(state, "Day_Of_Week")),
            sla_limit_minutes=parse_int(_text(state, "SLA_Limit_Mins")),
            queue_depth=parse_int(_text(state, "Queue_Depth")),
            active_agents=parse_int(_text(state, "Active_Agents")),
            avg_handle_time_minutes=parse_int(_text(state, "Avg_Handle_Time_Mins")),
            complexity_score=parse_float(_text(state, "Complexity_Score")),
            load_index=parse_float(_text(state, "Load_Index")),
            agent_skill_level=_optional_text(state, "Agent_Skill_Level"),
            automation_level=_optional_text(state, "Automation_Level"),
            predicted_sla_risk=parse_percentage(_first_present(insight, PREDICTED_RISK_FIELDS)),
            risk_level=risk_level,
            estimated_time_to_breach_minutes=parse_breach_minutes(
                _text(insight, "Estimated_Time_To_Breach_Mins")
            ),
            operational_bottleneck=_optional_text(insight, "Operational_Bottleneck"),
            recommended_action=_optional_text(insight, "Recommended_Action"),
            expected_risk_after_action=parse_percentage(
                _first_present(insight, EXPECTED_RISK_FIELDS)
            ),
        )

    def join(
        self,
        state_rows: Iterable[Row],
        insight_rows: Iterable[Row],
    ) -> tuple[list[Case], NormalizationReport]:
        """
        Inner-join state rows to insight rows on Case_ID.

        State row order is preserved. The first insight row wins for a
        repeated id, and a repeated state id is dropped after its first
        occurrence.

        Args:
            state_rows: Operational rows
            insight_rows: Insight rows

        Returns:
            Tuple of (cases, report)
        """
        report = NormalizationReport()

        insights_by_id: dict[str, Row] = {}
        for row in insight_rows:
            report.insight_rows += 1
            case_id = _text(row, CASE_ID)
            if not case_id:
                continue
            if case_id in insights_by_id:
                report.insight_duplicate_case_id += 1
                continue
            insights_by_id[case_id] = row

        cases: list[Case] = []
        seen: set[str] = set()
        matched_ids: set[str] = set()

        for row in state_rows:
            report.state_rows += 1
            case_id = _text(row, CASE_ID)
            if not case_id:
                report.missing_case_id += 1
                continue
            if case_id in seen:
                report.duplicate_case_id += 1
                continue
            seen.add(case_id)

            insight = insights_by_id.get(case_id)
            if insight is None:
                report.unmatched_state += 1
                continue
            matched_ids.add(case_id)

            case = self.normalize(row, insight)
            if case is None:
                report.unknown_risk_level += 1
                logger.debug(
                    "unknown_risk_level",
                    case_id=case_id,
                    risk_level=_text(insight, "Risk_Level"),
                )
                continue
            cases.append(case)

        report.cases = len(cases)
        report.unmatched_insight = len(insights_by_id.keys() - matched_ids)

        logger.info(
            "cases_normalized",
            cases=report.cases,
            state_rows=report.state_rows,
            insight_rows=report.insight_rows,
        )
        if report.dropped or report.unmatched_insight or report.insight_duplicate_case_id:
            logger.warning("rows_dropped", **report.as_dict())

        return cases, report
