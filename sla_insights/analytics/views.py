"""
Named analytics views for SLA Insights.

Each view is a thin configuration of the aggregation engine: a key function,
a metric set and an ordering. Results are GroupRow lists (or small dicts for
single-figure summaries) ready for the presentation layer.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Any

from sla_insights.analytics.engine import (
    NONE_LABEL,
    GroupRow,
    aggregate,
    count_where,
    distribution,
    mean_of,
    rate_where,
    summarize,
    top_n,
)
from sla_insights.domain.case import NO_ACTION_LABEL, Case
from sla_insights.domain.enums import ActionGroupBy, RiskLevel, Weekday

HOURS = range(24)
WEEKDAYS = range(7)


def _is_high(case: Case) -> bool:
    return case.risk_level is RiskLevel.HIGH


def _is_medium(case: Case) -> bool:
    return case.risk_level is RiskLevel.MEDIUM


def _is_low(case: Case) -> bool:
    return case.risk_level is RiskLevel.LOW


def _predicted_risk(case: Case) -> float:
    return case.predicted_sla_risk


def _action_label(case: Case) -> str:
    return case.recommended_action or NO_ACTION_LABEL


def complexity_bucket(score: float) -> float:
    """Bucket a complexity score at 0.1 resolution (floor)."""
    return math.floor(score * 10) / 10


LEVEL_COUNTS = (
    count_where("high_risk", _is_high),
    count_where("medium_risk", _is_medium),
    count_where("low_risk", _is_low),
)


# ---------------------------------------------------------------------------
# Headline figures
# ---------------------------------------------------------------------------


def kpi_summary(cases: Iterable[Case]) -> dict[str, Any]:
    """
    Headline counts for the executive dashboard.

    Returns:
        Dict with total, high/medium/low counts and the mean estimated time to
        breach over cases that have one
    """
    row = summarize(
        cases,
        [
            *LEVEL_COUNTS,
            mean_of("avg_time_to_breach", lambda c: c.estimated_time_to_breach_minutes),
        ],
    )
    return {
        "total": row.count,
        "high": int(row["high_risk"]),
        "medium": int(row["medium_risk"]),
        "low": int(row["low_risk"]),
        "avg_time_to_breach": row["avg_time_to_breach"],
    }


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------


def risk_level_distribution(cases: Iterable[Case]) -> list[tuple[str, int]]:
    return [
        (level.value, n)
        for level, n in distribution(cases, lambda c: c.risk_level)
    ]


def bottleneck_distribution(cases: Iterable[Case]) -> list[tuple[str, int]]:
    return distribution(cases, lambda c: c.operational_bottleneck)


def case_type_distribution(cases: Iterable[Case]) -> list[tuple[str, int]]:
    return distribution(cases, lambda c: c.case_type)


def action_distribution(cases: Iterable[Case]) -> list[tuple[str, int]]:
    return distribution(cases, _action_label)


def top_actions(cases: Iterable[Case], n: int = 5) -> list[tuple[str, int]]:
    """Most frequently recommended actions."""
    return top_n(distribution(cases, _action_label, by_count=True), n)


# ---------------------------------------------------------------------------
# Bottlenecks and complexity
# ---------------------------------------------------------------------------


def root_cause_summary(cases: Iterable[Case]) -> list[GroupRow]:
    """
    Cases per bottleneck with their high-risk share and mean load.

    Rows carry ``high_risk_count``, ``high_risk_pct`` and ``avg_load_index``,
    ordered by high-risk count descending.
    """
    return aggregate(
        cases,
        lambda c: c.operational_bottleneck,
        [
            count_where("high_risk_count", _is_high),
            rate_where("high_risk_pct", _is_high),
            mean_of("avg_load_index", lambda c: c.load_index),
        ],
        sort_by="high_risk_count",
        descending=True,
    )


def bottleneck_focus(cases: Sequence[Case], fragment: str) -> dict[str, Any] | None:
    """
    Root-cause row for the first bottleneck whose name contains ``fragment``.

    Adds ``share_of_high_risk``: the percentage of all high-risk cases that
    fall under this bottleneck. Returns None when no bottleneck matches.
    """
    rows = root_cause_summary(cases)
    match = next((r for r in rows if fragment in str(r.key)), None)
    if match is None:
        return None
    total_high = sum(1 for c in cases if _is_high(c))
    share = match["high_risk_count"] / total_high * 100 if total_high else 0.0
    return {**match.as_dict("bottleneck"), "share_of_high_risk": share}


def complexity_risk(cases: Iterable[Case]) -> list[GroupRow]:
    """High-risk rate per 0.1 complexity bucket, ascending by bucket."""
    return aggregate(
        cases,
        lambda c: complexity_bucket(c.complexity_score),
        [
            count_where("high_risk_count", _is_high),
            rate_where("risk_rate", _is_high),
        ],
        sort_by="key",
    )


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


def daily_trend(cases: Iterable[Case]) -> list[GroupRow]:
    """
    Risk mix per calendar day of arrival, ascending by date.

    Cases whose timestamp did not parse are left out of this view only.
    """
    return aggregate(
        cases,
        lambda c: c.timestamp.date(),
        [*LEVEL_COUNTS, mean_of("avg_risk", _predicted_risk)],
        where=lambda c: c.timestamp is not None,
        sort_by="key",
    )


def _profile_metrics():
    return [
        count_where("high_risk", _is_high),
        mean_of("avg_risk", _predicted_risk),
        rate_where("risk_rate", _is_high),
    ]


def hourly_profile(cases: Iterable[Case]) -> list[GroupRow]:
    """Exactly 24 rows, one per arrival hour, including empty hours."""
    return aggregate(cases, lambda c: c.arrival_hour, _profile_metrics(), domain=HOURS)


def weekday_profile(cases: Iterable[Case]) -> list[GroupRow]:
    """Exactly 7 rows, Sunday first; each row also carries ``day`` (name)."""
    rows = aggregate(cases, lambda c: c.day_of_week, _profile_metrics(), domain=WEEKDAYS)
    for row in rows:
        row.metrics["day"] = Weekday(row.key).label
    return rows


def _peak(rows: Sequence[GroupRow]) -> GroupRow | None:
    best = None
    for row in rows:
        if best is None or row["avg_risk"] > best["avg_risk"]:
            best = row
    return best


# ---------------------------------------------------------------------------
# Case types and recommendations
# ---------------------------------------------------------------------------


def case_type_risk(cases: Iterable[Case]) -> list[GroupRow]:
    """Risk heatmap per case type, highest mean risk first."""
    return aggregate(
        cases,
        lambda c: c.case_type,
        [
            *LEVEL_COUNTS,
            mean_of("avg_risk", _predicted_risk),
            rate_where("high_risk_rate", _is_high),
        ],
        sort_by="avg_risk",
        descending=True,
    )


_GROUP_KEYS = {
    ActionGroupBy.QUEUE: lambda c: c.queue_name,
    ActionGroupBy.RISK: lambda c: c.risk_level.value,
    ActionGroupBy.BOTTLENECK: lambda c: c.operational_bottleneck,
    ActionGroupBy.ACTION: _action_label,
}


def recommendation_groups(
    cases: Iterable[Case],
    group_by: ActionGroupBy | str = ActionGroupBy.QUEUE,
    risk_level: RiskLevel | str | None = None,
) -> list[GroupRow]:
    """
    Group cases for the recommendations planner.

    Each row keeps its cases (highest predicted risk first) and carries
    ``high_risk`` and ``avg_risk_reduction``. Rows are ordered by high-risk
    count descending.

    Args:
        cases: Cases to group
        group_by: queue, risk, bottleneck or action
        risk_level: Only include cases at this risk level
    """
    group_by = ActionGroupBy(group_by)
    level = RiskLevel(risk_level) if risk_level is not None else None

    rows = aggregate(
        cases,
        _GROUP_KEYS[group_by],
        [
            count_where("high_risk", _is_high),
            mean_of("avg_risk_reduction", lambda c: c.expected_risk_reduction),
        ],
        where=(lambda c: c.risk_level is level) if level is not None else None,
        sort_by="high_risk",
        descending=True,
        collect=True,
    )
    for row in rows:
        row.cases.sort(key=_predicted_risk, reverse=True)
    return rows


def action_coverage(cases: Iterable[Case]) -> dict[str, Any]:
    """How many cases have an action, and what it is expected to achieve."""
    row = summarize(
        cases,
        [
            count_where("with_action", lambda c: c.has_action),
            count_where("high_risk_with_action", lambda c: c.has_action and _is_high(c)),
            mean_of(
                "avg_risk_reduction",
                lambda c: c.expected_risk_reduction if c.has_action else None,
            ),
        ],
    )
    with_action = int(row["with_action"])
    return {
        "with_action": with_action,
        "high_risk_with_action": int(row["high_risk_with_action"]),
        "avg_risk_reduction": row["avg_risk_reduction"],
        "without_action": row.count - with_action,
    }


def key_insights(cases: Sequence[Case]) -> dict[str, Any]:
    """
    Narrative figures for the reports page.

    Peak hour and day are the buckets with the highest mean predicted risk
    (the earliest wins a tie); the top bottleneck is the most frequent one.
    """
    overall = summarize(cases, [count_where("high_risk", _is_high), mean_of("avg_risk", _predicted_risk)])
    peak_hour = _peak(hourly_profile(cases))
    peak_day = _peak(weekday_profile(cases))
    bottlenecks = distribution(cases, lambda c: c.operational_bottleneck, by_count=True)

    return {
        "total_cases": overall.count,
        "high_risk_cases": int(overall["high_risk"]),
        "high_risk_pct": overall["high_risk"] / overall.count * 100 if overall.count else 0.0,
        "avg_risk": overall["avg_risk"],
        "peak_hour": peak_hour.key if peak_hour else None,
        "peak_day": peak_day["day"] if peak_day else None,
        "top_bottleneck": bottlenecks[0][0] if bottlenecks else NONE_LABEL,
    }
