"""
Query and filter layer for SLA Insights.

Pure functions over case sequences: nothing here mutates its input.
"""

import math
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from sla_insights.domain.case import Case
from sla_insights.domain.enums import RiskLevel, SortDirection

SEARCH_FIELDS = (
    "case_id",
    "case_type",
    "queue_name",
    "operational_bottleneck",
    "recommended_action",
)

CASE_FIELDS = frozenset(Case.model_fields)


class UnknownFieldError(ValueError):
    """Raised for a field name Case does not have."""

    pass


class CaseFilter(BaseModel):
    """
    Active filters; every set field must match (logical AND).

    Unset fields do not filter. ``search`` is a case-insensitive substring
    match against the id, type, queue, bottleneck and action fields.
    """

    model_config = ConfigDict(frozen=True)

    queue_name: Optional[str] = None
    case_type: Optional[str] = None
    risk_level: Optional[RiskLevel] = None
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    arrival_hour: Optional[int] = Field(default=None, ge=0, le=23)
    operational_bottleneck: Optional[str] = None
    agent_skill_level: Optional[str] = None
    automation_level: Optional[str] = None
    search: Optional[str] = None

    def predicates(self) -> list[Callable[[Case], bool]]:
        """One predicate per active filter."""
        checks: list[Callable[[Case], bool]] = []
        for name in (
            "queue_name",
            "case_type",
            "risk_level",
            "day_of_week",
            "arrival_hour",
            "operational_bottleneck",
            "agent_skill_level",
            "automation_level",
        ):
            wanted = getattr(self, name)
            if wanted is not None:
                checks.append(_equals(name, wanted))
        if self.search:
            checks.append(search_predicate(self.search))
        return checks

    def matches(self, case: Case) -> bool:
        return all(check(case) for check in self.predicates())


def _equals(name: str, wanted: Any) -> Callable[[Case], bool]:
    return lambda case: getattr(case, name) == wanted


def search_predicate(term: str) -> Callable[[Case], bool]:
    """
    Case-insensitive substring match across the searchable fields.

    An absent field never matches; an empty term matches everything.
    """
    needle = term.lower()

    def matches(case: Case) -> bool:
        if not needle:
            return True
        for name in SEARCH_FIELDS:
            value = getattr(case, name)
            if value is not None and needle in value.lower():
                return True
        return False

    return matches


def filter_cases(cases: Iterable[Case], case_filter: CaseFilter | None = None) -> list[Case]:
    """
    Apply all active filters, preserving order.

    Args:
        cases: Cases to filter
        case_filter: Active filters; None or an empty filter keeps every case

    Returns:
        New list of matching cases
    """
    checks = case_filter.predicates() if case_filter is not None else []
    return [case for case in cases if all(check(case) for check in checks)]


def _check_field(field: str) -> None:
    if field not in CASE_FIELDS:
        raise UnknownFieldError(f"Case has no field {field!r}")


def _sort_value(value: Any) -> Any:
    if isinstance(value, RiskLevel):
        return value.value.lower()
    if isinstance(value, str):
        return value.lower()
    return value


def sort_cases(
    cases: Iterable[Case],
    field: str,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[Case]:
    """
    Sort cases by one field.

    Strings compare case-insensitively. Absent values go last in either
    direction. Equal values keep their input order.

    Raises:
        UnknownFieldError: If ``field`` is not a Case field
    """
    _check_field(field)
    descending = SortDirection(direction) is SortDirection.DESC

    present: list[Case] = []
    absent: list[Case] = []
    for case in cases:
        (absent if getattr(case, field) is None else present).append(case)

    present.sort(key=lambda c: _sort_value(getattr(c, field)), reverse=descending)
    return present + absent


def distinct_values(cases: Iterable[Case], field: str) -> list[Any]:
    """Sorted unique non-absent values of a field, for filter options."""
    _check_field(field)
    values = {getattr(case, field) for case in cases}
    values.discard(None)
    return sorted(values, key=_sort_value)


def paginate(cases: Sequence[Case], page: int, per_page: int = 20) -> tuple[list[Case], int]:
    """
    Slice one page out of a case sequence.

    Args:
        cases: Full, already filtered and sorted sequence
        page: 1-based page number; clamped to the valid range
        per_page: Page size

    Returns:
        Tuple of (cases on the page, total page count)
    """
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")
    pages = math.ceil(len(cases) / per_page)
    page = min(max(page, 1), max(pages, 1))
    start = (page - 1) * per_page
    return list(cases[start:start + per_page]), pages
