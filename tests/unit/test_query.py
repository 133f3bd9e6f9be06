"""
Unit tests for the query and filter layer.
"""

import pytest
from pydantic import ValidationError

from sla_insights.analytics.query import (
    CaseFilter,
    UnknownFieldError,
    distinct_values,
    filter_cases,
    paginate,
    search_predicate,
    sort_cases,
)
from sla_insights.domain.enums import RiskLevel
from sla_insights.ingest.normalizer import parse_timestamp


@pytest.fixture
def cases(case_factory):
    return [
        case_factory(case_id="A-1", queue_name="tier 2", risk_level=RiskLevel.HIGH, day_of_week=1,
                     arrival_hour=9, predicted_sla_risk=70.0, operational_bottleneck="Staffing"),
        case_factory(case_id="A-2", queue_name="Tier 1", risk_level=RiskLevel.LOW, day_of_week=1,
                     arrival_hour=14, predicted_sla_risk=20.0, recommended_action="Monitor queue"),
        case_factory(case_id="B-3", queue_name="Tier 3", risk_level=RiskLevel.HIGH, day_of_week=5,
                     arrival_hour=9, predicted_sla_risk=95.0, estimated_time_to_breach_minutes=15),
    ]


class TestFilter:
    """Tests for AND-composed filtering."""

    def test_no_filters_keeps_everything(self, cases):
        assert filter_cases(cases, CaseFilter()) == cases
        assert filter_cases(cases) == cases

    def test_filters_are_anded(self, cases):
        result = filter_cases(cases, CaseFilter(risk_level="High", arrival_hour=9, day_of_week=1))

        assert [c.case_id for c in result] == ["A-1"]

    def test_numeric_day_filter(self, cases):
        result = filter_cases(cases, CaseFilter(day_of_week=5))

        assert [c.case_id for c in result] == ["B-3"]

    def test_filter_does_not_mutate_input(self, cases):
        original = list(cases)
        filter_cases(cases, CaseFilter(queue_name="Tier 1"))

        assert cases == original

    def test_out_of_range_hour_rejected(self):
        with pytest.raises(ValidationError):
            CaseFilter(arrival_hour=24)

    def test_matches(self, cases):
        assert CaseFilter(queue_name="Tier 1").matches(cases[1])
        assert not CaseFilter(queue_name="Tier 1").matches(cases[0])


class TestSearch:
    """Tests for free-text search."""

    def test_case_insensitive_substring(self, cases):
        result = filter_cases(cases, CaseFilter(search="STAFF"))

        assert [c.case_id for c in result] == ["A-1"]

    def test_searches_actions_and_ids(self, cases):
        assert [c.case_id for c in filter_cases(cases, CaseFilter(search="monitor"))] == ["A-2"]
        assert [c.case_id for c in filter_cases(cases, CaseFilter(search="b-3"))] == ["B-3"]

    def test_absent_field_never_matches(self, case_factory):
        case = case_factory(case_id="Z", case_type="", queue_name="",
                            operational_bottleneck=None, recommended_action=None)

        assert search_predicate("none")(case) is False

    def test_empty_term_matches_all(self, cases):
        assert all(search_predicate("")(c) for c in cases)


class TestSort:
    """Tests for sorting and listing."""

    def test_sort_numeric_desc(self, cases):
        result = sort_cases(cases, "predicted_sla_risk", "desc")

        assert [c.case_id for c in result] == ["B-3", "A-1", "A-2"]

    def test_sort_strings_case_insensitive(self, cases):
        result = sort_cases(cases, "queue_name")

        assert [c.queue_name for c in result] == ["Tier 1", "tier 2", "Tier 3"]

    def test_absent_values_last_both_directions(self, cases):
        asc = sort_cases(cases, "estimated_time_to_breach_minutes", "asc")
        desc = sort_cases(cases, "estimated_time_to_breach_minutes", "desc")

        assert asc[0].case_id == "B-3"
        assert desc[0].case_id == "B-3"
        assert [c.case_id for c in asc[1:]] == ["A-1", "A-2"]

    def test_sort_returns_new_list(self, cases):
        original = list(cases)
        sort_cases(cases, "case_id", "desc")

        assert cases == original

    def test_unknown_field(self, cases):
        with pytest.raises(UnknownFieldError):
            sort_cases(cases, "priority")

    def test_sort_mixed_timestamp_forms(self, case_factory):
        """Zulu and plain ISO timestamps from the same extract sort together."""
        zulu = case_factory(case_id="Z", timestamp=parse_timestamp("2024-03-04T09:15:00Z"))
        plain = case_factory(case_id="P", timestamp=parse_timestamp("2024-03-04T10:15:00"))
        missing = case_factory(case_id="M", timestamp=None, timestamp_raw="garbage")

        result = sort_cases([plain, missing, zulu], "timestamp", "asc")

        assert [c.case_id for c in result] == ["Z", "P", "M"]

    def test_distinct_values(self, cases):
        assert distinct_values(cases, "day_of_week") == [1, 5]
        assert distinct_values(cases, "operational_bottleneck") == ["Staffing"]


class TestPaginate:
    """Tests for page slicing."""

    def test_pages(self, cases):
        page, pages = paginate(cases, 2, per_page=2)

        assert pages == 2
        assert [c.case_id for c in page] == ["B-3"]

    def test_page_clamped(self, cases):
        page, _ = paginate(cases, 9, per_page=2)

        assert [c.case_id for c in page] == ["B-3"]

    def test_empty(self):
        assert paginate([], 1) == ([], 0)
