"""
Analytics for SLA Insights.

Provides the aggregation engine, the views built on it, and case filtering.
"""

from sla_insights.analytics.engine import (
    NONE_LABEL,
    GroupRow,
    Metric,
    aggregate,
    count_where,
    distribution,
    mean_of,
    rate_where,
    sum_of,
    summarize,
    top_n,
)
from sla_insights.analytics.query import (
    CaseFilter,
    UnknownFieldError,
    distinct_values,
    filter_cases,
    paginate,
    search_predicate,
    sort_cases,
)
from sla_insights.analytics import views

__all__ = [
    "NONE_LABEL",
    "GroupRow",
    "Metric",
    "aggregate",
    "count_where",
    "distribution",
    "mean_of",
    "rate_where",
    "sum_of",
    "summarize",
    "top_n",
    "CaseFilter",
    "UnknownFieldError",
    "distinct_values",
    "filter_cases",
    "paginate",
    "search_predicate",
    "sort_cases",
    "views",
]
