"""
Aggregation engine for SLA Insights.

Every grouped view (distributions, root causes, trends, heatmaps) is one call
to ``aggregate`` with a key function, an optional filter and a set of metrics.

Groups are emitted in first-encounter order unless a fixed key domain is
given, in which case every domain key is emitted, in domain order, even when
no case falls into it. Sorting is stable, so ties keep encounter order.
Rates and means over empty groups are 0.
"""

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from sla_insights.domain.case import Case

NONE_LABEL = "None"

KeyFunc = Callable[[Case], Optional[Hashable]]
Predicate = Callable[[Case], bool]
ValueFunc = Callable[[Case], Optional[float]]

COUNT_WHERE = "count_where"
SUM = "sum"
MEAN = "mean"
RATE = "rate"


@dataclass(frozen=True)
class Metric:
    """
    One summary computed per group.

    Build instances with ``count_where``, ``sum_of``, ``mean_of`` and
    ``rate_where`` rather than directly.
    """

    name: str
    kind: str
    value: ValueFunc | None = None
    predicate: Predicate | None = None


def count_where(name: str, predicate: Predicate) -> Metric:
    """Number of cases in the group matching ``predicate``."""
    return Metric(name=name, kind=COUNT_WHERE, predicate=predicate)


def sum_of(name: str, value: ValueFunc) -> Metric:
    """Sum of ``value`` over the group; None values are skipped."""
    return Metric(name=name, kind=SUM, value=value)


def mean_of(name: str, value: ValueFunc) -> Metric:
    """Mean of ``value`` over the cases where it is not None."""
    return Metric(name=name, kind=MEAN, value=value)


def rate_where(name: str, predicate: Predicate) -> Metric:
    """Share of the group matching ``predicate``, as a percentage."""
    return Metric(name=name, kind=RATE, predicate=predicate)


@dataclass
class GroupRow:
    """Result row: a group key, its size and its metric values."""

    key: Any
    count: int = 0
    metrics: dict[str, float] = field(default_factory=dict)
    cases: list[Case] = field(default_factory=list)

    def __getitem__(self, name: str) -> Any:
        if name == "key":
            return self.key
        if name == "count":
            return self.count
        return self.metrics[name]

    def as_dict(self, key_name: str = "key") -> dict[str, Any]:
        """Flatten into a plain mapping for presentation."""
        return {key_name: self.key, "count": self.count, **self.metrics}


class _Accumulator:
    """Running totals for one group."""

    __slots__ = ("count", "matched", "sums", "samples", "cases")

    def __init__(self, metrics: Sequence[Metric]):
        self.count = 0
        self.matched = {m.name: 0 for m in metrics}
        self.sums = {m.name: 0.0 for m in metrics}
        self.samples = {m.name: 0 for m in metrics}
        self.cases: list[Case] = []

    def add(self, case: Case, metrics: Sequence[Metric], collect: bool) -> None:
        self.count += 1
        if collect:
            self.cases.append(case)
        for metric in metrics:
            if metric.predicate is not None:
                if metric.predicate(case):
                    self.matched[metric.name] += 1
            elif metric.value is not None:
                value = metric.value(case)
                if value is not None:
                    self.sums[metric.name] += value
                    self.samples[metric.name] += 1

    def finish(self, key: Any, metrics: Sequence[Metric]) -> GroupRow:
        values: dict[str, float] = {}
        for metric in metrics:
            name = metric.name
            if metric.kind == COUNT_WHERE:
                values[name] = self.matched[name]
            elif metric.kind == RATE:
                values[name] = _ratio(self.matched[name], self.count) * 100
            elif metric.kind == SUM:
                values[name] = self.sums[name]
            elif metric.kind == MEAN:
                values[name] = _ratio(self.sums[name], self.samples[name])
            else:
                raise ValueError(f"Unknown metric kind: {metric.kind}")
        return GroupRow(key=key, count=self.count, metrics=values, cases=self.cases)


def _ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def _check_metric_names(metrics: Sequence[Metric]) -> None:
    names = [m.name for m in metrics]
    reserved = {"key", "count"} & set(names)
    if reserved:
        raise ValueError(f"Metric names clash with row fields: {sorted(reserved)}")
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate metric names: {names}")


def aggregate(
    cases: Iterable[Case],
    key: KeyFunc,
    metrics: Sequence[Metric] = (),
    *,
    where: Predicate | None = None,
    domain: Iterable[Hashable] | None = None,
    sort_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
    collect: bool = False,
) -> list[GroupRow]:
    """
    Group cases and compute metrics per group.

    Args:
        cases: Cases to aggregate
        key: Grouping key per case; None maps to ``NONE_LABEL``
        metrics: Metrics computed for every group
        where: Filter applied before grouping
        domain: Fixed set of keys to pre-seed with zero values; cases whose
            key is outside the domain are ignored
        sort_by: "key", "count" or a metric name; None keeps group order
        descending: Sort direction
        limit: Keep only the first ``limit`` rows after sorting
        collect: Keep the member cases on each row

    Returns:
        List of GroupRow
    """
    _check_metric_names(metrics)

    groups: dict[Hashable, _Accumulator] = {}
    fixed = domain is not None
    if fixed:
        for domain_key in domain:
            groups[domain_key] = _Accumulator(metrics)

    for case in cases:
        if where is not None and not where(case):
            continue
        group_key = key(case)
        if group_key is None:
            group_key = NONE_LABEL
        acc = groups.get(group_key)
        if acc is None:
            if fixed:
                continue
            acc = groups[group_key] = _Accumulator(metrics)
        acc.add(case, metrics, collect)

    rows = [acc.finish(group_key, metrics) for group_key, acc in groups.items()]

    if sort_by is not None:
        rows = sorted(rows, key=lambda row: row[sort_by], reverse=descending)

    if limit is not None:
        rows = top_n(rows, limit)

    return rows


def summarize(
    cases: Iterable[Case],
    metrics: Sequence[Metric] = (),
    *,
    where: Predicate | None = None,
) -> GroupRow:
    """Compute metrics over all cases as a single group."""
    rows = aggregate(cases, lambda _: "all", metrics, where=where, domain=["all"])
    return rows[0]


def distribution(
    cases: Iterable[Case],
    key: KeyFunc,
    *,
    where: Predicate | None = None,
    by_count: bool = False,
) -> list[tuple[Any, int]]:
    """
    Count cases per key.

    Args:
        cases: Cases to count
        key: Category per case; None maps to ``NONE_LABEL``
        where: Filter applied before counting
        by_count: Order by count descending instead of encounter order

    Returns:
        List of (key, count)
    """
    rows = aggregate(
        cases,
        key,
        where=where,
        sort_by="count" if by_count else None,
        descending=by_count,
    )
    return [(row.key, row.count) for row in rows]


def top_n(rows: Sequence[Any], n: int) -> list[Any]:
    """First ``n`` entries of an already sorted result."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return list(rows[:n])
