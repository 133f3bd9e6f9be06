"""
Case repository for SLA Insights.

Holds the normalized cases for one loaded dataset. A repository is built once
and only read afterwards; loading new data means building a new repository.
"""

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

import structlog

from sla_insights.domain.case import Case
from sla_insights.ingest.normalizer import CaseNormalizer, NormalizationReport
from sla_insights.ingest.reader import read_rows

logger = structlog.get_logger()


class CaseNotFoundError(KeyError):
    """Raised when a case id is not in the repository."""

    pass


class CaseRepository:
    """
    Read-only collection of cases in source order.

    Usage:
        repository = CaseRepository.from_rows(state_rows, insight_rows)
        for case in repository.all():
            ...
        case = repository.get("CASE-0001")
    """

    def __init__(
        self,
        cases: Iterable[Case],
        report: NormalizationReport | None = None,
    ):
        """
        Initialize the repository.

        Args:
            cases: Normalized cases with unique ids
            report: How the source rows were joined, if known
        """
        self._cases: tuple[Case, ...] = tuple(cases)
        self._by_id: dict[str, Case] = {}
        for case in self._cases:
            if case.case_id in self._by_id:
                raise ValueError(f"Duplicate case_id in repository: {case.case_id}")
            self._by_id[case.case_id] = case
        self.report = report or NormalizationReport(
            state_rows=len(self._cases),
            insight_rows=len(self._cases),
            cases=len(self._cases),
        )

    @classmethod
    def from_rows(
        cls,
        state_rows: Iterable[Mapping[str, str]],
        insight_rows: Iterable[Mapping[str, str]],
        normalizer: CaseNormalizer | None = None,
    ) -> "CaseRepository":
        """Join raw rows into a repository."""
        normalizer = normalizer or CaseNormalizer()
        cases, report = normalizer.join(state_rows, insight_rows)
        return cls(cases, report)

    def all(self) -> tuple[Case, ...]:
        """All cases in insertion order."""
        return self._cases

    def get(self, case_id: str) -> Case:
        """
        Look up a case by id.

        Raises:
            CaseNotFoundError: If no case has this id
        """
        try:
            return self._by_id[case_id]
        except KeyError:
            raise CaseNotFoundError(case_id) from None

    def __contains__(self, case_id: object) -> bool:
        return case_id in self._by_id

    def __iter__(self) -> Iterator[Case]:
        return iter(self._cases)

    def __len__(self) -> int:
        return len(self._cases)


def load_repository(state_path: str | Path, insights_path: str | Path) -> CaseRepository:
    """
    Read both extracts from disk and build a repository.

    Args:
        state_path: CSV of operational case state
        insights_path: CSV of risk insights

    Returns:
        Loaded CaseRepository
    """
    state_rows = read_rows(state_path)
    insight_rows = read_rows(insights_path)
    repository = CaseRepository.from_rows(state_rows, insight_rows)
    logger.info(
        "repository_loaded",
        cases=len(repository),
        state_path=str(state_path),
        insights_path=str(insights_path),
    )
    return repository
