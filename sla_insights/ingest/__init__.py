"""
Ingestion for SLA Insights.

Reads the raw extracts and normalizes them into typed cases.
"""

from sla_insights.ingest.normalizer import (
    CaseNormalizer,
    NormalizationReport,
    parse_breach_minutes,
    parse_float,
    parse_int,
    parse_percentage,
    parse_timestamp,
)
from sla_insights.ingest.reader import read_rows

__all__ = [
    "CaseNormalizer",
    "NormalizationReport",
    "parse_breach_minutes",
    "parse_float",
    "parse_int",
    "parse_percentage",
    "parse_timestamp",
    "read_rows",
]
