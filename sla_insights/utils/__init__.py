"""
Utility modules for SLA Insights.

Provides:
- Structured logging configuration
"""

from sla_insights.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
