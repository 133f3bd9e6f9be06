"""
Configuration module for SLA Insights.

This module provides:
- Pydantic configuration models
- YAML configuration loading
- Configuration validation
"""

from sla_insights.config.models import (
    AnalyticsConfig,
    DataSourceConfig,
    ScenarioDefaultsConfig,
    ReportingConfig,
)
from sla_insights.config.loader import load_config
from sla_insights.config.validation import ConfigurationError, validate_config

__all__ = [
    "AnalyticsConfig",
    "DataSourceConfig",
    "ScenarioDefaultsConfig",
    "ReportingConfig",
    "ConfigurationError",
    "load_config",
    "validate_config",
]
