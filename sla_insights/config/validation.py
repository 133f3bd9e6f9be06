"""
Configuration validation for SLA Insights.

Provides additional validation beyond Pydantic model validation.
"""

import structlog

from sla_insights.config.models import AnalyticsConfig

logger = structlog.get_logger()


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def validate_config(config: AnalyticsConfig) -> list[str]:
    """
    Validate analytics configuration.

    Performs checks beyond what Pydantic models provide, such as
    cross-field validation and data file availability.

    Args:
        config: AnalyticsConfig to validate

    Returns:
        List of warning messages (non-fatal issues)

    Raises:
        ConfigurationError: If configuration has fatal issues
    """
    warnings: list[str] = []
    errors: list[str] = []

    state_path = config.data.state_path
    insights_path = config.data.insights_path

    if state_path.resolve() == insights_path.resolve():
        errors.append(
            f"State and insights sources point at the same file: {state_path}"
        )

    for label, path in (("state", state_path), ("insights", insights_path)):
        if not path.exists():
            warnings.append(f"The {label} data file does not exist: {path}")
        elif not path.is_file():
            errors.append(f"The {label} data path is not a file: {path}")

    if config.reporting.scenario_sample_size > 100:
        warnings.append(
            f"scenario_sample_size ({config.reporting.scenario_sample_size}) is large; "
            "every sampled case is simulated on each parameter change."
        )

    for warning in warnings:
        logger.warning("config_validation_warning", message=warning)

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return warnings
