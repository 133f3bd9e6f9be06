"""
Pydantic configuration models for SLA Insights.

These models define the structure and validation for analytics configuration.
"""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DataSourceConfig(BaseModel):
    """Locations of the two CSV extracts joined into cases."""

    state_path: Path = Field(
        default=Path("data/operations_input_state_FINAL.csv"),
        description="CSV of operational case state (one row per case)",
    )
    insights_path: Path = Field(
        default=Path("data/operations_decision_insights_FINAL.csv"),
        description="CSV of AI-derived risk insights (one row per case)",
    )


class ScenarioDefaultsConfig(BaseModel):
    """Starting values for the what-if scenario controls."""

    active_agents: int = Field(
        default=8,
        ge=1,
        le=500,
        description="Agents on shift in the default scenario",
    )
    queue_depth: int = Field(
        default=100,
        ge=0,
        description="Cases waiting in the default scenario",
    )
    automation_level_pct: float = Field(
        default=50.0,
        ge=0,
        le=100,
        description="Share of handling automated in the default scenario (%)",
    )


class ReportingConfig(BaseModel):
    """Sizes used by the summary views."""

    top_actions: int = Field(
        default=5,
        ge=1,
        description="Number of recommended actions listed in the summary",
    )
    scenario_sample_size: int = Field(
        default=10,
        ge=1,
        description="High-risk cases offered for what-if simulation",
    )
    cases_per_group: int = Field(
        default=12,
        ge=1,
        description="Cases shown per recommendation group",
    )


class AnalyticsConfig(BaseSettings):
    """
    Root analytics configuration.

    Values can be loaded from YAML files and overridden via environment variables,
    e.g. ``SLA_INSIGHTS_DATA__STATE_PATH=/tmp/state.csv``.
    """

    data: DataSourceConfig = Field(default_factory=DataSourceConfig)
    scenario: ScenarioDefaultsConfig = Field(default_factory=ScenarioDefaultsConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    model_config = {
        "env_prefix": "SLA_INSIGHTS_",
        "env_nested_delimiter": "__",
    }
