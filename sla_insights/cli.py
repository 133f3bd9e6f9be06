"""
Command-line interface for SLA Insights.

Provides commands for summarising a dataset, inspecting bottlenecks and
trends, running what-if simulations and exporting reports.
"""

import sys

import click
import structlog

from sla_insights.analytics import views
from sla_insights.config import AnalyticsConfig, load_config, validate_config
from sla_insights.domain.case import NO_ACTION_LABEL
from sla_insights.domain.enums import ActionGroupBy, RiskLevel
from sla_insights.domain.scenario import ScenarioParameters
from sla_insights.export import export_rows, write_csv
from sla_insights.repository import CaseNotFoundError, CaseRepository, load_repository
from sla_insights.simulation import (
    ActionAdvisor,
    InvalidScenarioParameters,
    action_confidence,
    compare_options,
    scenario_sample,
    simulate as simulate_case,
)
from sla_insights.utils.logging import configure_logging


logger = structlog.get_logger()


def _load(ctx: click.Context) -> tuple[AnalyticsConfig, CaseRepository]:
    """Load configuration and the case repository for a command."""
    overrides: dict = {}
    if ctx.obj.get("state_path"):
        overrides.setdefault("data", {})["state_path"] = ctx.obj["state_path"]
    if ctx.obj.get("insights_path"):
        overrides.setdefault("data", {})["insights_path"] = ctx.obj["insights_path"]

    config = load_config(ctx.obj.get("config_path"), override_values=overrides)
    for warning in validate_config(config):
        click.echo(f"Warning: {warning}", err=True)

    repository = load_repository(config.data.state_path, config.data.insights_path)
    report = repository.report
    if report.dropped or report.unmatched_insight:
        click.echo(
            f"Warning: {report.dropped} state rows and {report.unmatched_insight} "
            "insight rows could not be joined",
            err=True,
        )
    return config, repository


def _fail(error: Exception, event: str) -> None:
    logger.exception(event, error=str(error))
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--state",
    type=click.Path(),
    help="Override the state CSV path",
)
@click.option(
    "--insights",
    type=click.Path(),
    help="Override the insights CSV path",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Output logs as JSON",
)
@click.pass_context
def main(ctx, config, state, insights, verbose, json_logs):
    """SLA risk analytics for service queues."""
    ctx.ensure_object(dict)

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(level=log_level, json_output=json_logs)

    ctx.obj["config_path"] = config
    ctx.obj["state_path"] = state
    ctx.obj["insights_path"] = insights


@main.command()
@click.pass_context
def summary(ctx):
    """Headline KPIs, distributions and top actions."""
    try:
        config, repository = _load(ctx)
        cases = repository.all()

        kpis = views.kpi_summary(cases)
        click.echo("=== SLA Risk Summary ===")
        click.echo(f"Total cases: {kpis['total']:,}")
        click.echo(f"  High: {kpis['high']:,}")
        click.echo(f"  Medium: {kpis['medium']:,}")
        click.echo(f"  Low: {kpis['low']:,}")
        click.echo(f"Avg time to breach: {round(kpis['avg_time_to_breach'])} min")

        click.echo("\nBottlenecks:")
        for name, count in views.bottleneck_distribution(cases):
            click.echo(f"  {name}: {count:,}")

        click.echo("\nTop recommended actions:")
        for action, count in views.top_actions(cases, config.reporting.top_actions):
            click.echo(f"  {action}: {count:,}")

        coverage = views.action_coverage(cases)
        click.echo(
            f"\nCases with an action: {coverage['with_action']:,} "
            f"(avg expected reduction {coverage['avg_risk_reduction']:.1f}%)"
        )
    except Exception as e:
        _fail(e, "summary_failed")


@main.command("root-causes")
@click.pass_context
def root_causes(ctx):
    """High-risk attribution by bottleneck and complexity."""
    try:
        _, repository = _load(ctx)
        cases = repository.all()

        click.echo("=== Root Causes ===")
        for row in views.root_cause_summary(cases):
            click.echo(
                f"  {row.key}: {row.count:,} cases, "
                f"{int(row['high_risk_count']):,} high risk ({row['high_risk_pct']:.1f}%), "
                f"avg load {row['avg_load_index']:.2f}"
            )

        click.echo("\nRisk by complexity:")
        for row in views.complexity_risk(cases):
            click.echo(f"  {row.key:.1f}: {row.count:,} cases, {row['risk_rate']:.1f}% high risk")
    except Exception as e:
        _fail(e, "root_causes_failed")


@main.command()
@click.pass_context
def trends(ctx):
    """Daily trend and peak hours/days."""
    try:
        _, repository = _load(ctx)
        cases = repository.all()

        click.echo("=== Daily Trend ===")
        for row in views.daily_trend(cases):
            click.echo(
                f"  {row.key.isoformat()}: {row.count:,} cases, "
                f"{int(row['high_risk']):,} high, "
                f"avg risk {row['avg_risk']:.1f}%"
            )

        insights = views.key_insights(cases)
        click.echo("\nKey insights:")
        click.echo(
            f"  High-risk cases: {insights['high_risk_cases']:,} "
            f"({insights['high_risk_pct']:.1f}%)"
        )
        click.echo(f"  Average risk: {insights['avg_risk']:.1f}%")
        click.echo(f"  Peak hour: {insights['peak_hour']}:00")
        click.echo(f"  Peak day: {insights['peak_day']}")
        click.echo(f"  Top bottleneck: {insights['top_bottleneck']}")
    except Exception as e:
        _fail(e, "trends_failed")


@main.command()
@click.argument("case_id")
@click.option("--agents", type=int, default=None, help="Active agents (default: from config)")
@click.option("--queue-depth", type=int, default=None, help="Queue depth (default: from config)")
@click.option(
    "--automation",
    type=click.FloatRange(0, 100),
    default=None,
    help="Automation level % (default: from config)",
)
@click.pass_context
def simulate(ctx, case_id, agents, queue_depth, automation):
    """Project CASE_ID under a what-if scenario."""
    try:
        config, repository = _load(ctx)
        case = repository.get(case_id)

        defaults = config.scenario
        params = ScenarioParameters(
            active_agents=agents if agents is not None else defaults.active_agents,
            queue_depth=queue_depth if queue_depth is not None else defaults.queue_depth,
            automation_level_pct=(
                automation if automation is not None else defaults.automation_level_pct
            ),
        )
        result = simulate_case(case, params)

        breach = result.projected_time_to_breach_minutes
        click.echo(f"=== What-if: {case.case_id} ===")
        click.echo(
            f"Scenario: {params.active_agents} agents, queue {params.queue_depth}, "
            f"automation {params.automation_level_pct:.0f}%"
        )
        click.echo(f"Current risk: {case.predicted_sla_risk:.1f}%")
        click.echo(f"Simulated risk: {result.simulated_risk_pct:.1f}%")
        click.echo(f"Risk change: {-result.risk_reduction_pct:+.1f} points")
        click.echo(f"Simulated load index: {result.simulated_load_index:.2f}")
        click.echo(f"Projected time to breach: {breach if breach is not None else 'N/A'}")
    except CaseNotFoundError:
        click.echo(f"Error: unknown case {case_id}", err=True)
        sys.exit(1)
    except Exception as e:
        _fail(e, "simulation_failed")


@main.command("best-action")
@click.argument("case_id")
@click.pass_context
def best_action(ctx, case_id):
    """Rank interventions for CASE_ID."""
    try:
        _, repository = _load(ctx)
        case = repository.get(case_id)

        options = ActionAdvisor().rank_actions(case)
        click.echo(f"=== Interventions: {case.case_id} ===")
        for row in compare_options(options):
            click.echo(
                f"  {row['action']}: {row['simulated_risk_pct']:.1f}% risk, "
                f"reduction {row['risk_reduction_pct']:.1f} ({row['confidence']} confidence)"
            )
        click.echo(f"Best action: {options[0].name}")
    except CaseNotFoundError:
        click.echo(f"Error: unknown case {case_id}", err=True)
        sys.exit(1)
    except InvalidScenarioParameters as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        _fail(e, "best_action_failed")


@main.command()
@click.option(
    "--group-by",
    type=click.Choice([g.value for g in ActionGroupBy]),
    default=ActionGroupBy.QUEUE.value,
    show_default=True,
    help="Dimension to group recommendations by",
)
@click.option(
    "--risk-level",
    type=click.Choice([level.value for level in RiskLevel]),
    default=None,
    help="Only include cases at this risk level",
)
@click.pass_context
def recommendations(ctx, group_by, risk_level):
    """Recommended actions grouped for planning."""
    try:
        config, repository = _load(ctx)
        limit = config.reporting.cases_per_group

        for group in views.recommendation_groups(repository.all(), group_by, risk_level):
            click.echo(
                f"=== {group.key}: {group.count:,} cases, {int(group['high_risk']):,} high risk, "
                f"avg reduction {group['avg_risk_reduction']:.1f}% ==="
            )
            for case in group.cases[:limit]:
                click.echo(
                    f"  {case.case_id} {case.predicted_sla_risk:.1f}% -> "
                    f"{case.expected_risk_after_action:.1f}% "
                    f"[{action_confidence(case)}] {case.recommended_action or NO_ACTION_LABEL}"
                )
    except Exception as e:
        _fail(e, "recommendations_failed")


@main.command()
@click.pass_context
def scenarios(ctx):
    """High-risk cases projected under the default scenario."""
    try:
        config, repository = _load(ctx)
        defaults = config.scenario
        params = ScenarioParameters(
            active_agents=defaults.active_agents,
            queue_depth=defaults.queue_depth,
            automation_level_pct=defaults.automation_level_pct,
        )

        sample = scenario_sample(repository.all(), params, config.reporting.scenario_sample_size)
        click.echo(
            f"=== {len(sample)} high-risk cases at {params.active_agents} agents, "
            f"queue {params.queue_depth}, automation {params.automation_level_pct:.0f}% ==="
        )
        for case, result in sample:
            click.echo(
                f"  {case.case_id}: {case.predicted_sla_risk:.1f}% -> "
                f"{result.simulated_risk_pct:.1f}%"
            )
    except Exception as e:
        _fail(e, "scenarios_failed")


@main.command()
@click.argument("output", type=click.Path(dir_okay=False))
@click.option(
    "--actionable-only",
    is_flag=True,
    help="Only export cases with a recommended action",
)
@click.pass_context
def export(ctx, output, actionable_only):
    """Write a CSV report of all cases to OUTPUT."""
    try:
        _, repository = _load(ctx)
        rows = export_rows(repository.all(), actionable_only=actionable_only)
        path = write_csv(rows, output)
        click.echo(f"Exported {len(rows):,} cases to {path}")
    except Exception as e:
        _fail(e, "export_failed")


if __name__ == "__main__":
    main()
