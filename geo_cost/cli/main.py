"""
CLI interface for the GEO cost estimator.

Renders estimates, the model catalog and refresh cadences in the terminal.
"""

import sys
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from geo_cost.config.loader import load_estimator_config
from geo_cost.core.formatting import format_currency, format_multiplier, format_tokens
from geo_cost.core.pricing import CalculationResult
from geo_cost.core.session import EstimatorSession
from geo_cost.logging_config import configure_logging

app = typer.Typer(help="Estimate the spend of a two-pass GEO monitoring pipeline.")
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_ERROR = 1

CONFIG_ENVVAR = "GEO_COST_CONFIG"
LOG_LEVEL_ENVVAR = "GEO_COST_LOG_LEVEL"

_config_option = typer.Option(
    None,
    "--config",
    "-c",
    envvar=CONFIG_ENVVAR,
    help="YAML file overriding models, frequencies or token assumptions",
)
_profile_option = typer.Option(
    "monthly",
    "--profile",
    "-P",
    help="Accounting variant: 'monthly' or 'yearly' (adds projects)",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar=LOG_LEVEL_ENVVAR,
        help="Log level (DEBUG, INFO, WARNING, ...)",
    ),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON"),
):
    """GEO cost estimator CLI."""
    configure_logging(log_level=log_level, json_output=log_json)
    if ctx.invoked_subcommand is None:
        console.print("GEO Cost Estimator - Use --help to see available commands")


@app.command()
def estimate(
    prompts: Optional[str] = typer.Option(
        None,
        "--prompts",
        "-n",
        help="Number of prompts per run (defaults to the profile default)",
    ),
    models: Optional[List[str]] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to toggle; repeat to select one model per provider",
    ),
    web_search: Optional[str] = typer.Option(
        None,
        "--web-search",
        "-w",
        help="Percentage of prompts using web search / grounding (0-100)",
    ),
    frequency: Optional[str] = typer.Option(
        None,
        "--frequency",
        "-f",
        help="Refresh cadence key (daily, weekly, monthly)",
    ),
    projects: Optional[str] = typer.Option(
        None,
        "--projects",
        "-p",
        help="Number of projects (yearly profile only)",
    ),
    profile: str = _profile_option,
    config: Optional[str] = _config_option,
    breakdown: bool = typer.Option(
        False,
        "--breakdown",
        "-b",
        help="Show input/output costs of each pass",
    ),
):
    """
    Estimate the projected spend of the selected models.

    Numeric options are clamped the way the form does it: malformed or
    negative values fall back to 0 prompts, 0% web search and 1 project.
    """
    try:
        estimator_config = load_estimator_config(config)
        session = EstimatorSession(
            profile=estimator_config.profile(profile),
            catalog=estimator_config.catalog,
            tokens=estimator_config.tokens,
        )

        if prompts is not None:
            session.set_prompt_count(prompts)
        if web_search is not None:
            session.set_web_search_percent(web_search)
        if frequency is not None:
            session.set_frequency(frequency)
        if projects is not None:
            if session.profile.has_projects:
                session.set_project_count(projects)
            else:
                console.print(
                    f"[yellow]Note:[/] the {session.profile.name} profile has no "
                    "project dimension; --projects ignored"
                )
        if models:
            session.selection.clear()
            for model_id in models:
                session.toggle_model(model_id)

        result = session.result()
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_ERROR)

    _display_estimate(session, result, breakdown)
    sys.exit(EXIT_CODE_OK)


@app.command("models")
def list_models(config: Optional[str] = _config_option):
    """List the model catalog grouped by provider."""
    try:
        catalog = load_estimator_config(config).catalog
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_ERROR)

    for provider in catalog.providers():
        table = Table(title=provider, title_justify="left")
        table.add_column("ID", no_wrap=True)
        table.add_column("Name")
        table.add_column("In / Out ($/1M)", justify="right")
        table.add_column("Pass 2 model")
        table.add_column("Pass 2 In / Out ($/1M)", justify="right")
        table.add_column("Search ($/1k)", justify="right")
        for model in catalog.list_by_provider(provider):
            table.add_row(
                model.model_id,
                model.name,
                f"${model.input_price} / ${model.output_price}",
                model.pass2_model,
                f"${model.pass2_input_price} / ${model.pass2_output_price}",
                f"${model.web_search_price:.2f} ({model.search_label})",
            )
        console.print(table)


@app.command()
def frequencies(
    profile: str = _profile_option,
    config: Optional[str] = _config_option,
):
    """List refresh cadences and their runs per accounting period."""
    try:
        estimator_profile = load_estimator_config(config).profile(profile)
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_ERROR)

    table = Table(title=f"Refresh frequencies ({estimator_profile.name})")
    table.add_column("Key", no_wrap=True)
    table.add_column("Label")
    table.add_column("Runs", justify="right")
    for definition in estimator_profile.frequencies:
        table.add_row(
            definition.key,
            definition.label,
            format_multiplier(definition.multiplier, estimator_profile.period),
        )
    console.print(table)


def _display_estimate(
    session: EstimatorSession,
    result: CalculationResult,
    breakdown: bool,
) -> None:
    """Display estimate results in a financial format."""
    period = session.profile.period
    console.print("\n[bold]GEO Cost Estimate[/bold]")
    console.print("-" * 40)
    console.print(f"Prompts per run: {session.prompt_count:,}")
    console.print(f"Web search: {session.web_search_percent}% of prompts")
    console.print(
        f"Frequency: {result.frequency.label} "
        f"({format_multiplier(result.frequency.multiplier, period)})"
    )
    if session.profile.has_projects:
        console.print(f"Projects: {result.project_count}")

    if not result.models:
        console.print("\n[dim]No model selected.[/]")
        return

    table = Table(show_lines=False)
    table.add_column("Model")
    table.add_column("Pass 1", justify="right", no_wrap=True)
    table.add_column("Pass 2", justify="right", no_wrap=True)
    table.add_column("Search", justify="right", no_wrap=True)
    table.add_column("Per run", justify="right", no_wrap=True)
    table.add_column(f"Per {period}", justify="right", no_wrap=True)
    for cost in result.models:
        search = format_currency(cost.web_search_cost) if session.web_search_percent > 0 else "-"
        table.add_row(
            f"{cost.model.name} ({cost.model.search_label})",
            format_currency(cost.pass1_cost),
            format_currency(cost.pass2_cost),
            search,
            format_currency(cost.total_per_run),
            format_currency(cost.total_per_period),
        )
    console.print(table)

    if breakdown:
        detail = Table(title="Breakdown per run")
        detail.add_column("Model")
        detail.add_column("Pass 1 In", justify="right", no_wrap=True)
        detail.add_column("Pass 1 Out", justify="right", no_wrap=True)
        detail.add_column("Pass 2 In", justify="right", no_wrap=True)
        detail.add_column("Pass 2 Out", justify="right", no_wrap=True)
        detail.add_column("Search calls", justify="right", no_wrap=True)
        for cost in result.models:
            detail.add_row(
                cost.model.name,
                format_currency(cost.pass1_input_cost),
                format_currency(cost.pass1_output_cost),
                format_currency(cost.pass2_input_cost),
                format_currency(cost.pass2_output_cost),
                f"{cost.web_search_calls:g}",
            )
        console.print(detail)

    multiplier = result.frequency.multiplier
    if session.profile.has_projects:
        console.print(
            f"Per project: {format_currency(result.per_project_per_period)} per {period} "
            f"({format_currency(result.total_per_run)} x {multiplier}/{period})"
        )
        console.print(
            f"[bold]Total for {result.project_count} projects:[/bold] "
            f"{format_currency(result.total_per_period)} per {period} "
            f"({format_currency(result.grand_total_per_run)} per run)"
        )
    else:
        console.print(
            f"[bold]Total:[/bold] {format_currency(result.total_per_period)} per {period} "
            f"({format_currency(result.total_per_run)} x {multiplier}/{period})"
        )

    tokens = session.tokens
    console.print(
        f"[dim]Assumptions: pass 1 {format_tokens(tokens.pass1_input)} in / "
        f"{format_tokens(tokens.pass1_output)} out, pass 2 "
        f"{format_tokens(tokens.pass2_input)} in / {format_tokens(tokens.pass2_output)} out[/]"
    )


if __name__ == "__main__":
    app()
