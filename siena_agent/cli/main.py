"""
CLI interface for Siena Agent.

Cost estimates, the usage ledger, and narrative growth / hypothesis
formulation from the command line.
"""

import asyncio
import json
import logging
import sqlite3
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from siena_agent.agent import Agent
from siena_agent.brain import GrowthPolicy
from siena_agent.config.loader import AgentConfig, default_agent_config, load_agent_config
from siena_agent.core.pricing import calculate_estimate
from siena_agent.core.records import Narrative
from siena_agent.core.semantics import AbstractSemanticState, SemanticMetaGoal
from siena_agent.sdk.gemini_client import GeminiClient
from siena_agent.storage.db import DEFAULT_DB_PATH
from siena_agent.storage.repository import UsageRepository, initialize_schema

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

CLI_AGENT_NAME = "siena-cli"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Siena Agent CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if ctx.invoked_subcommand is None:
        console.print("Siena Agent - Use --help to see available commands")


def _token_arg(value: str):
    """A bare integer is a token count, anything else is text."""
    return int(value) if value.isdigit() else value


@app.command()
def estimate(
    model: str = typer.Argument(..., help="Model identifier, e.g. gemini-3-flash"),
    input: str = typer.Argument(..., help="Input token count or prompt text"),
    output: str = typer.Argument(..., help="Output token count or response text"),
    cached: bool = typer.Option(False, "--cached", "-c", help="Bill input at the cached rate"),
    hours: float = typer.Option(0.0, "--hours", help="Cache storage duration in hours"),
):
    """Estimate the cost of a single request."""
    if hours < 0:
        console.print("[red]Error:[/] --hours cannot be negative")
        sys.exit(EXIT_CODE_FAIL)

    result = calculate_estimate(model, _token_arg(input), _token_arg(output), cached, hours)

    console.print("\n[bold]Cost Estimate[/bold]")
    console.print("-" * 40)
    console.print(f"Model: {result.model_key}")
    console.print(f"Input tokens: {result.input_tokens:,}")
    console.print(f"Output tokens: {result.output_tokens:,}")
    if result.cached:
        console.print(f"Cached for: {result.duration_hours:g}h")
    console.print(f"Total: [bold]{_format_currency(result.total_usd)}[/bold]")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def init(
    db: str = typer.Option(DEFAULT_DB_PATH, "--db", help="Path to the usage ledger"),
):
    """Initialize the usage ledger database."""
    try:
        initialize_schema(db)
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except sqlite3.Error as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def usage(
    days: int = typer.Option(30, "--days", "-d", help="Number of days to look back"),
    agent: Optional[str] = typer.Option(None, "--agent", "-a", help="Filter to a specific agent"),
    db: str = typer.Option(DEFAULT_DB_PATH, "--db", help="Path to the usage ledger"),
):
    """Summarize recorded GenAI usage."""
    repository = UsageRepository(db)
    try:
        stats = repository.get_usage_stats(agent=agent, days=days)
        events = repository.get_recent_events(agent=agent, days=days, limit=20)
    except sqlite3.OperationalError as e:
        if "no such table" in str(e).lower():
            console.print("\n[bold yellow]No usage data found[/]")
            console.print("\nRun `siena init` to initialize the database.\n")
            sys.exit(EXIT_CODE_PASS)
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if not stats["total_requests"]:
        console.print(f"\n[bold yellow]No usage recorded in the last {days} days[/]\n")
        sys.exit(EXIT_CODE_PASS)

    console.print(f"\n[bold]GenAI Usage (last {days} days)[/bold]")
    console.print("-" * 40)
    console.print(f"Requests: {stats['total_requests']}")
    console.print(f"Tokens: {stats['total_tokens']:,}")
    console.print(f"Retries: {stats['total_retries']}")
    console.print(f"Total cost: {_format_currency(stats['total_cost'])}")
    console.print(f"Average cost/request: {_format_currency(stats['avg_cost'])}")

    table = Table(title="Recent calls")
    table.add_column("Timestamp")
    table.add_column("Agent")
    table.add_column("Model")
    table.add_column("Tokens", justify="right")
    table.add_column("Retries", justify="right")
    table.add_column("Cost", justify="right")
    for event in events:
        table.add_row(
            event.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            event.agent,
            event.model,
            f"{event.total_tokens:,}",
            str(event.retry_count),
            _format_currency(event.estimated_cost),
        )
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


def _load_config(config_path: Optional[str], memory_dir: Optional[str]) -> AgentConfig:
    config = load_agent_config(config_path) if config_path else default_agent_config()
    if memory_dir:
        config = replace(config, memory_dir=memory_dir)
    return config


def _load_narrative(path: str) -> Narrative:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return Narrative.from_dict(data)


def _agent_for(narrative: Narrative, config: AgentConfig) -> Agent:
    metagoal = SemanticMetaGoal(
        detailed=narrative.synopsis,
        abstract=AbstractSemanticState(what=narrative.title),
    )
    return Agent.new(CLI_AGENT_NAME, metagoal, config=config, client=GeminiClient())


@app.command()
def grow(
    seed: Path = typer.Argument(..., help="Narrative JSON file to grow"),
    iterations: int = typer.Option(1, "--iterations", "-n", help="Number of growth iterations"),
    policy: GrowthPolicy = typer.Option(
        GrowthPolicy.REPLACE,
        "--policy",
        "-p",
        help="replace: each iteration rewrites the body; append: adds to it",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Agent YAML configuration"),
    memory_dir: Optional[str] = typer.Option(None, "--memory-dir", help="Where records are saved"),
):
    """Grow a narrative and save the result."""
    try:
        config = _load_config(config_path, memory_dir)
        narrative = _load_narrative(str(seed))
        agent = _agent_for(narrative, config)
        grown = asyncio.run(agent.grow_narrative(narrative, iterations, policy))
        saved_to = agent.save(grown)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"[green]✓[/] Grew '{grown.title}' over {iterations} iteration(s)")
    console.print(f"Saved to {saved_to}")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def hypothesize(
    narrative_path: Path = typer.Argument(..., help="Narrative JSON file to analyze"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Agent YAML configuration"),
    memory_dir: Optional[str] = typer.Option(None, "--memory-dir", help="Where records are saved"),
):
    """Formulate a hypothesis from a narrative and save it."""
    try:
        config = _load_config(config_path, memory_dir)
        narrative = _load_narrative(str(narrative_path))
        agent = _agent_for(narrative, config)
        hypothesis = asyncio.run(agent.formulate_hypothesis(narrative))
        saved_to = agent.save(hypothesis)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"\n[bold]Hypothesis:[/bold] {hypothesis.title}")
    console.print(f"Thesis: {hypothesis.thesis}")
    if hypothesis.tags:
        console.print(f"Tags: {', '.join(hypothesis.tags)}")
    console.print(f"Saved to {saved_to}")
    sys.exit(EXIT_CODE_PASS)


def _format_currency(amount: float) -> str:
    """Format currency; small amounts keep six decimals."""
    return f"${amount:,.6f}" if amount < 0.01 else f"${amount:,.2f}"


if __name__ == "__main__":
    app()
