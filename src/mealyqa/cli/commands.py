"""CLI commands for MealyQA."""

from __future__ import annotations

import functools
import json
import logging
import sys
from collections.abc import Callable
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from mealyqa.config import MealyQAConfig, load_config
from mealyqa.core.replay import IMPOSSIBLE, replay as replay_sequence
from mealyqa.errors import MealyQAError
from mealyqa.loader import coerce_state, load_table
from mealyqa.reporting import ConsoleReporter, audit_report, replay_report, uio_report, wmethod_report
from mealyqa.uio import UIOFinder, audit_assignment
from mealyqa.wmethod import build_discrimination_tree

logger = logging.getLogger(__name__)

FORMAT_CHOICE = click.Choice(["text", "json"])


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report MealyQAError in red on stderr and exit with code 2."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except MealyQAError as e:
            logger.debug(e.format_verbose())
            Console(stderr=True, highlight=False).print(f"[red]Error: {escape(str(e))}[/red]")
            for suggestion in e.suggestions:
                click.echo(f"  - {suggestion}", err=True)
            sys.exit(2)

    return wrapper


def _reporter(config: MealyQAConfig) -> ConsoleReporter:
    return ConsoleReporter(color=config.color)


def _emit_json(data: dict[str, Any]) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.pass_context
@handle_errors
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """MealyQA - UIO sequences and W-method trees for Mealy machines."""
    ctx.ensure_object(dict)

    config_obj = load_config(config)
    verbose = verbose or config_obj.verbose
    setup_logging(verbose)

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("table_file", type=click.Path())
@click.option("--max-length", "-n", type=click.IntRange(min=1), default=None, help="Longest sequence to try")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default=None, help="Output format")
@click.pass_context
@handle_errors
def uio(ctx: click.Context, table_file: str, max_length: int | None, output_format: str | None) -> None:
    """Find a UIO sequence for every state of TABLE_FILE."""
    config: MealyQAConfig = ctx.obj["config"]
    table = load_table(table_file)
    result = UIOFinder(table, max_length=max_length or config.max_sequence_length).run()

    if (output_format or config.output_format) == "json":
        _emit_json(uio_report(table, result))
    else:
        _reporter(config).print_uio(table, result)


@cli.command()
@click.argument("table_file", type=click.Path())
@click.option("--steps/--no-steps", default=None, help="Show each split of the tree")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default=None, help="Output format")
@click.pass_context
@handle_errors
def wmethod(ctx: click.Context, table_file: str, steps: bool | None, output_format: str | None) -> None:
    """Build the W-method discrimination tree of TABLE_FILE."""
    config: MealyQAConfig = ctx.obj["config"]
    show_steps = config.show_steps if steps is None else steps
    table = load_table(table_file)
    result = build_discrimination_tree(table)

    if (output_format or config.output_format) == "json":
        _emit_json(wmethod_report(table, result, include_steps=show_steps))
    else:
        _reporter(config).print_wmethod(table, result, show_steps=show_steps)


@cli.command()
@click.argument("table_file", type=click.Path())
@click.argument("state")
@click.argument("inputs", metavar="INPUT")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default=None, help="Output format")
@click.pass_context
@handle_errors
def replay(ctx: click.Context, table_file: str, state: str, inputs: str, output_format: str | None) -> None:
    """Replay INPUT from STATE and print the output string."""
    config: MealyQAConfig = ctx.obj["config"]
    table = load_table(table_file)

    start = coerce_state(state)
    if start not in table:
        raise click.BadParameter(f"unknown state {state!r}", param_hint="STATE")

    outcome = replay_sequence(table, start, inputs)

    if (output_format or config.output_format) == "json":
        _emit_json(replay_report(start, inputs, outcome))
    else:
        _reporter(config).print_replay(outcome)

    sys.exit(1 if outcome is IMPOSSIBLE else 0)


@cli.command()
@click.argument("table_file", type=click.Path())
@click.option("--max-length", "-n", type=click.IntRange(min=1), default=None, help="Longest sequence to try")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default=None, help="Output format")
@click.pass_context
@handle_errors
def audit(ctx: click.Context, table_file: str, max_length: int | None, output_format: str | None) -> None:
    """Compute UIO sequences for TABLE_FILE and verify them by replay."""
    config: MealyQAConfig = ctx.obj["config"]
    table = load_table(table_file)
    result = UIOFinder(table, max_length=max_length or config.max_sequence_length).run()
    report = audit_assignment(table, result)

    if (output_format or config.output_format) == "json":
        _emit_json(audit_report(report))
    else:
        _reporter(config).print_audit(report)

    sys.exit(0 if report.ok else 1)
