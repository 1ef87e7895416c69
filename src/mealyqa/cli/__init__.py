"""MealyQA CLI - Command line interface for MealyQA."""

from __future__ import annotations

from mealyqa.cli.commands import cli, setup_logging


def main() -> None:
    """Main entry point for the mealyqa CLI."""
    cli()


__all__ = [
    "main",
    "cli",
    "setup_logging",
]
