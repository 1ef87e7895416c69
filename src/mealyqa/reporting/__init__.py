"""Reporting: rich console output and JSON reports."""

from mealyqa.reporting.console import ConsoleReporter, build_tree, format_block, format_sequence
from mealyqa.reporting.json_report import audit_report, replay_report, uio_report, wmethod_report

__all__ = [
    "ConsoleReporter",
    "build_tree",
    "format_block",
    "format_sequence",
    "uio_report",
    "wmethod_report",
    "audit_report",
    "replay_report",
]
