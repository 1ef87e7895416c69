"""Console reporter for terminal output."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from mealyqa.core.replay import IMPOSSIBLE, ReplayOutcome
from mealyqa.wmethod.engine import extract_sequences

if TYPE_CHECKING:
    from mealyqa.core.table import StateId, TransitionTable
    from mealyqa.uio.audit import AuditReport
    from mealyqa.uio.sequence import UIOResult
    from mealyqa.wmethod.tree import DiscriminationTree, Step, TreeNode, WResult

logger = logging.getLogger(__name__)

SEQUENCE_SEPARATOR = " + "


def format_sequence(labels: list[str]) -> str:
    """Join branch labels for display, e.g. ``a/z + not b/t``."""
    return SEQUENCE_SEPARATOR.join(labels)


def format_block(states: tuple[StateId, ...] | list[StateId]) -> str:
    return "{" + ", ".join(str(state) for state in states) + "}"


def build_tree(tree: DiscriminationTree) -> Tree:
    """Render a discrimination tree as a rich Tree.

    Terminal nodes covering several states are highlighted in yellow.
    """
    if not tree.nodes:
        return Tree("[dim](empty)[/dim]")

    def label(node: TreeNode, branch: str | None) -> str:
        text = escape(format_block(node.states))
        if node.degenerate:
            text = f"[yellow]{text} (indistinguishable)[/yellow]"
        elif node.terminal:
            text = f"[green]{text}[/green]"
        else:
            text = f"{text} [dim]test {escape(node.pair.label)}[/dim]"
        if branch is not None:
            text = f"[cyan]{escape(branch)}[/cyan] -> {text}"
        return text

    root = Tree(label(tree.root, None))
    stack: list[tuple[TreeNode, Tree]] = [(tree.root, root)]
    while stack:
        node, rendered = stack.pop()
        added = []
        for branch, child in tree.children(node):
            added.append((child, rendered.add(label(child, branch))))
        stack.extend(reversed(added))
    return root


class ConsoleReporter:
    """Renders engine results with rich.

    Example::

        reporter = ConsoleReporter()
        reporter.print_uio(table, find_result)
        reporter.print_wmethod(table, build_discrimination_tree(table))

        # Plain text, e.g. for files
        reporter = ConsoleReporter(color=False)
    """

    def __init__(self, console: Console | None = None, color: bool = True) -> None:
        """Initialize the console reporter.

        Args:
            console: Console to print to (default: a new stdout console).
            color: Whether to emit colors when creating the console.
        """
        self.console = console or Console(no_color=not color, highlight=False)

    def print_header(self, table: TransitionTable, title: str) -> None:
        self.console.print(
            f"\n[bold]{escape(title)}[/bold] for [cyan]{escape(table.name)}[/cyan] "
            f"({len(table)} states, {table.transition_count} transitions)\n"
        )

    def print_uio(self, table: TransitionTable, result: UIOResult) -> None:
        """Print the UIO assignment and the unresolved states."""
        self.print_header(table, "UIO sequences")

        rows = Table(show_header=True, header_style="bold")
        rows.add_column("State")
        rows.add_column("Input")
        rows.add_column("Output")
        rows.add_column("Length", justify="right")

        for state in table.states:
            sequence = result.sequences.get(state)
            if sequence is None:
                rows.add_row(escape(str(state)), "[yellow]-[/yellow]", "[yellow]-[/yellow]", "")
            else:
                rows.add_row(
                    escape(str(state)),
                    escape(sequence.input),
                    escape(sequence.output),
                    str(len(sequence)),
                )
        self.console.print(rows)

        if result.unresolved:
            logger.warning(
                f"No UIO sequence of length <= {result.max_length} for states {result.unresolved}"
            )
            self.console.print(
                f"\n[yellow]Unresolved ({len(result.unresolved)}):[/yellow] "
                f"{escape(format_block(result.unresolved))}"
            )
        self.console.print(
            f"\n[bold]{result.resolved_count}/{len(table)}[/bold] states identified "
            f"(max length {result.max_length})"
        )

    def print_audit(self, report: AuditReport) -> None:
        """Print the per-state traces and any reused transitions or collisions."""
        self.console.print(f"\n[bold]Transition audit[/bold] for [cyan]{escape(report.table_name)}[/cyan]\n")

        for entry in report.states:
            status = "[green]ok[/green]" if entry.ok else "[red]FAILED[/red]"
            self.console.print(
                f"  State {escape(str(entry.state))}: "
                f"{escape(entry.sequence.input)}/{escape(entry.sequence.output)} {status}"
            )
            for step in entry.steps:
                self.console.print(f"    [dim]{escape(str(step))}[/dim]")
            if entry.reused:
                pairs = ", ".join(f"({k.state}, {k.symbol})" for k in sorted(entry.reused, key=str))
                self.console.print(f"    [red]Reused transitions: {escape(pairs)}[/red]")
            if entry.collisions:
                self.console.print(
                    f"    [red]Output also produced by: {escape(format_block(entry.collisions))}[/red]"
                )
            if entry.replayed_output is IMPOSSIBLE:
                self.console.print("    [red]Input cannot be replayed from this state[/red]")

        if report.unresolved:
            self.console.print(f"\n[yellow]Unresolved:[/yellow] {escape(format_block(report.unresolved))}")

        if report.ok:
            self.console.print("\n[bold green]Audit passed[/bold green]")
        else:
            self.console.print("\n[bold red]Audit failed[/bold red]")

    def print_steps(self, steps: list[Step]) -> None:
        self.console.print("[bold]Splits:[/bold]")
        for number, step in enumerate(steps, start=1):
            groups = ", ".join(
                f"{label}: {format_block(states)}" for label, states in step.resulting_groups.items()
            )
            self.console.print(
                f"  {number}. {escape(format_block(step.starting_block))} "
                f"on [cyan]{escape(step.pair.label)}[/cyan] -> {escape(groups)}"
            )
        self.console.print()

    def print_wmethod(self, table: TransitionTable, result: WResult, show_steps: bool = True) -> None:
        """Print split steps, the tree and the per-state label sequences."""
        self.print_header(table, "W-method")

        if show_steps and result.steps:
            self.print_steps(result.steps)

        self.console.print(build_tree(result.tree))

        sequences = extract_sequences(result.tree)
        if sequences:
            self.console.print("\n[bold]Distinguishing sequences:[/bold]")
            for state in table.states:
                labels = sequences.get(state, [])
                self.console.print(f"  {escape(str(state))}: {escape(format_sequence(labels)) or '[dim](none)[/dim]'}")

        blocks = result.tree.indistinguishable_blocks()
        for block in blocks:
            logger.warning(f"States {list(block)} cannot be told apart by any single I/O pair")
        if blocks:
            self.console.print(
                "\n[yellow]Indistinguishable:[/yellow] "
                + ", ".join(escape(format_block(block)) for block in blocks)
            )

    def print_replay(self, outcome: str | ReplayOutcome) -> None:
        if outcome is IMPOSSIBLE:
            self.console.print("[red]IMPOSSIBLE[/red]")
        else:
            self.console.print(escape(outcome))
