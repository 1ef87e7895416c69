"""JSON report builders.

Each builder returns plain dicts/lists ready for ``json.dumps``. State ids
are kept as they are in the table for values; mapping keys are strings.
"""

from __future__ import annotations

from typing import Any

from mealyqa.core.replay import IMPOSSIBLE, ReplayOutcome
from mealyqa.core.table import StateId, TransitionTable
from mealyqa.uio.audit import AuditReport
from mealyqa.uio.sequence import UIOResult
from mealyqa.wmethod.engine import extract_sequences
from mealyqa.wmethod.tree import WResult


def _machine(table: TransitionTable) -> dict[str, Any]:
    return {
        "name": table.name,
        "states": list(table.states),
        "transitions": table.transition_count,
    }


def uio_report(table: TransitionTable, result: UIOResult) -> dict[str, Any]:
    return {
        "machine": _machine(table),
        "max_length": result.max_length,
        "sequences": {
            str(state): {
                "input": sequence.input,
                "output": sequence.output,
                "length": len(sequence),
            }
            for state, sequence in result.sequences.items()
        },
        "unresolved": list(result.unresolved),
        "complete": result.complete,
    }


def wmethod_report(table: TransitionTable, result: WResult, include_steps: bool = True) -> dict[str, Any]:
    report: dict[str, Any] = {
        "machine": _machine(table),
        "tree": result.tree.to_dict(),
        "sequences": {str(state): labels for state, labels in extract_sequences(result.tree).items()},
        "indistinguishable": [list(block) for block in result.tree.indistinguishable_blocks()],
    }
    if include_steps:
        report["steps"] = [
            {
                "block": list(step.starting_block),
                "pair": step.pair.label,
                "groups": {label: list(states) for label, states in step.resulting_groups.items()},
            }
            for step in result.steps
        ]
    return report


def audit_report(report: AuditReport) -> dict[str, Any]:
    return {
        "machine": report.table_name,
        "ok": report.ok,
        "states": [
            {
                "state": entry.state,
                "input": entry.sequence.input,
                "output": entry.sequence.output,
                "steps": [str(step) for step in entry.steps],
                "reused": [[key.state, key.symbol] for key in sorted(entry.reused, key=str)],
                "collisions": list(entry.collisions),
                "ok": entry.ok,
            }
            for entry in report.states
        ],
        "unresolved": list(report.unresolved),
    }


def replay_report(state: StateId, inputs: str, outcome: str | ReplayOutcome) -> dict[str, Any]:
    return {
        "state": state,
        "input": inputs,
        "output": None if outcome is IMPOSSIBLE else outcome,
        "impossible": outcome is IMPOSSIBLE,
    }
