"""Audit of a UIO assignment by independent replay.

The audit re-derives every assigned state's trace with Sequence Replay
instead of trusting the engine's bookkeeping, then checks the two
properties a test suite built from the assignment relies on:

- no transition is exercised by more than one state's sequence
- no other state reproduces a state's assigned output

States are visited in ascending order; a transition reported as reused is
attributed to the later state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from mealyqa.core.replay import IMPOSSIBLE, ReplayOutcome, detailed_steps, replay, used_transitions
from mealyqa.core.table import StateId, TransitionDetail, TransitionKey, TransitionTable, state_sort_key
from mealyqa.uio.sequence import IdentifyingSequence, UIOResult

logger = logging.getLogger(__name__)


@dataclass
class StateAudit:
    """Re-derived trace of one assigned state.

    Attributes:
        state: The audited state.
        sequence: Its assigned (input, output).
        steps: Transitions traversed by replaying the input.
        used: (state, symbol) pairs of those transitions.
        reused: Pairs already exercised by an earlier state's sequence.
        collisions: Other states whose replay yields the same output.
        replayed_output: What replay actually produced.
    """

    state: StateId
    sequence: IdentifyingSequence
    steps: list[TransitionDetail]
    used: frozenset[TransitionKey]
    reused: frozenset[TransitionKey] = frozenset()
    collisions: list[StateId] = field(default_factory=list)
    replayed_output: str | ReplayOutcome = ""

    @property
    def ok(self) -> bool:
        return (
            not self.reused
            and not self.collisions
            and self.replayed_output == self.sequence.output
        )


@dataclass
class AuditReport:
    """Audit over a full assignment."""

    table_name: str
    states: list[StateAudit] = field(default_factory=list)
    unresolved: list[StateId] = field(default_factory=list)

    @property
    def reused_transitions(self) -> frozenset[TransitionKey]:
        reused: set[TransitionKey] = set()
        for entry in self.states:
            reused |= entry.reused
        return frozenset(reused)

    @property
    def ok(self) -> bool:
        """True when every assigned sequence passed; unresolved states do not fail an audit."""
        return all(entry.ok for entry in self.states)


def audit_assignment(
    table: TransitionTable,
    assignment: dict[StateId, IdentifyingSequence] | UIOResult,
) -> AuditReport:
    """Replay every assigned sequence and check disjointness and uniqueness.

    Args:
        table: The machine the assignment was computed on.
        assignment: Either a UIOResult or a plain mapping state -> (input, output).

    Returns:
        AuditReport with one StateAudit per assigned state, ascending.
    """
    if isinstance(assignment, UIOResult):
        pairs = assignment.assignment
    else:
        pairs = {state: IdentifyingSequence(*seq) for state, seq in assignment.items()}

    report = AuditReport(
        table_name=table.name,
        unresolved=[state for state in table.states if state not in pairs],
    )
    seen: set[TransitionKey] = set()

    for state in sorted(pairs, key=state_sort_key):
        sequence = pairs[state]
        used = used_transitions(table, state, sequence.input)
        entry = StateAudit(
            state=state,
            sequence=sequence,
            steps=detailed_steps(table, state, sequence.input),
            used=used,
            reused=frozenset(used & seen),
            collisions=[
                other
                for other in table.states
                if other != state and replay(table, other, sequence.input) == sequence.output
            ],
            replayed_output=replay(table, state, sequence.input),
        )
        if entry.reused:
            logger.warning(f"State {state!r} reuses transitions {sorted(entry.reused, key=str)}")
        if entry.collisions:
            logger.warning(f"State {state!r} output {sequence.output!r} also produced by {entry.collisions}")
        if entry.replayed_output is IMPOSSIBLE:
            logger.warning(f"State {state!r} cannot replay its own input {sequence.input!r}")

        seen |= used
        report.states.append(entry)

    return report
