"""Sequence Replay: run an input string against a transition table.

Replay is a deterministic single pass: starting from a state, each input
character is looked up in the table, its output is appended and the walk
moves to the destination state. If the current state has no transition on
the current character, the whole replay is IMPOSSIBLE. IMPOSSIBLE is a
result value, distinct from the empty output produced by the empty input.

``used_transitions`` and ``detailed_steps`` perform the same walk and return
what was traversed. All three share ``walk`` so they always agree: when the
walk hits a missing transition, the sibling operations report the prefix
that was actually traversed.

Example:
    >>> replay(table, 1, "ab")
    'zt'
    >>> replay(table, 1, "bb") is IMPOSSIBLE
    True
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from mealyqa.core.table import StateId, TransitionDetail, TransitionKey, TransitionTable


class ReplayOutcome(Enum):
    """Non-string outcome of a replay."""

    IMPOSSIBLE = "impossible"

    def __repr__(self) -> str:
        return self.name


IMPOSSIBLE = ReplayOutcome.IMPOSSIBLE


def walk(table: TransitionTable, state: StateId, inputs: str) -> Iterator[TransitionDetail]:
    """Yield each transition traversed while consuming ``inputs`` from ``state``.

    Stops silently at the first missing transition. Callers that need to know
    whether the whole string was consumed compare the number of yielded steps
    with ``len(inputs)``.
    """
    current = state
    for symbol in inputs:
        transition = table.get(current, symbol)
        if transition is None:
            return
        yield TransitionDetail(current, transition.to_state, symbol, transition.output)
        current = transition.to_state


def replay(table: TransitionTable, state: StateId, inputs: str) -> str | ReplayOutcome:
    """Replay ``inputs`` from ``state``.

    Returns:
        The concatenated output string, or IMPOSSIBLE if some step has no
        transition.
    """
    outputs: list[str] = []
    for step in walk(table, state, inputs):
        outputs.append(step.output)
    if len(outputs) != len(inputs):
        return IMPOSSIBLE
    return "".join(outputs)


def used_transitions(table: TransitionTable, state: StateId, inputs: str) -> frozenset[TransitionKey]:
    """Set of (state, symbol) pairs traversed when replaying ``inputs`` from ``state``."""
    return frozenset(step.key for step in walk(table, state, inputs))


def detailed_steps(table: TransitionTable, state: StateId, inputs: str) -> list[TransitionDetail]:
    """Ordered transition records traversed when replaying ``inputs`` from ``state``."""
    return list(walk(table, state, inputs))
