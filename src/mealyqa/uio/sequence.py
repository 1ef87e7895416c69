"""Result types of the UIO engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from mealyqa.core.table import StateId, TransitionKey


@dataclass(frozen=True)
class Sequence:
    """A candidate (or assigned) input/output sequence from one origin state.

    Attributes:
        input: Input string, one character per step.
        output: Output string produced by replaying ``input`` from the origin.
        used_transitions: (state, symbol) pairs consumed by that replay.
    """

    input: str
    output: str
    used_transitions: frozenset[TransitionKey] = frozenset()

    def __len__(self) -> int:
        return len(self.input)

    @property
    def pair(self) -> IdentifyingSequence:
        return IdentifyingSequence(self.input, self.output)


class IdentifyingSequence(NamedTuple):
    """The (input, output) pair assigned to a state.

    Compares equal to the plain tuple ``(input, output)``.
    """

    input: str
    output: str


@dataclass
class UIOResult:
    """Outcome of one UIO run over a table.

    Attributes:
        sequences: Assigned sequence per state, in assignment order.
        unresolved: States without a sequence under the bound and the
            transitions still available, ascending.
        forbidden: Every (state, symbol) pair committed to some assignment.
        max_length: The length bound the run used.
    """

    sequences: dict[StateId, Sequence] = field(default_factory=dict)
    unresolved: list[StateId] = field(default_factory=list)
    forbidden: frozenset[TransitionKey] = frozenset()
    max_length: int = 3

    @property
    def assignment(self) -> dict[StateId, IdentifyingSequence]:
        """Mapping state -> (input, output); unresolved states are absent."""
        return {state: seq.pair for state, seq in self.sequences.items()}

    @property
    def resolved_count(self) -> int:
        return len(self.sequences)

    @property
    def complete(self) -> bool:
        """True if every state received a sequence."""
        return not self.unresolved
