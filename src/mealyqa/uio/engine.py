"""UIO engine: shortest Unique Input/Output sequence per state.

For every state the engine looks for the shortest input string whose output,
replayed from that state, cannot be reproduced from any other state. Each
(state, input symbol) transition may be committed to at most one state's
sequence, so tests built from the assignment never exercise the same
transition twice.

Search outline:

1. For length bound ``n`` = 1 .. ``max_length``, and for every state not yet
   assigned (ascending order):
2. Enumerate candidates depth-first from the state, never stepping through a
   transition already committed. Every non-empty prefix is a candidate.
3. Keep candidates unique to the state and disjoint from the committed set.
4. Assign the shortest (first found on ties) and commit its transitions.

States still unassigned when the bound is exhausted are *unresolved*. That
is a result, not an error.

Example:
    >>> from mealyqa.uio import find_identifying_sequences
    >>> find_identifying_sequences(table)
    {1: IdentifyingSequence(input='ab', output='zt'), ...}
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from mealyqa.core.replay import replay
from mealyqa.core.table import StateId, TransitionKey, TransitionTable
from mealyqa.uio.sequence import IdentifyingSequence, Sequence, UIOResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 3

# (current state, inputs so far, outputs so far, transitions used so far)
_Frame = tuple[StateId, str, str, frozenset[TransitionKey]]


def enumerate_candidates(
    table: TransitionTable,
    state: StateId,
    forbidden: frozenset[TransitionKey] | set[TransitionKey],
    max_length: int,
) -> Iterator[Sequence]:
    """Lazily enumerate candidate sequences starting at ``state``.

    Depth-first, symbols in definition order, every non-empty prefix yielded
    before its extensions. Transitions in ``forbidden`` are never stepped
    through. Uses an explicit stack, so depth is bounded by ``max_length``
    rather than the call stack.

    Args:
        table: The machine.
        state: Origin state.
        forbidden: (state, symbol) pairs already committed elsewhere.
        max_length: Longest input string to produce.

    Yields:
        Sequence per reachable prefix, in depth-first pre-order.
    """
    stack: list[_Frame] = [(state, "", "", frozenset())]

    while stack:
        current, inputs, outputs, used = stack.pop()

        if inputs:
            yield Sequence(inputs, outputs, used)

        if len(inputs) >= max_length:
            continue

        children: list[_Frame] = []
        for symbol, transition in table.transitions_from(current).items():
            key = TransitionKey(current, symbol)
            if key in forbidden:
                continue
            children.append((
                transition.to_state,
                inputs + symbol,
                outputs + transition.output,
                used | {key},
            ))

        # Reversed so the first symbol is popped first (pre-order)
        stack.extend(reversed(children))


def is_unique_for_state(
    table: TransitionTable,
    state: StateId,
    inputs: str,
    output: str,
) -> bool:
    """True if no other state of ``table`` produces ``output`` on ``inputs``.

    States that cannot replay ``inputs`` at all do not collide.
    """
    for other in table.states:
        if other == state:
            continue
        if replay(table, other, inputs) == output:
            return False
    return True


class UIOFinder:
    """Assigns identifying sequences to the states of one table.

    The committed-transition set lives only for the duration of ``run()``,
    so a finder can be run repeatedly and several finders can run on
    different tables independently.

    Args:
        table: The machine to analyse.
        max_length: Longest input string explored (inclusive).

    Example:
        >>> result = UIOFinder(table, max_length=3).run()
        >>> result.unresolved
        [3]
    """

    def __init__(self, table: TransitionTable, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        if max_length < 0:
            raise ValueError(f"max_length must be >= 0, got {max_length}")
        self.table = table
        self.max_length = max_length

    def select(
        self,
        state: StateId,
        forbidden: frozenset[TransitionKey],
        length: int,
    ) -> Sequence | None:
        """Shortest qualifying candidate for ``state`` within ``length``.

        Enumeration and the disjointness filter read the same ``forbidden``
        snapshot. Ties on length go to the candidate enumerated first.
        """
        best: Sequence | None = None
        considered = 0

        for candidate in enumerate_candidates(self.table, state, forbidden, length):
            considered += 1
            if best is not None and len(candidate) >= len(best):
                continue
            if not candidate.used_transitions.isdisjoint(forbidden):
                continue
            if is_unique_for_state(self.table, state, candidate.input, candidate.output):
                best = candidate

        logger.debug(
            f"State {state!r}, length {length}: {considered} candidates, "
            f"selected {best.input if best else None!r}"
        )
        return best

    def run(self) -> UIOResult:
        """Run the length-ascending assignment over every state."""
        states = self.table.states
        sequences: dict[StateId, Sequence] = {}
        forbidden: set[TransitionKey] = set()

        for length in range(1, self.max_length + 1):
            for state in states:
                if state in sequences:
                    continue
                chosen = self.select(state, frozenset(forbidden), length)
                if chosen is None:
                    continue
                sequences[state] = chosen
                forbidden |= chosen.used_transitions
                logger.debug(
                    f"Assigned state {state!r}: input={chosen.input!r} output={chosen.output!r}"
                )

        unresolved = [state for state in states if state not in sequences]
        logger.info(
            f"UIO on '{self.table.name}': {len(sequences)}/{len(states)} states resolved "
            f"(max_length={self.max_length})"
        )

        return UIOResult(
            sequences=sequences,
            unresolved=unresolved,
            forbidden=frozenset(forbidden),
            max_length=self.max_length,
        )


def find_identifying_sequences(
    table: TransitionTable,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> dict[StateId, IdentifyingSequence]:
    """Mapping state -> (input, output) for every state that has a UIO sequence.

    Use UIOFinder directly to also get used-transition sets and the list of
    unresolved states.
    """
    return UIOFinder(table, max_length=max_length).run().assignment
