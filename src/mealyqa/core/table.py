"""Transition Table: the Mealy machine both engines read.

A Mealy machine is modelled as a mapping::

    state -> {input symbol -> Transition(to_state, output)}

The table is deterministic (one transition per (state, input symbol)) but
need not be complete: a missing (state, input symbol) pair is a meaningful
observable, not an error. Once built, a TransitionTable is read-only.

Ordering rules the engines rely on:
- ``table.states`` is sorted ascending (ints before strings).
- ``table.inputs(state)`` keeps definition order.

Example:
    >>> from mealyqa.core.table import TableBuilder
    >>>
    >>> table = (
    ...     TableBuilder(name="toggle")
    ...     .state(1).on_input("a", 2, "x")
    ...     .state(2).on_input("a", 1, "y")
    ...     .build()
    ... )
    >>> table.get(1, "a")
    Transition(to_state=2, output='x')
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NamedTuple

from mealyqa.errors import (
    DuplicateTransitionError,
    ErrorContext,
    InvalidSymbolError,
    InvalidTableError,
)

logger = logging.getLogger(__name__)

StateId = Hashable


class Transition(NamedTuple):
    """Destination and output of a single (state, input symbol) transition."""

    to_state: StateId
    output: str


class TransitionKey(NamedTuple):
    """A (state, input symbol) pair identifying one transition.

    Compares equal to the plain tuple ``(state, symbol)``.
    """

    state: StateId
    symbol: str


@dataclass(frozen=True)
class TransitionDetail:
    """Full record of one traversed transition.

    Attributes:
        from_state: State the transition leaves.
        to_state: State the transition enters.
        input: Input symbol consumed.
        output: Output symbol produced.
    """

    from_state: StateId
    to_state: StateId
    input: str
    output: str

    @property
    def key(self) -> TransitionKey:
        return TransitionKey(self.from_state, self.input)

    def __str__(self) -> str:
        return (
            f"({self.from_state}, {self.input}) : state {self.from_state} -> "
            f"state {self.to_state}, input/output: {self.input}/{self.output}"
        )


def state_sort_key(state: StateId) -> tuple[int, Any]:
    """Total order over state identifiers: numbers first, then by string form."""
    if isinstance(state, (int, float)) and not isinstance(state, bool):
        return (0, state)
    return (1, str(state))


class TransitionTable:
    """Read-only transition table of a deterministic Mealy machine.

    Args:
        transitions: Mapping ``state -> {symbol -> (to_state, output)}``. Inner
            values may be Transition instances or plain 2-tuples.
        name: Human-readable machine name (used in reports and errors).

    Raises:
        InvalidTableError: If a state maps to something that is not a mapping.
        InvalidSymbolError: If an input symbol is not a single character.
    """

    def __init__(
        self,
        transitions: Mapping[StateId, Mapping[str, Transition | tuple[StateId, str]]] | None = None,
        name: str = "machine",
    ) -> None:
        self.name = name
        table: dict[StateId, Mapping[str, Transition]] = {}

        for state, row in (transitions or {}).items():
            if not isinstance(row, Mapping):
                raise InvalidTableError(
                    f"Transitions of state {state!r} must be a mapping, got {type(row).__name__}",
                    context=ErrorContext(table_name=name, state=state),
                )
            normalized: dict[str, Transition] = {}
            for symbol, target in row.items():
                _check_symbol(symbol, state, name)
                to_state, output = target
                normalized[symbol] = Transition(to_state, str(output))
            table[state] = MappingProxyType(normalized)

        self._table = table
        self._states = tuple(sorted(table, key=state_sort_key))

    @property
    def states(self) -> tuple[StateId, ...]:
        """All states, in ascending order."""
        return self._states

    @property
    def alphabet(self) -> tuple[str, ...]:
        """Input symbols used anywhere in the table, in discovery order."""
        seen: dict[str, None] = {}
        for state in self._states:
            for symbol in self._table[state]:
                seen.setdefault(symbol, None)
        return tuple(seen)

    @property
    def transition_count(self) -> int:
        return sum(len(row) for row in self._table.values())

    def inputs(self, state: StateId) -> tuple[str, ...]:
        """Input symbols defined for ``state``, in definition order."""
        row = self._table.get(state)
        return tuple(row) if row is not None else ()

    def transitions_from(self, state: StateId) -> Mapping[str, Transition]:
        """Read-only view of the outgoing transitions of ``state``."""
        return self._table.get(state, MappingProxyType({}))

    def get(self, state: StateId, symbol: str) -> Transition | None:
        """Return the transition for (state, symbol), or None if there is none."""
        row = self._table.get(state)
        if row is None:
            return None
        return row.get(symbol)

    def details(self) -> Iterator[TransitionDetail]:
        """Iterate over every transition, states ascending, symbols in definition order."""
        for state in self._states:
            for symbol, transition in self._table[state].items():
                yield TransitionDetail(state, transition.to_state, symbol, transition.output)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{"states": {...}}`` definition-file shape."""
        return {
            "name": self.name,
            "states": {
                str(state): {
                    "transitions": {
                        symbol: {"toState": t.to_state, "output": t.output}
                        for symbol, t in self._table[state].items()
                    }
                }
                for state in self._states
            },
        }

    def __contains__(self, state: object) -> bool:
        return state in self._table

    def __iter__(self) -> Iterator[StateId]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return (
            f"TransitionTable(name='{self.name}', "
            f"states={len(self._states)}, "
            f"transitions={self.transition_count})"
        )


def _check_symbol(symbol: Any, state: StateId, table_name: str) -> None:
    if not isinstance(symbol, str) or len(symbol) != 1:
        raise InvalidSymbolError(
            f"Input symbol {symbol!r} of state {state!r} must be a single character",
            context=ErrorContext(table_name=table_name, state=state, symbol=str(symbol)),
        )


class TableBuilder:
    """Fluent builder for TransitionTable.

    ``state()`` declares a state and makes it current; ``on_input()`` adds a
    transition leaving the current state. Symbols keep the order in which
    they are added.

    Example:
        >>> table = (
        ...     TableBuilder()
        ...     .state(1).on_input("a", 2, "z")
        ...     .state(2).on_input("b", 3, "t").on_input("a", 4, "x")
        ...     .build()
        ... )
    """

    def __init__(self, name: str = "machine") -> None:
        self.name = name
        self._rows: dict[StateId, dict[str, Transition]] = {}
        self._current: StateId | None = None
        self._has_current = False

    def state(self, state: StateId) -> TableBuilder:
        """Declare ``state`` (idempotent) and make it the current state."""
        self._rows.setdefault(state, {})
        self._current = state
        self._has_current = True
        return self

    def on_input(self, symbol: str, to_state: StateId, output: str) -> TableBuilder:
        """Add ``current --symbol/output--> to_state``.

        Raises:
            InvalidTableError: If no state has been declared yet.
            InvalidSymbolError: If ``symbol`` is not a single character.
            DuplicateTransitionError: If the current state already has a
                transition on ``symbol``.
        """
        if not self._has_current:
            raise InvalidTableError(
                "on_input() called before any state() declaration",
                context=ErrorContext(table_name=self.name, symbol=str(symbol)),
            )
        return self.transition(self._current, symbol, to_state, output)

    def transition(
        self,
        from_state: StateId,
        symbol: str,
        to_state: StateId,
        output: str,
    ) -> TableBuilder:
        """Add a transition from an explicit state, declaring it if needed."""
        _check_symbol(symbol, from_state, self.name)
        row = self._rows.setdefault(from_state, {})
        if symbol in row:
            raise DuplicateTransitionError(
                f"State {from_state!r} already has a transition on {symbol!r}",
                context=ErrorContext(table_name=self.name, state=from_state, symbol=symbol),
                existing=tuple(row[symbol]),
            )
        row[symbol] = Transition(to_state, output)
        return self

    def build(self) -> TransitionTable:
        table = TransitionTable(self._rows, name=self.name)
        logger.debug(f"Built table '{self.name}': {table!r}")
        return table
