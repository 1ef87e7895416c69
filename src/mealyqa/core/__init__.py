"""Core data model: the transition table and sequence replay."""

from mealyqa.core.replay import (
    IMPOSSIBLE,
    ReplayOutcome,
    detailed_steps,
    replay,
    used_transitions,
    walk,
)
from mealyqa.core.table import (
    StateId,
    TableBuilder,
    Transition,
    TransitionDetail,
    TransitionKey,
    TransitionTable,
    state_sort_key,
)

__all__ = [
    "StateId",
    "Transition",
    "TransitionKey",
    "TransitionDetail",
    "TransitionTable",
    "TableBuilder",
    "state_sort_key",
    "IMPOSSIBLE",
    "ReplayOutcome",
    "replay",
    "used_transitions",
    "detailed_steps",
    "walk",
]
