"""MealyQA - Test sequence generation for deterministic Mealy machines.

Computes Unique Input/Output (UIO) sequences and W-method discrimination
trees for a machine given as a transition table.

Quick Start:
    from mealyqa import TableBuilder, UIOFinder, build_discrimination_tree

    table = (
        TableBuilder("door")
        .state("closed").on_input("o", "open", "1")
        .state("open").on_input("c", "closed", "0")
        .build()
    )

    result = UIOFinder(table, max_length=3).run()
    tree, steps = build_discrimination_tree(table)

Or from the command line:
    mealyqa uio machine.json
    mealyqa wmethod machine.yaml --no-steps
"""

from __future__ import annotations

from mealyqa.core import (
    IMPOSSIBLE,
    ReplayOutcome,
    StateId,
    TableBuilder,
    Transition,
    TransitionDetail,
    TransitionKey,
    TransitionTable,
    detailed_steps,
    replay,
    used_transitions,
)
from mealyqa.errors import (
    ConfigValidationError,
    DuplicateTransitionError,
    ErrorCode,
    InvalidSymbolError,
    InvalidTableError,
    MealyQAError,
    TableError,
    TableFileNotFoundError,
    TableLoadError,
)
from mealyqa.loader import load_table, load_table_from_dict
from mealyqa.uio import (
    AuditReport,
    IdentifyingSequence,
    Sequence,
    UIOFinder,
    UIOResult,
    audit_assignment,
    find_identifying_sequences,
)
from mealyqa.wmethod import (
    DiscriminationTree,
    IOPair,
    Step,
    TreeNode,
    WResult,
    build_discrimination_tree,
    extract_sequences,
)

__version__ = "0.1.0"

__all__ = [
    # Transition table
    "StateId",
    "Transition",
    "TransitionKey",
    "TransitionDetail",
    "TransitionTable",
    "TableBuilder",
    "load_table",
    "load_table_from_dict",
    # Replay
    "replay",
    "used_transitions",
    "detailed_steps",
    "IMPOSSIBLE",
    "ReplayOutcome",
    # UIO
    "Sequence",
    "IdentifyingSequence",
    "UIOResult",
    "UIOFinder",
    "find_identifying_sequences",
    "AuditReport",
    "audit_assignment",
    # W-method
    "IOPair",
    "TreeNode",
    "DiscriminationTree",
    "Step",
    "WResult",
    "build_discrimination_tree",
    "extract_sequences",
    # Errors
    "MealyQAError",
    "ErrorCode",
    "TableError",
    "InvalidTableError",
    "DuplicateTransitionError",
    "InvalidSymbolError",
    "TableLoadError",
    "TableFileNotFoundError",
    "ConfigValidationError",
    "__version__",
]
