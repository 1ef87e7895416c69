"""W-method engine: discrimination tree over the state set.

Starting from the full state set, each block of more than one state is split
with the I/O pair that separates it most evenly: the positive group answers
``input`` with ``output``, the negative group answers with another output or
has no transition on ``input``. Splitting repeats on both groups with the
same full pair list until every block holds one state or no pair separates
it.

The root-to-leaf labels then form a distinguishing sequence per state.

Tie-breaking is explicit: pairs are tried in discovery order (states
ascending, symbols in definition order) and the first pair reaching the best
score wins.

Example:
    >>> from mealyqa.wmethod import build_discrimination_tree, extract_sequences
    >>> tree, steps = build_discrimination_tree(table)
    >>> extract_sequences(tree)[1]
    ['a/z']
"""

from __future__ import annotations

import logging

from mealyqa.core.table import StateId, TransitionTable
from mealyqa.wmethod.tree import DiscriminationTree, IOPair, Step, WResult

logger = logging.getLogger(__name__)


def collect_io_pairs(table: TransitionTable) -> list[IOPair]:
    """Every I/O pair appearing in ``table``, in discovery order, without duplicates."""
    seen: dict[IOPair, None] = {}
    for detail in table.details():
        seen.setdefault(IOPair(detail.input, detail.output), None)
    return list(seen)


def split_block(
    table: TransitionTable,
    block: tuple[StateId, ...],
    pair: IOPair,
) -> tuple[tuple[StateId, ...], tuple[StateId, ...]]:
    """Split ``block`` into (positive, negative) groups for ``pair``.

    Positive: states whose transition on ``pair.input`` outputs
    ``pair.output``. Negative: every other state, including states without
    a transition on ``pair.input``. Block order is preserved.
    """
    positive: list[StateId] = []
    negative: list[StateId] = []
    for state in block:
        transition = table.get(state, pair.input)
        if transition is not None and transition.output == pair.output:
            positive.append(state)
        else:
            negative.append(state)
    return tuple(positive), tuple(negative)


def choose_pair(
    table: TransitionTable,
    block: tuple[StateId, ...],
    pairs: list[IOPair],
) -> tuple[IOPair, tuple[StateId, ...], tuple[StateId, ...]] | None:
    """Best discriminating pair for ``block``, or None if no pair splits it.

    Maximizes the smaller group, then minimizes the larger one. Earlier pairs
    win ties.
    """
    best: tuple[IOPair, tuple[StateId, ...], tuple[StateId, ...]] | None = None
    best_smallest = 0
    best_largest = len(block)

    for pair in pairs:
        positive, negative = split_block(table, block, pair)
        if not positive or not negative:
            continue
        smallest = min(len(positive), len(negative))
        largest = max(len(positive), len(negative))
        if smallest > best_smallest or (smallest == best_smallest and largest < best_largest):
            best_smallest = smallest
            best_largest = largest
            best = (pair, positive, negative)

    return best


def build_discrimination_tree(
    table: TransitionTable,
    pairs: list[IOPair] | None = None,
) -> WResult:
    """Build the discrimination tree of ``table``.

    Uses an explicit stack; nodes and steps are created in pre-order,
    positive subtree first.

    Args:
        table: The machine.
        pairs: Candidate I/O pairs in priority order. Defaults to
            collect_io_pairs(table).

    Returns:
        WResult(tree, steps). An empty table yields a single empty terminal
        root and no steps.
    """
    if pairs is None:
        pairs = collect_io_pairs(table)

    tree = DiscriminationTree()
    steps: list[Step] = []

    # (block, parent id, True for the positive branch)
    stack: list[tuple[tuple[StateId, ...], int | None, bool]] = [(tuple(table.states), None, True)]

    while stack:
        block, parent, positive_branch = stack.pop()
        node = tree.add_node(block, parent=parent)
        if parent is not None:
            if positive_branch:
                tree.nodes[parent].matched = node.id
            else:
                tree.nodes[parent].unmatched = node.id

        if len(block) <= 1:
            continue

        choice = choose_pair(table, block, pairs)
        if choice is None:
            logger.debug(f"No pair separates block {list(block)}")
            continue

        pair, positive, negative = choice
        node.pair = pair
        steps.append(Step(
            starting_block=block,
            pair=pair,
            resulting_groups={pair.label: positive, pair.negated_label: negative},
        ))
        logger.debug(f"Split {list(block)} on {pair}: {list(positive)} | {list(negative)}")

        stack.append((negative, node.id, False))
        stack.append((positive, node.id, True))

    logger.info(
        f"W-method on '{table.name}': {len(steps)} splits, {len(tree.leaves())} leaves, "
        f"depth {tree.depth}"
    )
    return WResult(tree=tree, steps=steps)


def extract_sequences(tree: DiscriminationTree) -> dict[StateId, list[str]]:
    """Branch labels from the root to each state's leaf.

    States sharing a terminal leaf get identical label lists.
    """
    sequences: dict[StateId, list[str]] = {}
    if not tree.nodes:
        return sequences

    stack: list[tuple[int, list[str]]] = [(tree.root.id, [])]
    while stack:
        node_id, labels = stack.pop()
        node = tree.node(node_id)
        if node.terminal:
            for state in node.states:
                sequences[state] = list(labels)
            continue
        for label, child in reversed(tree.children(node)):
            stack.append((child.id, labels + [label]))

    return sequences
