"""Discrimination tree data structures.

The tree is stored as an arena: ``DiscriminationTree.nodes`` is a flat list
and nodes refer to their parent and children by index. Node 0 is the root.

Each node covers a *block* of states still to be told apart. A terminal node
has no pair and no children; it covers one state, no state, or several states
that no I/O pair separates. An internal node holds the I/O pair it tested and
exactly two children: the states that answer the pair ("a/x") and the states
that do not ("not a/x").
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from mealyqa.core.table import StateId


class IOPair(NamedTuple):
    """An (input symbol, output symbol) test."""

    input: str
    output: str

    @property
    def label(self) -> str:
        """Branch label of the states that answer this pair."""
        return f"{self.input}/{self.output}"

    @property
    def negated_label(self) -> str:
        """Branch label of the states that do not."""
        return f"not {self.label}"

    def __str__(self) -> str:
        return self.label


@dataclass
class TreeNode:
    """One block of the discrimination tree.

    Attributes:
        id: Index in the arena.
        states: States of the block, ascending.
        parent: Index of the parent node (None for the root).
        depth: Distance from the root.
        pair: The I/O pair tested here (None for terminal nodes).
        matched: Index of the child answering ``pair``.
        unmatched: Index of the child not answering ``pair``.
    """

    id: int
    states: tuple[StateId, ...]
    parent: int | None = None
    depth: int = 0
    pair: IOPair | None = None
    matched: int | None = None
    unmatched: int | None = None

    @property
    def terminal(self) -> bool:
        return self.pair is None

    @property
    def degenerate(self) -> bool:
        """Terminal node still holding several states."""
        return self.terminal and len(self.states) > 1


@dataclass(frozen=True)
class Step:
    """Trace record of one split, in creation order.

    Attributes:
        starting_block: States of the split node.
        pair: The chosen I/O pair.
        resulting_groups: Branch label -> states, positive branch first.
    """

    starting_block: tuple[StateId, ...]
    pair: IOPair
    resulting_groups: dict[str, tuple[StateId, ...]]


@dataclass
class DiscriminationTree:
    """Arena of TreeNode; node 0 is the root once the tree is built."""

    nodes: list[TreeNode] = field(default_factory=list)

    @property
    def root(self) -> TreeNode:
        return self.nodes[0]

    @property
    def states(self) -> tuple[StateId, ...]:
        return self.root.states if self.nodes else ()

    @property
    def depth(self) -> int:
        return max((node.depth for node in self.nodes), default=0)

    def add_node(self, states: tuple[StateId, ...], parent: int | None = None) -> TreeNode:
        depth = 0 if parent is None else self.nodes[parent].depth + 1
        node = TreeNode(id=len(self.nodes), states=states, parent=parent, depth=depth)
        self.nodes.append(node)
        return node

    def node(self, node_id: int) -> TreeNode:
        return self.nodes[node_id]

    def children(self, node: TreeNode) -> list[tuple[str, TreeNode]]:
        """Labelled children of ``node``, positive branch first."""
        if node.terminal:
            return []
        result = []
        if node.matched is not None:
            result.append((node.pair.label, self.nodes[node.matched]))
        if node.unmatched is not None:
            result.append((node.pair.negated_label, self.nodes[node.unmatched]))
        return result

    def walk(self) -> Iterator[TreeNode]:
        """Pre-order traversal, positive branch before negative."""
        if not self.nodes:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(child for _, child in reversed(self.children(node)))

    def leaves(self) -> list[TreeNode]:
        return [node for node in self.walk() if node.terminal]

    def indistinguishable_blocks(self) -> list[tuple[StateId, ...]]:
        """Blocks of states that share a terminal leaf."""
        return [node.states for node in self.leaves() if node.degenerate]

    def to_dict(self, node: TreeNode | None = None) -> dict[str, Any]:
        """Nested dict view, for JSON output."""
        if node is None:
            if not self.nodes:
                return {}
            node = self.root
        data: dict[str, Any] = {
            "states": list(node.states),
            "terminal": node.terminal,
        }
        if not node.terminal:
            data["pair"] = node.pair.label
            data["groups"] = {label: self.to_dict(child) for label, child in self.children(node)}
        return data

    def __len__(self) -> int:
        return len(self.nodes)


class WResult(NamedTuple):
    """The discrimination tree and its split trace."""

    tree: DiscriminationTree
    steps: list[Step]
