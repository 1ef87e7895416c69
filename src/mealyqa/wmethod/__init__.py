"""W-method discrimination trees.

- collect_io_pairs: Ordered I/O pair list of a table
- split_block: Positive/negative split of a block on one pair
- build_discrimination_tree: Tree plus split trace
- extract_sequences: Per-state branch label lists
"""

from mealyqa.wmethod.engine import (
    build_discrimination_tree,
    choose_pair,
    collect_io_pairs,
    extract_sequences,
    split_block,
)
from mealyqa.wmethod.tree import DiscriminationTree, IOPair, Step, TreeNode, WResult

__all__ = [
    "IOPair",
    "TreeNode",
    "DiscriminationTree",
    "Step",
    "WResult",
    "collect_io_pairs",
    "split_block",
    "choose_pair",
    "build_discrimination_tree",
    "extract_sequences",
]
