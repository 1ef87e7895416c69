"""Tests for the W-method discrimination tree."""

from __future__ import annotations

from mealyqa.core.table import TableBuilder, TransitionTable
from mealyqa.wmethod import (
    DiscriminationTree,
    IOPair,
    build_discrimination_tree,
    choose_pair,
    collect_io_pairs,
    extract_sequences,
    split_block,
)


class TestIOPair:
    """Tests for IOPair labels."""

    def test_labels(self) -> None:
        pair = IOPair("a", "x")
        assert pair.label == "a/x"
        assert pair.negated_label == "not a/x"
        assert str(pair) == "a/x"


class TestCollectPairs:
    """Tests for collect_io_pairs()."""

    def test_discovery_order_without_duplicates(self, reference_table: TransitionTable) -> None:
        assert collect_io_pairs(reference_table) == [
            IOPair("a", "z"),
            IOPair("b", "t"),
            IOPair("a", "x"),
            IOPair("b", "x"),
            IOPair("a", "y"),
        ]

    def test_empty_table(self) -> None:
        assert collect_io_pairs(TransitionTable()) == []


class TestSplitBlock:
    """Tests for split_block() and choose_pair()."""

    def test_split(self, reference_table: TransitionTable) -> None:
        positive, negative = split_block(reference_table, (1, 2, 3, 4, 5), IOPair("a", "z"))
        assert positive == (1, 5)
        assert negative == (2, 3, 4)

    def test_missing_input_goes_negative(self, reference_table: TransitionTable) -> None:
        positive, negative = split_block(reference_table, (1, 3, 4), IOPair("b", "x"))
        assert positive == (3, 4)
        assert negative == (1,)

    def test_choose_most_balanced(self, reference_table: TransitionTable) -> None:
        pair, positive, negative = choose_pair(
            reference_table, (1, 2, 3, 4, 5), collect_io_pairs(reference_table)
        )
        # a/z, a/x and b/x all split 2|3; a/z is discovered first
        assert pair == IOPair("a", "z")
        assert (positive, negative) == ((1, 5), (2, 3, 4))

    def test_choose_maximizes_smaller_group(self) -> None:
        table = (
            TableBuilder()
            .state(1).on_input("a", 1, "x").on_input("b", 1, "x")
            .state(2).on_input("a", 1, "y").on_input("b", 1, "x")
            .state(3).on_input("a", 1, "y").on_input("b", 1, "y")
            .state(4).on_input("a", 1, "y").on_input("b", 1, "y")
            .build()
        )
        pair, _, _ = choose_pair(table, (1, 2, 3, 4), collect_io_pairs(table))
        assert pair == IOPair("b", "x")

    def test_no_discriminating_pair(self, twin_table: TransitionTable) -> None:
        assert choose_pair(twin_table, (1, 2), collect_io_pairs(twin_table)) is None


class TestBuildDiscriminationTree:
    """Tests for build_discrimination_tree()."""

    def test_reference_steps(self, reference_table: TransitionTable) -> None:
        tree, steps = build_discrimination_tree(reference_table)

        assert [step.pair.label for step in steps] == ["a/z", "b/t", "a/x"]
        assert steps[0].starting_block == (1, 2, 3, 4, 5)
        assert steps[0].resulting_groups == {"a/z": (1, 5), "not a/z": (2, 3, 4)}
        assert steps[1].resulting_groups == {"b/t": (2,), "not b/t": (3, 4)}
        assert steps[2].resulting_groups == {"a/x": (3,), "not a/x": (4,)}

    def test_reference_tree_shape(self, reference_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(reference_table)

        assert len(tree) == 7
        assert tree.depth == 3
        assert tree.root.states == (1, 2, 3, 4, 5)
        assert tree.root.pair == IOPair("a", "z")
        assert [leaf.states for leaf in tree.leaves()] == [(1, 5), (2,), (3,), (4,)]

    def test_reference_indistinguishable_block(self, reference_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(reference_table)
        assert tree.indistinguishable_blocks() == [(1, 5)]

    def test_partition_invariant(self, reference_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(reference_table)
        for node in tree.walk():
            children = tree.children(node)
            if node.terminal:
                assert children == []
                continue
            assert len(children) == 2
            (_, matched), (_, unmatched) = children
            assert matched.states and unmatched.states
            assert not set(matched.states) & set(unmatched.states)
            assert set(matched.states) | set(unmatched.states) == set(node.states)
            assert matched.parent == node.id and unmatched.parent == node.id

    def test_identical_states_give_terminal_root(self, twin_table: TransitionTable) -> None:
        tree, steps = build_discrimination_tree(twin_table)

        assert steps == []
        assert len(tree) == 1
        assert tree.root.terminal
        assert tree.root.degenerate
        assert tree.root.states == (1, 2)

    def test_empty_table(self) -> None:
        tree, steps = build_discrimination_tree(TransitionTable())
        assert steps == []
        assert len(tree) == 1
        assert tree.root.states == ()
        assert tree.root.terminal
        assert extract_sequences(tree) == {}

    def test_single_state(self) -> None:
        table = TableBuilder().state(1).on_input("a", 1, "x").build()
        tree, steps = build_discrimination_tree(table)
        assert steps == []
        assert tree.root.terminal
        assert not tree.root.degenerate
        assert extract_sequences(tree) == {1: []}

    def test_pairs_are_reused_at_depth(self) -> None:
        # b/y splits both halves left by a/x
        table = (
            TableBuilder()
            .state(1).on_input("a", 1, "x").on_input("b", 1, "y")
            .state(2).on_input("a", 1, "x").on_input("b", 1, "z")
            .state(3).on_input("a", 1, "w").on_input("b", 1, "y")
            .state(4).on_input("a", 1, "w").on_input("b", 1, "z")
            .build()
        )
        tree, steps = build_discrimination_tree(table)
        assert [step.pair.label for step in steps] == ["a/x", "b/y", "b/y"]
        assert tree.indistinguishable_blocks() == []

    def test_explicit_pair_order(self, reference_table: TransitionTable) -> None:
        pairs = [IOPair("b", "x"), IOPair("a", "z"), IOPair("b", "t"), IOPair("a", "x"), IOPair("a", "y")]
        _, steps = build_discrimination_tree(reference_table, pairs=pairs)
        assert steps[0].pair == IOPair("b", "x")


class TestExtractSequences:
    """Tests for extract_sequences()."""

    def test_reference_sequences(self, reference_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(reference_table)
        assert extract_sequences(tree) == {
            1: ["a/z"],
            5: ["a/z"],
            2: ["not a/z", "b/t"],
            3: ["not a/z", "not b/t", "a/x"],
            4: ["not a/z", "not b/t", "not a/x"],
        }

    def test_every_state_appears_once(self, reference_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(reference_table)
        sequences = extract_sequences(tree)
        assert sorted(sequences) == list(tree.states)
        leaf_states = [state for leaf in tree.leaves() for state in leaf.states]
        assert sorted(leaf_states) == sorted(set(leaf_states))

    def test_shared_leaf_shares_labels(self, twin_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(twin_table)
        assert extract_sequences(tree) == {1: [], 2: []}

    def test_unbuilt_tree(self) -> None:
        assert extract_sequences(DiscriminationTree()) == {}


class TestTreeToDict:
    """Tests for the nested dict view."""

    def test_nested_groups(self, reference_table: TransitionTable) -> None:
        tree, _ = build_discrimination_tree(reference_table)
        data = tree.to_dict()

        assert data["pair"] == "a/z"
        assert data["groups"]["a/z"] == {"states": [1, 5], "terminal": True}
        assert data["groups"]["not a/z"]["groups"]["b/t"]["states"] == [2]

    def test_empty(self) -> None:
        assert DiscriminationTree().to_dict() == {}
