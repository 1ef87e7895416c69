"""Pytest fixtures for MealyQA tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mealyqa.core.table import TableBuilder, TransitionTable

REFERENCE_DEFINITION = {
    "name": "reference",
    "states": {
        "1": {"transitions": {"a": {"toState": 2, "output": "z"}}},
        "2": {"transitions": {"b": {"toState": 3, "output": "t"}, "a": {"toState": 4, "output": "x"}}},
        "3": {"transitions": {"b": {"toState": 1, "output": "x"}, "a": {"toState": 2, "output": "x"}}},
        "4": {"transitions": {"a": {"toState": 2, "output": "y"}, "b": {"toState": 5, "output": "x"}}},
        "5": {"transitions": {"a": {"toState": 3, "output": "z"}}},
    },
}


@pytest.fixture
def reference_table() -> TransitionTable:
    """The five-state reference machine.

    1 -a/z-> 2, 2 -b/t-> 3, 2 -a/x-> 4, 3 -b/x-> 1, 3 -a/x-> 2,
    4 -a/y-> 2, 4 -b/x-> 5, 5 -a/z-> 3
    """
    return (
        TableBuilder(name="reference")
        .state(1).on_input("a", 2, "z")
        .state(2).on_input("b", 3, "t").on_input("a", 4, "x")
        .state(3).on_input("b", 1, "x").on_input("a", 2, "x")
        .state(4).on_input("a", 2, "y").on_input("b", 5, "x")
        .state(5).on_input("a", 3, "z")
        .build()
    )


@pytest.fixture
def partial_table() -> TransitionTable:
    """State 2 has no transition on 'a', state 1 none on 'b'."""
    return (
        TableBuilder(name="partial")
        .state(1).on_input("a", 2, "x")
        .state(2).on_input("b", 1, "x")
        .build()
    )


@pytest.fixture
def twin_table() -> TransitionTable:
    """Two states that behave identically on every input."""
    return (
        TableBuilder(name="twins")
        .state(1).on_input("a", 2, "x")
        .state(2).on_input("a", 1, "x")
        .build()
    )


@pytest.fixture
def named_table() -> TransitionTable:
    """String states: A alone answers 'a' with 'x'."""
    return (
        TableBuilder(name="named")
        .state("A").on_input("a", "B", "x")
        .state("B").on_input("a", "A", "y")
        .build()
    )


@pytest.fixture
def reference_file(tmp_path: Path) -> Path:
    path = tmp_path / "reference.json"
    path.write_text(json.dumps(REFERENCE_DEFINITION))
    return path


@pytest.fixture
def twin_file(tmp_path: Path) -> Path:
    path = tmp_path / "twins.yaml"
    path.write_text(
        "transitions:\n"
        "  - {from: 1, to: 2, input: a, output: x}\n"
        "  - {from: 2, to: 1, input: a, output: x}\n"
    )
    return path
