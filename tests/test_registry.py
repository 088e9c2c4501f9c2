from __future__ import annotations

import logging

import pytest

from rae.assignment import (
    AlgorithmRegistry,
    EmptyAssignmentAlgorithm,
    build_default_registry,
    calculate_assignments,
    get_available_algorithms,
)
from rae.core import stable_order
from tests.helpers import make_character


class ReverseNamesAlgorithm:
    name = "reverse"
    description = "Test double returning the roster reversed."

    def solve(self, roster):
        return list(reversed(roster))


def test_available_algorithms_include_greedy_smart_and_empty():
    names = [info.name for info in get_available_algorithms()]
    assert {"greedy", "smart", "empty"} <= set(names)
    assert all(info.description for info in get_available_algorithms())


def test_unknown_algorithm_falls_back_to_greedy(caplog):
    roster = [make_character("Main", "online", marches_count=1), make_character("Farm", "offline_empty", main_character_id="Main")]
    registry = build_default_registry(stable_order())
    with caplog.at_level(logging.WARNING, logger="rae.assignment.registry"):
        result = calculate_assignments(roster, "does-not-exist", registry=registry)
    assert result[0].target_ids() == ["Farm"]
    assert result[0].score is not None
    assert "falling back" in caplog.text


def test_default_algorithm_is_greedy():
    registry = build_default_registry(stable_order())
    assert registry.get(None).name == "greedy"


def test_require_is_strict():
    registry = build_default_registry(stable_order())
    with pytest.raises(KeyError):
        registry.require("nope")


def test_registries_are_independent_and_accept_custom_strategies():
    custom = AlgorithmRegistry([ReverseNamesAlgorithm(), EmptyAssignmentAlgorithm()], default_name="empty")
    default = build_default_registry(stable_order())
    assert "reverse" in custom
    assert "reverse" not in default
    roster = [make_character("A", "online"), make_character("B", "online")]
    assert [c.character_id for c in calculate_assignments(roster, "reverse", registry=custom)] == ["B", "A"]
    assert calculate_assignments(roster, "unknown", registry=custom)[0].reinforce == []


def test_calculate_assignments_dispatches_by_name():
    roster = [make_character("A", "online"), make_character("B", "online")]
    registry = build_default_registry(stable_order())
    assert calculate_assignments(roster, "empty", registry=registry)[0].reinforce == []
    assert calculate_assignments(roster, "smart", registry=registry)[0].target_ids() == ["B"]
