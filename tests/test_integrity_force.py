from __future__ import annotations

import json
from pathlib import Path

import pytest

from rae.assignment import (
    AlgorithmRegistry,
    AssignmentAuditor,
    RosterValidator,
    build_default_registry,
    calculate_assignments,
    clone_roster,
)
from rae.contracts import ReinforcementEdge, ValidationError
from rae.core import (
    AssignmentIntegrityError,
    CapacityPolicy,
    EnginePolicies,
    GreedyPolicy,
    SmartPolicy,
    stable_order,
)
from tests.helpers import incoming, make_character


class SelfLoopAlgorithm:
    name = "broken"
    description = "Test double that violates edge invariants."

    def solve(self, roster):
        working = clone_roster(roster)
        for character in working:
            character.reinforce = [ReinforcementEdge(character.character_id)]
        return working


def test_validator_rejects_duplicate_ids():
    roster = [make_character("A", "online"), make_character("A", "offline_empty")]
    with pytest.raises(ValidationError) as exc:
        RosterValidator().validate(roster)
    assert [i.code for i in exc.value.issues] == ["DUPLICATE_CHARACTER_ID"]


def test_validator_rejects_negative_capacity_and_bad_marches():
    bad = make_character("A", "online", reinforcement_capacity=-1)
    bad.marches_count = "six"  # type: ignore[assignment]
    with pytest.raises(ValidationError) as exc:
        RosterValidator().validate([bad])
    assert {i.code for i in exc.value.issues} == {"INVALID_MARCHES_COUNT", "NEGATIVE_REINFORCEMENT_CAPACITY"}


def test_validator_warns_without_blocking():
    result = RosterValidator().validate([
        make_character("F", "online", main_character_id="Ghost"),
        make_character("S", "unknown", main_character_id="S", confidence_level=3.5),
    ])
    assert result.ok
    assert {i.code for i in result.issues} == {
        "DANGLING_MAIN_CHARACTER",
        "SELF_OWNED_FARM",
        "UNDECLARED_STATUS",
        "CONFIDENCE_OUT_OF_RANGE",
    }
    assert all(i.severity == "warning" for i in result.issues)


def test_auditor_flags_every_violation_kind():
    source = make_character("S", "online", marches_count=1)
    source.reinforce = [ReinforcementEdge("T"), ReinforcementEdge("T"), ReinforcementEdge("S"), ReinforcementEdge("Ghost")]
    farm = make_character("F", "online", main_character_id="S")
    farm.reinforce = [ReinforcementEdge("T")]
    target = make_character("T", "online", max_reinforcement_marches=1)
    report = AssignmentAuditor().audit("greedy", [source, farm, target])
    codes = {i.code for i in report.issues}
    assert codes == {
        "OUTGOING_OVER_CAPACITY",
        "SELF_REINFORCEMENT",
        "DUPLICATE_EDGE",
        "UNKNOWN_TARGET",
        "FARM_AS_SOURCE",
        "INCOMING_OVER_CAP",
    }
    assert not report.passed


def test_strict_run_hard_stops_with_forensic_artifact(tmp_path: Path):
    registry = AlgorithmRegistry([SelfLoopAlgorithm()], default_name="broken")
    with pytest.raises(AssignmentIntegrityError) as exc:
        calculate_assignments([make_character("A", "online")], "broken", registry=registry, strict=True, forensic_dir=tmp_path)
    error = exc.value
    assert error.algorithm == "broken"
    assert error.error_code == "SELF_REINFORCEMENT"
    assert error.violations == ["SELF_REINFORCEMENT:A:character reinforces itself"]
    assert str(error).startswith("[SELF_REINFORCEMENT] broken assignment")
    written = list(tmp_path.glob("forensic_broken_*.json"))
    assert len(written) == 1
    payload = json.loads(written[0].read_text(encoding="utf-8"))
    assert payload["context"]["algorithm"] == "broken"
    assert payload["context"]["violation_codes"] == ["SELF_REINFORCEMENT"]
    assert payload["identifiers"] == {"A": "SELF_REINFORCEMENT"}


def test_non_strict_run_returns_whatever_the_strategy_produced():
    registry = AlgorithmRegistry([SelfLoopAlgorithm()], default_name="broken")
    result = calculate_assignments([make_character("A", "online")], "broken", registry=registry)
    assert result[0].target_ids() == ["A"]


def test_validator_rejects_non_numeric_limits():
    bad = make_character("A", "online")
    bad.reinforcement_capacity = "lots"  # type: ignore[assignment]
    bad.max_reinforcement_marches = "2"  # type: ignore[assignment]
    bad.confidence_level = "high"  # type: ignore[assignment]
    with pytest.raises(ValidationError) as exc:
        RosterValidator().validate([bad])
    assert [(i.code, i.field_path) for i in exc.value.issues] == [
        ("NON_NUMERIC_FIELD", "confidenceLevel"),
        ("NON_NUMERIC_FIELD", "maxReinforcementMarches"),
        ("NON_NUMERIC_FIELD", "reinforcementCapacity"),
    ]


def test_strict_run_audits_with_injected_capacity_policy():
    capacity = CapacityPolicy(troops_per_march=100_000)
    policies = EnginePolicies(
        greedy=GreedyPolicy(capacity=capacity),
        smart=SmartPolicy(capacity=capacity),
        capacity=capacity,
    )
    registry = build_default_registry(stable_order(), policies)
    roster = [make_character("T", "online", reinforcement_capacity=300_000)]
    roster.extend(make_character(f"S{i}", "online", marches_count=1, reinforcement_capacity=0) for i in range(1, 5))

    result = calculate_assignments(roster, "greedy", registry=registry, strict=True)

    assert incoming(result)["T"] == 3
    assert registry.require("greedy").capacity_policy is capacity
    assert not AssignmentAuditor().audit("greedy", result).passed
    assert AssignmentAuditor(capacity).audit("greedy", result).passed
