from __future__ import annotations

import pytest

from rae.assignment import CapacityResolver, clone_roster, normalize_marches_count, normalize_status, resolve_confidence
from rae.contracts import CharacterStatus
from rae.core import CapacityPolicy
from tests.helpers import make_character


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("online", CharacterStatus.ONLINE),
        ("offline_empty", CharacterStatus.OFFLINE_EMPTY),
        ("offline_not_empty", CharacterStatus.OFFLINE_NOT_EMPTY),
        ("unknown", CharacterStatus.OFFLINE_NOT_EMPTY),
        ("not_available", CharacterStatus.OFFLINE_NOT_EMPTY),
        (None, CharacterStatus.OFFLINE_NOT_EMPTY),
    ],
)
def test_status_normalization_is_total(raw, expected):
    assert normalize_status(raw) is expected


@pytest.mark.parametrize("raw,expected", [(0, 6), (None, 6), (1, 1), (4, 4), (6, 6), (9, 6), (-3, 1)])
def test_marches_count_defaults_and_clamps(raw, expected):
    assert normalize_marches_count(raw) == expected


def test_confidence_defaults_when_unset():
    assert resolve_confidence(make_character("A", "online")) == 1.0
    assert resolve_confidence(make_character("A", "online"), default=0.7) == 0.7
    assert resolve_confidence(make_character("A", "online", confidence_level=1.6)) == 1.6


def test_incoming_cap_prefers_smaller_of_explicit_and_troop_capacity():
    resolver = CapacityResolver(CapacityPolicy())
    assert resolver.incoming_cap(make_character("A", "online")) is None
    assert resolver.incoming_cap(make_character("A", "online"), default=3) == 3
    assert resolver.incoming_cap(make_character("A", "online", reinforcement_capacity=300_000)) == 2
    assert resolver.incoming_cap(make_character("A", "online", reinforcement_capacity=449_999)) == 2
    assert resolver.incoming_cap(make_character("A", "online", max_reinforcement_marches=4)) == 4
    both = make_character("A", "online", max_reinforcement_marches=4, reinforcement_capacity=300_000)
    assert resolver.incoming_cap(both) == 2
    assert resolver.incoming_cap(make_character("A", "online", reinforcement_capacity=0)) == 0


def test_outgoing_capacity_forced_to_zero_for_passive_characters():
    resolver = CapacityResolver(CapacityPolicy())
    farm = make_character("F", "online", marches_count=0, main_character_id="M")
    limits = resolver.resolve([farm], passive=lambda c: c.is_farm, incoming_default=lambda c: None)
    assert limits["F"].outgoing == 0
    assert limits["F"].unbounded


def test_invalid_capacity_policy_rejected():
    with pytest.raises(ValueError):
        CapacityResolver(CapacityPolicy(troops_per_march=0))


def test_clone_roster_is_deep():
    roster = [make_character("A", "online")]
    copied = clone_roster(roster)
    copied[0].status = "offline_empty"
    copied[0].extras["x"] = 1
    assert roster[0].status == "online"
    assert roster[0].extras == {}
