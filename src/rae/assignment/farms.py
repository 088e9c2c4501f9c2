from __future__ import annotations

from typing import Callable, Sequence

from rae.contracts import Character

from .ledger import AssignmentLedger


def farms_by_owner(roster: Sequence[Character]) -> dict[str, list[Character]]:
    owned: dict[str, list[Character]] = {}
    for character in roster:
        if character.main_character_id:
            owned.setdefault(character.main_character_id, []).append(character)
    return owned


def assign_farm_priority(
    ledger: AssignmentLedger,
    roster: Sequence[Character],
    *,
    owner_eligible: Callable[[Character], bool],
    weight: Callable[[Character], float] = lambda _: 1.0,
) -> int:
    """Spend each owner's marches on its own farms, one edge per farm.

    Owners are visited in roster order. Farms never reciprocate, and an owner
    that is itself a farm is skipped.
    """
    owned = farms_by_owner(roster)
    made = 0
    for owner in roster:
        farms = owned.get(owner.character_id)
        if not farms or owner.is_farm or not owner_eligible(owner):
            continue
        for farm in farms:
            if ledger.remaining(owner.character_id) <= 0:
                break
            if ledger.try_assign(owner.character_id, farm.character_id, weight=weight(owner)):
                made += 1
    return made
