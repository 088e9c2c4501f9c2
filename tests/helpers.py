from __future__ import annotations

from collections import Counter
from typing import Sequence

from rae.contracts import Character
from rae.core import seeded_random


def make_character(
    character_id: str,
    status: str,
    marches_count: int = 6,
    main_character_id: str | None = None,
    max_reinforcement_marches: int | None = None,
    reinforcement_capacity: int | None = None,
    confidence_level: float | None = None,
    town_center_level: int | None = None,
) -> Character:
    return Character(
        character_id=character_id,
        name=f"User {character_id}",
        power_level=1000,
        status=status,
        marches_count=marches_count,
        main_character_id=main_character_id,
        max_reinforcement_marches=max_reinforcement_marches,
        reinforcement_capacity=reinforcement_capacity,
        confidence_level=confidence_level,
        town_center_level=town_center_level,
    )


def by_id(result: Sequence[Character]) -> dict[str, Character]:
    return {c.character_id: c for c in result}


def incoming(result: Sequence[Character]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for source in result:
        for edge in source.reinforce:
            counts[edge.target_id] += 1
    return counts


def random_roster(seed: int, size: int = 14) -> list[Character]:
    rng = seeded_random(seed)
    statuses = ["online", "offline_empty", "offline_not_empty", "unknown"]
    roster: list[Character] = []
    for index in range(size):
        cid = f"C{index:02d}"
        owner = None
        if roster and rng.rand() < 0.2:
            owner = rng.choice([c.character_id for c in roster if not c.main_character_id] or ["missing"])
        roster.append(
            make_character(
                cid,
                rng.choice(statuses),
                marches_count=rng.randint(0, 8),
                main_character_id=owner,
                max_reinforcement_marches=rng.choice([None, None, 1, 2, 4]),
                reinforcement_capacity=rng.choice([None, None, 150_000, 320_000, 900_000]),
                confidence_level=rng.choice([None, 0.5, 0.8, 1.0, 1.4, 2.0]),
                town_center_level=rng.choice([None, 30, 34, 36]),
            )
        )
    return roster
