from __future__ import annotations

import math
from typing import Callable, Iterable

from rae.contracts import CapacityLimits, Character
from rae.core.policy import CapacityPolicy

from .normalize import normalize_marches_count

IncomingDefault = Callable[[Character], "int | None"]
PassivePredicate = Callable[[Character], bool]


class CapacityResolver:
    """Computes per-run outgoing capacity and incoming caps.

    Limits are resolved once, before any assignment phase, and never
    recomputed while edges are being placed.
    """

    def __init__(self, policy: CapacityPolicy) -> None:
        policy.validate()
        self._policy = policy

    def outgoing_capacity(self, character: Character, *, passive: bool = False) -> int:
        count = normalize_marches_count(character.marches_count, self._policy.max_marches)
        return 0 if passive else count

    def capacity_derived_cap(self, character: Character) -> int | None:
        if character.reinforcement_capacity is None:
            return None
        return max(0, math.floor(float(character.reinforcement_capacity) / self._policy.troops_per_march))

    def incoming_cap(self, character: Character, default: int | None = None) -> int | None:
        explicit = character.max_reinforcement_marches
        base = max(0, int(explicit)) if explicit is not None else default
        derived = self.capacity_derived_cap(character)
        if derived is None:
            return base
        if base is None:
            return derived
        return min(base, derived)

    def resolve(
        self,
        roster: Iterable[Character],
        *,
        passive: PassivePredicate,
        incoming_default: IncomingDefault,
    ) -> dict[str, CapacityLimits]:
        limits: dict[str, CapacityLimits] = {}
        for character in roster:
            limits[character.character_id] = CapacityLimits(
                outgoing=self.outgoing_capacity(character, passive=passive(character)),
                incoming_cap=self.incoming_cap(character, incoming_default(character)),
            )
        return limits
