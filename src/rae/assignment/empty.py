from __future__ import annotations

from typing import Sequence

from rae.contracts import Character
from rae.core.policy import CapacityPolicy

from .normalize import clone_roster, normalize_marches_count


class EmptyAssignmentAlgorithm:
    name = "empty"
    description = "Clears all assignments (no reinforcements)."
    farm_target_statuses: frozenset[str] = frozenset()

    def __init__(self, policy: CapacityPolicy | None = None) -> None:
        self._policy = policy or CapacityPolicy()

    @property
    def capacity_policy(self) -> CapacityPolicy:
        return self._policy

    def solve(self, roster: Sequence[Character]) -> list[Character]:
        working = clone_roster(roster)
        for character in working:
            character.marches_count = normalize_marches_count(character.marches_count, self._policy.max_marches)
            character.reinforce = []
            character.score = None
        return working
