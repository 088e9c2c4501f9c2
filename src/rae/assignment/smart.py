from __future__ import annotations

import logging
from typing import Sequence

from rae.contracts import CapacityLimits, Character, CharacterStatus, RandomSource
from rae.core.policy import CapacityPolicy, SmartPolicy

from .capacity import CapacityResolver
from .farms import assign_farm_priority
from .ledger import AssignmentLedger
from .normalize import clone_roster, normalize_marches_count, normalize_status, resolve_confidence

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = frozenset({CharacterStatus.ONLINE.value, CharacterStatus.OFFLINE_EMPTY.value})


class SmartAssignmentAlgorithm:
    """Priority-scored round robin with a cleanup pass for offline-not-empty targets.

    Phases: per-run incoming limits, farm priority, prioritized round robin
    among online and offline-empty participants, then cleanup where any
    non offline-not-empty character (farms included) spends its remaining
    marches on offline-not-empty targets.
    """

    name = "smart"
    description = "Smart allocation prioritizing active players and farm utilization."
    farm_target_statuses: frozenset[str] = frozenset({CharacterStatus.OFFLINE_NOT_EMPTY.value})

    def __init__(self, random_source: RandomSource, policy: SmartPolicy | None = None) -> None:
        self._random = random_source
        self._policy = policy or SmartPolicy()
        self._policy.validate()
        self._resolver = CapacityResolver(self._policy.capacity)

    @property
    def capacity_policy(self) -> CapacityPolicy:
        return self._policy.capacity

    def solve(self, roster: Sequence[Character]) -> list[Character]:
        working = clone_roster(roster)
        for character in working:
            character.status = normalize_status(character.status).value
            character.marches_count = normalize_marches_count(character.marches_count, self._policy.capacity.max_marches)

        ledger = AssignmentLedger(self.compute_limits(working))

        farm_edges = assign_farm_priority(ledger, working, owner_eligible=lambda c: True)
        logger.debug("smart farm phase placed %d edges", farm_edges)

        prioritized = self._prioritized_round_robin(ledger, working)
        logger.debug("smart prioritized phase placed %d edges", prioritized)

        cleanup = self._cleanup(ledger, working)
        logger.debug("smart cleanup phase placed %d edges", cleanup)

        ledger.attach(working)
        logger.info("smart assignment placed %d edges for %d characters", ledger.edge_count, len(working))
        return working

    def compute_limits(self, roster: Sequence[Character]) -> dict[str, CapacityLimits]:
        """Resolve incoming caps for the run without touching ``max_reinforcement_marches``."""
        return self._resolver.resolve(roster, passive=lambda c: False, incoming_default=self._default_incoming_cap)

    def _default_incoming_cap(self, character: Character) -> int:
        level = character.town_center_level
        if level is not None and level >= self._policy.high_town_center_level:
            return self._policy.high_town_center_cap
        return self._policy.default_incoming_cap

    def base_score(self, character: Character) -> float:
        if character.status == CharacterStatus.ONLINE:
            multiplier = self._policy.online_multiplier
        else:
            multiplier = self._policy.offline_empty_multiplier
        return multiplier * resolve_confidence(character, self._policy.default_confidence)

    def _prioritized_round_robin(self, ledger: AssignmentLedger, roster: list[Character]) -> int:
        participants = [c for c in roster if c.status in ACTIVE_STATUSES]
        scores = {c.character_id: self.base_score(c) for c in participants}
        values = {
            c.character_id: self._reinforcement_value(scores[c.character_id], ledger.incoming_cap(c.character_id))
            for c in participants
        }

        sources = [c for c in participants if not c.is_farm]
        self._random.shuffle(sources)
        sources.sort(key=lambda c: scores[c.character_id], reverse=True)

        made = 0
        progress = True
        while progress:
            progress = False
            for source in sources:
                sid = source.character_id
                if ledger.remaining(sid) <= 0:
                    continue
                candidates = [t for t in participants if ledger.can_assign(sid, t.character_id)]
                if not candidates:
                    continue
                allowed = [t for t in candidates if scores[t.character_id] <= scores[sid]]
                if allowed:
                    target = max(allowed, key=lambda t: values[t.character_id])
                else:
                    # Nobody ranks at or below this source; fall back to the least valuable target.
                    target = min(candidates, key=lambda t: values[t.character_id])
                if ledger.try_assign(sid, target.character_id):
                    made += 1
                    progress = True
        return made

    @staticmethod
    def _reinforcement_value(score: float, cap: int | None) -> float:
        if cap is None:
            return 0.0
        if cap <= 0:
            return float("inf")
        return score / cap

    def _cleanup(self, ledger: AssignmentLedger, roster: list[Character]) -> int:
        targets = [c for c in roster if c.status == CharacterStatus.OFFLINE_NOT_EMPTY]
        sources = [
            c for c in roster
            if c.status != CharacterStatus.OFFLINE_NOT_EMPTY and ledger.remaining(c.character_id) > 0
        ]
        self._random.shuffle(sources)

        skipped: set[str] = set()
        made = 0
        while True:
            open_targets = [
                t for t in targets
                if t.character_id not in skipped and not ledger.is_full(t.character_id)
            ]
            active = [s for s in sources if ledger.remaining(s.character_id) > 0]
            if not open_targets or not active:
                break
            target = min(open_targets, key=lambda t: ledger.incoming_count(t.character_id))
            served = next(
                (s for s in active if ledger.try_assign(s.character_id, target.character_id)),
                None,
            )
            if served is None:
                skipped.add(target.character_id)
            else:
                made += 1
        return made
