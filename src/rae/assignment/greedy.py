from __future__ import annotations

import logging
from typing import Sequence

from rae.contracts import Character, CharacterStatus, RandomSource
from rae.core.policy import CapacityPolicy, GreedyPolicy

from .capacity import CapacityResolver
from .farms import assign_farm_priority
from .ledger import AssignmentLedger
from .normalize import clone_roster, is_declared_status, normalize_marches_count, normalize_status, resolve_confidence
from .scoring import finalize_scores

logger = logging.getLogger(__name__)


class GreedyAssignmentAlgorithm:
    """Confidence-weighted greedy assignment.

    After farm priority, online sources get a few preferential rounds over
    online and offline-empty targets, then offline and online pools alternate
    until a full alternation places nothing. Each round every source with
    marches left places at most one edge, on the target with the best score.
    Offline-not-empty characters, farms and characters whose status was never
    declared do not send marches.
    """

    name = "greedy"
    description = "Confidence-weighted greedy fill favouring the least reinforced online and empty targets."
    farm_target_statuses: frozenset[str] = frozenset()

    def __init__(self, random_source: RandomSource, policy: GreedyPolicy | None = None) -> None:
        self._random = random_source
        self._policy = policy or GreedyPolicy()
        self._policy.validate()
        self._resolver = CapacityResolver(self._policy.capacity)

    @property
    def capacity_policy(self) -> CapacityPolicy:
        return self._policy.capacity

    def solve(self, roster: Sequence[Character]) -> list[Character]:
        working = clone_roster(roster)
        undeclared = {c.character_id for c in working if not is_declared_status(c.status)}
        for character in working:
            character.status = normalize_status(character.status).value
            character.marches_count = normalize_marches_count(character.marches_count, self._policy.capacity.max_marches)

        limits = self._resolver.resolve(
            working,
            passive=lambda c: c.is_farm or c.character_id in undeclared,
            incoming_default=lambda c: None,
        )
        ledger = AssignmentLedger(limits)

        online = [c for c in working if c.status == CharacterStatus.ONLINE]
        offline_empty = [c for c in working if c.status == CharacterStatus.OFFLINE_EMPTY]
        offline_not_empty = [c for c in working if c.status == CharacterStatus.OFFLINE_NOT_EMPTY]

        online_sources = [c for c in online if not c.is_farm]
        offline_sources = [c for c in offline_empty if not c.is_farm]
        source_ids = {c.character_id for c in online_sources + offline_sources}

        online_targets = online + offline_empty
        offline_targets = offline_empty + offline_not_empty

        farm_edges = assign_farm_priority(
            ledger,
            working,
            owner_eligible=lambda c: c.character_id in source_ids,
            weight=self._confidence,
        )
        logger.debug("greedy farm priority placed %d edges", farm_edges)

        preferential = 0
        for _ in range(self._policy.preferential_rounds):
            made = self._round(ledger, online_sources, online_targets)
            preferential += made
            if not made:
                break
        logger.debug("greedy preferential rounds placed %d edges", preferential)

        alternating = 0
        while True:
            made = self._round(ledger, offline_sources, offline_targets)
            made += self._round(ledger, online_sources, online_targets)
            alternating += made
            if not made:
                break
        logger.debug("greedy alternating rounds placed %d edges", alternating)

        ledger.attach(working)
        logger.info("greedy assignment placed %d edges for %d characters", ledger.edge_count, len(working))
        return finalize_scores(working, self._policy)

    def _round(self, ledger: AssignmentLedger, sources: list[Character], targets: list[Character]) -> int:
        made = 0
        for source in self._by_confidence(sources):
            if ledger.remaining(source.character_id) <= 0:
                continue
            target = self._best_target(ledger, source, targets)
            if target is None:
                continue
            if ledger.try_assign(source.character_id, target.character_id, weight=self._confidence(source)):
                made += 1
        return made

    def _by_confidence(self, sources: list[Character]) -> list[Character]:
        # Shuffle before the stable sort so only equal-confidence sources change order between runs.
        ordered = list(sources)
        self._random.shuffle(ordered)
        ordered.sort(key=self._confidence, reverse=True)
        return ordered

    def _best_target(self, ledger: AssignmentLedger, source: Character, targets: list[Character]) -> Character | None:
        best: Character | None = None
        best_score = float("-inf")
        for target in targets:
            if not ledger.can_assign(source.character_id, target.character_id):
                continue
            score = self.target_score(target, ledger.incoming_weight(target.character_id))
            if score > best_score:
                best, best_score = target, score
        return best

    def target_score(self, target: Character, incoming_weight: float) -> float:
        policy = self._policy
        not_empty_score = policy.offline_not_empty_base / (policy.penalty + incoming_weight)
        status = normalize_status(target.status)
        if status == CharacterStatus.OFFLINE_NOT_EMPTY:
            return not_empty_score
        weight = max(incoming_weight, policy.min_incoming_weight)
        base = policy.online_base if status == CharacterStatus.ONLINE else policy.offline_empty_base
        confidence = self._confidence(target)
        return (base / weight) * confidence + (1 - confidence) * not_empty_score

    def _confidence(self, character: Character) -> float:
        return resolve_confidence(character, self._policy.default_confidence)
