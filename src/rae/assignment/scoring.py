from __future__ import annotations

from collections import Counter
from typing import Sequence

from rae.contracts import Character, CharacterStatus
from rae.core.policy import GreedyPolicy

from .normalize import clone_roster, normalize_status


def incoming_counts(roster: Sequence[Character]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for source in roster:
        for edge in source.reinforce:
            counts[edge.target_id] += 1
    return counts


def edge_value(status: CharacterStatus, incoming: int, policy: GreedyPolicy) -> float:
    incoming = max(incoming, 1)
    if status == CharacterStatus.ONLINE:
        return policy.online_edge_value / incoming
    if status == CharacterStatus.OFFLINE_EMPTY:
        return policy.offline_empty_edge_value / incoming
    return 1.0 / (policy.offline_not_empty_offset + incoming)


def finalize_scores(roster: list[Character], policy: GreedyPolicy | None = None) -> list[Character]:
    """Attach ``score_value`` to every edge and ``score`` to every character, in place.

    Edges that point outside the roster are worth nothing.
    """
    policy = policy or GreedyPolicy()
    by_id = {c.character_id: c for c in roster}
    counts = incoming_counts(roster)
    for source in roster:
        total = 0.0
        for edge in source.reinforce:
            target = by_id.get(edge.target_id)
            if target is None:
                edge.score_value = 0.0
                continue
            edge.score_value = edge_value(normalize_status(target.status), counts[edge.target_id], policy)
            total += edge.score_value
        source.score = total
    return roster


def score_roster(roster: Sequence[Character], policy: GreedyPolicy | None = None) -> list[Character]:
    return finalize_scores(clone_roster(roster), policy)
