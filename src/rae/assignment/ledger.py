from __future__ import annotations

from typing import Iterable, Mapping

from rae.contracts import CapacityLimits, Character, ReinforcementEdge


class AssignmentLedger:
    """Single-run bookkeeping of edges, remaining marches and incoming load.

    Every phase of every strategy places edges through :meth:`try_assign`, so
    capacity limits hold no matter how phases are ordered.
    """

    def __init__(self, limits: Mapping[str, CapacityLimits]) -> None:
        self._limits = dict(limits)
        self._edges: dict[str, list[ReinforcementEdge]] = {cid: [] for cid in self._limits}
        self._remaining: dict[str, int] = {cid: lim.outgoing for cid, lim in self._limits.items()}
        self._incoming: dict[str, int] = {cid: 0 for cid in self._limits}
        self._incoming_weight: dict[str, float] = {cid: 0.0 for cid in self._limits}

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._limits

    def remaining(self, character_id: str) -> int:
        return self._remaining.get(character_id, 0)

    def incoming_count(self, character_id: str) -> int:
        return self._incoming.get(character_id, 0)

    def incoming_weight(self, character_id: str) -> float:
        return self._incoming_weight.get(character_id, 0.0)

    def incoming_cap(self, character_id: str) -> int | None:
        limits = self._limits.get(character_id)
        return limits.incoming_cap if limits is not None else 0

    def is_full(self, character_id: str) -> bool:
        if character_id not in self._limits:
            return True
        cap = self._limits[character_id].incoming_cap
        return cap is not None and self._incoming[character_id] >= cap

    def has_edge(self, source_id: str, target_id: str) -> bool:
        return any(edge.target_id == target_id for edge in self._edges.get(source_id, []))

    def can_assign(self, source_id: str, target_id: str, *, allow_duplicate_target: bool = False) -> bool:
        if source_id == target_id:
            return False
        if source_id not in self._limits or target_id not in self._limits:
            return False
        if self._remaining[source_id] <= 0:
            return False
        if not allow_duplicate_target and self.has_edge(source_id, target_id):
            return False
        return not self.is_full(target_id)

    def try_assign(
        self,
        source_id: str,
        target_id: str,
        *,
        weight: float = 1.0,
        allow_duplicate_target: bool = False,
        march_type: str | None = None,
    ) -> bool:
        if not self.can_assign(source_id, target_id, allow_duplicate_target=allow_duplicate_target):
            return False
        self._edges[source_id].append(ReinforcementEdge(target_id=target_id, march_type=march_type))
        self._remaining[source_id] -= 1
        self._incoming[target_id] += 1
        self._incoming_weight[target_id] += weight
        return True

    def edges_for(self, source_id: str) -> list[ReinforcementEdge]:
        return list(self._edges.get(source_id, []))

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._edges.values())

    def unused_outgoing(self) -> dict[str, int]:
        return {cid: rem for cid, rem in self._remaining.items() if rem > 0}

    def attach(self, roster: Iterable[Character]) -> None:
        for character in roster:
            character.reinforce = self.edges_for(character.character_id)
