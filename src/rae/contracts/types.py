from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class CharacterStatus(str, Enum):
    ONLINE = "online"
    OFFLINE_EMPTY = "offline_empty"
    OFFLINE_NOT_EMPTY = "offline_not_empty"
    UNKNOWN = "unknown"


class RandomSource(Protocol):
    def rand(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, items: Sequence[Any]) -> Any: ...

    def shuffle(self, items: list[Any]) -> None: ...

    def spawn(self, substream_id: str) -> RandomSource: ...


@dataclass(slots=True)
class ReinforcementEdge:
    target_id: str
    march_type: str | None = None
    score_value: float | None = None


@dataclass(slots=True)
class Character:
    character_id: str
    name: str = ""
    power_level: int = 0
    status: str = CharacterStatus.UNKNOWN.value
    marches_count: int = 0
    main_character_id: str | None = None
    reinforcement_capacity: int | None = None
    max_reinforcement_marches: int | None = None
    confidence_level: float | None = None
    town_center_level: int | None = None
    reinforce: list[ReinforcementEdge] = field(default_factory=list)
    score: float | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def is_farm(self) -> bool:
        return bool(self.main_character_id)

    def target_ids(self) -> list[str]:
        return [edge.target_id for edge in self.reinforce]


@dataclass(slots=True)
class CapacityLimits:
    outgoing: int
    incoming_cap: int | None = None

    @property
    def unbounded(self) -> bool:
        return self.incoming_cap is None


@dataclass(slots=True)
class AlgorithmInfo:
    name: str
    description: str


class AssignmentAlgorithm(Protocol):
    name: str
    description: str

    def solve(self, roster: Sequence[Character]) -> list[Character]: ...


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.entity_id}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = issues


@dataclass(slots=True)
class AssignmentReport:
    algorithm: str
    edge_count: int
    incoming_counts: dict[str, int]
    unused_outgoing: dict[str, int]
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not any(i.severity == "blocking" for i in self.issues)


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: Mapping[str, Any]
    context: Mapping[str, Any]
    identifiers: Mapping[str, str]
    causal_fragment: Sequence[str]
