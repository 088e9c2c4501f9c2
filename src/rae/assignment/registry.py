from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from rae.contracts import AlgorithmInfo, AssignmentAlgorithm, Character, RandomSource
from rae.core.errors import AssignmentIntegrityError, persist_forensic_artifact
from rae.core.policy import EnginePolicies, default_policies, validate_policies
from rae.core.randomness import fair_random

from .empty import EmptyAssignmentAlgorithm
from .greedy import GreedyAssignmentAlgorithm
from .smart import SmartAssignmentAlgorithm
from .validation import AssignmentAuditor, RosterValidator

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "greedy"


class AlgorithmRegistry:
    """Caller-owned lookup of named assignment strategies."""

    def __init__(self, algorithms: Iterable[AssignmentAlgorithm] = (), default_name: str = DEFAULT_ALGORITHM) -> None:
        self._algorithms: dict[str, AssignmentAlgorithm] = {}
        self.default_name = default_name
        for algorithm in algorithms:
            self.register(algorithm)

    def register(self, algorithm: AssignmentAlgorithm) -> None:
        self._algorithms[algorithm.name] = algorithm

    def __contains__(self, name: object) -> bool:
        return name in self._algorithms

    def names(self) -> list[str]:
        return list(self._algorithms)

    def require(self, name: str) -> AssignmentAlgorithm:
        if name not in self._algorithms:
            raise KeyError(f"unknown assignment algorithm '{name}'")
        return self._algorithms[name]

    def get(self, name: str | None) -> AssignmentAlgorithm:
        if name is not None and name in self._algorithms:
            return self._algorithms[name]
        if name is not None:
            logger.warning("unknown assignment algorithm %r, falling back to %r", name, self.default_name)
        return self.require(self.default_name)

    def available(self) -> list[AlgorithmInfo]:
        return [AlgorithmInfo(name=a.name, description=a.description) for a in self._algorithms.values()]


def build_default_registry(
    random_source: RandomSource | None = None,
    policies: EnginePolicies | None = None,
) -> AlgorithmRegistry:
    policies = policies or default_policies()
    validate_policies(policies)
    random_source = random_source or fair_random()
    return AlgorithmRegistry(
        [
            GreedyAssignmentAlgorithm(random_source.spawn("greedy"), policies.greedy),
            SmartAssignmentAlgorithm(random_source.spawn("smart"), policies.smart),
            EmptyAssignmentAlgorithm(policies.capacity),
        ]
    )


def get_available_algorithms(registry: AlgorithmRegistry | None = None) -> list[AlgorithmInfo]:
    return (registry or build_default_registry()).available()


def calculate_assignments(
    roster: Sequence[Character],
    algorithm_name: str | None = DEFAULT_ALGORITHM,
    *,
    registry: AlgorithmRegistry | None = None,
    strict: bool = False,
    forensic_dir: Path | None = None,
) -> list[Character]:
    """Run one assignment over a roster snapshot and return new characters.

    Unknown algorithm names fall back to ``greedy``. With ``strict`` the roster
    is validated first and the result audited against the strategy's own
    capacity policy; a failed audit raises
    :class:`AssignmentIntegrityError`, optionally writing the forensic
    artifact to ``forensic_dir``.
    """
    registry = registry or build_default_registry()
    algorithm = registry.get(algorithm_name)
    if strict:
        RosterValidator().validate(roster)

    result = algorithm.solve(roster)

    if strict:
        auditor = AssignmentAuditor(getattr(algorithm, "capacity_policy", None))
        report = auditor.audit(
            algorithm.name,
            result,
            farm_target_statuses=getattr(algorithm, "farm_target_statuses", frozenset()),
        )
        try:
            auditor.enforce(report, roster_size=len(result))
        except AssignmentIntegrityError as exc:
            if forensic_dir is not None:
                persist_forensic_artifact(exc.artifact, forensic_dir)
            raise
    return result
