from .types import (
    AlgorithmInfo,
    AssignmentAlgorithm,
    AssignmentReport,
    CapacityLimits,
    Character,
    CharacterStatus,
    ForensicArtifact,
    RandomSource,
    ReinforcementEdge,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "AlgorithmInfo",
    "AssignmentAlgorithm",
    "AssignmentReport",
    "CapacityLimits",
    "Character",
    "CharacterStatus",
    "ForensicArtifact",
    "RandomSource",
    "ReinforcementEdge",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
]
