from .errors import AssignmentIntegrityError, build_forensic_artifact, persist_forensic_artifact
from .ids import make_id
from .policy import (
    CapacityPolicy,
    EnginePolicies,
    GreedyPolicy,
    SmartPolicy,
    default_policies,
    validate_policies,
)
from .randomness import PythonRandomSource, StableOrderSource, fair_random, seeded_random, stable_order

__all__ = [
    "AssignmentIntegrityError",
    "CapacityPolicy",
    "EnginePolicies",
    "GreedyPolicy",
    "PythonRandomSource",
    "SmartPolicy",
    "StableOrderSource",
    "build_forensic_artifact",
    "default_policies",
    "fair_random",
    "make_id",
    "persist_forensic_artifact",
    "seeded_random",
    "stable_order",
    "validate_policies",
]
