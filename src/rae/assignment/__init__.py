from .capacity import CapacityResolver
from .empty import EmptyAssignmentAlgorithm
from .farms import assign_farm_priority, farms_by_owner
from .greedy import GreedyAssignmentAlgorithm
from .ledger import AssignmentLedger
from .normalize import clone_roster, normalize_marches_count, normalize_status, resolve_confidence
from .registry import (
    DEFAULT_ALGORITHM,
    AlgorithmRegistry,
    build_default_registry,
    calculate_assignments,
    get_available_algorithms,
)
from .scoring import edge_value, finalize_scores, incoming_counts, score_roster
from .smart import SmartAssignmentAlgorithm
from .validation import AssignmentAuditor, RosterValidator

__all__ = [
    "AlgorithmRegistry",
    "AssignmentAuditor",
    "AssignmentLedger",
    "CapacityResolver",
    "DEFAULT_ALGORITHM",
    "EmptyAssignmentAlgorithm",
    "GreedyAssignmentAlgorithm",
    "RosterValidator",
    "SmartAssignmentAlgorithm",
    "assign_farm_priority",
    "build_default_registry",
    "calculate_assignments",
    "clone_roster",
    "edge_value",
    "farms_by_owner",
    "finalize_scores",
    "get_available_algorithms",
    "incoming_counts",
    "normalize_marches_count",
    "normalize_status",
    "resolve_confidence",
    "score_roster",
]
