from .assignment import (
    AlgorithmRegistry,
    build_default_registry,
    calculate_assignments,
    get_available_algorithms,
)
from .contracts import Character, CharacterStatus, ReinforcementEdge

__all__ = [
    "AlgorithmRegistry",
    "Character",
    "CharacterStatus",
    "ReinforcementEdge",
    "build_default_registry",
    "calculate_assignments",
    "get_available_algorithms",
]
