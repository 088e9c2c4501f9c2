from __future__ import annotations

import copy
import math
from typing import Iterable

from rae.contracts import Character, CharacterStatus

SOURCE_STATUSES = frozenset(
    {
        CharacterStatus.ONLINE.value,
        CharacterStatus.OFFLINE_EMPTY.value,
        CharacterStatus.OFFLINE_NOT_EMPTY.value,
    }
)


def normalize_status(raw: object) -> CharacterStatus:
    """Map any raw status onto the three canonical values.

    Anything other than ``online`` or ``offline_empty`` (``unknown``, ``None``,
    legacy strings such as ``not_available``) is treated as ``offline_not_empty``.
    """
    if raw == CharacterStatus.ONLINE.value:
        return CharacterStatus.ONLINE
    if raw == CharacterStatus.OFFLINE_EMPTY.value:
        return CharacterStatus.OFFLINE_EMPTY
    return CharacterStatus.OFFLINE_NOT_EMPTY


def is_declared_status(raw: object) -> bool:
    return raw in SOURCE_STATUSES


def resolve_confidence(character: Character, default: float = 1.0) -> float:
    value = character.confidence_level
    if value is None:
        return default
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(confidence):
        return default
    return confidence


def normalize_marches_count(raw: object, max_marches: int = 6) -> int:
    try:
        count = int(raw or 0)
    except (TypeError, ValueError):
        count = 0
    if count == 0:
        count = max_marches
    return max(1, min(max_marches, count))


def clone_roster(roster: Iterable[Character]) -> list[Character]:
    return [copy.deepcopy(c) for c in roster]
