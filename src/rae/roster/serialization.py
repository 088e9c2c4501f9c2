from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from rae.contracts import Character, CharacterStatus, ReinforcementEdge

# Document key -> Character attribute, in output order.
FIELD_KEYS: dict[str, str] = {
    "id": "character_id",
    "name": "name",
    "powerLevel": "power_level",
    "status": "status",
    "marchesCount": "marches_count",
    "mainCharacterId": "main_character_id",
    "reinforcementCapacity": "reinforcement_capacity",
    "maxReinforcementMarches": "max_reinforcement_marches",
    "confidenceLevel": "confidence_level",
    "townCenterLevel": "town_center_level",
}
KEY_ALIASES = {"characterId": "id", "characterName": "name"}
VIEW_ONLY_KEYS = frozenset({"score", "scoreValue"})


def edge_from_dict(raw: Mapping[str, Any]) -> ReinforcementEdge:
    target_id = raw.get("targetId", raw.get("characterId"))
    if target_id is None:
        raise ValueError(f"reinforcement edge has no target id: {dict(raw)!r}")
    return ReinforcementEdge(
        target_id=str(target_id),
        march_type=raw.get("marchType"),
        score_value=raw.get("scoreValue"),
    )


def edge_to_dict(edge: ReinforcementEdge) -> dict[str, Any]:
    out: dict[str, Any] = {"targetId": edge.target_id}
    if edge.march_type is not None:
        out["marchType"] = edge.march_type
    if edge.score_value is not None:
        out["scoreValue"] = edge.score_value
    return out


def character_from_dict(raw: Mapping[str, Any]) -> Character:
    data = {KEY_ALIASES.get(k, k): v for k, v in raw.items()}
    if data.get("id") in (None, ""):
        raise ValueError(f"character document has no id: {dict(raw)!r}")
    values: dict[str, Any] = {attr: data[key] for key, attr in FIELD_KEYS.items() if data.get(key) is not None}
    values["character_id"] = str(values["character_id"])
    if "marches_count" in values:
        values["marches_count"] = int(values["marches_count"])
    if "status" not in values:
        values["status"] = CharacterStatus.UNKNOWN.value
    extras = {k: v for k, v in data.items() if k not in FIELD_KEYS and k not in {"reinforce", "score"}}
    return Character(
        **values,
        reinforce=[edge_from_dict(e) for e in data.get("reinforce") or []],
        score=data.get("score"),
        extras=extras,
    )


def character_to_dict(character: Character) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, attr in FIELD_KEYS.items():
        value = getattr(character, attr)
        if value is not None:
            out[key] = value
    out.update(character.extras)
    out["reinforce"] = [edge_to_dict(e) for e in character.reinforce]
    if character.score is not None:
        out["score"] = character.score
    return out


def roster_from_dicts(rows: Iterable[Mapping[str, Any]]) -> list[Character]:
    return [character_from_dict(row) for row in rows]


def roster_to_dicts(roster: Sequence[Character]) -> list[dict[str, Any]]:
    return [character_to_dict(c) for c in roster]


def sanitize_for_storage(roster: Sequence[Character]) -> list[dict[str, Any]]:
    """Documents ready for the event store: no view-only scores, no null values."""
    documents: list[dict[str, Any]] = []
    for row in roster_to_dicts(roster):
        clean = {k: v for k, v in row.items() if k not in VIEW_ONLY_KEYS and v is not None}
        clean["reinforce"] = [
            {k: v for k, v in edge.items() if k not in VIEW_ONLY_KEYS} for edge in row["reinforce"]
        ]
        documents.append(clean)
    return documents


def load_roster(path: Path) -> list[Character]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, Mapping):
        payload = payload.get("characters")
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a character array")
    return roster_from_dicts(payload)


def dump_roster(roster: Sequence[Character], path: Path, *, for_storage: bool = False) -> Path:
    rows = sanitize_for_storage(roster) if for_storage else roster_to_dicts(roster)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=2), encoding="utf-8")
    return path
