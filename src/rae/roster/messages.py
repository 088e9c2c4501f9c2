from __future__ import annotations

from typing import Sequence

from rae.contracts import Character


def assignment_message(character: Character, roster: Sequence[Character]) -> str:
    """Clipboard text telling a player whom to reinforce."""
    by_id = {c.character_id: c for c in roster}
    lines = [f"Player {character.name or character.character_id} reinforces (Player, Power):"]
    if not character.reinforce:
        lines.append("No assignments.")
        return "\n".join(lines)
    for index, edge in enumerate(character.reinforce, start=1):
        target = by_id.get(edge.target_id)
        line = f"{index}. {target.name if target and target.name else 'Unknown'}"
        if target is not None and target.power_level is not None:
            line += f": {target.power_level:,}"
        lines.append(line)
    return "\n".join(lines)


def incoming_message(character: Character, roster: Sequence[Character]) -> str:
    senders = [c for c in roster if character.character_id in c.target_ids()]
    lines = [f"Player {character.name or character.character_id} is reinforced by:"]
    if not senders:
        lines.append("Nobody.")
    for index, sender in enumerate(senders, start=1):
        lines.append(f"{index}. {sender.name or sender.character_id}")
    return "\n".join(lines)


def roster_messages(roster: Sequence[Character]) -> list[str]:
    return [assignment_message(c, roster) for c in roster]
