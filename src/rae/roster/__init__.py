from .messages import assignment_message, incoming_message, roster_messages
from .serialization import (
    character_from_dict,
    character_to_dict,
    dump_roster,
    load_roster,
    roster_from_dicts,
    roster_to_dicts,
    sanitize_for_storage,
)

__all__ = [
    "assignment_message",
    "character_from_dict",
    "character_to_dict",
    "dump_roster",
    "incoming_message",
    "load_roster",
    "roster_from_dicts",
    "roster_messages",
    "roster_to_dicts",
    "sanitize_for_storage",
]
