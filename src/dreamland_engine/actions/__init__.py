"""Player action records, history queries and archival."""

from .archival import ArchivalPolicy, InMemoryActionArchive, JsonlActionArchive, archive_by_age, archive_old_actions
from .schemas import ActionHistory, PlayerAction, create_empty_action_history, estimate_action_history_size
from .tracker import record_action, record_actions

__all__ = [
    "ActionHistory",
    "ArchivalPolicy",
    "InMemoryActionArchive",
    "JsonlActionArchive",
    "PlayerAction",
    "archive_by_age",
    "archive_old_actions",
    "create_empty_action_history",
    "estimate_action_history_size",
    "record_action",
    "record_actions",
]
