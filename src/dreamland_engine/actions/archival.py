"""Moving old actions out of the hot history.

Archived actions leave ``ActionHistory.actions`` (so the length/count
invariant holds) and are counted in ``archived_action_count``.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field

from dreamland_engine.actions.schemas import (
    ActionHistory,
    PlayerAction,
    estimate_action_history_size,
    player_action_adapter,
)

logger = logging.getLogger("dreamland_engine.actions.archival")

TICKS_PER_DAY = 24 * 60


class ArchivalPolicy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    hot_storage_ticks: int = Field(default=7 * TICKS_PER_DAY, gt=0)
    delete_after_ticks: int = Field(default=30 * TICKS_PER_DAY, gt=0)
    max_size_bytes: int = Field(default=50 * 1024 * 1024, gt=0)


class ActionArchive(Protocol):
    """Cold storage for actions removed from the hot history."""

    def append(self, actions: Sequence[PlayerAction]) -> None:
        """Persist archived actions in order."""

    def load(self) -> list[PlayerAction]:
        """Return every archived action, oldest first."""

    def purge_before(self, turn_count: int) -> int:
        """Delete archived actions older than ``turn_count``; returns how many were removed."""


class InMemoryActionArchive:
    def __init__(self) -> None:
        self._actions: list[PlayerAction] = []

    def append(self, actions: Sequence[PlayerAction]) -> None:
        self._actions.extend(actions)

    def load(self) -> list[PlayerAction]:
        return list(self._actions)

    def purge_before(self, turn_count: int) -> int:
        kept = [action for action in self._actions if action.turn_count >= turn_count]
        removed = len(self._actions) - len(kept)
        self._actions = kept
        return removed


class JsonlActionArchive:
    """Simple JSONL-backed action archive."""

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, actions: Sequence[PlayerAction]) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            for action in actions:
                handle.write(json.dumps(action.model_dump(mode="json")) + "\n")

    def load(self) -> list[PlayerAction]:
        if not self._path.exists():
            return []

        actions: list[PlayerAction] = []
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                actions.append(player_action_adapter.validate_python(json.loads(line)))
        return actions

    def purge_before(self, turn_count: int) -> int:
        actions = self.load()
        kept = [action for action in actions if action.turn_count >= turn_count]
        with self._path.open("w", encoding="utf-8") as handle:
            for action in kept:
                handle.write(json.dumps(action.model_dump(mode="json")) + "\n")
        return len(actions) - len(kept)


def archive_old_actions(
    history: ActionHistory, keep_last_n: int, archive: ActionArchive | None = None
) -> ActionHistory:
    """Keep the newest ``keep_last_n`` actions and hand the rest to ``archive``."""
    keep_last_n = max(0, keep_last_n)
    if len(history.actions) <= keep_last_n:
        return history
    split = len(history.actions) - keep_last_n
    return _move_to_archive(history, split, archive)


def archive_by_age(
    history: ActionHistory,
    current_turn: int,
    policy: ArchivalPolicy | None = None,
    archive: ActionArchive | None = None,
) -> ActionHistory:
    """Archive actions older than the hot window, then purge the archive past the delete window."""
    policy = policy or ArchivalPolicy()
    cutoff = current_turn - policy.hot_storage_ticks
    split = 0
    while split < len(history.actions) and history.actions[split].turn_count < cutoff:
        split += 1
    updated = _move_to_archive(history, split, archive) if split else history
    if archive is not None:
        purged = archive.purge_before(current_turn - policy.delete_after_ticks)
        if purged:
            logger.info("archived_actions_purged", extra={"count": purged})
    return updated


def should_archive(history: ActionHistory, policy: ArchivalPolicy | None = None) -> bool:
    policy = policy or ArchivalPolicy()
    return estimate_action_history_size(history) > policy.max_size_bytes


def _move_to_archive(history: ActionHistory, split: int, archive: ActionArchive | None) -> ActionHistory:
    moved = history.actions[:split]
    kept = history.actions[split:]
    if archive is not None:
        archive.append(moved)
    logger.info("actions_archived", extra={"count": len(moved), "kept": len(kept)})
    return history.model_copy(
        update={
            "actions": kept,
            "total_action_count": len(kept),
            "archived_action_count": history.archived_action_count + len(moved),
        }
    )


@dataclass(slots=True)
class HistoryStats:
    total_actions: int
    archived_actions: int
    estimated_bytes: int
    by_type: dict[str, int] = field(default_factory=dict)
    oldest_turn: int | None = None
    newest_turn: int | None = None


def get_history_stats(history: ActionHistory) -> HistoryStats:
    return HistoryStats(
        total_actions=history.total_action_count,
        archived_actions=history.archived_action_count,
        estimated_bytes=estimate_action_history_size(history),
        by_type=dict(Counter(action.type for action in history.actions)),
        oldest_turn=history.actions[0].turn_count if history.actions else None,
        newest_turn=history.actions[-1].turn_count if history.actions else None,
    )
