"""Append and query operations over an :class:`ActionHistory`.

All functions are pure; recording returns a new history and never mutates
past entries.
"""

from __future__ import annotations

from typing import Callable, Sequence

from dreamland_engine.actions.schemas import (
    ActionHistory,
    ActionType,
    CombatAction,
    CraftingAction,
    HarvestingAction,
    PlayerAction,
    create_empty_action_history,
)

ActionPredicate = Callable[[PlayerAction], bool]


def _check_order(previous: PlayerAction | None, action: PlayerAction) -> None:
    if previous is None:
        return
    if action.timestamp < previous.timestamp or action.turn_count < previous.turn_count:
        raise ValueError(
            f"Action {action.id!r} is older than the last recorded action {previous.id!r}"
        )


def record_action(history: ActionHistory, action: PlayerAction) -> ActionHistory:
    return record_actions(history, [action])


def record_actions(history: ActionHistory, actions: Sequence[PlayerAction]) -> ActionHistory:
    if not actions:
        return history
    previous = history.actions[-1] if history.actions else None
    for action in actions:
        _check_order(previous, action)
        previous = action
    combined = (*history.actions, *actions)
    return history.model_copy(
        update={
            "actions": combined,
            "last_action_id": actions[-1].id,
            "total_action_count": len(combined),
        }
    )


def count_by_type(history: ActionHistory, action_type: ActionType) -> int:
    return sum(1 for action in history.actions if action.type == action_type)


def count_by_filter(history: ActionHistory, predicate: ActionPredicate) -> int:
    return sum(1 for action in history.actions if predicate(action))


def get_by_type(history: ActionHistory, action_type: ActionType) -> list[PlayerAction]:
    return [action for action in history.actions if action.type == action_type]


def get_by_time_window(history: ActionHistory, start_timestamp: int, end_timestamp: int) -> list[PlayerAction]:
    """Actions with ``start <= timestamp <= end``."""
    return [action for action in history.actions if start_timestamp <= action.timestamp <= end_timestamp]


def get_by_location(history: ActionHistory, x: int, y: int) -> list[PlayerAction]:
    return [
        action
        for action in history.actions
        if action.player_position.x == x and action.player_position.y == y
    ]


def get_recent(history: ActionHistory, count: int) -> list[PlayerAction]:
    if count <= 0:
        return []
    return list(history.actions[-count:])


def sum_property(
    history: ActionHistory,
    predicate: ActionPredicate,
    prop: Callable[[PlayerAction], float],
) -> float:
    return sum(prop(action) for action in history.actions if predicate(action))


def get_total_damage_dealt(history: ActionHistory, creature_type: str | None = None) -> float:
    return sum(
        action.damage_dealt
        for action in history.actions
        if isinstance(action, CombatAction) and (creature_type is None or action.target_creature_type == creature_type)
    )


def get_total_items_harvested(history: ActionHistory, item_name: str | None = None) -> int:
    return sum(
        action.quantity
        for action in history.actions
        if isinstance(action, HarvestingAction) and (item_name is None or action.item_name == item_name)
    )


def get_total_items_crafted(history: ActionHistory, recipe_id: str | None = None) -> int:
    return sum(
        action.output.quantity
        for action in history.actions
        if isinstance(action, CraftingAction) and (recipe_id is None or action.recipe_id == recipe_id)
    )


def clear_history(history: ActionHistory) -> ActionHistory:
    return create_empty_action_history()
