from __future__ import annotations

import pytest
from pydantic import ValidationError

from dreamland_engine.actions import archival, tracker
from dreamland_engine.actions.schemas import (
    ActionHistory,
    CombatAction,
    CraftedStack,
    CraftingAction,
    GridPosition,
    HarvestingAction,
    MovementAction,
    create_empty_action_history,
    estimate_action_history_size,
    parse_action,
)


def _combat(index: int, *, damage: float = 10.0, creature_type: str = "wolf", x: int = 0) -> CombatAction:
    return CombatAction(
        id=f"combat-{index}",
        timestamp=1_000 * index,
        turn_count=index,
        player_position=GridPosition(x=x, y=0),
        target_creature_id=f"{creature_type}_{index}",
        target_creature_type=creature_type,
        damage_dealt=damage,
    )


def _harvest(index: int, item_name: str = "Wood", quantity: int = 2) -> HarvestingAction:
    return HarvestingAction(
        id=f"harvest-{index}",
        timestamp=1_000 * index,
        turn_count=index,
        player_position=GridPosition(x=1, y=1),
        item_id=item_name.lower(),
        item_name=item_name,
        quantity=quantity,
        source="FLORA",
    )


def _craft(index: int, recipe_id: str = "iron_sword", quantity: int = 1) -> CraftingAction:
    return CraftingAction(
        id=f"craft-{index}",
        timestamp=1_000 * index,
        turn_count=index,
        player_position=GridPosition(x=2, y=2),
        recipe_id=recipe_id,
        recipe_name=recipe_id.replace("_", " ").title(),
        inputs=(CraftedStack(item_id="iron_ore", item_name="Iron Ore", quantity=2),),
        output=CraftedStack(item_id=recipe_id, item_name=recipe_id, quantity=quantity),
    )


def _history(count: int) -> ActionHistory:
    return tracker.record_actions(create_empty_action_history(), [_combat(i) for i in range(count)])


@pytest.mark.parametrize("count", [0, 1, 5, 40])
def test_count_always_matches_length(count: int) -> None:
    history = create_empty_action_history()
    for index in range(count):
        history = tracker.record_action(history, _combat(index))
        assert history.total_action_count == len(history.actions)

    assert history.total_action_count == count
    assert history.last_action_id == (f"combat-{count - 1}" if count else "")


def test_recording_never_mutates_the_original() -> None:
    empty = create_empty_action_history()

    updated = tracker.record_action(empty, _combat(0))

    assert empty.actions == ()
    assert updated.actions == (_combat(0),)


def test_out_of_order_actions_are_rejected() -> None:
    history = tracker.record_action(create_empty_action_history(), _combat(5))

    with pytest.raises(ValueError):
        tracker.record_action(history, _combat(3))
    with pytest.raises(ValueError):
        tracker.record_actions(create_empty_action_history(), [_combat(2), _combat(1)])


def test_inconsistent_count_fails_validation() -> None:
    with pytest.raises(ValidationError):
        ActionHistory(actions=(_combat(0),), total_action_count=3)


def test_actions_are_frozen() -> None:
    action = _combat(0)

    with pytest.raises(ValidationError):
        action.damage_dealt = 99


def test_parse_action_picks_variant_by_type() -> None:
    payload = _harvest(3).model_dump(mode="json")

    parsed = parse_action(payload)

    assert isinstance(parsed, HarvestingAction)
    assert parsed == _harvest(3)
    with pytest.raises(ValidationError):
        parse_action({**payload, "type": "DANCING"})


def test_queries_by_type_window_location_and_recency() -> None:
    history = tracker.record_actions(
        create_empty_action_history(),
        [_combat(1, x=4), _harvest(2), _combat(3), _craft(4), _harvest(5)],
    )

    assert tracker.count_by_type(history, "COMBAT") == 2
    assert [a.id for a in tracker.get_by_type(history, "HARVESTING")] == ["harvest-2", "harvest-5"]
    assert [a.id for a in tracker.get_by_time_window(history, 2_000, 4_000)] == ["harvest-2", "combat-3", "craft-4"]
    assert [a.id for a in tracker.get_by_location(history, 4, 0)] == ["combat-1"]
    assert [a.id for a in tracker.get_recent(history, 2)] == ["craft-4", "harvest-5"]
    assert tracker.get_recent(history, 0) == []
    assert tracker.count_by_filter(history, lambda action: action.turn_count >= 3) == 3


def test_totals_filter_by_name() -> None:
    history = tracker.record_actions(
        create_empty_action_history(),
        [
            _combat(1, damage=12, creature_type="wolf"),
            _combat(2, damage=5, creature_type="deer"),
            _harvest(3, "Wood", 3),
            _harvest(4, "Stone", 1),
            _craft(5, quantity=2),
            _craft(6, recipe_id="wooden_bow"),
        ],
    )

    assert tracker.get_total_damage_dealt(history) == 17
    assert tracker.get_total_damage_dealt(history, "wolf") == 12
    assert tracker.get_total_items_harvested(history) == 4
    assert tracker.get_total_items_harvested(history, "Stone") == 1
    assert tracker.get_total_items_crafted(history) == 3
    assert tracker.get_total_items_crafted(history, "iron_sword") == 2
    assert tracker.sum_property(history, lambda a: a.type == "COMBAT", lambda a: a.turn_count) == 3


def test_clear_history_returns_empty() -> None:
    assert tracker.clear_history(_history(4)) == create_empty_action_history()


def test_archive_keeps_newest_and_preserves_invariant() -> None:
    store = archival.InMemoryActionArchive()

    trimmed = archival.archive_old_actions(_history(10), keep_last_n=3, archive=store)

    assert [a.id for a in trimmed.actions] == ["combat-7", "combat-8", "combat-9"]
    assert trimmed.total_action_count == len(trimmed.actions) == 3
    assert trimmed.archived_action_count == 7
    assert trimmed.lifetime_action_count == 10
    assert [a.id for a in store.load()] == [f"combat-{i}" for i in range(7)]


def test_archive_is_noop_when_history_is_small() -> None:
    history = _history(2)
    assert archival.archive_old_actions(history, keep_last_n=5) is history


def test_archive_by_age_moves_and_purges(tmp_path) -> None:
    store = archival.JsonlActionArchive(tmp_path / "archive" / "actions.jsonl")
    policy = archival.ArchivalPolicy(hot_storage_ticks=10, delete_after_ticks=15)
    history = tracker.record_actions(
        create_empty_action_history(),
        [_combat(1), _harvest(6), _craft(12), _combat(20)],
    )

    updated = archival.archive_by_age(history, current_turn=20, policy=policy, archive=store)

    # cutoff turn 10: turns 1 and 6 leave; purge removes archived turns below 5
    assert [a.id for a in updated.actions] == ["craft-12", "combat-20"]
    assert updated.archived_action_count == 2
    assert [a.id for a in store.load()] == ["harvest-6"]
    assert isinstance(store.load()[0], HarvestingAction)


def test_jsonl_archive_round_trip_and_missing_file(tmp_path) -> None:
    store = archival.JsonlActionArchive(tmp_path / "actions.jsonl")
    assert store.load() == []

    store.append([_craft(1), _combat(2)])
    store.append([_harvest(3)])

    assert store.load() == [_craft(1), _combat(2), _harvest(3)]
    assert store.purge_before(2) == 1


def test_size_estimate_and_stats() -> None:
    history = tracker.record_actions(create_empty_action_history(), [_combat(1), _harvest(2), _combat(3)])

    assert estimate_action_history_size(history) == 750
    assert archival.should_archive(history, archival.ArchivalPolicy(max_size_bytes=700)) is True
    assert archival.should_archive(history) is False

    stats = archival.get_history_stats(history)
    assert stats.by_type == {"COMBAT": 2, "HARVESTING": 1}
    assert (stats.oldest_turn, stats.newest_turn) == (1, 3)


def test_movement_requires_positive_distance() -> None:
    with pytest.raises(ValidationError):
        MovementAction(
            id="m",
            timestamp=0,
            turn_count=0,
            player_position=GridPosition(x=0, y=0),
            destination_position=GridPosition(x=0, y=0),
            distance=0,
        )
