from __future__ import annotations

import json

import pytest

from dreamland_engine.actions.schemas import CombatAction, GridPosition
from dreamland_engine.actions.tracker import record_action
from dreamland_engine.catalog import EffectType, ItemEffect
from dreamland_engine.models import (
    Chunk,
    CreatureGenetics,
    Item,
    ItemMetadata,
    LifeStage,
    PlantInstance,
    PlantStage,
    PlayerStatus,
    Season,
    WildlifeCreature,
    World,
)
from dreamland_engine.persistence import (
    GameState,
    InMemorySaveRepository,
    JsonFileSaveRepository,
    SaveRepositoryError,
    state_from_dict,
    state_to_dict,
)


def _state(tick: int = 42) -> GameState:
    chunk = Chunk(x=1, y=-2, terrain="forest", moisture=60.0, temperature=None, vegetation_density=35.0)
    chunk.plants.append(PlantInstance(species_id="berry_bush", hp=20, maturity=40, stage=PlantStage.GROWING))
    creature = WildlifeCreature(
        id="deer_1",
        species_id="deer",
        position=(1, -2),
        genetics=CreatureGenetics(speed=4.5, fearfulness=70),
        personality={"caution": 70.0},
        stage=LifeStage.BABY,
        hunger=12.5,
        parent_ids=("deer_a", "deer_b"),
        spawned_at=40,
    )
    player = PlayerStatus(
        position=(1, -2),
        health=80.0,
        inventory=[
            Item(
                id="soup",
                effects=[ItemEffect(type=EffectType.RESTORE_HUNGER, amount=20)],
                metadata=ItemMetadata(is_soup=True, is_hot=True, recipe_id="vegetable_soup"),
            )
        ],
    )
    history = record_action(
        GameState().action_history,
        CombatAction(
            id="c1",
            timestamp=5,
            turn_count=3,
            player_position=GridPosition(x=0, y=0),
            target_creature_id="wolf_1",
            target_creature_type="wolf",
            damage_dealt=7,
        ),
    )
    return GameState(
        world=World([chunk]),
        creatures=[creature],
        player=player,
        action_history=history,
        tick=tick,
        season=Season.AUTUMN,
    )


def _assert_same(restored: GameState, original: GameState) -> None:
    assert restored.tick == original.tick
    assert restored.season is original.season
    assert list(restored.world) == list(original.world)
    assert restored.creatures == original.creatures
    assert restored.player == original.player
    assert restored.action_history == original.action_history


def test_state_dict_round_trip_keeps_types() -> None:
    original = _state()

    restored = state_from_dict(json.loads(json.dumps(state_to_dict(original))))

    _assert_same(restored, original)
    assert restored.creatures[0].position == (1, -2)
    assert restored.creatures[0].stage is LifeStage.BABY
    assert restored.world.get(1, -2).plants[0].stage is PlantStage.GROWING


def test_in_memory_repository_snapshots_state() -> None:
    repository = InMemorySaveRepository()
    state = _state()

    repository.save("slot1", state)
    state.creatures[0].hunger = 99.0

    loaded = repository.load("slot1")
    assert loaded.creatures[0].hunger == 12.5
    assert repository.load("empty") is None

    repository.delete("slot1")
    assert repository.load("slot1") is None
    repository.delete("slot1")


def test_json_repository_round_trip(tmp_path) -> None:
    repository = JsonFileSaveRepository(tmp_path)
    original = _state()

    repository.save("main", original)

    assert (tmp_path / "main.json").exists()
    assert not (tmp_path / "main.json.tmp").exists()
    _assert_same(repository.load("main"), original)


def test_json_repository_lists_newest_first(tmp_path) -> None:
    repository = JsonFileSaveRepository(tmp_path)
    repository.save("first", _state(tick=1))
    repository.save("second", _state(tick=2))
    first = json.loads((tmp_path / "first.json").read_text(encoding="utf-8"))
    first["saved_at"] = "2020-01-01T00:00:00+00:00"
    (tmp_path / "first.json").write_text(json.dumps(first), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    summaries = repository.list_save_summaries()

    assert [summary.slot_id for summary in summaries] == ["second", "first"]
    assert summaries[0].tick == 2
    assert summaries[0].chunk_count == 1
    assert summaries[0].creature_count == 1


def test_json_repository_rejects_bad_slot_ids(tmp_path) -> None:
    repository = JsonFileSaveRepository(tmp_path)

    with pytest.raises(SaveRepositoryError):
        repository.save("../escape", _state())
    with pytest.raises(SaveRepositoryError):
        repository.load("has space")


def test_corrupt_save_raises_repository_error(tmp_path) -> None:
    repository = JsonFileSaveRepository(tmp_path)
    (tmp_path / "bad.json").write_text(json.dumps({"saved_at": "now"}), encoding="utf-8")

    with pytest.raises(SaveRepositoryError):
        repository.load("bad")
    assert repository.load("missing") is None


def test_delete_removes_file(tmp_path) -> None:
    repository = JsonFileSaveRepository(tmp_path)
    repository.save("gone", _state())

    repository.delete("gone")
    repository.delete("gone")

    assert repository.load("gone") is None
    assert repository.list_save_summaries() == []
