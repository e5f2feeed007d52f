from __future__ import annotations

import random

import pytest

from dreamland_engine.cli import GameSession
from dreamland_engine.creatures.engine import CreatureEngine
from dreamland_engine.data import default_catalog, identity_translator
from dreamland_engine.models import Chunk, PlayerStatus, Season, WildlifeCreature, World
from dreamland_engine.nature.engine import PlantEngine
from dreamland_engine.persistence import InMemorySaveRepository
from dreamland_engine.scheduling import CreatureUpdateScheduler
from dreamland_engine.simulation import WorldSimulation

CATALOG = default_catalog()


class RecordingTelemetry:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def emit(self, event_name: str, payload: dict) -> None:
        self.events.append((event_name, payload))


def _simulation(telemetry=None, seed: int = 3) -> WorldSimulation:
    rng = random.Random(seed)
    world = World([Chunk(x=x, y=y, moisture=50, temperature=20, light_level=70) for x in range(3) for y in range(3)])
    return WorldSimulation(
        world,
        PlantEngine(identity_translator, CATALOG.plants, rng=rng),
        CreatureEngine(identity_translator, CATALOG.species, rng=rng),
        CreatureUpdateScheduler(tick_duration_ms=100, rng=rng),
        telemetry=telemetry,
    )


def test_spawned_creature_updates_from_next_tick() -> None:
    telemetry = RecordingTelemetry()
    simulation = _simulation(telemetry)
    simulation.spawn_creature(WildlifeCreature(id="deer_0", species_id="deer", position=(1, 1)))

    assert simulation.scheduler.next_tick("deer_0") == 1
    report = simulation.step()

    assert report.tick == 1
    assert report.creatures.updated == ["deer_0"]
    assert simulation.scheduler.next_tick("deer_0") == 2
    assert telemetry.events == [("tick_completed", report.summary())]
    assert report.summary()["creatures_updated"] == 1


def test_dead_creatures_leave_the_schedule() -> None:
    simulation = _simulation()
    simulation.spawn_creature(WildlifeCreature(id="old", species_id="deer", position=(0, 0), hunger=100, health=1))

    report = simulation.step()

    assert report.creatures.deaths == ["old"]
    assert "old" not in simulation.scheduler
    assert simulation.creatures == []
    assert [message.text for message in report.messages] == ["creatureStarved"]


def test_despawn_removes_creature_and_schedule() -> None:
    simulation = _simulation()
    simulation.spawn_creature(WildlifeCreature(id="r", species_id="rabbit", position=(0, 0)))

    removed = simulation.despawn_creature("r")

    assert removed.id == "r"
    assert "r" not in simulation.scheduler
    assert simulation.step().creatures.updated == []


def test_run_advances_ticks_and_snapshot_captures_state() -> None:
    simulation = _simulation()
    simulation.season = Season.SUMMER
    simulation.spawn_creature(WildlifeCreature(id="w", species_id="wolf", position=(2, 2)))

    reports = simulation.run(3)

    assert [report.tick for report in reports] == [1, 2, 3]
    assert simulation.run(-2) == []
    state = simulation.snapshot(PlayerStatus(position=(1, 1)))
    assert state.tick == 3
    assert state.season is Season.SUMMER
    assert state.player.position == (1, 1)
    assert [creature.id for creature in state.creatures] == ["w"]
    assert state.action_history.total_action_count == 0


def _session(repository=None) -> GameSession:
    return GameSession(
        CATALOG,
        repository or InMemorySaveRepository(),
        rng=random.Random(12),
        clock=lambda: 1_700_000_000_000,
    )


def test_session_requires_a_world() -> None:
    session = _session()

    assert session.tick == 0
    with pytest.raises(RuntimeError):
        session.advance(1)
    with pytest.raises(RuntimeError):
        session.save("slot")


def test_session_new_world_and_advance() -> None:
    session = _session()

    simulation = session.new_world(4, 3, {"deer": 2, "unicorn": 5})
    reports = session.advance(2)

    assert len(simulation.world) == 12
    assert len(reports) == 2
    assert session.tick == 2
    assert {"deer_0", "deer_1"} <= {creature.id for creature in simulation.creatures}


def test_session_craft_records_action() -> None:
    session = _session()
    session.give_item("iron_ore", 5)
    session.give_item("wood", 3)

    result = session.craft("iron_sword")

    assert result.success is True
    assert result.craft_time_seconds == 35
    assert [(item.id, item.quantity) for item in session.player.inventory] == [("wood", 1), ("iron_sword", 1)]
    assert session.history.total_action_count == 1
    action = session.history.actions[0]
    assert action.type == "CRAFTING"
    assert action.timestamp == 1_700_000_000_000
    assert action.output.item_id == "iron_sword"
    assert [(stack.item_name, stack.quantity) for stack in action.inputs] == [("Iron Ore", 5), ("Wood", 2)]


def test_session_failed_craft_records_nothing() -> None:
    session = _session()

    result = session.craft("iron_sword")

    assert result.success is False
    assert session.history.total_action_count == 0


def test_session_craft_lookups() -> None:
    session = _session()

    assert session.craft_time("iron_sword") == 35
    assert session.craft_time("nope") is None
    assert [(stack.id, stack.quantity) for stack in session.recipe_cost("wooden_bow")] == [("wood", 3), ("string", 1)]


def test_session_cook_unknown_recipe_fails() -> None:
    session = _session()

    output = session.cook("dragon_stew", ["carrot"])

    assert output.success is False
    assert output.outcome is None


def test_session_cooks_from_inventory() -> None:
    session = _session()
    session.give_item("raw_meat")
    session.give_item("animal_fat")

    output = session.cook("meat_skewer", ["raw_meat", "animal_fat"])

    assert output.success is True
    assert [item.id.startswith("cooked_meat_kebab_") for item in session.player.inventory] == [True]


def test_session_save_and_load_round_trip() -> None:
    repository = InMemorySaveRepository()
    session = _session(repository)
    session.new_world(3, 3, {"rabbit": 3})
    session.advance(4)
    session.give_item("iron_ore", 5)
    session.give_item("wood", 2)
    session.craft("iron_sword")
    creature_ids = sorted(creature.id for creature in session.simulation.creatures)

    session.save("slot_a")
    restored = _session(repository)

    assert restored.load("missing") is False
    assert restored.load("slot_a") is True
    assert restored.tick == 4
    assert sorted(creature.id for creature in restored.simulation.creatures) == creature_ids
    assert restored.history == session.history
    assert [summary.slot_id for summary in restored.list_saves()] == ["slot_a"]
    restored.advance(1)
    assert restored.tick == 5
