from __future__ import annotations

import random

import pytest

from dreamland_engine.creatures.engine import CreatureAction, CreatureEngine
from dreamland_engine.data import default_catalog
from dreamland_engine.models import Chunk, CreatureGenetics, LifeStage, WildlifeCreature, World

SPECIES = default_catalog().species
FAR_AWAY = (500, 500)


class FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


class RecordingTranslator:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def __call__(self, key: str, **params) -> str:
        self.calls.append((key, params))
        return key


def _world(*, width: int = 7, vegetation: float = 0.0) -> World:
    half = width // 2
    return World([Chunk(x=x, y=y, vegetation_density=vegetation) for x in range(-half, half + 1) for y in range(-half, half + 1)])


def _engine(value: float = 0.5, translator=None) -> CreatureEngine:
    return CreatureEngine(translator or RecordingTranslator(), SPECIES, rng=FixedRandom(value))


def _creature(creature_id: str, species_id: str, position=(0, 0), **fields) -> WildlifeCreature:
    return WildlifeCreature(id=creature_id, species_id=species_id, position=position, **fields)


def test_duplicate_creature_id_is_rejected() -> None:
    engine = _engine()
    engine.add_creature(_creature("d", "deer"))

    with pytest.raises(ValueError):
        engine.add_creature(_creature("d", "deer"))


def test_starving_creature_dies_and_is_removed() -> None:
    translator = RecordingTranslator()
    engine = _engine(translator=translator)
    engine.add_creature(_creature("d", "deer", hunger=100.0, health=5.0))

    report = engine.run_updates(1, ["d"], _world(), FAR_AWAY)

    assert report.deaths == ["d"]
    assert report.actions["d"] is CreatureAction.DIED
    assert report.updated == []
    assert engine.get("d") is None
    assert translator.calls == [("creatureStarved", {"creature": "Deer"})]


def test_hunger_grows_each_update_and_caps() -> None:
    engine = _engine(value=0.1)
    deer = _creature("d", "deer", hunger=99.95)
    engine.add_creature(deer)

    engine.run_updates(1, ["d"], _world(), FAR_AWAY)

    assert deer.hunger == 100.0
    assert deer.health == 95.0
    assert deer.last_action_tick == 1


def test_well_fed_baby_is_promoted() -> None:
    translator = RecordingTranslator()
    engine = _engine(value=0.99, translator=translator)
    fawn = _creature("fawn", "deer", stage=LifeStage.BABY, hunger=20.0, feeding_count=4)
    engine.add_creature(fawn)

    engine.run_updates(1, ["fawn"], _world(width=1), FAR_AWAY)

    assert fawn.stage is LifeStage.ADULT
    assert fawn.hunger == pytest.approx(10.1)
    assert ("creatureMatured", {"creature": "Deer"}) in translator.calls


def test_fearful_creature_flees_from_player() -> None:
    engine = _engine()
    rabbit = _creature("r", "rabbit", genetics=CreatureGenetics(speed=2, fearfulness=95), personality={"caution": 80})
    engine.add_creature(rabbit)

    report = engine.run_updates(1, ["r"], _world(), player_position=(1, 0))

    assert report.actions["r"] is CreatureAction.FLEE
    assert rabbit.position == (-2, 0)
    assert [message.text for message in report.messages] == ["creatureFleeing"]


def test_prey_flees_from_nearby_predator() -> None:
    engine = _engine()
    rabbit = _creature("r", "rabbit", position=(1, 1), genetics=CreatureGenetics(speed=1, fearfulness=80))
    engine.add_creature(rabbit)
    engine.add_creature(_creature("w", "wolf", position=(2, 1)))

    report = engine.run_updates(1, ["r"], _world(), FAR_AWAY)

    assert report.actions["r"] is CreatureAction.FLEE
    assert rabbit.position == (0, 1)


def test_adults_in_same_cell_breed_once_per_tick() -> None:
    translator = RecordingTranslator()
    engine = _engine(translator=translator)
    mother = _creature("a", "deer", hunger=10.0)
    father = _creature("b", "deer", hunger=10.0)
    engine.add_creature(mother)
    engine.add_creature(father)

    report = engine.run_updates(5, ["a", "b"], _world(), FAR_AWAY)

    assert report.actions == {"a": CreatureAction.BREED, "b": CreatureAction.NONE}
    assert len(report.births) == 1
    child = report.births[0]
    assert child.id.startswith("deer_")
    assert child.stage is LifeStage.BABY
    assert child.parent_ids == ("a", "b")
    assert child.spawned_at == 5
    assert engine.get(child.id) is child
    assert engine.population("deer") == 3
    assert mother.hunger == pytest.approx(30.1)
    assert father.hunger == pytest.approx(30.1)
    assert ("creatureBorn", {"creature": "Deer"}) in translator.calls


def test_crowded_species_pays_more_to_breed() -> None:
    engine = _engine()
    engine.add_creature(_creature("a", "wolf", hunger=0.0))
    engine.add_creature(_creature("b", "wolf", hunger=0.0))
    for index in range(12):
        engine.add_creature(_creature(f"extra_{index}", "wolf", position=(3, 3), health=50.0))

    report = engine.run_updates(1, ["a"], _world(), FAR_AWAY)

    # 14 wolves against a capacity of 15
    assert report.actions["a"] is CreatureAction.BREED
    assert engine.get("a").hunger == pytest.approx(0.1 + 20.0 * 3.0)


def test_hungry_herbivore_forages() -> None:
    translator = RecordingTranslator()
    engine = _engine(translator=translator)
    deer = _creature("d", "deer", hunger=80.0)
    engine.add_creature(deer)
    world = _world(vegetation=50.0)

    report = engine.run_updates(1, ["d"], world, FAR_AWAY)

    assert report.actions["d"] is CreatureAction.FORAGE
    assert world.get(0, 0).vegetation_density == 45.0
    assert deer.hunger == pytest.approx(80.1 - 24.0)
    assert deer.feeding_count == 1
    assert ("creatureEating", {"creature": "Deer"}) in translator.calls


def test_predator_closes_distance_before_attacking() -> None:
    engine = _engine()
    wolf = _creature("w", "wolf", hunger=75.0)
    engine.add_creature(wolf)
    engine.add_creature(_creature("r", "rabbit", position=(3, 0)))

    report = engine.run_updates(1, ["w"], _world(), FAR_AWAY)

    assert report.actions["w"] is CreatureAction.HUNT
    assert wolf.position == (3, 0)
    assert report.deaths == []


def test_successful_hunt_kills_prey_and_feeds_predator() -> None:
    translator = RecordingTranslator()
    engine = _engine(value=0.1, translator=translator)
    wolf = _creature("w", "wolf", hunger=75.0, personality={"aggression": 100})
    engine.add_creature(wolf)
    engine.add_creature(_creature("r", "rabbit"))

    report = engine.run_updates(1, ["w", "r"], _world(), FAR_AWAY)

    assert report.deaths == ["r"]
    assert "r" not in report.actions
    assert engine.get("r") is None
    assert wolf.hunger == pytest.approx(75.1 - 40.0)
    assert wolf.feeding_count == 1
    assert ("creatureKilled", {"creature": "Rabbit"}) in translator.calls


def test_sociable_creature_moves_toward_its_pack() -> None:
    engine = _engine()
    leader = _creature("w1", "wolf", personality={"sociability": 80})
    engine.add_creature(leader)
    engine.add_creature(_creature("w2", "wolf", position=(3, 0)))

    report = engine.run_updates(1, ["w1"], _world(), FAR_AWAY)

    assert report.actions["w1"] is CreatureAction.PACK
    assert leader.position == (1, 0)


def test_unknown_species_is_left_alone() -> None:
    engine = _engine()
    ghost = _creature("g", "ghost")
    engine.add_creature(ghost)

    report = engine.run_updates(1, ["g", "missing"], _world(), FAR_AWAY)

    assert report.actions == {"g": CreatureAction.NONE}
    assert ghost.last_action_tick is None
