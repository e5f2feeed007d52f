"""Per-creature decision loop.

Each scheduled update runs, in order: hunger and starvation, baby to adult
promotion, fleeing, pack cohesion, breeding, feeding (forage or hunt) and
finally idle wandering. The first behaviour that acts ends the update.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping
from uuid import uuid4

from dreamland_engine.balance import BalanceConfig, DEFAULT_BALANCE
from dreamland_engine.catalog import SpeciesDefinition
from dreamland_engine.creatures import breeding, fleeing, hunting
from dreamland_engine.models import Chunk, NarrativeMessage, Position, Threat, Translator, WildlifeCreature, World
from dreamland_engine.scheduling import chebyshev_distance

WANDER_DIRECTIONS: tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1), (-1, -1), (-1, 1), (1, -1), (1, 1))
PACK_SOCIABILITY = 70.0
PACK_RADIUS = 5


class CreatureAction(str, Enum):
    NONE = "none"
    DIED = "died"
    FLEE = "flee"
    PACK = "pack"
    BREED = "breed"
    FORAGE = "forage"
    HUNT = "hunt"
    WANDER = "wander"


@dataclass(slots=True)
class CreatureUpdateReport:
    tick: int
    updated: list[str] = field(default_factory=list)
    actions: dict[str, CreatureAction] = field(default_factory=dict)
    births: list[WildlifeCreature] = field(default_factory=list)
    deaths: list[str] = field(default_factory=list)
    messages: list[NarrativeMessage] = field(default_factory=list)


class CreatureEngine:
    """Owns the creature registry and applies per-creature behaviour."""

    def __init__(
        self,
        translate: Translator,
        species: Mapping[str, SpeciesDefinition],
        *,
        balance: BalanceConfig = DEFAULT_BALANCE,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._t = translate
        self._species = species
        self._balance = balance.creatures
        self._nature_defaults = balance.nature.defaults
        self._rng = rng or random.Random()
        self._logger = logger or logging.getLogger("dreamland_engine.creatures.engine")
        self._creatures: dict[str, WildlifeCreature] = {}

    @property
    def creatures(self) -> list[WildlifeCreature]:
        return list(self._creatures.values())

    def get(self, creature_id: str) -> WildlifeCreature | None:
        return self._creatures.get(creature_id)

    def add_creature(self, creature: WildlifeCreature) -> None:
        if creature.id in self._creatures:
            raise ValueError(f"Duplicate creature id: {creature.id}")
        self._creatures[creature.id] = creature

    def remove_creature(self, creature_id: str) -> WildlifeCreature | None:
        return self._creatures.pop(creature_id, None)

    def population(self, species_id: str) -> int:
        return sum(1 for creature in self._creatures.values() if creature.species_id == species_id)

    def run_updates(
        self,
        tick: int,
        creature_ids: Iterable[str],
        world: World,
        player_position: Position,
    ) -> CreatureUpdateReport:
        report = CreatureUpdateReport(tick=tick)
        bred: set[str] = set()
        for creature_id in creature_ids:
            creature = self._creatures.get(creature_id)
            if creature is None or creature_id in report.deaths:
                continue
            action = self._update_creature(creature, tick, world, player_position, report, bred)
            report.actions[creature_id] = action
            if action is not CreatureAction.DIED:
                report.updated.append(creature_id)

        for creature_id in report.deaths:
            self._creatures.pop(creature_id, None)
        for offspring in report.births:
            self._creatures[offspring.id] = offspring
        return report

    def _update_creature(
        self,
        creature: WildlifeCreature,
        tick: int,
        world: World,
        player_position: Position,
        report: CreatureUpdateReport,
        bred: set[str],
    ) -> CreatureAction:
        species = self._species.get(creature.species_id)
        if species is None:
            self._logger.debug("unknown_creature_species", extra={"creature_id": creature.id})
            return CreatureAction.NONE
        creature.last_action_tick = tick
        name = species.name.en

        if not self._apply_hunger(creature, species):
            self._kill(creature, report, "creatureStarved", name)
            return CreatureAction.DIED

        if breeding.should_become_adult(creature, species):
            breeding.promote_to_adult(creature, self._balance.breeding.adult_hunger_bonus)
            report.messages.append(NarrativeMessage(self._t("creatureMatured", creature=name)))

        threats = self._detect_threats(creature, player_position)
        if fleeing.should_flee(creature, threats):
            self._flee(creature, threats, world)
            report.messages.append(NarrativeMessage(self._t("creatureFleeing", creature=name)))
            return CreatureAction.FLEE

        if self._keep_with_pack(creature, world):
            return CreatureAction.PACK

        if creature.id not in bred and self._try_breed(creature, species, tick, world, report, bred):
            return CreatureAction.BREED

        if hunting.should_hunt(creature):
            action = self._feed(creature, species, world, report)
            if action is not CreatureAction.NONE:
                return action

        laziness = creature.personality.get("laziness", 50.0)
        if self._rng.random() * 100 > laziness:
            self._move(creature, self._rng.choice(WANDER_DIRECTIONS), world)
            return CreatureAction.WANDER
        return CreatureAction.NONE

    def _apply_hunger(self, creature: WildlifeCreature, species: SpeciesDefinition) -> bool:
        """Advance hunger; returns False when starvation killed the creature."""
        hunger = self._balance.hunger
        growth = species.hunger_rate_multiplier * creature.genetics.hunger_rate * hunger.growth_per_tick_factor
        creature.hunger = min(breeding.MAX_HUNGER, creature.hunger + growth)
        if creature.hunger >= breeding.MAX_HUNGER:
            creature.health = max(0.0, creature.health - hunger.starvation_damage)
        return creature.is_alive

    def _detect_threats(self, creature: WildlifeCreature, player_position: Position) -> list[Threat]:
        """Player first, then predators, all within detection range."""
        threats_balance = self._balance.threats
        threats: list[Threat] = []
        if chebyshev_distance(creature.position, player_position) <= threats_balance.detection_range:
            threats.append(Threat(position=player_position, severity=threats_balance.player_severity, type="player"))
        for other in self._creatures.values():
            if other.id == creature.id or not other.is_alive:
                continue
            predator = self._species.get(other.species_id)
            if predator is None or creature.species_id not in predator.prey_species:
                continue
            if chebyshev_distance(creature.position, other.position) <= threats_balance.detection_range:
                threats.append(Threat(position=other.position, severity=threats_balance.predator_severity, type="predator"))
        return threats

    def _flee(self, creature: WildlifeCreature, threats: list[Threat], world: World) -> None:
        direction = fleeing.calculate_flee_direction(creature, threats)
        if direction != (0, 0) and self._move(creature, direction, world):
            return
        x, y = creature.position
        refuge = fleeing.find_safe_refuge(
            x,
            y,
            threats,
            lambda cx, cy: self._is_refuge(world.get(cx, cy)),
            self._balance.threats.refuge_search_range,
        )
        if refuge is not None and self._move(creature, hunting.calculate_hunting_movement(creature, refuge), world):
            return
        self._move(creature, fleeing.panic_movement(self._rng), world)

    def _is_refuge(self, chunk: Chunk | None) -> bool:
        return chunk is not None and chunk.vegetation_density >= self._balance.threats.refuge_min_vegetation

    def _keep_with_pack(self, creature: WildlifeCreature, world: World) -> bool:
        if creature.personality.get("sociability", 0.0) < PACK_SOCIABILITY:
            return False
        nearest: WildlifeCreature | None = None
        nearest_distance = PACK_RADIUS + 1
        for other in self._creatures.values():
            if other.id == creature.id or other.species_id != creature.species_id or not other.is_alive:
                continue
            distance = chebyshev_distance(creature.position, other.position)
            if distance == 0:
                return False
            if distance < nearest_distance:
                nearest, nearest_distance = other, distance
        if nearest is None:
            return False
        step = (_sign(nearest.position[0] - creature.position[0]), _sign(nearest.position[1] - creature.position[1]))
        return self._move(creature, step, world)

    def _try_breed(
        self,
        creature: WildlifeCreature,
        species: SpeciesDefinition,
        tick: int,
        world: World,
        report: CreatureUpdateReport,
        bred: set[str],
    ) -> bool:
        settings = self._balance.breeding
        max_hunger = self._balance.hunger.max_breeding_hunger
        if not breeding.can_breed(creature, species, max_hunger):
            return False
        candidates = [
            other for other in self._creatures.values() if other.id not in bred and other.id not in report.deaths
        ]
        mate = breeding.find_mate(creature, candidates, species.id, settings.range, max_hunger)
        if mate is None:
            return False

        capacity = species.carrying_capacity or settings.default_carrying_capacity
        population = self.population(species.id) + sum(1 for b in report.births if b.species_id == species.id)
        cost = settings.base_cost * breeding.get_breeding_cost_multiplier(population, capacity, settings)

        chunk = world.get(*creature.position)
        defaults = self._nature_defaults
        offspring = breeding.generate_offspring(
            creature,
            mate,
            f"{species.id}_{uuid4().hex[:12]}",
            tick,
            temperature=_reading(chunk.temperature if chunk else None, defaults.temperature),
            vegetation=chunk.vegetation_density if chunk else 0.0,
            moisture=_reading(chunk.moisture if chunk else None, defaults.moisture),
            rng=self._rng,
            offspring_hunger=settings.offspring_hunger,
        )
        breeding.apply_breeding_cost(creature, mate, cost)
        bred.update((creature.id, mate.id))
        report.births.append(offspring)
        report.messages.append(NarrativeMessage(self._t("creatureBorn", creature=species.name.en)))
        self._logger.info(
            "creature_born",
            extra={"creature_id": offspring.id, "parents": offspring.parent_ids, "cost": cost},
        )
        return True

    def _feed(
        self,
        creature: WildlifeCreature,
        species: SpeciesDefinition,
        world: World,
        report: CreatureUpdateReport,
    ) -> CreatureAction:
        name = species.name.en
        if species.eats_plants and hunting.forage(creature, world.get(*creature.position), self._balance.hunger):
            breeding.record_feeding(creature)
            report.messages.append(NarrativeMessage(self._t("creatureEating", creature=name)))
            return CreatureAction.FORAGE

        if not species.prey_species:
            return CreatureAction.NONE
        candidates = [c for c in self._creatures.values() if c.id not in report.deaths]
        prey = hunting.find_prey(creature, candidates, species.prey_species)
        if prey is None:
            return CreatureAction.NONE
        if prey.position != creature.position:
            self._move(creature, hunting.calculate_hunting_movement(creature, prey.position), world)
            report.messages.append(NarrativeMessage(self._t("creatureHunting", creature=name)))
            return CreatureAction.HUNT
        if hunting.attempt_hunt(creature, prey, self._rng):
            prey.health = 0.0
            prey_species = self._species.get(prey.species_id)
            self._kill(prey, report, "creatureKilled", prey_species.name.en if prey_species else prey.species_id)
            creature.hunger = max(0.0, creature.hunger - self._balance.hunger.prey_hunger_relief)
            breeding.record_feeding(creature)
        return CreatureAction.HUNT

    def _move(self, creature: WildlifeCreature, delta: Position, world: World) -> bool:
        target = (creature.position[0] + delta[0], creature.position[1] + delta[1])
        if delta == (0, 0) or target not in world:
            return False
        creature.position = target
        return True

    def _kill(self, creature: WildlifeCreature, report: CreatureUpdateReport, message_key: str, name: str) -> None:
        creature.health = 0.0
        report.deaths.append(creature.id)
        report.messages.append(NarrativeMessage(self._t(message_key, creature=name)))
        self._logger.info("creature_died", extra={"creature_id": creature.id, "cause": message_key})


def _reading(value: float | None, default: float) -> float:
    return default if value is None else value


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)
