"""Breeding and life-stage transitions for wildlife."""

from __future__ import annotations

import math
import random
from typing import Iterable

from dreamland_engine.balance import BreedingBalance, HungerBalance
from dreamland_engine.catalog import SpeciesDefinition
from dreamland_engine.creatures.genetics import generate_offspring_genetics
from dreamland_engine.models import PERSONALITY_TRAITS, LifeStage, WildlifeCreature

MAX_HUNGER = 100.0
MAX_BREEDING_HUNGER = HungerBalance().max_breeding_hunger


def _is_mate_ready(creature: WildlifeCreature, max_hunger: float = MAX_BREEDING_HUNGER) -> bool:
    return creature.stage is LifeStage.ADULT and creature.hunger <= max_hunger


def can_breed(creature: WildlifeCreature, species: SpeciesDefinition, max_hunger: float = MAX_BREEDING_HUNGER) -> bool:
    return species.can_breed and _is_mate_ready(creature, max_hunger)


def find_mate(
    creature: WildlifeCreature,
    nearby: Iterable[WildlifeCreature],
    species_id: str,
    breeding_range: int = 3,
    max_hunger: float = MAX_BREEDING_HUNGER,
) -> WildlifeCreature | None:
    """Return the first viable partner in ``nearby`` order.

    Partners must share the exact cell; ``breeding_range`` is kept as an
    outer bound for callers that pre-filter by distance.
    """
    x, y = creature.position
    for candidate in nearby:
        if candidate.species_id != species_id or candidate.id == creature.id:
            continue
        cx, cy = candidate.position
        if math.hypot(cx - x, cy - y) > breeding_range:
            continue
        if (cx, cy) != (x, y):
            continue
        if _is_mate_ready(candidate, max_hunger):
            return candidate
    return None


def generate_offspring(
    parent1: WildlifeCreature,
    parent2: WildlifeCreature,
    offspring_id: str,
    spawn_tick: int,
    temperature: float,
    vegetation: float,
    moisture: float,
    rng: random.Random,
    offspring_hunger: float = BreedingBalance().offspring_hunger,
) -> WildlifeCreature:
    genetics = generate_offspring_genetics(parent1.genetics, parent2.genetics, temperature, vegetation, moisture, rng)

    # Each trait comes whole from one parent; a missing trait on the chosen parent stays missing.
    personality: dict[str, float] = {}
    for trait in PERSONALITY_TRAITS:
        source = parent1 if rng.random() < 0.5 else parent2
        if trait in source.personality:
            personality[trait] = source.personality[trait]

    return WildlifeCreature(
        id=offspring_id,
        species_id=parent1.species_id,
        position=parent1.position,
        genetics=genetics,
        personality=personality,
        stage=LifeStage.BABY,
        hunger=offspring_hunger,
        health=100.0,
        feeding_count=0,
        parent_ids=(parent1.id, parent2.id),
        spawned_at=spawn_tick,
    )


def apply_breeding_cost(parent1: WildlifeCreature, parent2: WildlifeCreature, cost: float = 20.0) -> None:
    for parent in (parent1, parent2):
        parent.hunger = min(MAX_HUNGER, parent.hunger + cost)


def get_breeding_cost_multiplier(
    population: int, capacity: int = 100, balance: BreedingBalance | None = None
) -> float:
    scaling = (balance or BreedingBalance()).population_cost_scaling
    if capacity <= 0:
        return scaling.max_multiplier
    ratio = population / capacity
    if ratio < scaling.threshold_1:
        return scaling.multiplier_1
    if ratio < scaling.threshold_2:
        return scaling.multiplier_2
    if ratio < scaling.threshold_3:
        return scaling.multiplier_3
    return scaling.max_multiplier


def should_become_adult(creature: WildlifeCreature, species: SpeciesDefinition) -> bool:
    return creature.stage is LifeStage.BABY and creature.feeding_count >= species.adult_feeding_threshold


def promote_to_adult(creature: WildlifeCreature, hunger_bonus: float = 10.0) -> None:
    creature.stage = LifeStage.ADULT
    creature.hunger = max(0.0, creature.hunger - hunger_bonus)


def record_feeding(creature: WildlifeCreature) -> None:
    creature.feeding_count += 1
