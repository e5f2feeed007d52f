"""Food seeking: when to hunt, how far to look, and eating."""

from __future__ import annotations

import math
import random
from typing import Iterable

from dreamland_engine.balance import HungerBalance
from dreamland_engine.models import Chunk, Position, WildlifeCreature

BASE_HUNT_THRESHOLD = 70.0
BASE_HUNTING_RANGE = 15
DEFAULT_GREEDINESS = 50.0


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded toward +inf, so 2.5 -> 3 and -2.5 -> -2."""
    return math.floor(value + 0.5)


def should_hunt(creature: WildlifeCreature, hunger: float | None = None) -> bool:
    hunger = creature.hunger if hunger is None else hunger
    threshold = BASE_HUNT_THRESHOLD
    threshold -= creature.personality.get("greediness", DEFAULT_GREEDINESS) / 10
    threshold += creature.personality.get("laziness", 0.0) / 15
    return hunger > threshold


def get_hunting_range(creature: WildlifeCreature) -> int:
    greediness = creature.personality.get("greediness", DEFAULT_GREEDINESS) / 100
    return round_half_up(BASE_HUNTING_RANGE + creature.genetics.speed * 2 + greediness * 10)


def calculate_hunting_movement(creature: WildlifeCreature, target: Position) -> Position:
    x, y = creature.position
    dx, dy = target[0] - x, target[1] - y
    distance = math.hypot(dx, dy) or 1.0
    if distance <= creature.genetics.speed:
        return (dx, dy)
    effort = 1 - creature.personality.get("laziness", 0.0) / 100
    scale = creature.genetics.speed * effort / distance
    return (round_half_up(dx * scale), round_half_up(dy * scale))


def find_prey(
    hunter: WildlifeCreature,
    candidates: Iterable[WildlifeCreature],
    prey_species: Iterable[str],
) -> WildlifeCreature | None:
    """Nearest living prey within hunting range; ties keep input order."""
    wanted = set(prey_species)
    hunting_range = get_hunting_range(hunter)
    x, y = hunter.position
    best: WildlifeCreature | None = None
    best_distance = math.inf
    for candidate in candidates:
        if candidate.id == hunter.id or candidate.species_id not in wanted or not candidate.is_alive:
            continue
        distance = math.hypot(candidate.position[0] - x, candidate.position[1] - y)
        if distance <= hunting_range and distance < best_distance:
            best, best_distance = candidate, distance
    return best


def attempt_hunt(predator: WildlifeCreature, prey: WildlifeCreature, rng: random.Random) -> bool:
    success = 0.5
    success += (predator.genetics.speed - prey.genetics.speed) / 10 * 0.05
    success += predator.personality.get("aggression", 50.0) / 100 * 0.1
    success += prey.genetics.fearfulness / 100 * 0.1
    return rng.random() < max(0.0, min(0.95, success))


def calculate_hunger_satisfaction(creature: WildlifeCreature, nutrition: float) -> float:
    satisfaction = nutrition / (creature.genetics.size or 1.0)
    if creature.hunger > 80:
        satisfaction *= 1.2
    return min(creature.hunger, satisfaction)


def forage(creature: WildlifeCreature, chunk: Chunk | None, balance: HungerBalance) -> bool:
    """Eat vegetation in the creature's cell; returns whether anything was eaten."""
    if chunk is None or chunk.vegetation_density <= 0:
        return False
    eaten = min(chunk.vegetation_density, balance.forage_consumption)
    chunk.vegetation_density -= eaten
    creature.hunger = max(0.0, creature.hunger - calculate_hunger_satisfaction(creature, eaten * balance.hunger_relief_per_unit))
    return True
