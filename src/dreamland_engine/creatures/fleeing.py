"""Threat response for wildlife.

``threats[0]`` is always the threat a creature reacts to, even when another
threat is closer. Callers order threats by priority.
"""

from __future__ import annotations

import math
import random
from typing import Callable, Sequence

from dreamland_engine.creatures.hunting import round_half_up
from dreamland_engine.models import Position, Threat, WildlifeCreature

MIN_FLEE_THRESHOLD = 3.0
DEFAULT_CAUTION = 50.0
LOW_HEALTH = 30.0
LOW_HEALTH_SEVERITY = 20.0
FEAR_TRIGGER = 40.0

SafeLocationCheck = Callable[[int, int], bool]


def flee_threshold(creature: WildlifeCreature) -> float:
    caution = creature.personality.get("caution", DEFAULT_CAUTION)
    return max(MIN_FLEE_THRESHOLD, (caution + creature.genetics.fearfulness) / 10)


def should_flee(creature: WildlifeCreature, threats: Sequence[Threat]) -> bool:
    if not threats:
        return False
    primary = threats[0]
    x, y = creature.position
    tx, ty = primary.position
    if math.hypot(tx - x, ty - y) > flee_threshold(creature):
        return False
    if creature.health < LOW_HEALTH and primary.severity > LOW_HEALTH_SEVERITY:
        return True
    return primary.severity * creature.genetics.fearfulness / 100 > FEAR_TRIGGER


def calculate_flee_direction(creature: WildlifeCreature, threats: Sequence[Threat]) -> Position:
    if not threats:
        return (0, 0)
    x, y = creature.position
    tx, ty = threats[0].position
    dx, dy = x - tx, y - ty
    distance = math.hypot(dx, dy) or 1.0
    effort = 1 - creature.personality.get("laziness", 0.0) / 100
    scale = creature.genetics.speed * effort / distance
    return (round_half_up(dx * scale), round_half_up(dy * scale))


def find_safe_refuge(
    x: int,
    y: int,
    threats: Sequence[Threat],
    is_safe_location: SafeLocationCheck,
    search_range: int = 10,
) -> Position | None:
    """Walk away from the primary threat until ``is_safe_location`` accepts a cell."""
    if not threats:
        return None
    tx, ty = threats[0].position
    step_x = _sign(x - tx) or 1
    step_y = _sign(y - ty) or 1
    for distance in range(1, search_range + 1):
        candidate = (x + step_x * distance, y + step_y * distance)
        if is_safe_location(*candidate):
            return candidate
    return None


def panic_movement(rng: random.Random) -> Position:
    return (math.floor(rng.random() * 3) - 1, math.floor(rng.random() * 3) - 1)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)
