"""Quantitative inheritance for wildlife.

Offspring traits are the parents' average with +/-10% noise plus a small
environmental bonus, so populations drift towards their biome over
generations.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from dreamland_engine.models import CreatureGenetics

TRAIT_MIN = 0.1
TRAIT_MAX = 100.0
INHERITANCE_VARIATION = 0.2
MUTATION_RATE = 0.05


@dataclass(slots=True, frozen=True)
class EnvironmentalBonus:
    hunger_rate: float = 0.0
    speed: float = 0.0
    size: float = 0.0
    fearfulness: float = 0.0


def calculate_environmental_bonus(temperature: float, vegetation: float, moisture: float) -> EnvironmentalBonus:
    """Percentage-point trait modifiers for the birth chunk."""
    hunger_rate = speed = size = fearfulness = 0.0
    if temperature < 0:
        size += 20
        speed -= 10
    if vegetation > 70:
        speed += 15
        size -= 5
    if temperature > 25:
        speed += 15
        size -= 10
        hunger_rate += 20
    if moisture < 30:
        hunger_rate -= 10
        fearfulness += 10
    return EnvironmentalBonus(hunger_rate=hunger_rate, speed=speed, size=size, fearfulness=fearfulness)


def inherit_trait(parent_a: float, parent_b: float, environmental_bonus: float, rng: random.Random) -> float:
    average = (parent_a + parent_b) / 2
    noise = 1 + (rng.random() - 0.5) * INHERITANCE_VARIATION
    return max(TRAIT_MIN, min(TRAIT_MAX, average * noise + environmental_bonus))


def generate_offspring_genetics(
    parent_a: CreatureGenetics,
    parent_b: CreatureGenetics,
    temperature: float,
    vegetation: float,
    moisture: float,
    rng: random.Random,
) -> CreatureGenetics:
    bonus = calculate_environmental_bonus(temperature, vegetation, moisture)
    return CreatureGenetics(
        hunger_rate=inherit_trait(parent_a.hunger_rate, parent_b.hunger_rate, bonus.hunger_rate / 100, rng),
        speed=inherit_trait(parent_a.speed, parent_b.speed, bonus.speed / 100, rng),
        size=inherit_trait(parent_a.size, parent_b.size, bonus.size / 100, rng),
        fearfulness=inherit_trait(parent_a.fearfulness, parent_b.fearfulness, bonus.fearfulness / 100, rng),
    )


def mutate_genetics(genetics: CreatureGenetics, rng: random.Random) -> CreatureGenetics:
    def _jitter() -> float:
        return (rng.random() - 0.5) * 2 * MUTATION_RATE

    return CreatureGenetics(
        hunger_rate=genetics.hunger_rate * (1 + _jitter()),
        speed=genetics.speed * (1 + _jitter()),
        size=genetics.size * (1 + _jitter()),
        fearfulness=max(0.0, genetics.fearfulness + _jitter() * 100),
    )
