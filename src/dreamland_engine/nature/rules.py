"""Pure vegetation rules: suitability scoring, stress and probabilities.

All functions are side-effect free. Random rolls are passed in by the caller
so behaviour can be pinned in tests.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from dreamland_engine.balance import DensityBalance, NatureDefaults, SuitabilityBalance
from dreamland_engine.catalog import PlantRequirements


@dataclass(slots=True, frozen=True)
class Environment:
    """Resolved environment readings for one chunk (no missing values)."""

    moisture: float
    temperature: float
    light: float


@dataclass(slots=True, frozen=True)
class ToleranceBand:
    min_moisture: float
    max_moisture: float
    min_temperature: float
    max_temperature: float
    min_light: float

    @classmethod
    def from_requirements(cls, requirements: PlantRequirements, defaults: NatureDefaults) -> ToleranceBand:
        return cls(
            min_moisture=_fallback(requirements.min_moisture, defaults.min_moisture),
            max_moisture=_fallback(requirements.max_moisture, defaults.max_moisture),
            min_temperature=_fallback(requirements.min_temperature, defaults.min_temperature),
            max_temperature=_fallback(requirements.max_temperature, defaults.max_temperature),
            min_light=_fallback(requirements.min_light, defaults.min_light),
        )


def _fallback(value: float | None, default: float) -> float:
    return default if value is None else value


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def moisture_suitability(moisture: float, min_moisture: float, max_moisture: float, balance: SuitabilityBalance) -> float:
    if moisture < min_moisture:
        return _clamp(moisture / min_moisture, 0.0, 1.0) if min_moisture > 0 else 1.0
    if moisture > max_moisture:
        return max(balance.wet_penalty_min, 1.0 - (moisture - max_moisture) / balance.wet_penalty_factor)
    return 1.0


def temperature_suitability(
    temperature: float, min_temperature: float, max_temperature: float, balance: SuitabilityBalance
) -> float:
    if temperature < min_temperature:
        lethal = min_temperature - balance.cold_margin
        return _clamp((temperature - lethal) / balance.cold_margin, 0.0, 1.0)
    if temperature > max_temperature:
        return max(0.0, 1.0 - (temperature - max_temperature) / balance.heat_margin)
    return 1.0


def light_suitability(light: float, min_light: float) -> float:
    if light < min_light:
        return _clamp(light / min_light, 0.0, 1.0) if min_light > 0 else 1.0
    return 1.0


def calculate_environmental_suitability(
    environment: Environment, band: ToleranceBand, balance: SuitabilityBalance
) -> float:
    """Weighted moisture/temperature/light match in ``[0, 1]``."""
    score = (
        moisture_suitability(environment.moisture, band.min_moisture, band.max_moisture, balance) * balance.moisture_weight
        + temperature_suitability(environment.temperature, band.min_temperature, band.max_temperature, balance)
        * balance.temp_weight
        + light_suitability(environment.light, band.min_light) * balance.light_weight
    )
    return _clamp(score, 0.0, 1.0)


def is_lethal_temperature(temperature: float, band: ToleranceBand, balance: SuitabilityBalance) -> bool:
    return (
        temperature < band.min_temperature - balance.cold_margin
        or temperature > band.max_temperature + balance.heat_margin
    )


def calculate_environmental_stress(suitability: float, base_stress_damage: int) -> int:
    return math.ceil((1.0 - _clamp(suitability, 0.0, 1.0)) * base_stress_damage)


def growth_probability(base_chance: float, suitability: float) -> float:
    return base_chance * suitability


def drop_probability(base_chance: float, stress: float) -> float:
    return base_chance * (1.0 + stress)


def harvest_yield(max_yield: int, hp: float, max_hp: float) -> int:
    if hp <= 0 or max_hp <= 0:
        return 0
    return math.floor(max_yield * min(hp, max_hp) / max_hp)


def vegetation_density_from_count(plant_count: int, balance: DensityBalance) -> int:
    return min(balance.max_density, plant_count * balance.units_per_plant)


def can_reproduce(suitability: float, balance: SuitabilityBalance) -> bool:
    return suitability > balance.reproduction_threshold


def should_reproduce(suitability: float, reproduction_chance: float, roll: float, balance: SuitabilityBalance) -> bool:
    return can_reproduce(suitability, balance) and roll < reproduction_chance


def should_part_grow(base_chance: float, suitability: float, roll: float) -> bool:
    return roll < growth_probability(base_chance, suitability)


def should_part_drop(base_chance: float, stress: float, roll: float) -> bool:
    return roll < drop_probability(base_chance, stress)
