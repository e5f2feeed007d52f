"""Game balance table.

Every numeric knob of the simulation lives here so designers and tests can
tune behaviour without touching engine code. The table is read-only: build a
tuned copy with :func:`load_balance` or :meth:`BalanceConfig.with_overrides`
and inject it into the engines that need it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class GrowthBalance(_Frozen):
    base_chance: float = 0.05
    drop_chance: float = 0.01
    base_stress_damage: int = 5
    maturity_step: float = 10.0
    fertilizer_growth_bonus: float = 0.02
    nutrition_per_growth: float = 1.0
    drop_reset_ratio: float = 0.5


class SuitabilityBalance(_Frozen):
    moisture_weight: float = 0.4
    temp_weight: float = 0.4
    light_weight: float = 0.2
    wet_penalty_factor: float = 28.57
    wet_penalty_min: float = 0.3
    cold_margin: float = 15.0
    heat_margin: float = 20.0
    reproduction_threshold: float = 0.7
    reproduction_min_maturity: float = 0.8


class NatureDefaults(_Frozen):
    moisture: float = 50.0
    min_moisture: float = 20.0
    max_moisture: float = 80.0
    temperature: float = 15.0
    min_temperature: float = 10.0
    max_temperature: float = 30.0
    light: float = 50.0
    min_light: float = 20.0
    nutrition: float = 50.0
    fertilizer_level: float = 0.0
    water_retention: float = 1.0


class DensityBalance(_Frozen):
    units_per_plant: int = 10
    max_density: int = 100


class NatureBalance(_Frozen):
    growth: GrowthBalance = Field(default_factory=GrowthBalance)
    suitability: SuitabilityBalance = Field(default_factory=SuitabilityBalance)
    defaults: NatureDefaults = Field(default_factory=NatureDefaults)
    density: DensityBalance = Field(default_factory=DensityBalance)


class PlantBalance(_Frozen):
    season_multiplier: dict[str, float] = Field(
        default_factory=lambda: {"spring": 1.3, "summer": 1.1, "autumn": 0.9, "winter": 0.6}
    )
    fertilizer_decay_per_tick: float = 0.1
    max_fertilizer: float = 100.0
    max_nutrition: float = 100.0
    watering_moisture_bonus: float = 20.0
    vegetation_change_threshold: float = 10.0


class DelayRange(_Frozen):
    min: int
    max: int


class CreatureSimulationBalance(_Frozen):
    update_delay_immediate: DelayRange = DelayRange(min=0, max=0)
    update_delay_short: DelayRange = DelayRange(min=50, max=150)
    update_delay_medium: DelayRange = DelayRange(min=150, max=300)
    update_delay_long: DelayRange = DelayRange(min=300, max=500)
    distance_immediate: int = 5
    distance_short: int = 10
    distance_medium: int = 15


class HungerBalance(_Frozen):
    max_breeding_hunger: float = 60.0
    growth_per_tick_factor: float = 0.1
    starvation_damage: float = 5.0
    forage_consumption: float = 5.0
    hunger_relief_per_unit: float = 4.0
    prey_hunger_relief: float = 40.0


class PopulationCostScaling(_Frozen):
    threshold_1: float = 0.5
    multiplier_1: float = 1.0
    threshold_2: float = 0.75
    multiplier_2: float = 1.5
    threshold_3: float = 0.9
    multiplier_3: float = 2.0
    max_multiplier: float = 3.0


class BreedingBalance(_Frozen):
    base_cost: float = 20.0
    range: int = 3
    population_cost_scaling: PopulationCostScaling = Field(default_factory=PopulationCostScaling)
    default_carrying_capacity: int = 100
    adult_hunger_bonus: float = 10.0
    offspring_hunger: float = 50.0


class ThreatBalance(_Frozen):
    player_severity: float = 45.0
    predator_severity: float = 70.0
    detection_range: int = 6
    refuge_search_range: int = 10
    refuge_min_vegetation: float = 40.0


class CreatureBalance(_Frozen):
    simulation: CreatureSimulationBalance = Field(default_factory=CreatureSimulationBalance)
    hunger: HungerBalance = Field(default_factory=HungerBalance)
    breeding: BreedingBalance = Field(default_factory=BreedingBalance)
    threats: ThreatBalance = Field(default_factory=ThreatBalance)


class OvenBalance(_Frozen):
    min_temperature: float = 50.0
    max_temperature: float = 300.0
    ideal_temperature: float = 180.0
    perfect_range: float = 10.0
    burnt_multiplier: float = 0.8
    undercooked_multiplier: float = 0.6


class CookingBalance(_Frozen):
    oven: OvenBalance = Field(default_factory=OvenBalance)
    pot_ingredients_per_bowl: int = 2
    pot_dispense_stagger_ms: int = 500


class CraftingBalance(_Frozen):
    base_times: dict[int, int] = Field(default_factory=lambda: {1: 10, 2: 20, 3: 35, 4: 60, 5: 120})
    min_difficulty: int = 1
    max_difficulty: int = 5
    min_craft_seconds: int = 5
    max_craft_seconds: int = 300


class CombatBalance(_Frozen):
    crit_multiplier: float = 1.5
    min_damage: int = 1


class BalanceConfig(_Frozen):
    """Root of the tuning table."""

    nature: NatureBalance = Field(default_factory=NatureBalance)
    plant: PlantBalance = Field(default_factory=PlantBalance)
    creatures: CreatureBalance = Field(default_factory=CreatureBalance)
    cooking: CookingBalance = Field(default_factory=CookingBalance)
    crafting: CraftingBalance = Field(default_factory=CraftingBalance)
    combat: CombatBalance = Field(default_factory=CombatBalance)

    def with_overrides(self, overrides: dict[str, Any]) -> BalanceConfig:
        """Return a new table with ``overrides`` deep-merged over this one."""
        merged = _deep_merge(self.model_dump(), overrides)
        return BalanceConfig.model_validate(merged)


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


DEFAULT_BALANCE = BalanceConfig()


def load_balance(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> BalanceConfig:
    """Build a balance table from the defaults, an optional JSON file and explicit overrides."""
    balance = DEFAULT_BALANCE
    if path is not None:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        balance = balance.with_overrides(payload)
    if overrides:
        balance = balance.with_overrides(overrides)
    return balance
