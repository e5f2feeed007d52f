"""Per-chunk vegetation simulation."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from dreamland_engine.balance import BalanceConfig, DEFAULT_BALANCE
from dreamland_engine.catalog import PlantDefinition
from dreamland_engine.models import Chunk, NarrativeMessage, PlantInstance, PlantStage, Position, Season, Translator
from dreamland_engine.nature import rules


@dataclass(slots=True)
class PlantDrop:
    """Harvestable item released by a mature plant."""

    chunk: Position
    plant_id: str
    item_id: str
    quantity: int = 1


@dataclass(slots=True)
class PlantTickReport:
    tick: int
    messages: list[NarrativeMessage] = field(default_factory=list)
    drops: list[PlantDrop] = field(default_factory=list)
    plants_died: int = 0
    plants_spawned: int = 0


class PlantEngine:
    """Advances vegetation one tick at a time.

    Plant definitions are injected so tests and mods can swap the catalog.
    Unknown species and missing chunk readings are skipped or defaulted, a
    tick never raises on malformed world data.
    """

    def __init__(
        self,
        translate: Translator,
        plants: Mapping[str, PlantDefinition],
        *,
        balance: BalanceConfig = DEFAULT_BALANCE,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._t = translate
        self._plants = plants
        self._balance = balance
        self._rng = rng or random.Random()
        self._logger = logger or logging.getLogger("dreamland_engine.nature.engine")

    def update_plants(
        self,
        tick: int,
        chunks: Mapping[Position, Chunk] | Iterable[Chunk],
        season: Season | str = Season.SPRING,
    ) -> PlantTickReport:
        report = PlantTickReport(tick=tick)
        season_multiplier = self._season_multiplier(season)
        for chunk in _iter_chunks(chunks):
            if chunk.plants:
                self._update_chunk(chunk, season_multiplier, report)
            self._decay_chunk(chunk)
        return report

    def add_plant(self, chunk: Chunk, definition: PlantDefinition) -> PlantInstance:
        plant = PlantInstance(species_id=definition.id, hp=definition.hp, max_maturity=definition.max_maturity)
        chunk.plants.append(plant)
        return plant

    def apply_fertilizer(self, chunk: Chunk, amount: float) -> float:
        """Raise the chunk fertilizer level; the only way it ever increases."""
        plant = self._balance.plant
        current = self._reading(chunk.fertilizer_level, self._balance.nature.defaults.fertilizer_level)
        chunk.fertilizer_level = min(plant.max_fertilizer, max(0.0, current + amount))
        self._logger.debug("fertilizer_applied", extra={"chunk": chunk.key, "level": chunk.fertilizer_level})
        return chunk.fertilizer_level

    def water_chunk(self, chunk: Chunk, ticks: int, retention: float | None = None) -> None:
        chunk.water_timer = max(chunk.water_timer, float(max(0, ticks)))
        if retention is not None:
            chunk.water_retention = max(0.0, retention)

    def get_vegetation_narrative(self, chunk: Chunk) -> str | None:
        """Describe a significant density change since the previous tick, if any.

        Queried on demand (e.g. when the player listens around) instead of
        being pushed every tick.
        """
        delta = chunk.vegetation_density - chunk.prev_vegetation_density
        if abs(delta) < self._balance.plant.vegetation_change_threshold:
            return None
        key = "vegetationIncreased" if delta > 0 else "vegetationDecreased"
        return self._t(key, x=chunk.x, y=chunk.y)

    def _update_chunk(self, chunk: Chunk, season_multiplier: float, report: PlantTickReport) -> None:
        nature = self._balance.nature
        environment = self._environment(chunk)
        fertilizer = self._reading(chunk.fertilizer_level, nature.defaults.fertilizer_level)
        growth_scale = season_multiplier * (1.0 + fertilizer * nature.growth.fertilizer_growth_bonus)

        survivors: list[PlantInstance] = []
        offspring: list[PlantInstance] = []
        for plant in chunk.plants:
            definition = self._plants.get(plant.species_id)
            if definition is None:
                self._logger.debug("unknown_plant_species", extra={"species_id": plant.species_id})
                survivors.append(plant)
                continue

            band = rules.ToleranceBand.from_requirements(definition.requirements, nature.defaults)
            suitability = rules.calculate_environmental_suitability(environment, band, nature.suitability)
            plant.suitability = suitability
            plant.age += 1

            if rules.is_lethal_temperature(environment.temperature, band, nature.suitability):
                plant.hp -= nature.growth.base_stress_damage
                if plant.hp <= 0:
                    report.plants_died += 1
                    report.messages.append(
                        NarrativeMessage(self._t("plantDied", plant=definition.name.en, x=chunk.x, y=chunk.y))
                    )
                    self._logger.info("plant_died", extra={"chunk": chunk.key, "species_id": plant.species_id})
                    continue

            self._grow(chunk, plant, suitability * growth_scale)
            self._maybe_drop(chunk, plant, definition, suitability, report)

            density = rules.vegetation_density_from_count(len(chunk.plants) + len(offspring), nature.density)
            if (
                density < nature.density.max_density
                and plant.maturity >= plant.max_maturity * nature.suitability.reproduction_min_maturity
                and rules.should_reproduce(
                    suitability, definition.reproduction_chance, self._rng.random(), nature.suitability
                )
            ):
                offspring.append(
                    PlantInstance(species_id=definition.id, hp=definition.hp, max_maturity=definition.max_maturity)
                )
                report.messages.append(
                    NarrativeMessage(self._t("plantReproduced", plant=definition.name.en, x=chunk.x, y=chunk.y))
                )
            survivors.append(plant)

        chunk.plants = survivors + offspring
        report.plants_spawned += len(offspring)
        self._refresh_density(chunk)

    def _grow(self, chunk: Chunk, plant: PlantInstance, scaled_suitability: float) -> None:
        growth = self._balance.nature.growth
        if plant.maturity >= plant.max_maturity:
            return
        if not rules.should_part_grow(growth.base_chance, scaled_suitability, self._rng.random()):
            return
        plant.maturity = min(plant.max_maturity, max(0.0, plant.maturity + growth.maturity_step))
        plant.refresh_stage()
        nutrition = self._reading(chunk.nutrition, self._balance.nature.defaults.nutrition)
        chunk.nutrition = max(0.0, nutrition - growth.nutrition_per_growth)

    def _maybe_drop(
        self,
        chunk: Chunk,
        plant: PlantInstance,
        definition: PlantDefinition,
        suitability: float,
        report: PlantTickReport,
    ) -> None:
        growth = self._balance.nature.growth
        if plant.stage is not PlantStage.MATURE:
            return
        stress = rules.calculate_environmental_stress(suitability, growth.base_stress_damage)
        if not rules.should_part_drop(growth.drop_chance, stress, self._rng.random()):
            return
        plant.maturity = plant.max_maturity * growth.drop_reset_ratio
        plant.refresh_stage()
        report.drops.append(
            PlantDrop(chunk=chunk.key, plant_id=definition.id, item_id=definition.drop_item_id or definition.id)
        )

    def _refresh_density(self, chunk: Chunk) -> None:
        density = self._balance.nature.density
        total = 0.0
        for plant in chunk.plants:
            definition = self._plants.get(plant.species_id)
            contribution = definition.vegetation_contribution if definition else density.units_per_plant
            ratio = plant.maturity / plant.max_maturity if plant.max_maturity else 0.0
            total += contribution * ratio
        chunk.prev_vegetation_density = chunk.vegetation_density
        chunk.vegetation_density = min(float(density.max_density), total)

    def _decay_chunk(self, chunk: Chunk) -> None:
        decay = self._balance.plant.fertilizer_decay_per_tick
        if chunk.fertilizer_level is not None:
            chunk.fertilizer_level = max(0.0, chunk.fertilizer_level - decay)
        if chunk.water_timer > 0:
            chunk.water_timer = max(0.0, chunk.water_timer - 1)

    def _environment(self, chunk: Chunk) -> rules.Environment:
        defaults = self._balance.nature.defaults
        moisture = self._reading(chunk.moisture, defaults.moisture)
        if chunk.water_timer > 0:
            retention = self._reading(chunk.water_retention, defaults.water_retention)
            moisture = min(100.0, moisture + retention * self._balance.plant.watering_moisture_bonus)
        return rules.Environment(
            moisture=moisture,
            temperature=self._reading(chunk.temperature, defaults.temperature),
            light=self._reading(chunk.light_level, defaults.light),
        )

    def _season_multiplier(self, season: Season | str) -> float:
        key = season.value if isinstance(season, Season) else str(season).lower()
        return self._balance.plant.season_multiplier.get(key, 1.0)

    @staticmethod
    def _reading(value: float | None, default: float) -> float:
        return default if value is None else value


def _iter_chunks(chunks: Mapping[Position, Chunk] | Iterable[Chunk]) -> Iterable[Chunk]:
    if isinstance(chunks, Mapping):
        return chunks.values()
    return chunks
