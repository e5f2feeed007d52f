"""Small seeded world generator for demos and the CLI.

Terrain is picked per cell from a fixed table; each terrain carries a
baseline climate that is jittered per chunk. Plants are seeded only where the
catalog holds their species.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from dreamland_engine.catalog import Catalog
from dreamland_engine.models import (
    Chunk,
    CreatureGenetics,
    LifeStage,
    PlantInstance,
    WildlifeCreature,
    World,
)


@dataclass(slots=True, frozen=True)
class TerrainProfile:
    moisture: float
    temperature: float
    light: float
    soil_type: str
    plants: tuple[str, ...]


TERRAINS: dict[str, TerrainProfile] = {
    "grassland": TerrainProfile(55, 18, 70, "loam", ("wild_grass", "berry_bush")),
    "forest": TerrainProfile(70, 15, 40, "humus", ("berry_bush", "healing_herb_plant")),
    "desert": TerrainProfile(10, 35, 90, "sand", ("cactus",)),
    "swamp": TerrainProfile(90, 20, 35, "peat", ("healing_herb_plant", "wild_grass")),
    "mountain": TerrainProfile(35, 5, 60, "rock", ("wild_grass",)),
}

CLIMATE_JITTER = 5.0


def generate_world(
    width: int,
    height: int,
    catalog: Catalog,
    rng: random.Random,
    *,
    plants_per_chunk: int = 2,
) -> World:
    if width <= 0 or height <= 0:
        raise ValueError("World dimensions must be positive")

    terrains = list(TERRAINS)
    world = World()
    for y in range(height):
        for x in range(width):
            terrain = rng.choice(terrains)
            world.add_chunk(_make_chunk(x, y, terrain, catalog, rng, plants_per_chunk))
    return world


def _make_chunk(
    x: int, y: int, terrain: str, catalog: Catalog, rng: random.Random, plants_per_chunk: int
) -> Chunk:
    profile = TERRAINS[terrain]
    chunk = Chunk(
        x=x,
        y=y,
        terrain=terrain,
        moisture=_jitter(profile.moisture, rng),
        temperature=_jitter(profile.temperature, rng),
        light_level=_jitter(profile.light, rng),
        soil_type=profile.soil_type,
        nutrition=50.0,
    )
    available = [plant_id for plant_id in profile.plants if plant_id in catalog.plants]
    if not available:
        return chunk
    for _ in range(plants_per_chunk):
        definition = catalog.plants[rng.choice(available)]
        maturity = round(rng.uniform(0, definition.max_maturity), 1)
        plant = PlantInstance(
            species_id=definition.id,
            hp=definition.hp,
            max_maturity=definition.max_maturity,
            maturity=maturity,
        )
        plant.refresh_stage()
        chunk.plants.append(plant)
    chunk.vegetation_density = min(
        100.0, sum(catalog.plants[p.species_id].vegetation_contribution for p in chunk.plants)
    )
    chunk.prev_vegetation_density = chunk.vegetation_density
    return chunk


def _jitter(value: float, rng: random.Random) -> float:
    return round(min(100.0, max(0.0, value + rng.uniform(-CLIMATE_JITTER, CLIMATE_JITTER))), 1)


def populate_creatures(
    world: World,
    catalog: Catalog,
    rng: random.Random,
    counts: dict[str, int],
) -> list[WildlifeCreature]:
    """Spawn ``counts[species_id]`` adults on random chunks; unknown species are ignored."""
    keys = list(world.chunks)
    if not keys:
        return []

    creatures: list[WildlifeCreature] = []
    for species_id, count in counts.items():
        species = catalog.species.get(species_id)
        if species is None:
            continue
        base = species.base_genetics
        for index in range(count):
            creatures.append(
                WildlifeCreature(
                    id=f"{species_id}_{index}",
                    species_id=species_id,
                    position=rng.choice(keys),
                    genetics=CreatureGenetics(
                        hunger_rate=base.hunger_rate,
                        speed=base.speed,
                        size=base.size,
                        fearfulness=base.fearfulness,
                    ),
                    personality=dict(species.personality),
                    stage=LifeStage.ADULT,
                    hunger=round(rng.uniform(0, 40), 1),
                )
            )
    return creatures
