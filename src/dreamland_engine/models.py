from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

from .catalog import ItemEffect

Position = tuple[int, int]
Translator = Callable[..., str]

PERSONALITY_TRAITS = ("laziness", "aggression", "caution", "greediness", "sociability", "curiosity")


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class PlantStage(str, Enum):
    SEEDLING = "seedling"
    GROWING = "growing"
    MATURE = "mature"


class LifeStage(str, Enum):
    BABY = "baby"
    ADULT = "adult"


@dataclass(slots=True)
class PlantInstance:
    species_id: str
    hp: float
    max_maturity: float = 100.0
    maturity: float = 0.0
    stage: PlantStage = PlantStage.SEEDLING
    suitability: float | None = None
    age: int = 0

    def refresh_stage(self) -> None:
        ratio = self.maturity / self.max_maturity if self.max_maturity else 0.0
        if ratio >= 1.0:
            self.stage = PlantStage.MATURE
        elif ratio > 0.0:
            self.stage = PlantStage.GROWING
        else:
            self.stage = PlantStage.SEEDLING


@dataclass(slots=True)
class Chunk:
    """One addressable cell of the world grid.

    Environment fields may be ``None``; readers fall back to the balance
    table defaults instead of failing.
    """

    x: int
    y: int
    terrain: str = "grassland"
    moisture: float | None = None
    temperature: float | None = None
    light_level: float | None = None
    vegetation_density: float = 0.0
    soil_type: str = "loam"
    water_timer: float = 0.0
    water_retention: float | None = None
    nutrition: float | None = None
    fertilizer_level: float | None = None
    plants: list[PlantInstance] = field(default_factory=list)
    explored: bool = False
    last_visited: int | None = None
    prev_vegetation_density: float = 0.0

    @property
    def key(self) -> Position:
        return (self.x, self.y)


class World:
    """Owns the chunk map; one chunk per coordinate."""

    def __init__(self, chunks: list[Chunk] | None = None) -> None:
        self._chunks: dict[Position, Chunk] = {}
        for chunk in chunks or []:
            self.add_chunk(chunk)

    def add_chunk(self, chunk: Chunk) -> None:
        if chunk.key in self._chunks:
            raise ValueError(f"Duplicate chunk coordinates: {chunk.key}")
        self._chunks[chunk.key] = chunk

    def get(self, x: int, y: int) -> Chunk | None:
        return self._chunks.get((x, y))

    def __contains__(self, key: Position) -> bool:
        return key in self._chunks

    def __iter__(self) -> Iterator[Chunk]:
        return iter(self._chunks.values())

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> dict[Position, Chunk]:
        return self._chunks


@dataclass(slots=True)
class CreatureGenetics:
    hunger_rate: float = 1.0
    speed: float = 3.0
    size: float = 1.0
    fearfulness: float = 50.0


@dataclass(slots=True)
class WildlifeCreature:
    id: str
    species_id: str
    position: Position
    genetics: CreatureGenetics = field(default_factory=CreatureGenetics)
    personality: dict[str, float] = field(default_factory=dict)
    stage: LifeStage = LifeStage.ADULT
    hunger: float = 0.0
    health: float = 100.0
    feeding_count: int = 0
    parent_ids: tuple[str, str] | None = None
    spawned_at: int = 0
    last_action_tick: int | None = None

    @property
    def is_alive(self) -> bool:
        return self.health > 0


@dataclass(slots=True)
class Threat:
    position: Position
    severity: float
    type: str


@dataclass(slots=True)
class ItemStack:
    id: str
    quantity: int


@dataclass(slots=True)
class ItemMetadata:
    is_hot: bool = False
    is_charred: bool = False
    is_watery: bool = False
    is_soup: bool = False
    recipe_id: str | None = None
    crafted_at: int | None = None
    quality: str | None = None


@dataclass(slots=True)
class Item:
    id: str
    quantity: int = 1
    effects: list[ItemEffect] = field(default_factory=list)
    metadata: ItemMetadata = field(default_factory=ItemMetadata)
    equipped: bool = False


@dataclass(slots=True)
class PlayerStatus:
    position: Position = (0, 0)
    health: float = 100.0
    hunger: float = 0.0
    inventory: list[Item] = field(default_factory=list)


@dataclass(slots=True)
class NarrativeMessage:
    text: str
    type: str = "narrative"
