"""Static definitions consumed by the engines.

Recipes, items, plants and wildlife species are immutable definitions. They
are grouped in a :class:`Catalog` that is built explicitly and passed to the
engines that need it, so tests and mods can supply their own tables.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Definition(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class BilingualText(_Definition):
    en: str
    vi: str

    def __str__(self) -> str:
        return self.en


class EffectType(str, Enum):
    RESTORE_HUNGER = "RESTORE_HUNGER"
    RESTORE_STAMINA = "RESTORE_STAMINA"
    RESTORE_MANA = "RESTORE_MANA"
    HEAL = "HEAL"


class ItemEffect(_Definition):
    type: EffectType
    amount: float = 0.0


class SpiceModifierType(str, Enum):
    MULTIPLY_HUNGER = "MULTIPLY_HUNGER"
    MULTIPLY_ALL_STATS = "MULTIPLY_ALL_STATS"


class SpiceModifier(_Definition):
    type: SpiceModifierType
    value: float = Field(ge=0)


class ItemDefinition(_Definition):
    id: str
    name: BilingualText
    category: str = "Material"
    tier: int = 1
    emoji: str = ""
    effects: tuple[ItemEffect, ...] = ()
    spice_modifier: SpiceModifier | None = None


class RecipeIngredient(_Definition):
    id: str
    quantity: int = Field(default=1, gt=0)


class Recipe(_Definition):
    """Crafting recipe: ingredients in insertion order, primary material first."""

    id: str
    name: BilingualText | None = None
    ingredients: tuple[RecipeIngredient, ...]
    result_id: str
    result_quantity: int = Field(default=1, gt=0)
    difficulty: int = 1


class CookingType(str, Enum):
    CAMPFIRE = "CAMPFIRE"
    POT = "POT"
    OVEN = "OVEN"


class StatMultipliers(_Definition):
    hunger: float = 1.0
    stamina: float = 1.0
    health: float = 1.0


class CookingResult(_Definition):
    base_food: Literal["meat_kebab", "vegan_kebab", "herb_kebab", "soup", "baked_good"]
    emoji: str = ""


class CookingRecipe(_Definition):
    """Cooking recipe. Ingredient matching ignores order."""

    id: str
    name: BilingualText
    ingredients: tuple[RecipeIngredient, ...] = Field(min_length=1, max_length=9)
    cooking_type: CookingType
    cooking_time: int = Field(default=30, ge=10, le=300)
    ideal_temperature: float | None = None
    result: CookingResult
    stat_multipliers: StatMultipliers = Field(default_factory=StatMultipliers)
    tier: int = Field(default=2, ge=1, le=3)

    @model_validator(mode="after")
    def _oven_has_no_temperature_elsewhere(self) -> CookingRecipe:
        if self.ideal_temperature is not None and self.cooking_type is not CookingType.OVEN:
            raise ValueError("ideal_temperature only applies to OVEN recipes")
        return self


class PlantRequirements(_Definition):
    min_moisture: float | None = None
    max_moisture: float | None = None
    min_temperature: float | None = None
    max_temperature: float | None = None
    min_light: float | None = None


class PlantDefinition(_Definition):
    id: str
    name: BilingualText
    hp: int = Field(default=20, gt=0)
    max_maturity: float = Field(default=100.0, gt=0)
    vegetation_contribution: float = 10.0
    requirements: PlantRequirements = Field(default_factory=PlantRequirements)
    reproduction_chance: float = Field(default=0.05, ge=0, le=1)
    drop_item_id: str | None = None


class DietType(str, Enum):
    HERBIVOROUS = "herbivorous"
    CARNIVOROUS = "carnivorous"
    OMNIVOROUS = "omnivorous"


class GeneticsTemplate(_Definition):
    hunger_rate: float = 1.0
    speed: float = 3.0
    size: float = 1.0
    fearfulness: float = 50.0


class SpeciesDefinition(_Definition):
    id: str
    name: BilingualText
    diet_type: DietType
    base_genetics: GeneticsTemplate = Field(default_factory=GeneticsTemplate)
    personality: dict[str, float] = Field(default_factory=dict)
    prey_species: tuple[str, ...] = ()
    adult_feeding_threshold: int = 3
    can_breed: bool = True
    hunger_rate_multiplier: float = 1.0
    carrying_capacity: int | None = None

    @property
    def eats_plants(self) -> bool:
        return self.diet_type is not DietType.CARNIVOROUS


class Catalog(_Definition):
    """Id-keyed definition tables."""

    items: dict[str, ItemDefinition] = Field(default_factory=dict)
    recipes: dict[str, Recipe] = Field(default_factory=dict)
    cooking_recipes: dict[str, CookingRecipe] = Field(default_factory=dict)
    plants: dict[str, PlantDefinition] = Field(default_factory=dict)
    species: dict[str, SpeciesDefinition] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _keys_match_ids(self) -> Catalog:
        for table in (self.items, self.recipes, self.cooking_recipes, self.plants, self.species):
            for key, definition in table.items():
                if key != definition.id:
                    raise ValueError(f"Catalog key {key!r} does not match definition id {definition.id!r}")
        return self

    @classmethod
    def from_definitions(
        cls,
        *,
        items: list[ItemDefinition] = (),
        recipes: list[Recipe] = (),
        cooking_recipes: list[CookingRecipe] = (),
        plants: list[PlantDefinition] = (),
        species: list[SpeciesDefinition] = (),
    ) -> Catalog:
        return cls(
            items={d.id: d for d in items},
            recipes={d.id: d for d in recipes},
            cooking_recipes={d.id: d for d in cooking_recipes},
            plants={d.id: d for d in plants},
            species={d.id: d for d in species},
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> Catalog:
        target = Path(path).expanduser()
        if not target.exists():
            raise FileNotFoundError(f"Catalog not found: {target}")
        payload = json.loads(target.read_text(encoding="utf-8"))
        return cls.from_definitions(
            items=[ItemDefinition.model_validate(d) for d in payload.get("items", [])],
            recipes=[Recipe.model_validate(d) for d in payload.get("recipes", [])],
            cooking_recipes=[CookingRecipe.model_validate(d) for d in payload.get("cooking_recipes", [])],
            plants=[PlantDefinition.model_validate(d) for d in payload.get("plants", [])],
            species=[SpeciesDefinition.model_validate(d) for d in payload.get("species", [])],
        )
