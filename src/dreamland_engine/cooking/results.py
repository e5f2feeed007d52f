from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from dreamland_engine.catalog import BilingualText, CookingRecipe, ItemDefinition, ItemEffect
from dreamland_engine.effects import ERROR_SOUND, SideEffect
from dreamland_engine.models import Item, ItemMetadata

INGREDIENT_MISMATCH = BilingualText(en="Ingredients do not match recipe", vi="Nguyên liệu không phù hợp")


class CookingQuality(str, Enum):
    PERFECT = "PERFECT"
    BURNT = "BURNT"
    UNDERCOOKED = "UNDERCOOKED"


@dataclass(slots=True)
class CookingOutcome:
    """Result shared by every cooking method."""

    success: bool
    message: BilingualText
    items: list[Item] = field(default_factory=list)
    effects: list[SideEffect] = field(default_factory=list)
    quality: CookingQuality | None = None
    bowl_count: int = 0


def ingredients_match(recipe: CookingRecipe, ingredients: Sequence[Item]) -> bool:
    """Set containment on ids; supplied quantities are not compared."""
    if len(ingredients) < len(recipe.ingredients):
        return False
    supplied = {item.id for item in ingredients}
    return all(required.id in supplied for required in recipe.ingredients)


def failure(message: BilingualText, items: list[Item] | None = None) -> CookingOutcome:
    return CookingOutcome(success=False, message=message, items=items or [], effects=[ERROR_SOUND])


def cooked_item(food: ItemDefinition, metadata: ItemMetadata, multiplier: float = 1.0) -> Item:
    effects = [ItemEffect(type=effect.type, amount=round(effect.amount * multiplier)) for effect in food.effects]
    return Item(id=food.id, quantity=1, effects=effects, metadata=metadata)
