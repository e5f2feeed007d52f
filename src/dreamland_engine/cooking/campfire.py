"""Campfire grilling.

A matching ingredient set becomes one merged skewer. When the set does not
match, each ingredient is simply grilled on its own and handed back hot.
"""

from __future__ import annotations

from typing import Sequence

from dreamland_engine.catalog import BilingualText, CookingRecipe
from dreamland_engine.cooking.food import FoodGenerator
from dreamland_engine.cooking.results import CookingOutcome, cooked_item, ingredients_match
from dreamland_engine.effects import ERROR_SOUND, PlaySound, ShowParticle
from dreamland_engine.models import Item, ItemMetadata


def cook_on_campfire(
    ingredients: Sequence[Item],
    recipe: CookingRecipe,
    generator: FoodGenerator,
    spice: Item | None = None,
    *,
    tick: int | None = None,
) -> CookingOutcome:
    if not ingredients_match(recipe, ingredients):
        grilled = [
            Item(
                id=item.id,
                quantity=item.quantity,
                effects=list(item.effects),
                metadata=ItemMetadata(is_hot=True, crafted_at=tick),
            )
            for item in ingredients
        ]
        return CookingOutcome(
            success=False,
            message=BilingualText(en="Ingredients grilled separately", vi="Nguyên liệu được nướng riêng"),
            items=grilled,
            effects=[ERROR_SOUND],
        )

    food = generator.generate(recipe, ingredients, spice)
    item = cooked_item(food, ItemMetadata(is_hot=True, recipe_id=recipe.id, crafted_at=tick))
    return CookingOutcome(
        success=True,
        message=BilingualText(en=f"Cooked {food.name.en}", vi=f"Đã nấu {food.name.vi}"),
        items=[item],
        effects=[PlaySound(sound="CAMPFIRE_SIZZLE"), ShowParticle(particle="FIRE_SPARKS")],
    )
