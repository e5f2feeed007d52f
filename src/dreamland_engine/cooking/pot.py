from __future__ import annotations

import math
from typing import Sequence

from dreamland_engine.balance import CookingBalance
from dreamland_engine.catalog import BilingualText, CookingRecipe
from dreamland_engine.cooking.food import FoodGenerator
from dreamland_engine.cooking.results import INGREDIENT_MISMATCH, CookingOutcome, cooked_item, failure, ingredients_match
from dreamland_engine.effects import PlaySound, ShowParticle, SideEffect
from dreamland_engine.models import Item, ItemMetadata

DEFAULT_COOKING_BALANCE = CookingBalance()


def cook_in_pot(
    ingredients: Sequence[Item],
    recipe: CookingRecipe,
    generator: FoodGenerator,
    water: Item | None,
    spice: Item | None = None,
    *,
    tick: int | None = None,
    balance: CookingBalance = DEFAULT_COOKING_BALANCE,
) -> CookingOutcome:
    """Simmer a soup; every two ingredients fill one bowl, rounding up."""
    if water is None:
        return failure(BilingualText(en="Need water to cook in pot", vi="Cần nước để nấu lẩu"))
    if not ingredients:
        return failure(BilingualText(en="Need ingredients to cook", vi="Cần nguyên liệu để nấu"))
    if not ingredients_match(recipe, ingredients):
        return failure(INGREDIENT_MISMATCH)

    bowl_count = math.ceil(len(ingredients) / balance.pot_ingredients_per_bowl)
    food = generator.generate(recipe, ingredients, spice)
    bowls = [
        cooked_item(food, ItemMetadata(is_soup=True, is_hot=True, recipe_id=recipe.id, crafted_at=tick))
        for _ in range(bowl_count)
    ]

    effects: list[SideEffect] = [PlaySound(sound="COOKING_SUCCESS"), ShowParticle(particle="BOILING_BUBBLES")]
    for index in range(bowl_count):
        delay_ms = index * balance.pot_dispense_stagger_ms
        effects.append(PlaySound(sound="LADLE_DISPENSE", delay_ms=delay_ms))
        effects.append(ShowParticle(particle="STEAM_BURST", delay_ms=delay_ms))

    plural = "s" if bowl_count > 1 else ""
    return CookingOutcome(
        success=True,
        message=BilingualText(en=f"Made {bowl_count} bowl{plural} of soup", vi=f"Làm được {bowl_count} bát súp"),
        items=bowls,
        effects=effects,
        bowl_count=bowl_count,
    )
