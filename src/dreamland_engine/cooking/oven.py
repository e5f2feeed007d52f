from __future__ import annotations

from typing import Sequence

from dreamland_engine.balance import OvenBalance
from dreamland_engine.catalog import BilingualText, CookingRecipe
from dreamland_engine.cooking.food import FoodGenerator
from dreamland_engine.cooking.results import (
    INGREDIENT_MISMATCH,
    CookingOutcome,
    CookingQuality,
    cooked_item,
    failure,
    ingredients_match,
)
from dreamland_engine.effects import PlaySound, ShowParticle
from dreamland_engine.models import Item, ItemMetadata

DEFAULT_OVEN_BALANCE = OvenBalance()

_QUALITY_MESSAGES = {
    CookingQuality.PERFECT: BilingualText(en="Perfect bake!", vi="Nướng hoàn hảo!"),
    CookingQuality.BURNT: BilingualText(en="Slightly burnt", vi="Hơi cháy"),
    CookingQuality.UNDERCOOKED: BilingualText(en="Undercooked", vi="Chưa chín"),
}


def get_quality(
    temperature: float, ideal_temperature: float, balance: OvenBalance = DEFAULT_OVEN_BALANCE
) -> tuple[CookingQuality, float]:
    if abs(temperature - ideal_temperature) <= balance.perfect_range:
        return CookingQuality.PERFECT, 1.0
    if temperature > ideal_temperature:
        return CookingQuality.BURNT, balance.burnt_multiplier
    return CookingQuality.UNDERCOOKED, balance.undercooked_multiplier


def cook_in_oven(
    ingredients: Sequence[Item],
    recipe: CookingRecipe,
    temperature: float,
    generator: FoodGenerator,
    spice: Item | None = None,
    *,
    tick: int | None = None,
    balance: OvenBalance = DEFAULT_OVEN_BALANCE,
) -> CookingOutcome:
    """Bake one item per input ingredient, all sharing the cook's quality."""
    if not balance.min_temperature <= temperature <= balance.max_temperature:
        low, high = int(balance.min_temperature), int(balance.max_temperature)
        return failure(
            BilingualText(
                en=f"Temperature out of range ({low}-{high}°C)",
                vi=f"Nhiệt độ ngoài phạm vi ({low}-{high}°C)",
            )
        )
    if not ingredients_match(recipe, ingredients):
        return failure(INGREDIENT_MISMATCH)

    food = generator.generate(recipe, ingredients, spice)
    ideal = recipe.ideal_temperature if recipe.ideal_temperature is not None else balance.ideal_temperature
    quality, multiplier = get_quality(temperature, ideal, balance)

    items = [
        cooked_item(
            food,
            ItemMetadata(
                recipe_id=recipe.id,
                crafted_at=tick,
                quality=quality.value,
                is_charred=quality is CookingQuality.BURNT,
                is_watery=quality is CookingQuality.UNDERCOOKED,
            ),
            multiplier,
        )
        for _ in ingredients
    ]
    return CookingOutcome(
        success=True,
        message=_QUALITY_MESSAGES[quality],
        items=items,
        effects=[PlaySound(sound="OVEN_COMPLETE"), ShowParticle(particle="STEAM_CLOUD")],
        quality=quality,
    )
