"""Builds cooked food definitions from ingredient stacks.

Effects of all ingredients are summed, scaled by the recipe multipliers and
an optional spice modifier, then rounded. Results are cached per generator
instance by recipe, sorted ingredient ids and spice.
"""

from __future__ import annotations

import hashlib
from typing import Mapping, Sequence

from dreamland_engine.catalog import (
    BilingualText,
    CookingRecipe,
    CookingType,
    EffectType,
    ItemDefinition,
    ItemEffect,
    SpiceModifierType,
)
from dreamland_engine.models import Item

_ADJECTIVES: dict[str, BilingualText] = {
    "chili": BilingualText(en="Fiery", vi="Cay"),
    "honey": BilingualText(en="Sweet", vi="Ngọt"),
    "salt": BilingualText(en="Savory", vi="Mặn"),
    "citrus": BilingualText(en="Fresh", vi="Tươi"),
    "herb": BilingualText(en="Herbal", vi="Thảo mộc"),
    "mushroom": BilingualText(en="Umami", vi="Umami"),
    "default": BilingualText(en="Hearty", vi="Đậm đà"),
}
# Spice-like modifiers win over ingredient flavours.
_ADJECTIVE_PRIORITY = ("chili", "honey", "salt", "citrus", "herb", "mushroom")
_MODIFIER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "chili": ("chili", "pepper"),
    "honey": ("honey",),
    "citrus": ("citrus", "lemon", "acid"),
    "herb": ("herb", "aromatic"),
    "mushroom": ("mushroom", "fungi"),
    "salt": ("salt",),
}
_METHOD_VERBS: dict[CookingType, BilingualText] = {
    CookingType.CAMPFIRE: BilingualText(en="Grilled", vi="Nướng"),
    CookingType.POT: BilingualText(en="Simmered", vi="Kho"),
    CookingType.OVEN: BilingualText(en="Roasted", vi="Quay"),
}
_BASE_NAMES: dict[str, BilingualText] = {
    "meat_kebab": BilingualText(en="Meat Skewer", vi="Xiên Thịt"),
    "vegan_kebab": BilingualText(en="Vegetable Skewer", vi="Xiên Rau"),
    "herb_kebab": BilingualText(en="Herb Medley", vi="Hỗn Hợp Thảo Mộc"),
    "soup": BilingualText(en="Soup", vi="Súp"),
    "baked_good": BilingualText(en="Baked Dish", vi="Bánh Nướng"),
}
_EFFECT_ORDER = (EffectType.RESTORE_HUNGER, EffectType.RESTORE_STAMINA, EffectType.HEAL, EffectType.RESTORE_MANA)


def generate_food_name(ingredient_ids: Sequence[str], recipe: CookingRecipe, spice_id: str | None = None) -> BilingualText:
    modifiers: set[str] = set()
    for item_id in [*ingredient_ids, *([spice_id] if spice_id else [])]:
        lowered = item_id.lower()
        for modifier, keywords in _MODIFIER_KEYWORDS.items():
            if any(keyword in lowered for keyword in keywords):
                modifiers.add(modifier)
    adjective = next((_ADJECTIVES[m] for m in _ADJECTIVE_PRIORITY if m in modifiers), _ADJECTIVES["default"])
    method = _METHOD_VERBS[recipe.cooking_type]
    base = _BASE_NAMES[recipe.result.base_food]
    return BilingualText(en=f"{adjective.en} {method.en} {base.en}", vi=f"{base.vi} {method.vi} {adjective.vi}")


class FoodGenerator:
    def __init__(self, item_definitions: Mapping[str, ItemDefinition]) -> None:
        self._definitions = item_definitions
        self._cache: dict[str, ItemDefinition] = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    def definition(self, item_id: str) -> ItemDefinition | None:
        return self._definitions.get(item_id)

    def generate(self, recipe: CookingRecipe, ingredients: Sequence[Item], spice: Item | None = None) -> ItemDefinition:
        ingredient_ids = sorted(item.id for item in ingredients)
        cache_key = f"{recipe.id}|{'|'.join(ingredient_ids)}|{spice.id if spice else 'none'}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        totals = {effect_type: 0.0 for effect_type in _EFFECT_ORDER}
        for item in ingredients:
            definition = self._definitions.get(item.id)
            if definition is None:
                continue
            for effect in definition.effects:
                totals[effect.type] += effect.amount

        multipliers = recipe.stat_multipliers
        totals[EffectType.RESTORE_HUNGER] *= multipliers.hunger
        totals[EffectType.RESTORE_STAMINA] *= multipliers.stamina
        totals[EffectType.HEAL] *= multipliers.health
        self._apply_spice(totals, spice)

        digest = hashlib.sha1(cache_key.encode("utf-8")).hexdigest()[:8]
        food = ItemDefinition(
            id=f"cooked_{recipe.result.base_food}_{digest}",
            name=generate_food_name([item.id for item in ingredients], recipe, spice.id if spice else None),
            category="Food",
            tier=recipe.tier,
            emoji=recipe.result.emoji,
            effects=tuple(
                ItemEffect(type=effect_type, amount=round(totals[effect_type]))
                for effect_type in _EFFECT_ORDER
                if totals[effect_type] > 0
            ),
        )
        self._cache[cache_key] = food
        return food

    def _apply_spice(self, totals: dict[EffectType, float], spice: Item | None) -> None:
        if spice is None:
            return
        definition = self._definitions.get(spice.id)
        modifier = definition.spice_modifier if definition else None
        if modifier is None:
            return
        if modifier.type is SpiceModifierType.MULTIPLY_HUNGER:
            totals[EffectType.RESTORE_HUNGER] *= modifier.value
        else:
            for effect_type in totals:
                totals[effect_type] *= modifier.value
