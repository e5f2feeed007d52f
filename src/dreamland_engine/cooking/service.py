"""Inventory-facing cooking entrypoint that dispatches on the recipe's method."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

from dreamland_engine.balance import CookingBalance
from dreamland_engine.catalog import BilingualText, CookingRecipe, CookingType
from dreamland_engine.cooking.campfire import cook_on_campfire
from dreamland_engine.cooking.food import FoodGenerator
from dreamland_engine.cooking.oven import cook_in_oven
from dreamland_engine.cooking.pot import cook_in_pot
from dreamland_engine.cooking.results import CookingOutcome
from dreamland_engine.effects import ERROR_SOUND, Notification, SideEffect
from dreamland_engine.models import Item

WATER_ITEM_ID = "water"


@dataclass(slots=True)
class CookingRequest:
    recipe: CookingRecipe
    ingredient_ids: Sequence[str]
    temperature: float | None = None
    spice_item_id: str | None = None
    tick: int | None = None


@dataclass(slots=True)
class CookingOutput:
    success: bool
    outcome: CookingOutcome | None
    effects: list[SideEffect] = field(default_factory=list)


class CookingService:
    """Resolves a cooking request against a player's inventory.

    Nothing is consumed unless the engine reports success. On success one
    unit of each listed ingredient (plus the spice, and the water for pots)
    is removed and the cooked items are appended.
    """

    def __init__(
        self,
        generator: FoodGenerator,
        *,
        balance: CookingBalance | None = None,
        water_item_id: str = WATER_ITEM_ID,
        logger: logging.Logger | None = None,
    ) -> None:
        self._generator = generator
        self._balance = balance or CookingBalance()
        self._water_item_id = water_item_id
        self._logger = logger or logging.getLogger("dreamland_engine.cooking.service")

    def execute(self, inventory: list[Item], request: CookingRequest) -> CookingOutput:
        ingredients: list[Item] = []
        wanted = Counter(request.ingredient_ids)
        for item_id in request.ingredient_ids:
            item = _find(inventory, item_id)
            if item is None or _total(inventory, item_id) < wanted[item_id]:
                return self._reject(BilingualText(en="Missing ingredient", vi="Thiếu nguyên liệu"))
            ingredients.append(item)
        spice = _find(inventory, request.spice_item_id) if request.spice_item_id else None
        water = _find(inventory, self._water_item_id)

        recipe = request.recipe
        if recipe.cooking_type is CookingType.CAMPFIRE:
            outcome = cook_on_campfire(ingredients, recipe, self._generator, spice, tick=request.tick)
        elif recipe.cooking_type is CookingType.POT:
            outcome = cook_in_pot(
                ingredients, recipe, self._generator, water, spice, tick=request.tick, balance=self._balance
            )
        else:
            if request.temperature is None:
                return self._reject(BilingualText(en="Temperature required for oven", vi="Cần nhiệt độ để nấu lò"))
            outcome = cook_in_oven(
                ingredients,
                recipe,
                request.temperature,
                self._generator,
                spice,
                tick=request.tick,
                balance=self._balance.oven,
            )

        level = "success" if outcome.success else "error"
        effects = [*outcome.effects, Notification(message=outcome.message, level=level)]
        if not outcome.success:
            self._logger.debug("cooking_failed", extra={"recipe_id": recipe.id, "reason": outcome.message.en})
            return CookingOutput(success=False, outcome=outcome, effects=effects)

        consumed = list(request.ingredient_ids)
        if spice is not None:
            consumed.append(spice.id)
        if recipe.cooking_type is CookingType.POT:
            consumed.append(self._water_item_id)
        for item_id in consumed:
            _take_one(inventory, item_id)
        inventory.extend(outcome.items)
        self._logger.info(
            "food_cooked",
            extra={"recipe_id": recipe.id, "method": recipe.cooking_type.value, "items": len(outcome.items)},
        )
        return CookingOutput(success=True, outcome=outcome, effects=effects)

    def _reject(self, message: BilingualText) -> CookingOutput:
        return CookingOutput(
            success=False, outcome=None, effects=[ERROR_SOUND, Notification(message=message, level="error")]
        )


def _find(inventory: Sequence[Item], item_id: str) -> Item | None:
    return next((item for item in inventory if item.id == item_id and item.quantity > 0), None)


def _take_one(inventory: list[Item], item_id: str) -> None:
    item = _find(inventory, item_id)
    if item is None:
        return
    item.quantity -= 1
    if item.quantity <= 0:
        inventory.remove(item)


def _total(inventory: Sequence[Item], item_id: str) -> int:
    return sum(item.quantity for item in inventory if item.id == item_id)
