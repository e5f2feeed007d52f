"""Crafting rules: recipe validation, cost and craft time.

The recipe table is an explicit :class:`RecipeBook` argument. Validation only
answers yes or no; an unknown recipe and missing materials are the same
``False``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Protocol

from dreamland_engine.balance import CraftingBalance
from dreamland_engine.catalog import BilingualText, Recipe, RecipeIngredient
from dreamland_engine.effects import ERROR_SOUND, Notification, PlaySound, SideEffect
from dreamland_engine.models import Item, ItemMetadata, ItemStack

logger = logging.getLogger("dreamland_engine.crafting.rules")

DEFAULT_CRAFTING_BALANCE = CraftingBalance()


class Stack(Protocol):
    id: str
    quantity: int


class RecipeBook:
    """Id-keyed crafting recipes; iteration keeps insertion order."""

    def __init__(self, recipes: Iterable[Recipe] | Mapping[str, Recipe] = ()) -> None:
        values = recipes.values() if isinstance(recipes, Mapping) else recipes
        self._recipes: dict[str, Recipe] = {recipe.id: recipe for recipe in values}

    def get(self, recipe_id: str) -> Recipe | None:
        return self._recipes.get(recipe_id)

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._recipes

    def __iter__(self):
        return iter(self._recipes.values())

    def __len__(self) -> int:
        return len(self._recipes)


def _recipe(recipe_id: str, result_id: str, difficulty: int, *ingredients: tuple[str, int]) -> Recipe:
    return Recipe(
        id=recipe_id,
        ingredients=tuple(RecipeIngredient(id=item_id, quantity=quantity) for item_id, quantity in ingredients),
        result_id=result_id,
        difficulty=difficulty,
    )


DEFAULT_RECIPE_BOOK = RecipeBook(
    [
        _recipe("iron_sword", "iron_sword", 3, ("iron_ore", 5), ("wood", 2)),
        _recipe("wooden_bow", "wooden_bow", 2, ("wood", 3), ("string", 1)),
        _recipe("health_potion", "health_potion", 2, ("herb", 2), ("water", 1)),
        _recipe("copper_ore", "copper_ore", 1, ("copper_raw", 1)),
    ]
)


def _available(inventory: Iterable[Stack]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for stack in inventory:
        totals[stack.id] = totals.get(stack.id, 0) + stack.quantity
    return totals


def validate_recipe(recipe_id: str, inventory: Iterable[Stack], recipe_book: RecipeBook = DEFAULT_RECIPE_BOOK) -> bool:
    recipe = recipe_book.get(recipe_id)
    if recipe is None:
        return False
    available = _available(inventory)
    return all(available.get(ingredient.id, 0) >= ingredient.quantity for ingredient in recipe.ingredients)


def calculate_craft_time(difficulty: float, balance: CraftingBalance = DEFAULT_CRAFTING_BALANCE) -> int:
    """Seconds to craft: difficulty is clamped to 1..5 and looked up in the base-time table."""
    clamped = max(balance.min_difficulty, min(balance.max_difficulty, difficulty))
    base_time = balance.base_times.get(clamped, balance.base_times[balance.min_difficulty])
    return int(max(balance.min_craft_seconds, min(balance.max_craft_seconds, base_time)))


def get_recipe_cost(recipe_id: str, recipe_book: RecipeBook = DEFAULT_RECIPE_BOOK) -> list[ItemStack]:
    recipe = recipe_book.get(recipe_id)
    if recipe is None:
        return []
    return [ItemStack(id=ingredient.id, quantity=ingredient.quantity) for ingredient in recipe.ingredients]


@dataclass(slots=True)
class CraftResult:
    success: bool
    recipe_id: str
    message: BilingualText
    item: Item | None = None
    consumed: list[ItemStack] = field(default_factory=list)
    craft_time_seconds: int = 0
    effects: list[SideEffect] = field(default_factory=list)


def craft(
    recipe_id: str,
    inventory: list[Item],
    recipe_book: RecipeBook = DEFAULT_RECIPE_BOOK,
    *,
    tick: int | None = None,
    balance: CraftingBalance = DEFAULT_CRAFTING_BALANCE,
) -> CraftResult:
    """Consume ingredients from ``inventory`` and add the result.

    The inventory is only touched when :func:`validate_recipe` passes.
    """
    recipe = recipe_book.get(recipe_id)
    if recipe is None:
        return _failure(recipe_id, BilingualText(en="Unknown recipe", vi="Không rõ công thức"))
    if not validate_recipe(recipe_id, inventory, recipe_book):
        return _failure(recipe_id, BilingualText(en="Not enough materials", vi="Không đủ nguyên liệu"))

    consumed = [_consume(inventory, ingredient) for ingredient in recipe.ingredients]
    item = Item(
        id=recipe.result_id,
        quantity=recipe.result_quantity,
        metadata=ItemMetadata(recipe_id=recipe.id, crafted_at=tick),
    )
    inventory.append(item)
    logger.info("item_crafted", extra={"recipe_id": recipe.id, "result_id": recipe.result_id})
    message = BilingualText(en=f"Crafted {recipe.result_id}", vi=f"Đã chế tạo {recipe.result_id}")
    return CraftResult(
        success=True,
        recipe_id=recipe.id,
        message=message,
        item=item,
        consumed=consumed,
        craft_time_seconds=calculate_craft_time(recipe.difficulty, balance),
        effects=[PlaySound(sound="CRAFT_SUCCESS"), Notification(message=message, level="success")],
    )


def _consume(inventory: list[Item], ingredient: RecipeIngredient) -> ItemStack:
    remaining = ingredient.quantity
    for stack in list(inventory):
        if remaining <= 0:
            break
        if stack.id != ingredient.id:
            continue
        taken = min(stack.quantity, remaining)
        stack.quantity -= taken
        remaining -= taken
        if stack.quantity <= 0:
            inventory.remove(stack)
    return ItemStack(id=ingredient.id, quantity=ingredient.quantity)


def _failure(recipe_id: str, message: BilingualText) -> CraftResult:
    logger.debug("craft_rejected", extra={"recipe_id": recipe_id, "reason": message.en})
    return CraftResult(
        success=False,
        recipe_id=recipe_id,
        message=message,
        effects=[ERROR_SOUND, Notification(message=message, level="error")],
    )
