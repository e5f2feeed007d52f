from __future__ import annotations

import pytest

from dreamland_engine.balance import CraftingBalance
from dreamland_engine.catalog import Recipe, RecipeIngredient
from dreamland_engine.crafting.rules import (
    DEFAULT_RECIPE_BOOK,
    RecipeBook,
    calculate_craft_time,
    craft,
    get_recipe_cost,
    validate_recipe,
)
from dreamland_engine.effects import ERROR_SOUND, Notification, PlaySound
from dreamland_engine.models import Item, ItemStack


@pytest.mark.parametrize(("difficulty", "expected"), [(1, 10), (2, 20), (3, 35), (4, 60), (5, 120)])
def test_craft_time_table(difficulty: int, expected: int) -> None:
    assert calculate_craft_time(difficulty) == expected


@pytest.mark.parametrize(("difficulty", "expected"), [(0, 10), (-7, 10), (6, 120), (99, 120)])
def test_craft_time_clamps_difficulty(difficulty: int, expected: int) -> None:
    result = calculate_craft_time(difficulty)
    assert result == expected
    assert isinstance(result, int)
    assert 5 <= result <= 300


def test_craft_time_fractional_difficulty_uses_easiest_time() -> None:
    assert calculate_craft_time(2.5) == 10


def test_craft_time_result_is_clamped_to_bounds() -> None:
    balance = CraftingBalance(base_times={1: 1, 2: 20, 3: 35, 4: 60, 5: 900})

    assert calculate_craft_time(1, balance) == 5
    assert calculate_craft_time(5, balance) == 300


def test_recipe_cost_keeps_table_order() -> None:
    assert get_recipe_cost("iron_sword") == [ItemStack(id="iron_ore", quantity=5), ItemStack(id="wood", quantity=2)]
    assert get_recipe_cost("unknown") == []


def test_validate_recipe_requires_every_ingredient_quantity() -> None:
    enough = [ItemStack(id="iron_ore", quantity=5), ItemStack(id="wood", quantity=2)]
    short = [ItemStack(id="iron_ore", quantity=2), ItemStack(id="wood", quantity=2)]
    missing_wood = [ItemStack(id="iron_ore", quantity=5)]

    assert validate_recipe("iron_sword", enough) is True
    assert validate_recipe("iron_sword", short) is False
    assert validate_recipe("iron_sword", missing_wood) is False


def test_validate_recipe_unknown_and_insufficient_are_both_plain_false() -> None:
    assert validate_recipe("does_not_exist", [ItemStack(id="iron_ore", quantity=99)]) is False
    assert validate_recipe("wooden_bow", []) is False


def test_validate_recipe_sums_split_stacks() -> None:
    inventory = [ItemStack(id="wood", quantity=2), ItemStack(id="wood", quantity=1), ItemStack(id="string", quantity=1)]
    assert validate_recipe("wooden_bow", inventory) is True


def test_injected_recipe_book_replaces_defaults() -> None:
    book = RecipeBook(
        [Recipe(id="torch", ingredients=(RecipeIngredient(id="stick", quantity=1),), result_id="torch", difficulty=1)]
    )

    assert validate_recipe("torch", [ItemStack(id="stick", quantity=1)], book) is True
    assert validate_recipe("iron_sword", [ItemStack(id="iron_ore", quantity=5), ItemStack(id="wood", quantity=2)], book) is False
    assert "torch" in book and len(book) == 1
    assert len(DEFAULT_RECIPE_BOOK) == 4


def test_craft_consumes_ingredients_and_adds_result() -> None:
    inventory = [Item(id="iron_ore", quantity=3), Item(id="iron_ore", quantity=3), Item(id="wood", quantity=2)]

    result = craft("iron_sword", inventory, tick=12)

    assert result.success is True
    assert result.craft_time_seconds == 35
    assert [(item.id, item.quantity) for item in inventory] == [("iron_ore", 1), ("iron_sword", 1)]
    assert result.item.metadata.recipe_id == "iron_sword"
    assert result.item.metadata.crafted_at == 12
    assert PlaySound(sound="CRAFT_SUCCESS") in result.effects


def test_craft_never_touches_inventory_when_invalid() -> None:
    inventory = [Item(id="iron_ore", quantity=4), Item(id="wood", quantity=2)]

    result = craft("iron_sword", inventory)

    assert result.success is False
    assert result.message.en == "Not enough materials"
    assert [(item.id, item.quantity) for item in inventory] == [("iron_ore", 4), ("wood", 2)]
    assert result.effects[0] == ERROR_SOUND
    assert isinstance(result.effects[1], Notification)


def test_craft_unknown_recipe() -> None:
    result = craft("moon_blade", [])

    assert result.success is False
    assert result.message.en == "Unknown recipe"
    assert result.item is None
