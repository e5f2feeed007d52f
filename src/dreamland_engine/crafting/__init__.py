"""Recipe validation, cost and time calculation."""

from .rules import (
    DEFAULT_RECIPE_BOOK,
    CraftResult,
    RecipeBook,
    calculate_craft_time,
    craft,
    get_recipe_cost,
    validate_recipe,
)

__all__ = [
    "DEFAULT_RECIPE_BOOK",
    "CraftResult",
    "RecipeBook",
    "calculate_craft_time",
    "craft",
    "get_recipe_cost",
    "validate_recipe",
]
