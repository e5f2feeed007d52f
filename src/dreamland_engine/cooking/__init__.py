"""Campfire, pot and oven cooking plus the inventory-facing service."""

from .campfire import cook_on_campfire
from .food import FoodGenerator, generate_food_name
from .oven import cook_in_oven, get_quality
from .pot import cook_in_pot
from .results import CookingOutcome, CookingQuality
from .service import CookingOutput, CookingRequest, CookingService

__all__ = [
    "CookingOutcome",
    "CookingOutput",
    "CookingQuality",
    "CookingRequest",
    "CookingService",
    "FoodGenerator",
    "cook_in_oven",
    "cook_in_pot",
    "cook_on_campfire",
    "generate_food_name",
    "get_quality",
]
