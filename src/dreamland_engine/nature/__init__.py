"""Vegetation rules and the per-chunk plant engine."""

from .engine import PlantDrop, PlantEngine, PlantTickReport
from .rules import Environment, ToleranceBand, calculate_environmental_suitability

__all__ = [
    "Environment",
    "PlantDrop",
    "PlantEngine",
    "PlantTickReport",
    "ToleranceBand",
    "calculate_environmental_suitability",
]
