"""Dreamland Engine: ecological simulation and crafting/cooking resolution."""

__version__ = "0.1.0"
