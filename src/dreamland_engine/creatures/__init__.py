"""Wildlife genetics, breeding, fleeing, hunting and the decision loop."""

from .engine import CreatureAction, CreatureEngine, CreatureUpdateReport

__all__ = ["CreatureAction", "CreatureEngine", "CreatureUpdateReport"]
