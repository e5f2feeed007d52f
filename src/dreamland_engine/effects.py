"""Declarative side effects returned by the engines.

Engines never play sounds or show notifications themselves. They return lists
of these records and an :class:`EffectSink` owned by the presentation layer
executes them.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .catalog import BilingualText


class _Effect(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class PlaySound(_Effect):
    type: Literal["play_sound"] = "play_sound"
    sound: str
    volume: float = Field(default=0.8, ge=0.0, le=1.0)
    delay_ms: int = Field(default=0, ge=0)


class ShowParticle(_Effect):
    type: Literal["show_particle"] = "show_particle"
    particle: str
    position: tuple[int, int] | None = None
    delay_ms: int = Field(default=0, ge=0)


class Notification(_Effect):
    type: Literal["notification"] = "notification"
    message: BilingualText
    duration_ms: int = Field(default=3000, gt=0)
    level: Literal["info", "success", "warning", "error"] = "info"


class TriggerAnimation(_Effect):
    type: Literal["trigger_animation"] = "trigger_animation"
    entity_id: str
    animation: str
    speed: float = Field(default=1.0, gt=0)


class TriggerEvent(_Effect):
    type: Literal["trigger_event"] = "trigger_event"
    event_name: str
    data: dict[str, Any] = Field(default_factory=dict)


class LogDebug(_Effect):
    type: Literal["log_debug"] = "log_debug"
    message: str


SideEffect = Annotated[
    Union[PlaySound, ShowParticle, Notification, TriggerAnimation, TriggerEvent, LogDebug],
    Field(discriminator="type"),
]

side_effect_adapter: TypeAdapter[SideEffect] = TypeAdapter(SideEffect)

ERROR_SOUND = PlaySound(sound="ERROR", volume=0.6)


def parse_effect(payload: dict[str, Any]) -> SideEffect:
    """Validate a raw ``{type, ...}`` payload into its effect variant."""
    return side_effect_adapter.validate_python(payload)


class EffectSink(Protocol):
    """Executes side effects (audio, particles, notifications, events)."""

    def execute(self, effects: list[SideEffect]) -> None:
        """Perform the given effects in order."""


class CollectingEffectSink:
    """Keeps every executed effect; used by headless runs and tests."""

    def __init__(self) -> None:
        self.executed: list[SideEffect] = []

    def execute(self, effects: list[SideEffect]) -> None:
        self.executed.extend(effects)

    def of_type(self, effect_type: str) -> list[SideEffect]:
        return [effect for effect in self.executed if effect.type == effect_type]


class LoggingEffectSink:
    """Writes effects to a logger instead of a presentation layer."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("dreamland_engine.effects")

    def execute(self, effects: list[SideEffect]) -> None:
        for effect in effects:
            self._logger.info("side_effect", extra={"effect": effect.model_dump(mode="json")})
