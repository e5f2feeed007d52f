"""Combat damage math and the bridge from numeric outcomes to side effects."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from dreamland_engine.balance import CombatBalance
from dreamland_engine.catalog import BilingualText
from dreamland_engine.effects import (
    LogDebug,
    Notification,
    PlaySound,
    ShowParticle,
    SideEffect,
    TriggerAnimation,
    TriggerEvent,
)

DEFAULT_COMBAT_BALANCE = CombatBalance()


class SuccessLevel(str, Enum):
    CRITICAL_FAILURE = "CriticalFailure"
    FAILURE = "Failure"
    SUCCESS = "Success"
    GREAT_SUCCESS = "GreatSuccess"
    CRITICAL_SUCCESS = "CriticalSuccess"


@dataclass(slots=True, frozen=True)
class DamageResult:
    base_damage: int
    is_critical: bool
    multiplier: float
    final_damage: int


def calculate_damage(
    attack: int,
    defense: int,
    crit_chance: float,
    roll: float,
    balance: CombatBalance = DEFAULT_COMBAT_BALANCE,
) -> DamageResult:
    """``crit_chance`` is a percentage; ``roll`` is a uniform draw in ``[0, 1)``."""
    base = max(balance.min_damage, attack - defense)
    is_critical = roll < crit_chance / 100
    multiplier = balance.crit_multiplier if is_critical else 1.0
    return DamageResult(base, is_critical, multiplier, math.floor(base * multiplier))


@dataclass(slots=True, frozen=True)
class LootDrop:
    name: str
    quantity: int
    emoji: str = ""


@dataclass(slots=True)
class CombatOutcome:
    player_damage: int
    enemy_damage: int
    enemy_defeated: bool = False
    enemy_fled: bool = False
    success_level: SuccessLevel = SuccessLevel.SUCCESS
    loot_drops: list[LootDrop] = field(default_factory=list)
    player_hp_before: float = 0.0
    player_hp_after: float = 0.0
    enemy_hp_before: float = 0.0
    enemy_hp_after: float = 0.0


def generate_combat_effects(outcome: CombatOutcome, enemy_entity_id: str = "enemy-current") -> list[SideEffect]:
    effects: list[SideEffect] = []
    critical = outcome.success_level is SuccessLevel.CRITICAL_SUCCESS

    if outcome.player_damage > 0:
        effects.append(
            PlaySound(sound="combat/critical-hit" if critical else "combat/hit", volume=1.0 if critical else 0.8)
        )
        effects.append(
            TriggerAnimation(entity_id=enemy_entity_id, animation="hit-critical" if critical else "hit", speed=1.0)
        )
        marker = " CRITICAL" if critical else ""
        effects.append(
            Notification(
                message=BilingualText(
                    en=f"Dealt {outcome.player_damage} damage{marker}!",
                    vi=f"Gây {outcome.player_damage} sát thương{marker}!",
                ),
                duration_ms=2000,
            )
        )
    elif outcome.success_level is SuccessLevel.CRITICAL_FAILURE:
        effects.append(PlaySound(sound="combat/miss", volume=0.6))

    if outcome.enemy_defeated:
        effects.append(PlaySound(sound="combat/victory", volume=1.0))
        effects.append(
            Notification(
                message=BilingualText(en="Enemy defeated!", vi="Đã hạ gục kẻ thù!"), duration_ms=3000, level="success"
            )
        )
        effects.append(TriggerAnimation(entity_id="player", animation="victory", speed=1.2))
        effects.append(
            TriggerEvent(
                event_name="combat.victory",
                data={"player_damage_dealt": outcome.player_damage, "enemy_defeated": True},
            )
        )

    if outcome.enemy_fled:
        effects.append(PlaySound(sound="combat/flee", volume=0.7))
        effects.append(Notification(message=BilingualText(en="Enemy fled!", vi="Kẻ thù đã bỏ chạy!"), duration_ms=2000))

    if outcome.loot_drops:
        names = ", ".join(f"{drop.quantity}x {drop.name}" for drop in outcome.loot_drops)
        effects.append(
            Notification(message=BilingualText(en=f"Loot: {names}", vi=f"Chiến lợi phẩm: {names}"), duration_ms=3000)
        )
        effects.append(
            TriggerEvent(
                event_name="loot.acquired",
                data={"items": [{"name": d.name, "quantity": d.quantity, "emoji": d.emoji} for d in outcome.loot_drops]},
            )
        )
        effects.append(ShowParticle(particle="loot-drop"))

    if outcome.enemy_damage > 0:
        effects.append(
            Notification(
                message=BilingualText(
                    en=f"You took {outcome.enemy_damage} damage!", vi=f"Bạn nhận {outcome.enemy_damage} sát thương!"
                ),
                duration_ms=2000,
                level="warning",
            )
        )
        effects.append(TriggerAnimation(entity_id="player", animation="take-damage", speed=1.0))

    effects.append(
        LogDebug(
            message=(
                f"Combat: player_dmg={outcome.player_damage} enemy_dmg={outcome.enemy_damage} "
                f"defeated={outcome.enemy_defeated}"
            )
        )
    )
    return effects
