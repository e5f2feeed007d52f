from __future__ import annotations

import pytest
from pydantic import ValidationError

from dreamland_engine.balance import CombatBalance
from dreamland_engine.catalog import BilingualText
from dreamland_engine.combat import CombatOutcome, LootDrop, SuccessLevel, calculate_damage, generate_combat_effects
from dreamland_engine.effects import (
    CollectingEffectSink,
    LogDebug,
    LoggingEffectSink,
    Notification,
    PlaySound,
    ShowParticle,
    TriggerEvent,
    parse_effect,
)


def test_damage_has_floor_and_crit_multiplier() -> None:
    crit = calculate_damage(10, 4, crit_chance=20, roll=0.1)
    plain = calculate_damage(10, 4, crit_chance=20, roll=0.5)
    blocked = calculate_damage(3, 10, crit_chance=0, roll=0.0)

    assert (crit.base_damage, crit.is_critical, crit.final_damage) == (6, True, 9)
    assert (plain.is_critical, plain.final_damage) == (False, 6)
    assert blocked.final_damage == 1


def test_damage_uses_injected_balance() -> None:
    result = calculate_damage(5, 5, crit_chance=100, roll=0.0, balance=CombatBalance(crit_multiplier=3.0, min_damage=2))

    assert result.final_damage == 6


def test_critical_victory_with_loot_effects() -> None:
    outcome = CombatOutcome(
        player_damage=18,
        enemy_damage=4,
        enemy_defeated=True,
        success_level=SuccessLevel.CRITICAL_SUCCESS,
        loot_drops=[LootDrop(name="Wolf Pelt", quantity=2, emoji="🐺")],
    )

    effects = generate_combat_effects(outcome, enemy_entity_id="wolf_3")

    assert effects[0] == PlaySound(sound="combat/critical-hit", volume=1.0)
    assert effects[1].entity_id == "wolf_3"
    assert effects[1].animation == "hit-critical"
    assert effects[2].message.en == "Dealt 18 damage CRITICAL!"
    events = [effect for effect in effects if isinstance(effect, TriggerEvent)]
    assert [event.event_name for event in events] == ["combat.victory", "loot.acquired"]
    assert events[1].data["items"] == [{"name": "Wolf Pelt", "quantity": 2, "emoji": "🐺"}]
    assert ShowParticle(particle="loot-drop") in effects
    warnings = [e for e in effects if isinstance(e, Notification) and e.level == "warning"]
    assert warnings[0].message.en == "You took 4 damage!"
    assert isinstance(effects[-1], LogDebug)


def test_critical_miss_plays_miss_sound_only() -> None:
    effects = generate_combat_effects(
        CombatOutcome(player_damage=0, enemy_damage=0, success_level=SuccessLevel.CRITICAL_FAILURE)
    )

    assert effects[0] == PlaySound(sound="combat/miss", volume=0.6)
    assert len(effects) == 2


def test_fled_enemy_notification() -> None:
    effects = generate_combat_effects(CombatOutcome(player_damage=0, enemy_damage=0, enemy_fled=True))

    assert PlaySound(sound="combat/flee", volume=0.7) in effects
    assert any(isinstance(e, Notification) and e.message.en == "Enemy fled!" for e in effects)


def test_parse_effect_dispatches_on_type() -> None:
    sound = parse_effect({"type": "play_sound", "sound": "OVEN_COMPLETE", "delay_ms": 200})
    note = parse_effect({"type": "notification", "message": {"en": "Hi", "vi": "Chào"}})

    assert isinstance(sound, PlaySound) and sound.delay_ms == 200
    assert note.message == BilingualText(en="Hi", vi="Chào")
    with pytest.raises(ValidationError):
        parse_effect({"type": "explode"})
    with pytest.raises(ValidationError):
        parse_effect({"type": "play_sound", "sound": "x", "volume": 2.0})


def test_sinks_execute_in_order(caplog) -> None:
    effects = [PlaySound(sound="A"), ShowParticle(particle="B"), PlaySound(sound="C")]
    collecting = CollectingEffectSink()

    collecting.execute(effects)
    with caplog.at_level("INFO", logger="dreamland_engine.effects"):
        LoggingEffectSink().execute(effects)

    assert collecting.executed == effects
    assert [effect.sound for effect in collecting.of_type("play_sound")] == ["A", "C"]
    assert [record.getMessage() for record in caplog.records] == ["side_effect"] * 3
