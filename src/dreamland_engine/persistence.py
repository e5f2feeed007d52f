"""Save/load repository contract and two implementations."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from dreamland_engine.actions.schemas import ActionHistory, create_empty_action_history
from dreamland_engine.catalog import ItemEffect
from dreamland_engine.models import (
    Chunk,
    CreatureGenetics,
    Item,
    ItemMetadata,
    LifeStage,
    PlantInstance,
    PlantStage,
    PlayerStatus,
    Season,
    WildlifeCreature,
    World,
)

SAVE_FORMAT_VERSION = 1
_SLOT_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class SaveRepositoryError(RuntimeError):
    """Raised when a save slot cannot be read or written."""


@dataclass(slots=True)
class GameState:
    world: World = field(default_factory=World)
    creatures: list[WildlifeCreature] = field(default_factory=list)
    player: PlayerStatus = field(default_factory=PlayerStatus)
    action_history: ActionHistory = field(default_factory=create_empty_action_history)
    tick: int = 0
    season: Season = Season.SPRING


@dataclass(slots=True)
class SaveSummary:
    slot_id: str
    tick: int
    season: Season
    saved_at: datetime
    chunk_count: int
    creature_count: int


class SaveRepository(Protocol):
    """Persistence contract for game states keyed by slot id."""

    def load(self, slot_id: str) -> GameState | None:
        """Return the saved state, or ``None`` for an empty slot."""

    def save(self, slot_id: str, state: GameState) -> None:
        """Write ``state`` to ``slot_id``, replacing any previous save."""

    def delete(self, slot_id: str) -> None:
        """Remove a slot; deleting an empty slot is a no-op."""

    def list_save_summaries(self) -> list[SaveSummary]:
        """Return summaries of every occupied slot, newest first."""


def state_to_dict(state: GameState) -> dict[str, Any]:
    return {
        "version": SAVE_FORMAT_VERSION,
        "tick": state.tick,
        "season": state.season.value,
        "chunks": [_chunk_to_dict(chunk) for chunk in state.world],
        "creatures": [_creature_to_dict(creature) for creature in state.creatures],
        "player": {
            "position": list(state.player.position),
            "health": state.player.health,
            "hunger": state.player.hunger,
            "inventory": [_item_to_dict(item) for item in state.player.inventory],
        },
        "action_history": state.action_history.model_dump(mode="json"),
    }


def state_from_dict(payload: dict[str, Any]) -> GameState:
    player = payload.get("player", {})
    return GameState(
        world=World([_chunk_from_dict(chunk) for chunk in payload.get("chunks", [])]),
        creatures=[_creature_from_dict(creature) for creature in payload.get("creatures", [])],
        player=PlayerStatus(
            position=tuple(player.get("position", (0, 0))),
            health=player.get("health", 100.0),
            hunger=player.get("hunger", 0.0),
            inventory=[_item_from_dict(item) for item in player.get("inventory", [])],
        ),
        action_history=ActionHistory.model_validate(payload.get("action_history", {})),
        tick=payload.get("tick", 0),
        season=Season(payload.get("season", Season.SPRING.value)),
    )


def _chunk_to_dict(chunk: Chunk) -> dict[str, Any]:
    payload = asdict(chunk)
    payload["plants"] = [{**asdict(plant), "stage": plant.stage.value} for plant in chunk.plants]
    return payload


def _chunk_from_dict(payload: dict[str, Any]) -> Chunk:
    plants = [
        PlantInstance(**{**plant, "stage": PlantStage(plant.get("stage", PlantStage.SEEDLING.value))})
        for plant in payload.get("plants", [])
    ]
    return Chunk(**{**payload, "plants": plants})


def _creature_to_dict(creature: WildlifeCreature) -> dict[str, Any]:
    payload = asdict(creature)
    payload["stage"] = creature.stage.value
    payload["position"] = list(creature.position)
    payload["parent_ids"] = list(creature.parent_ids) if creature.parent_ids else None
    return payload


def _creature_from_dict(payload: dict[str, Any]) -> WildlifeCreature:
    parent_ids = payload.get("parent_ids")
    return WildlifeCreature(
        id=payload["id"],
        species_id=payload["species_id"],
        position=tuple(payload["position"]),
        genetics=CreatureGenetics(**payload.get("genetics", {})),
        personality=dict(payload.get("personality", {})),
        stage=LifeStage(payload.get("stage", LifeStage.ADULT.value)),
        hunger=payload.get("hunger", 0.0),
        health=payload.get("health", 100.0),
        feeding_count=payload.get("feeding_count", 0),
        parent_ids=tuple(parent_ids) if parent_ids else None,
        spawned_at=payload.get("spawned_at", 0),
        last_action_tick=payload.get("last_action_tick"),
    )


def _item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "id": item.id,
        "quantity": item.quantity,
        "effects": [effect.model_dump(mode="json") for effect in item.effects],
        "metadata": asdict(item.metadata),
        "equipped": item.equipped,
    }


def _item_from_dict(payload: dict[str, Any]) -> Item:
    return Item(
        id=payload["id"],
        quantity=payload.get("quantity", 1),
        effects=[ItemEffect.model_validate(effect) for effect in payload.get("effects", [])],
        metadata=ItemMetadata(**payload.get("metadata", {})),
        equipped=payload.get("equipped", False),
    )


def _summary(slot_id: str, state: GameState, saved_at: datetime) -> SaveSummary:
    return SaveSummary(
        slot_id=slot_id,
        tick=state.tick,
        season=state.season,
        saved_at=saved_at,
        chunk_count=len(state.world),
        creature_count=len(state.creatures),
    )


class InMemorySaveRepository:
    """Keeps serialized snapshots so later mutations of a state never leak into a save."""

    def __init__(self) -> None:
        self._slots: dict[str, tuple[dict[str, Any], datetime]] = {}

    def load(self, slot_id: str) -> GameState | None:
        entry = self._slots.get(slot_id)
        return state_from_dict(json.loads(json.dumps(entry[0]))) if entry else None

    def save(self, slot_id: str, state: GameState) -> None:
        self._slots[slot_id] = (state_to_dict(state), datetime.now(timezone.utc))

    def delete(self, slot_id: str) -> None:
        self._slots.pop(slot_id, None)

    def list_save_summaries(self) -> list[SaveSummary]:
        summaries = [
            _summary(slot_id, state_from_dict(payload), saved_at)
            for slot_id, (payload, saved_at) in self._slots.items()
        ]
        return sorted(summaries, key=lambda summary: summary.saved_at, reverse=True)


class JsonFileSaveRepository:
    """One ``<slot>.json`` file per slot under a save directory."""

    def __init__(self, directory: str | Path, logger: logging.Logger | None = None) -> None:
        self._directory = Path(directory).expanduser()
        self._directory.mkdir(parents=True, exist_ok=True)
        self._logger = logger or logging.getLogger("dreamland_engine.persistence")

    def _path(self, slot_id: str) -> Path:
        if not _SLOT_RE.match(slot_id):
            raise SaveRepositoryError(f"Invalid save slot id: {slot_id!r}")
        return self._directory / f"{slot_id}.json"

    def load(self, slot_id: str) -> GameState | None:
        path = self._path(slot_id)
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return state_from_dict(payload["state"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            raise SaveRepositoryError(f"Corrupt save slot {slot_id!r}: {exc}") from exc

    def save(self, slot_id: str, state: GameState) -> None:
        path = self._path(slot_id)
        document = {"saved_at": datetime.now(timezone.utc).isoformat(), "state": state_to_dict(state)}
        temp_path = path.with_suffix(".json.tmp")
        temp_path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
        temp_path.replace(path)
        self._logger.info("game_saved", extra={"slot_id": slot_id, "tick": state.tick})

    def delete(self, slot_id: str) -> None:
        path = self._path(slot_id)
        if path.exists():
            path.unlink()

    def list_save_summaries(self) -> list[SaveSummary]:
        summaries: list[SaveSummary] = []
        for path in sorted(self._directory.glob("*.json")):
            try:
                document = json.loads(path.read_text(encoding="utf-8"))
                state = state_from_dict(document["state"])
                saved_at = datetime.fromisoformat(document["saved_at"])
            except (json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError):
                self._logger.warning("unreadable_save_skipped", extra={"path": str(path)})
                continue
            summaries.append(_summary(path.stem, state, saved_at))
        return sorted(summaries, key=lambda summary: summary.saved_at, reverse=True)
