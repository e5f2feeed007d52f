"""Turn driver tying the plant engine, scheduler and creature engine together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dreamland_engine.actions.schemas import ActionHistory, create_empty_action_history
from dreamland_engine.creatures.engine import CreatureEngine, CreatureUpdateReport
from dreamland_engine.models import NarrativeMessage, PlayerStatus, Position, Season, WildlifeCreature, World
from dreamland_engine.nature.engine import PlantEngine, PlantTickReport
from dreamland_engine.persistence import GameState
from dreamland_engine.scheduling import CreatureUpdateScheduler
from dreamland_engine.telemetry.logging import NullTelemetry, Telemetry


@dataclass(slots=True)
class TickReport:
    tick: int
    plants: PlantTickReport
    creatures: CreatureUpdateReport
    messages: list[NarrativeMessage] = field(default_factory=list)

    def summary(self) -> dict:
        return {
            "tick": self.tick,
            "creatures_updated": len(self.creatures.updated),
            "births": len(self.creatures.births),
            "deaths": len(self.creatures.deaths),
            "plants_died": self.plants.plants_died,
            "plants_spawned": self.plants.plants_spawned,
            "drops": len(self.plants.drops),
        }


class WorldSimulation:
    """Advances a world one tick at a time.

    Per tick: plants update on every chunk, then only the creatures whose
    scheduled tick has arrived are evaluated. Updated creatures and newborns
    are rescheduled by their distance to the player; dead ones leave the
    schedule.
    """

    def __init__(
        self,
        world: World,
        plant_engine: PlantEngine,
        creature_engine: CreatureEngine,
        scheduler: CreatureUpdateScheduler,
        *,
        player_position: Position = (0, 0),
        season: Season = Season.SPRING,
        start_tick: int = 0,
        telemetry: Telemetry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.world = world
        self.player_position = player_position
        self.season = season
        self._plants = plant_engine
        self._creatures = creature_engine
        self._scheduler = scheduler
        self._tick = start_tick
        self._telemetry = telemetry or NullTelemetry()
        self._logger = logger or logging.getLogger("dreamland_engine.simulation")

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def creatures(self) -> list[WildlifeCreature]:
        return self._creatures.creatures

    @property
    def scheduler(self) -> CreatureUpdateScheduler:
        return self._scheduler

    def spawn_creature(self, creature: WildlifeCreature) -> None:
        """Register a creature and make it eligible on the next tick."""
        self._creatures.add_creature(creature)
        self._scheduler.schedule(creature.id, self._tick)

    def despawn_creature(self, creature_id: str) -> WildlifeCreature | None:
        self._scheduler.remove(creature_id)
        return self._creatures.remove_creature(creature_id)

    def step(self) -> TickReport:
        self._tick += 1
        tick = self._tick

        plant_report = self._plants.update_plants(tick, self.world, self.season)
        due = self._scheduler.pop_due(tick)
        creature_report = self._creatures.run_updates(tick, due, self.world, self.player_position)

        for creature_id in creature_report.deaths:
            self._scheduler.remove(creature_id)
        for creature_id in creature_report.updated:
            creature = self._creatures.get(creature_id)
            if creature is not None:
                self._scheduler.schedule_by_distance(creature_id, creature.position, self.player_position, tick)
        for offspring in creature_report.births:
            self._scheduler.schedule_by_distance(offspring.id, offspring.position, self.player_position, tick)

        report = TickReport(
            tick=tick,
            plants=plant_report,
            creatures=creature_report,
            messages=[*plant_report.messages, *creature_report.messages],
        )
        self._telemetry.emit("tick_completed", report.summary())
        self._logger.debug("tick_completed", extra={"tick": tick, "due": len(due)})
        return report

    def run(self, ticks: int) -> list[TickReport]:
        return [self.step() for _ in range(max(0, ticks))]

    def snapshot(
        self, player: PlayerStatus | None = None, action_history: ActionHistory | None = None
    ) -> GameState:
        player = player or PlayerStatus(position=self.player_position)
        return GameState(
            world=self.world,
            creatures=self._creatures.creatures,
            player=player,
            action_history=action_history or create_empty_action_history(),
            tick=self._tick,
            season=self.season,
        )
