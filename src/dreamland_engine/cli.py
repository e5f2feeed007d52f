"""CLI-side session facade and builders."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Sequence
from uuid import uuid4

from dreamland_engine.actions.schemas import (
    ActionHistory,
    CraftedStack,
    CraftingAction,
    GridPosition,
    create_empty_action_history,
)
from dreamland_engine.actions.tracker import record_action
from dreamland_engine.balance import BalanceConfig, DEFAULT_BALANCE, load_balance
from dreamland_engine.catalog import BilingualText, Catalog
from dreamland_engine.config import Settings
from dreamland_engine.cooking.food import FoodGenerator
from dreamland_engine.cooking.service import CookingOutput, CookingRequest, CookingService
from dreamland_engine.crafting.rules import CraftResult, RecipeBook, calculate_craft_time, craft, get_recipe_cost
from dreamland_engine.creatures.engine import CreatureEngine
from dreamland_engine.data import default_catalog, make_translator
from dreamland_engine.effects import ERROR_SOUND, Notification
from dreamland_engine.models import Item, ItemStack, PlayerStatus, Translator, World
from dreamland_engine.nature.engine import PlantEngine
from dreamland_engine.persistence import JsonFileSaveRepository, SaveRepository, SaveSummary
from dreamland_engine.scheduling import CreatureUpdateScheduler
from dreamland_engine.simulation import TickReport, WorldSimulation
from dreamland_engine.telemetry.logging import LoggingTelemetry, NullTelemetry, Telemetry
from dreamland_engine.worldgen import generate_world, populate_creatures

DEFAULT_CREATURE_COUNTS = {"deer": 4, "rabbit": 6, "wolf": 2}


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class GameSession:
    """Sync facade over the simulation, crafting and cooking engines.

    One session holds one world, one player and its action history. Saves go
    through the injected :class:`SaveRepository`.
    """

    def __init__(
        self,
        catalog: Catalog,
        save_repository: SaveRepository,
        *,
        balance: BalanceConfig = DEFAULT_BALANCE,
        rng: random.Random | None = None,
        translate: Translator | None = None,
        telemetry: Telemetry | None = None,
        tick_duration_ms: int = 100,
        clock: Callable[[], int] = _wall_clock_ms,
        logger: logging.Logger | None = None,
    ) -> None:
        self.catalog = catalog
        self.balance = balance
        self.player = PlayerStatus()
        self.history: ActionHistory = create_empty_action_history()
        self.simulation: WorldSimulation | None = None

        self._saves = save_repository
        self._rng = rng or random.Random()
        self._t = translate or make_translator()
        self._telemetry = telemetry or NullTelemetry()
        self._tick_duration_ms = tick_duration_ms
        self._clock = clock
        self._logger = logger or logging.getLogger("dreamland_engine.cli")

        self.recipe_book = RecipeBook(catalog.recipes)
        self._cooking = CookingService(FoodGenerator(catalog.items), balance=balance.cooking)

    @property
    def tick(self) -> int:
        return self.simulation.tick if self.simulation else 0

    def new_world(
        self, width: int, height: int, creature_counts: dict[str, int] | None = None
    ) -> WorldSimulation:
        world = generate_world(width, height, self.catalog, self._rng)
        self.simulation = self._build_simulation(world)
        counts = DEFAULT_CREATURE_COUNTS if creature_counts is None else creature_counts
        for creature in populate_creatures(world, self.catalog, self._rng, counts):
            self.simulation.spawn_creature(creature)
        self._logger.info(
            "world_created", extra={"width": width, "height": height, "creatures": len(self.simulation.creatures)}
        )
        return self.simulation

    def advance(self, ticks: int) -> list[TickReport]:
        if self.simulation is None:
            raise RuntimeError("No world loaded; call new_world or load first")
        return self.simulation.run(ticks)

    def recipe_cost(self, recipe_id: str) -> list[ItemStack]:
        return get_recipe_cost(recipe_id, self.recipe_book)

    def craft_time(self, recipe_id: str) -> int | None:
        recipe = self.recipe_book.get(recipe_id)
        if recipe is None:
            return None
        return calculate_craft_time(recipe.difficulty, self.balance.crafting)

    def give_item(self, item_id: str, quantity: int = 1) -> Item:
        """Add a stack to the player's inventory, carrying the catalog's item effects."""
        definition = self.catalog.items.get(item_id)
        item = Item(id=item_id, quantity=quantity, effects=list(definition.effects) if definition else [])
        self.player.inventory.append(item)
        return item

    def craft(self, recipe_id: str) -> CraftResult:
        result = craft(
            recipe_id, self.player.inventory, self.recipe_book, tick=self.tick, balance=self.balance.crafting
        )
        if result.success and result.item is not None:
            self._record_crafting(result)
        return result

    def cook(
        self,
        recipe_id: str,
        ingredient_ids: Sequence[str],
        *,
        temperature: float | None = None,
        spice_item_id: str | None = None,
    ) -> CookingOutput:
        recipe = self.catalog.cooking_recipes.get(recipe_id)
        if recipe is None:
            message = BilingualText(en="Unknown recipe", vi="Không rõ công thức")
            return CookingOutput(
                success=False, outcome=None, effects=[ERROR_SOUND, Notification(message=message, level="error")]
            )
        request = CookingRequest(
            recipe=recipe,
            ingredient_ids=list(ingredient_ids),
            temperature=temperature,
            spice_item_id=spice_item_id,
            tick=self.tick,
        )
        return self._cooking.execute(self.player.inventory, request)

    def save(self, slot_id: str) -> None:
        if self.simulation is None:
            raise RuntimeError("Nothing to save; no world loaded")
        self._saves.save(slot_id, self.simulation.snapshot(self.player, self.history))

    def load(self, slot_id: str) -> bool:
        state = self._saves.load(slot_id)
        if state is None:
            return False
        self.player = state.player
        self.history = state.action_history
        self.simulation = self._build_simulation(state.world, start_tick=state.tick)
        self.simulation.season = state.season
        for creature in state.creatures:
            self.simulation.spawn_creature(creature)
        return True

    def list_saves(self) -> list[SaveSummary]:
        return self._saves.list_save_summaries()

    def _build_simulation(self, world: World, start_tick: int = 0) -> WorldSimulation:
        return WorldSimulation(
            world,
            PlantEngine(self._t, self.catalog.plants, balance=self.balance, rng=self._rng),
            CreatureEngine(self._t, self.catalog.species, balance=self.balance, rng=self._rng),
            CreatureUpdateScheduler(
                tick_duration_ms=self._tick_duration_ms,
                rng=self._rng,
                balance=self.balance.creatures.simulation,
            ),
            player_position=self.player.position,
            start_tick=start_tick,
            telemetry=self._telemetry,
        )

    def _record_crafting(self, result: CraftResult) -> None:
        recipe = self.recipe_book.get(result.recipe_id)
        name = recipe.name.en if recipe and recipe.name else result.recipe_id
        action = CraftingAction(
            id=f"craft_{uuid4().hex[:12]}",
            timestamp=self._clock(),
            turn_count=self.tick,
            player_position=GridPosition(x=self.player.position[0], y=self.player.position[1]),
            recipe_id=result.recipe_id,
            recipe_name=name,
            inputs=tuple(
                CraftedStack(item_id=stack.id, item_name=self._item_name(stack.id), quantity=stack.quantity)
                for stack in result.consumed
            ),
            output=CraftedStack(
                item_id=result.item.id, item_name=self._item_name(result.item.id), quantity=result.item.quantity
            ),
        )
        self.history = record_action(self.history, action)

    def _item_name(self, item_id: str) -> str:
        definition = self.catalog.items.get(item_id)
        return definition.name.en if definition else item_id


def build_session(settings: Settings, *, seed: int | None = None) -> GameSession:
    """Wire a session from runtime settings."""
    catalog = Catalog.from_json_file(settings.catalog_path) if settings.catalog_path else default_catalog()
    balance = load_balance(settings.balance_path)
    effective_seed = seed if seed is not None else settings.random_seed
    return GameSession(
        catalog,
        JsonFileSaveRepository(settings.save_directory),
        balance=balance,
        rng=random.Random(effective_seed),
        telemetry=LoggingTelemetry() if settings.telemetry_enabled else NullTelemetry(),
        tick_duration_ms=settings.tick_duration_ms,
    )
