"""Player action records.

Every action is a frozen pydantic model tagged by ``type``. The
``ActionHistory`` aggregate is immutable too: recording returns a new history.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

BYTES_PER_ACTION = 250


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class GridPosition(_Record):
    x: int
    y: int


class BaseAction(_Record):
    id: str
    timestamp: int = Field(ge=0, description="Unix timestamp in milliseconds")
    turn_count: int = Field(ge=0)
    player_position: GridPosition


class CombatAction(BaseAction):
    type: Literal["COMBAT"] = "COMBAT"
    target_creature_id: str
    target_creature_type: str
    damage_dealt: float = Field(ge=0)
    equipped_weapon: str | None = None


class HarvestingAction(BaseAction):
    type: Literal["HARVESTING"] = "HARVESTING"
    item_id: str
    item_name: str
    quantity: int = Field(ge=1)
    source: Literal["CREATURE", "FLORA", "MINERAL"]
    harvest_tool: str | None = None


class CraftedStack(_Record):
    item_id: str
    item_name: str
    quantity: int = Field(ge=1)


class CraftingAction(BaseAction):
    type: Literal["CRAFTING"] = "CRAFTING"
    recipe_id: str
    recipe_name: str
    inputs: tuple[CraftedStack, ...] = ()
    output: CraftedStack


class ItemUsageAction(BaseAction):
    type: Literal["ITEM_USAGE"] = "ITEM_USAGE"
    item_id: str
    item_name: str
    usage_type: Literal["CONSUME", "EQUIP", "UNEQUIP"]
    effect_result: str | None = None


class SkillUsageAction(BaseAction):
    type: Literal["SKILL_USAGE"] = "SKILL_USAGE"
    skill_id: str
    skill_name: str
    target_creature_id: str | None = None
    mana_cost: float | None = Field(default=None, ge=0)
    cooldown_seconds: float | None = Field(default=None, ge=0)


class MovementAction(BaseAction):
    type: Literal["MOVEMENT"] = "MOVEMENT"
    destination_position: GridPosition
    distance: int = Field(ge=1)
    biome_type: str | None = None


class ExplorationAction(BaseAction):
    type: Literal["EXPLORATION"] = "EXPLORATION"
    location_type: Literal["LANDMARK", "STRUCTURE", "NPC", "BIOME"]
    location_name: str
    previously_discovered: bool = False


class FarmingAction(BaseAction):
    type: Literal["FARMING"] = "FARMING"
    action_type: Literal["TILL", "PLANT", "WATER", "FERTILIZE", "HARVEST"]
    crop_type: str | None = None
    resulting_growth_stage: float | None = None


PlayerAction = Annotated[
    Union[
        CombatAction,
        HarvestingAction,
        CraftingAction,
        ItemUsageAction,
        SkillUsageAction,
        MovementAction,
        ExplorationAction,
        FarmingAction,
    ],
    Field(discriminator="type"),
]
ActionType = Literal[
    "COMBAT", "HARVESTING", "CRAFTING", "ITEM_USAGE", "SKILL_USAGE", "MOVEMENT", "EXPLORATION", "FARMING"
]

player_action_adapter: TypeAdapter[PlayerAction] = TypeAdapter(PlayerAction)


class ActionHistory(_Record):
    """Chronological action log; ``total_action_count`` always equals ``len(actions)``."""

    actions: tuple[PlayerAction, ...] = ()
    last_action_id: str = ""
    total_action_count: int = Field(default=0, ge=0)
    archived_action_count: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _count_matches(self) -> ActionHistory:
        if self.total_action_count != len(self.actions):
            raise ValueError("total_action_count must equal the number of actions")
        return self

    @property
    def lifetime_action_count(self) -> int:
        return self.total_action_count + self.archived_action_count


def create_empty_action_history() -> ActionHistory:
    return ActionHistory()


def estimate_action_history_size(history: ActionHistory) -> int:
    """Rough serialized size in bytes, used to decide when to archive."""
    return len(history.actions) * BYTES_PER_ACTION


def parse_action(payload: dict) -> PlayerAction:
    return player_action_adapter.validate_python(payload)
