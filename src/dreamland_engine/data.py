"""Built-in catalog and narrative templates used by the CLI and demos."""

from __future__ import annotations

from typing import Any, Mapping

from dreamland_engine.catalog import (
    BilingualText,
    Catalog,
    CookingRecipe,
    CookingResult,
    CookingType,
    DietType,
    EffectType,
    GeneticsTemplate,
    ItemDefinition,
    ItemEffect,
    PlantDefinition,
    PlantRequirements,
    RecipeIngredient,
    SpeciesDefinition,
    SpiceModifier,
    SpiceModifierType,
    StatMultipliers,
)
from dreamland_engine.crafting.rules import DEFAULT_RECIPE_BOOK
from dreamland_engine.models import Translator

NARRATIVE_TEMPLATES: dict[str, str] = {
    "plantDied": "The {plant} at ({x}, {y}) withers away.",
    "plantReproduced": "A new {plant} sprouts at ({x}, {y}).",
    "vegetationIncreased": "The vegetation around ({x}, {y}) grows thicker.",
    "vegetationDecreased": "The vegetation around ({x}, {y}) thins out.",
    "creatureStarved": "A {creature} collapses from hunger.",
    "creatureKilled": "A {creature} falls to a predator.",
    "creatureMatured": "A young {creature} has grown up.",
    "creatureFleeing": "A {creature} bolts away in fear.",
    "creatureBorn": "A baby {creature} is born.",
    "creatureEating": "A {creature} grazes quietly.",
    "creatureHunting": "A {creature} stalks its prey.",
}


def identity_translator(key: str, **params: Any) -> str:
    return key


def make_translator(templates: Mapping[str, str] = NARRATIVE_TEMPLATES) -> Translator:
    """Format ``templates[key]`` with the call's params; unknown keys come back unchanged."""

    def translate(key: str, **params: Any) -> str:
        template = templates.get(key)
        if template is None:
            return key
        try:
            return template.format(**params)
        except KeyError:
            return template

    return translate


def _name(en: str, vi: str) -> BilingualText:
    return BilingualText(en=en, vi=vi)


def _food(item_id: str, en: str, vi: str, emoji: str, **effects: float) -> ItemDefinition:
    return ItemDefinition(
        id=item_id,
        name=_name(en, vi),
        category="Food",
        emoji=emoji,
        effects=tuple(ItemEffect(type=EffectType(kind), amount=amount) for kind, amount in effects.items()),
    )


def _material(item_id: str, en: str, vi: str, emoji: str = "") -> ItemDefinition:
    return ItemDefinition(id=item_id, name=_name(en, vi), emoji=emoji)


def _ingredients(*item_ids: str) -> tuple[RecipeIngredient, ...]:
    return tuple(RecipeIngredient(id=item_id) for item_id in item_ids)


def default_catalog() -> Catalog:
    items = [
        _food("raw_meat", "Raw Meat", "Thịt sống", "🥩", RESTORE_HUNGER=30),
        _food("animal_fat", "Animal Fat", "Mỡ động vật", "🧈", RESTORE_STAMINA=8),
        _food("carrot", "Carrot", "Cà rốt", "🥕", RESTORE_HUNGER=12, RESTORE_STAMINA=4),
        _food("potato", "Potato", "Khoai tây", "🥔", RESTORE_HUNGER=18),
        _food("wild_berries", "Wild Berries", "Quả mọng", "🫐", RESTORE_HUNGER=6, HEAL=4),
        _food("wheat_flour", "Wheat Flour", "Bột mì", "🌾", RESTORE_HUNGER=10),
        _food("honey", "Honey", "Mật ong", "🍯", RESTORE_STAMINA=10, HEAL=2),
        _food("healing_herb", "Healing Herb", "Thảo dược", "🌿", HEAL=15, RESTORE_MANA=5),
        _food("water", "Water", "Nước", "💧", RESTORE_STAMINA=2),
        ItemDefinition(
            id="salt",
            name=_name("Salt", "Muối"),
            category="Spice",
            emoji="🧂",
            spice_modifier=SpiceModifier(type=SpiceModifierType.MULTIPLY_HUNGER, value=1.15),
        ),
        ItemDefinition(
            id="chili",
            name=_name("Chili", "Ớt"),
            category="Spice",
            emoji="🌶️",
            spice_modifier=SpiceModifier(type=SpiceModifierType.MULTIPLY_ALL_STATS, value=1.1),
        ),
        _material("iron_ore", "Iron Ore", "Quặng sắt", "⛏️"),
        _material("wood", "Wood", "Gỗ", "🪵"),
        _material("string", "String", "Dây"),
        _material("herb", "Herb", "Thảo mộc", "🌿"),
        _material("copper_raw", "Raw Copper", "Đồng thô"),
        _material("iron_sword", "Iron Sword", "Kiếm sắt", "🗡️"),
        _material("wooden_bow", "Wooden Bow", "Cung gỗ", "🏹"),
        _material("health_potion", "Health Potion", "Thuốc hồi máu", "🧪"),
        _material("copper_ore", "Copper Ore", "Quặng đồng"),
    ]

    cooking_recipes = [
        CookingRecipe(
            id="meat_skewer",
            name=_name("Meat Skewer", "Xiên thịt"),
            ingredients=_ingredients("raw_meat", "animal_fat"),
            cooking_type=CookingType.CAMPFIRE,
            cooking_time=20,
            result=CookingResult(base_food="meat_kebab", emoji="🍢"),
            stat_multipliers=StatMultipliers(hunger=1.2),
        ),
        CookingRecipe(
            id="herb_skewer",
            name=_name("Herb Skewer", "Xiên thảo mộc"),
            ingredients=_ingredients("healing_herb", "carrot"),
            cooking_type=CookingType.CAMPFIRE,
            result=CookingResult(base_food="herb_kebab", emoji="🌿"),
            stat_multipliers=StatMultipliers(health=1.3),
        ),
        CookingRecipe(
            id="vegetable_soup",
            name=_name("Vegetable Soup", "Súp rau"),
            ingredients=_ingredients("carrot", "potato"),
            cooking_type=CookingType.POT,
            cooking_time=60,
            result=CookingResult(base_food="soup", emoji="🍲"),
            stat_multipliers=StatMultipliers(hunger=1.1, stamina=1.5),
        ),
        CookingRecipe(
            id="honey_bread",
            name=_name("Honey Bread", "Bánh mật ong"),
            ingredients=_ingredients("wheat_flour", "honey"),
            cooking_type=CookingType.OVEN,
            cooking_time=90,
            ideal_temperature=180,
            result=CookingResult(base_food="baked_good", emoji="🍞"),
            stat_multipliers=StatMultipliers(hunger=1.4),
            tier=3,
        ),
    ]

    plants = [
        PlantDefinition(
            id="wild_grass",
            name=_name("Wild Grass", "Cỏ dại"),
            hp=10,
            max_maturity=50,
            vegetation_contribution=8,
            reproduction_chance=0.1,
        ),
        PlantDefinition(
            id="berry_bush",
            name=_name("Berry Bush", "Bụi quả mọng"),
            hp=20,
            vegetation_contribution=12,
            requirements=PlantRequirements(min_moisture=30, max_moisture=80, min_temperature=8, max_temperature=28),
            drop_item_id="wild_berries",
        ),
        PlantDefinition(
            id="healing_herb_plant",
            name=_name("Healing Herb", "Cây thảo dược"),
            hp=12,
            max_maturity=80,
            vegetation_contribution=6,
            requirements=PlantRequirements(min_moisture=40, min_light=30),
            reproduction_chance=0.03,
            drop_item_id="healing_herb",
        ),
        PlantDefinition(
            id="cactus",
            name=_name("Cactus", "Xương rồng"),
            hp=40,
            max_maturity=150,
            vegetation_contribution=5,
            requirements=PlantRequirements(
                min_moisture=5, max_moisture=30, min_temperature=20, max_temperature=45, min_light=60
            ),
            reproduction_chance=0.02,
        ),
    ]

    species = [
        SpeciesDefinition(
            id="deer",
            name=_name("Deer", "Nai"),
            diet_type=DietType.HERBIVOROUS,
            base_genetics=GeneticsTemplate(hunger_rate=1.0, speed=4, size=1.2, fearfulness=70),
            personality={"caution": 70, "sociability": 60, "laziness": 30},
            adult_feeding_threshold=4,
            carrying_capacity=40,
        ),
        SpeciesDefinition(
            id="rabbit",
            name=_name("Rabbit", "Thỏ"),
            diet_type=DietType.HERBIVOROUS,
            base_genetics=GeneticsTemplate(hunger_rate=1.3, speed=5, size=0.5, fearfulness=85),
            personality={"caution": 80, "curiosity": 40},
            adult_feeding_threshold=2,
            carrying_capacity=80,
        ),
        SpeciesDefinition(
            id="wolf",
            name=_name("Wolf", "Sói"),
            diet_type=DietType.CARNIVOROUS,
            base_genetics=GeneticsTemplate(hunger_rate=1.2, speed=5, size=1.4, fearfulness=20),
            personality={"aggression": 70, "greediness": 60, "sociability": 80},
            prey_species=("deer", "rabbit"),
            adult_feeding_threshold=5,
            carrying_capacity=15,
        ),
    ]

    return Catalog.from_definitions(
        items=items,
        recipes=list(DEFAULT_RECIPE_BOOK),
        cooking_recipes=cooking_recipes,
        plants=plants,
        species=species,
    )
