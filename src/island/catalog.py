"""
Island game catalog.

Static game data:
- RESOURCES: every collectable resource with its stack cap
- LOOT_TABLES: weighted resources per location and rarity tier
- RARITY_TABLES: rarity percentages per recall quality
- LOCATION_UNLOCKS: level needed for each location
- RECIPES: crafting recipes for tools and raft components
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.errors import ConfigurationError
from src.srs.models import RecallQuality

from .models import Location, Rarity, Resource, ResourceCategory

W = ResourceCategory.WOOD
F = ResourceCategory.FOOD
M = ResourceCategory.MATERIAL
T = ResourceCategory.TREASURE
S = ResourceCategory.SPECIAL


# =============================================================================
# Resources
# =============================================================================

RESOURCES: dict[str, Resource] = {
    r.id: r
    for r in (
        # Wood
        Resource("stick", "Stick", "🪵", W, Rarity.COMMON, 99),
        Resource("wood_log", "Wood Log", "🪓", W, Rarity.COMMON, 50),
        Resource("driftwood", "Driftwood", "🌊", W, Rarity.COMMON, 50),
        Resource("twigs", "Twigs", "🌿", W, Rarity.COMMON, 99),
        # Food
        Resource("coconut", "Coconut", "🥥", F, Rarity.COMMON, 30),
        Resource("berries", "Berries", "🫐", F, Rarity.COMMON, 50),
        Resource("small_fish", "Small Fish", "🐟", F, Rarity.COMMON, 30),
        Resource("medium_fish", "Medium Fish", "🐠", F, Rarity.COMMON, 20),
        Resource("large_fish", "Large Fish", "🦈", F, Rarity.RARE, 10),
        Resource("crab", "Crab", "🦀", F, Rarity.RARE, 15),
        Resource("honey", "Honey", "🍯", F, Rarity.RARE, 20),
        Resource("oyster", "Oyster", "🦪", F, Rarity.RARE, 15),
        Resource("bird_egg", "Bird Egg", "🥚", F, Rarity.VERY_RARE, 10),
        Resource("rabbit", "Rabbit", "🐰", F, Rarity.VERY_RARE, 5),
        # Material
        Resource("flint", "Flint", "🪨", M, Rarity.RARE, 30),
        Resource("shell", "Shell", "🐚", M, Rarity.COMMON, 50),
        Resource("bird_feather", "Bird Feather", "🪶", M, Rarity.RARE, 30),
        Resource("leaves", "Leaves", "🍃", M, Rarity.COMMON, 99),
        Resource("glass_bottle", "Glass Bottle", "🍾", M, Rarity.RARE, 15),
        Resource("kelp", "Kelp", "🌱", M, Rarity.COMMON, 40),
        Resource("medicinal_herb", "Medicinal Herb", "🌿", M, Rarity.RARE, 25),
        # Treasure
        Resource("pearl", "Pearl", "🔮", T, Rarity.VERY_RARE, 50),
        Resource("ancient_coin", "Ancient Coin", "🪙", T, Rarity.LEGENDARY, 99),
        Resource("treasure_map", "Treasure Map", "🗺️", T, Rarity.LEGENDARY, 5),
        Resource("message_in_bottle", "Message in Bottle", "📜", T, Rarity.VERY_RARE, 10),
        # Special
        Resource("golden_fruit", "Golden Fruit", "🍊", S, Rarity.LEGENDARY, 10),
        Resource("golden_fish", "Golden Fish", "✨", S, Rarity.LEGENDARY, 5),
        # Crafted raft parts
        Resource("rope", "Rope", "🪢", M, Rarity.COMMON, 30),
        Resource("sail_cloth", "Sail Cloth", "⛵", M, Rarity.RARE, 5),
        Resource("sturdy_hull", "Sturdy Hull", "🚣", M, Rarity.VERY_RARE, 1),
        Resource("navigation_tools", "Navigation Tools", "🧭", M, Rarity.VERY_RARE, 1),
        Resource("raft", "Raft", "🛶", S, Rarity.LEGENDARY, 1),
    )
}


def get_resource(resource_id: str) -> Resource:
    """Look up a resource, raising ConfigurationError if unknown."""
    try:
        return RESOURCES[resource_id]
    except KeyError:
        raise ConfigurationError(f"Unknown resource: {resource_id!r}") from None


# =============================================================================
# Loot Tables
# =============================================================================

LootTable = dict[Rarity, list[tuple[str, int]]]  # tier -> [(resource_id, weight)]

LOOT_TABLES: dict[Location, LootTable] = {
    Location.TREE: {
        Rarity.COMMON: [("stick", 40), ("wood_log", 30), ("coconut", 20), ("leaves", 10)],
        Rarity.RARE: [("bird_feather", 50), ("honey", 50)],
        Rarity.VERY_RARE: [("bird_egg", 100)],
        Rarity.LEGENDARY: [("golden_fruit", 100)],
    },
    Location.BUSH: {
        Rarity.COMMON: [("berries", 45), ("twigs", 30), ("leaves", 25)],
        Rarity.RARE: [("flint", 60), ("medicinal_herb", 40)],
        Rarity.VERY_RARE: [("rabbit", 100)],
        Rarity.LEGENDARY: [("ancient_coin", 100)],
    },
    Location.BEACH: {
        Rarity.COMMON: [("shell", 40), ("driftwood", 35), ("kelp", 25)],
        Rarity.RARE: [("crab", 55), ("glass_bottle", 45)],
        Rarity.VERY_RARE: [("message_in_bottle", 100)],
        Rarity.LEGENDARY: [("treasure_map", 100)],
    },
    Location.SEA: {
        Rarity.COMMON: [("small_fish", 45), ("medium_fish", 35), ("kelp", 20)],
        Rarity.RARE: [("large_fish", 50), ("oyster", 50)],
        Rarity.VERY_RARE: [("pearl", 100)],
        Rarity.LEGENDARY: [("golden_fish", 100)],
    },
}

# Percent chance per tier; whatever is left over is "nothing found".
RARITY_TABLES: dict[RecallQuality, dict[Rarity, float]] = {
    RecallQuality.FAIL: {
        Rarity.COMMON: 50, Rarity.RARE: 5, Rarity.VERY_RARE: 0.5, Rarity.LEGENDARY: 0,
    },
    RecallQuality.HARD: {
        Rarity.COMMON: 60, Rarity.RARE: 12, Rarity.VERY_RARE: 2, Rarity.LEGENDARY: 0.1,
    },
    RecallQuality.GOOD: {
        Rarity.COMMON: 70, Rarity.RARE: 18, Rarity.VERY_RARE: 5, Rarity.LEGENDARY: 0.5,
    },
    RecallQuality.EASY: {
        Rarity.COMMON: 75, Rarity.RARE: 20, Rarity.VERY_RARE: 8, Rarity.LEGENDARY: 2,
    },
}

# (min, max) quantity per tier
QUANTITY_RANGES: dict[Rarity, tuple[int, int]] = {
    Rarity.COMMON: (1, 3),
    Rarity.RARE: (1, 2),
    Rarity.VERY_RARE: (1, 1),
    Rarity.LEGENDARY: (1, 1),
}

QUANTITY_BONUS: dict[RecallQuality, float] = {
    RecallQuality.FAIL: 0.0,
    RecallQuality.HARD: 0.0,
    RecallQuality.GOOD: 0.5,
    RecallQuality.EASY: 1.0,
}

LOCATION_UNLOCKS: dict[Location, int] = {
    Location.TREE: 1,
    Location.BUSH: 2,
    Location.BEACH: 3,
    Location.SEA: 4,
}


# =============================================================================
# Recipes
# =============================================================================


@dataclass(frozen=True)
class Recipe:
    """A crafting recipe. Tools are tracked as crafted ids, not inventory."""

    id: str
    name: str
    emoji: str
    ingredients: tuple[tuple[str, int], ...]
    required_level: int
    description: str
    effect: str | None = None
    is_raft_component: bool = False


RECIPES: dict[str, Recipe] = {
    r.id: r
    for r in (
        Recipe("stone_axe", "Stone Axe", "🪓", (("stick", 2), ("flint", 1)), 1,
               "A basic axe for gathering wood", effect="+50% wood from trees"),
        Recipe("fishing_rod", "Fishing Rod", "🎣", (("stick", 3), ("twigs", 2)), 1,
               "A simple rod for catching fish", effect="+30% chance for better fish"),
        Recipe("basket", "Basket", "🧺", (("leaves", 10), ("twigs", 5)), 1,
               "Carry more items", effect="+1 item per gather"),
        Recipe("rope", "Rope", "🪢", (("twigs", 10), ("leaves", 5)), 1,
               "Strong rope woven from plant fibers", is_raft_component=True),
        Recipe("sail_cloth", "Sail Cloth", "⛵",
               (("leaves", 15), ("bird_feather", 5), ("rope", 2)), 5,
               "A sturdy cloth to catch the wind", is_raft_component=True),
        Recipe("sturdy_hull", "Sturdy Hull", "🚣",
               (("wood_log", 30), ("driftwood", 10), ("rope", 5)), 8,
               "The main body of your escape vessel", is_raft_component=True),
        Recipe("navigation_tools", "Navigation Tools", "🧭",
               (("glass_bottle", 3), ("treasure_map", 1), ("pearl", 2)), 10,
               "Tools to navigate the open sea", is_raft_component=True),
        Recipe("raft", "Raft", "🛶",
               (("sturdy_hull", 1), ("sail_cloth", 1), ("navigation_tools", 1), ("rope", 5)), 12,
               "Your ticket off this island!", is_raft_component=True),
    )
}

RAFT_COMPONENTS: tuple[str, ...] = tuple(r.id for r in RECIPES.values() if r.is_raft_component)


def get_recipe(recipe_id: str) -> Recipe:
    try:
        return RECIPES[recipe_id]
    except KeyError:
        raise ConfigurationError(f"Unknown recipe: {recipe_id!r}") from None


def available_recipes(level: int) -> list[Recipe]:
    return [r for r in RECIPES.values() if r.required_level <= level]
