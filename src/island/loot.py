"""
Loot System: base reward resolution.

Better recall means better loot odds. One gather consumes, in order:

1. Rarity draw    - picks a tier or "nothing found" (stops here on nothing)
2. Resource draw  - weighted pick within the location's tier list
3. Quantity draw  - quantity within the tier's range plus a quality bonus

Each draw is exactly one ``rng.random()`` call, so a SequenceRandom of
three values reproduces any outcome.

Broken game data never raises out of here: unknown locations, empty tier
lists and table entries naming unknown resources are logged and resolve
to "nothing found".
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from loguru import logger

from src.core.errors import ConfigurationError
from src.core.providers import RandomSource
from src.srs.models import RecallQuality

from .catalog import (
    LOCATION_UNLOCKS,
    LOOT_TABLES,
    QUANTITY_BONUS,
    QUANTITY_RANGES,
    RARITY_TABLES,
    LootTable,
    get_resource,
)
from .models import Location, Rarity, RewardOutcome

# Tiers are checked best first against the cumulative roll
_ROLL_ORDER = (Rarity.LEGENDARY, Rarity.VERY_RARE, Rarity.RARE, Rarity.COMMON)


def resolve_base_reward(
    quality: RecallQuality,
    location: Location,
    rng: RandomSource,
    rarity_tables: Mapping[RecallQuality, Mapping[Rarity, float]] = RARITY_TABLES,
    loot_tables: Mapping[Location, LootTable] = LOOT_TABLES,
) -> RewardOutcome:
    """
    Roll the base reward for one review at a location.

    Args:
        quality: Recall quality of the review
        location: Where the learner gathers
        rng: Random source (1 draw on nothing found, else 3)
        rarity_tables: Tier percentages per quality
        loot_tables: Weighted resources per location and tier

    Returns:
        RewardOutcome before any modifiers
    """
    try:
        rarity = roll_rarity(rarity_tables[quality], rng)
        if rarity is None:
            return RewardOutcome.nothing()

        table = loot_tables[location]
        resource_id = roll_resource(table.get(rarity, ()), rng)
        if resource_id is None:
            raise ConfigurationError(f"No {rarity.value} loot configured at {location.value}")

        get_resource(resource_id)
        quantity = roll_quantity(rarity, quality, rng)
    except (ConfigurationError, KeyError) as e:
        logger.warning(f"Loot table misconfigured ({quality.value} at {location}): {e}")
        return RewardOutcome.nothing()

    return RewardOutcome(resource_id=resource_id, quantity=quantity, rarity=rarity)


def roll_rarity(
    probabilities: Mapping[Rarity, float],
    rng: RandomSource,
) -> Rarity | None:
    """
    Pick a rarity tier from percent chances (one draw).

    Percentages that sum to less than 100 leave the remainder as None.
    """
    roll = rng.random() * 100
    cumulative = 0.0
    for rarity in _ROLL_ORDER:
        cumulative += probabilities.get(rarity, 0.0)
        if roll < cumulative:
            return rarity
    return None


def roll_resource(
    entries: Sequence[tuple[str, int]],
    rng: RandomSource,
) -> str | None:
    """Weighted pick of a resource id (one draw). None if there are no entries."""
    if not entries:
        return None

    total_weight = sum(weight for _, weight in entries)
    roll = rng.random() * total_weight

    cumulative = 0
    for resource_id, weight in entries:
        cumulative += weight
        if roll < cumulative:
            return resource_id

    # Only reachable with zero total weight
    return entries[0][0]


def roll_quantity(rarity: Rarity, quality: RecallQuality, rng: RandomSource) -> int:
    """Quantity for a found resource (one draw), never below 1."""
    low, high = QUANTITY_RANGES[rarity]
    bonus = QUANTITY_BONUS[quality]
    quantity = math.floor(rng.random() * (high - low + 1) + low + bonus)
    return max(1, quantity)


# =============================================================================
# Locations
# =============================================================================


def unlocked_locations(level: int) -> list[Location]:
    """Locations available at a player level, in unlock order."""
    return [
        location
        for location, required in sorted(LOCATION_UNLOCKS.items(), key=lambda kv: kv[1])
        if level >= required
    ]


def pick_location(level: int, rng: RandomSource) -> Location:
    """Pick a random unlocked location (one draw)."""
    locations = unlocked_locations(level) or [Location.TREE]
    index = min(int(rng.random() * len(locations)), len(locations) - 1)
    return locations[index]
