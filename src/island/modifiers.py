"""
Modifier Pipeline.

Turns a base reward into the final reward by applying, in order:
1. The active companion's modifier (if any)
2. Crafted tool modifiers, in the order the caller passes them

Effect kinds:
- flat_quantity:          quantity += magnitude
- percent_quantity:       quantity += max(1, floor(base_quantity * magnitude / 100))
                          (always against the base quantity, never the running total)
- rarity_upgrade_chance:  one draw; on r * 100 < magnitude the rarity becomes one
                          tier above the base rarity. Legendary cannot be upgraded.

Draws: one per applicable rarity_upgrade_chance modifier, in application
order. Quantity effects draw nothing. A base with no resource consumes no
draws and comes back unchanged.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from src.core.providers import RandomSource

from .catalog import RECIPES
from .models import EffectKind, Location, Modifier, ResourceCategory, RewardOutcome


@dataclass(frozen=True)
class ModifierResult:
    """Final reward plus the bonuses that fired."""

    outcome: RewardOutcome
    bonus_log: tuple[str, ...] = ()
    rarity_upgraded: bool = False


def apply_modifiers(
    base: RewardOutcome,
    companion_modifier: Modifier | None,
    crafted_tools: Sequence[Modifier],
    location: Location,
    resource_category: ResourceCategory | None,
    rng: RandomSource,
) -> ModifierResult:
    """
    Apply companion then tool modifiers to a base reward.

    Args:
        base: Outcome from the reward resolver
        companion_modifier: Active companion's modifier, or None
        crafted_tools: Tool modifiers in application order
        location: Where the reward was gathered
        resource_category: Category of the found resource
        rng: Random source for rarity upgrades

    Returns:
        ModifierResult with the final outcome and bonus log
    """
    if base.resource_id is None:
        return ModifierResult(outcome=base)

    chain: list[Modifier] = []
    if companion_modifier is not None:
        chain.append(companion_modifier)
    chain.extend(crafted_tools)

    base_quantity = base.quantity
    quantity = base.quantity
    rarity = base.rarity
    upgraded = False
    bonus_log: list[str] = []

    for modifier in chain:
        if not modifier.applies_to(location, resource_category):
            continue

        match modifier.effect_kind:
            case EffectKind.FLAT_QUANTITY:
                bonus = int(modifier.magnitude)
                quantity += bonus
                bonus_log.append(f"{modifier.label}: +{bonus}")

            case EffectKind.PERCENT_QUANTITY:
                bonus = max(1, math.floor(base_quantity * modifier.magnitude / 100))
                quantity += bonus
                bonus_log.append(f"{modifier.label}: +{modifier.magnitude:g}% (+{bonus})")

            case EffectKind.RARITY_UPGRADE_CHANCE:
                succeeded = rng.random() * 100 < modifier.magnitude
                if not succeeded or base.rarity is None:
                    continue
                target = base.rarity.upgraded()
                if target == base.rarity or rarity == target:
                    continue
                rarity = target
                upgraded = True
                bonus_log.append(f"{modifier.label}: rarity upgraded to {target.value}!")

            case _:
                raise ValueError(f"Unhandled effect kind: {modifier.effect_kind!r}")

    return ModifierResult(
        outcome=RewardOutcome(resource_id=base.resource_id, quantity=quantity, rarity=rarity),
        bonus_log=tuple(bonus_log),
        rarity_upgraded=upgraded,
    )


# =============================================================================
# Tool Modifiers
# =============================================================================

TOOL_MODIFIERS: dict[str, Modifier] = {
    "stone_axe": Modifier(
        id="stone_axe",
        name="Stone Axe",
        emoji="🪓",
        effect_kind=EffectKind.PERCENT_QUANTITY,
        magnitude=50,
        locations=frozenset({Location.TREE}),
        categories=frozenset({ResourceCategory.WOOD}),
    ),
    "fishing_rod": Modifier(
        id="fishing_rod",
        name="Fishing Rod",
        emoji="🎣",
        effect_kind=EffectKind.RARITY_UPGRADE_CHANCE,
        magnitude=30,
        locations=frozenset({Location.SEA}),
        categories=frozenset({ResourceCategory.FOOD}),
    ),
    "basket": Modifier(
        id="basket",
        name="Basket",
        emoji="🧺",
        effect_kind=EffectKind.FLAT_QUANTITY,
        magnitude=1,
    ),
}


def tool_modifiers(crafted_ids: Iterable[str]) -> list[Modifier]:
    """
    Modifiers for the crafted items that have a gathering effect.

    Crafted ids that are known recipes without an effect (raft parts) are
    skipped silently; ids that match no recipe are logged and skipped.
    """
    modifiers = []
    for crafted_id in crafted_ids:
        modifier = TOOL_MODIFIERS.get(crafted_id)
        if modifier is not None:
            modifiers.append(modifier)
        elif crafted_id not in RECIPES:
            logger.warning(f"Ignoring unknown crafted item {crafted_id!r}: no such recipe")
    return modifiers


def describe_active_tools(crafted_ids: Iterable[str], location: Location) -> list[str]:
    """One line per crafted tool that can fire at a location, for display."""
    lines = []
    for modifier in tool_modifiers(crafted_ids):
        if modifier.locations is None or location in modifier.locations:
            recipe = RECIPES.get(modifier.id)
            effect = recipe.effect if recipe and recipe.effect else modifier.effect_kind.value
            lines.append(f"{modifier.label}: {effect}")
    return lines
