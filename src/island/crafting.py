"""
Crafting.

Turns inventory resources into tools and raft components. With the
monkey companion active, each craft takes one draw: below 10% the
ingredients are kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from src.core.errors import ConfigurationError
from src.core.providers import RandomSource

from .catalog import RESOURCES, Recipe, get_recipe
from .companions import AbilityKind, get_companion
from .inventory import LearnerState
from .progression import LevelChange, XPEvent

CRAFTING_XP = 15


@dataclass
class CraftResult:
    success: bool
    recipe_id: str
    reason: str | None = None
    materials_saved: bool = False
    xp_event: XPEvent | None = None
    level_change: LevelChange | None = None
    unlocked_companions: list[str] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


def can_craft(recipe: Recipe, learner: LearnerState) -> bool:
    """Level and ingredient check."""
    if learner.level < recipe.required_level:
        return False
    return all(
        learner.inventory.count(resource_id) >= quantity
        for resource_id, quantity in recipe.ingredients
    )


def craft_item(
    recipe_id: str,
    learner: LearnerState,
    rng: RandomSource,
    now: datetime,
) -> CraftResult:
    """
    Craft a recipe for a learner, mutating their state on success.

    Args:
        recipe_id: Recipe to craft
        learner: Learner state (inventory, crafted items, progress)
        rng: Random source, used only with the crafting-helper companion
        now: Timestamp for the XP event

    Returns:
        CraftResult describing what happened
    """
    try:
        recipe = get_recipe(recipe_id)
    except ConfigurationError as e:
        logger.warning(str(e))
        return CraftResult(success=False, recipe_id=recipe_id, reason="unknown recipe")

    if learner.level < recipe.required_level:
        return CraftResult(
            success=False,
            recipe_id=recipe_id,
            reason=f"requires level {recipe.required_level}",
        )

    if not can_craft(recipe, learner):
        return CraftResult(success=False, recipe_id=recipe_id, reason="missing ingredients")

    result = CraftResult(success=True, recipe_id=recipe_id)

    companion = get_companion(learner.active_companion)
    if companion and companion.ability == AbilityKind.CRAFTING_HELPER:
        result.materials_saved = rng.random() * 100 < companion.value

    if result.materials_saved:
        result.messages.append(f"{companion.emoji} {companion.name} saved your materials!")
    else:
        for resource_id, quantity in recipe.ingredients:
            learner.inventory.remove(resource_id, quantity)

    if recipe.id in RESOURCES:
        learner.inventory.add(recipe.id, 1)

    if recipe.id not in learner.crafted_items:
        learner.crafted_items.append(recipe.id)

    result.xp_event = XPEvent(
        type="crafting",
        amount=CRAFTING_XP,
        description=f"Crafted {recipe.name}",
        timestamp=now,
    )
    result.level_change = learner.progress.add_xp(result.xp_event)
    if result.level_change.leveled_up:
        result.unlocked_companions = learner.unlock_companions(result.level_change.new_level)

    logger.info(f"Crafted {recipe.id} (materials saved: {result.materials_saved})")
    return result
