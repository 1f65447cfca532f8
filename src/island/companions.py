"""
Island companions (pets).

Pets unlock at set levels and each has one passive ability. Only the
parrot and the dolphin change gather rewards, so only they yield a
Modifier for the pipeline. The crab's auto-gather is driven by the
session manager and the monkey's helper by crafting.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from .models import EffectKind, Location, Modifier, ResourceCategory


class AbilityKind(str, Enum):
    AUTO_GATHER = "auto_gather"
    RARE_DROP_BONUS = "rare_drop_bonus"
    CRAFTING_HELPER = "crafting_helper"
    FISHING_BONUS = "fishing_bonus"


@dataclass(frozen=True)
class Companion:
    """A pet with its unlock level and ability."""

    id: str
    name: str
    emoji: str
    unlock_level: int
    description: str
    ability: AbilityKind
    ability_description: str
    value: float
    modifier: Modifier | None = None


COMPANIONS: dict[str, Companion] = {
    "crab": Companion(
        id="crab",
        name="Sandy the Crab",
        emoji="🦀",
        unlock_level=5,
        description="A friendly crab that auto-gathers shells while you study",
        ability=AbilityKind.AUTO_GATHER,
        ability_description="Auto-gathers 1 shell every 5 reviews",
        value=5,
    ),
    "parrot": Companion(
        id="parrot",
        name="Polly the Parrot",
        emoji="🦜",
        unlock_level=9,
        description="A colorful parrot that helps you find rare items",
        ability=AbilityKind.RARE_DROP_BONUS,
        ability_description="+5% chance for rare drops",
        value=5,
        modifier=Modifier(
            id="parrot",
            name="Polly the Parrot",
            emoji="🦜",
            effect_kind=EffectKind.RARITY_UPGRADE_CHANCE,
            magnitude=5,
        ),
    ),
    "monkey": Companion(
        id="monkey",
        name="Coco the Monkey",
        emoji="🐵",
        unlock_level=12,
        description="A clever monkey that helps with crafting",
        ability=AbilityKind.CRAFTING_HELPER,
        ability_description="10% chance to not consume crafting materials",
        value=10,
    ),
    "dolphin": Companion(
        id="dolphin",
        name="Splash the Dolphin",
        emoji="🐬",
        unlock_level=15,
        description="A playful dolphin that doubles your fishing rewards",
        ability=AbilityKind.FISHING_BONUS,
        ability_description="2x fish from sea location",
        value=100,
        modifier=Modifier(
            id="dolphin",
            name="Splash the Dolphin",
            emoji="🐬",
            effect_kind=EffectKind.PERCENT_QUANTITY,
            magnitude=100,
            locations=frozenset({Location.SEA}),
            categories=frozenset({ResourceCategory.FOOD}),
        ),
    ),
}

# Crab auto-gather
AUTO_GATHER_RESOURCE = "shell"


def get_companion(companion_id: str | None) -> Companion | None:
    """Look up a companion; unknown ids are logged and treated as no companion."""
    if companion_id is None:
        return None
    companion = COMPANIONS.get(companion_id)
    if companion is None:
        logger.warning(f"Unknown companion {companion_id!r}; no companion bonus applied")
    return companion


def companion_modifier(companion_id: str | None) -> Modifier | None:
    """The reward modifier of a companion, or None."""
    companion = get_companion(companion_id)
    return companion.modifier if companion else None


def all_companions() -> list[Companion]:
    """All companions sorted by unlock level."""
    return sorted(COMPANIONS.values(), key=lambda c: c.unlock_level)


def newly_unlocked(level: int, already_unlocked: Iterable[str]) -> list[str]:
    """Companion ids unlocked at ``level`` that the learner does not have yet."""
    owned = set(already_unlocked)
    return [
        c.id for c in all_companions()
        if c.unlock_level <= level and c.id not in owned
    ]


def next_companion(level: int) -> Companion | None:
    """The next companion to unlock above ``level``."""
    return next((c for c in all_companions() if c.unlock_level > level), None)
