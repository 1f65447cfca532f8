"""
Island survival game driven by reviews.

Components:
- catalog: resources, loot tables, recipes
- loot: base reward resolution and location picking
- modifiers: companion and tool reward pipeline
- companions: pets and their abilities
- inventory / crafting / progression: learner game state
"""

from .companions import COMPANIONS, Companion, companion_modifier
from .crafting import CraftResult, craft_item
from .inventory import Inventory, LearnerState
from .loot import pick_location, resolve_base_reward, unlocked_locations
from .models import (
    EffectKind,
    Location,
    Modifier,
    Rarity,
    Resource,
    ResourceCategory,
    RewardOutcome,
)
from .modifiers import ModifierResult, apply_modifiers, tool_modifiers
from .progression import Progress, XPEvent, xp_required_for_level

__all__ = [
    # Model
    "EffectKind",
    "Location",
    "Modifier",
    "Rarity",
    "Resource",
    "ResourceCategory",
    "RewardOutcome",
    # Rewards
    "resolve_base_reward",
    "pick_location",
    "unlocked_locations",
    "apply_modifiers",
    "tool_modifiers",
    "ModifierResult",
    # Companions
    "COMPANIONS",
    "Companion",
    "companion_modifier",
    # Learner state
    "Inventory",
    "LearnerState",
    "Progress",
    "XPEvent",
    "xp_required_for_level",
    "CraftResult",
    "craft_item",
]
