"""
Island game data model.

Resources, rarity tiers, reward outcomes and the modifier definitions
shared by companions and crafted tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Rarity(str, Enum):
    """Rarity tier, ordered from least to most valuable."""

    COMMON = "common"
    RARE = "rare"
    VERY_RARE = "very_rare"
    LEGENDARY = "legendary"

    def upgraded(self) -> Rarity:
        """Next tier up; legendary stays legendary."""
        index = RARITY_ORDER.index(self)
        if index < len(RARITY_ORDER) - 1:
            return RARITY_ORDER[index + 1]
        return self


RARITY_ORDER: tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.RARE,
    Rarity.VERY_RARE,
    Rarity.LEGENDARY,
)


class Location(str, Enum):
    """Gathering spots on the island."""

    TREE = "tree"
    BUSH = "bush"
    BEACH = "beach"
    SEA = "sea"


class ResourceCategory(str, Enum):
    WOOD = "wood"
    FOOD = "food"
    MATERIAL = "material"
    TREASURE = "treasure"
    SPECIAL = "special"


class EffectKind(str, Enum):
    """How a modifier changes a reward."""

    FLAT_QUANTITY = "flat_quantity"
    PERCENT_QUANTITY = "percent_quantity"
    RARITY_UPGRADE_CHANCE = "rarity_upgrade_chance"


@dataclass(frozen=True)
class Resource:
    """A collectable resource and its stack limit."""

    id: str
    name: str
    emoji: str
    category: ResourceCategory
    rarity: Rarity
    max_stack: int


@dataclass(frozen=True)
class RewardOutcome:
    """
    Result of one gather.

    ``resource_id=None`` means nothing was found and always carries
    ``quantity=0`` and ``rarity=None``.
    """

    resource_id: str | None
    quantity: int
    rarity: Rarity | None

    def __post_init__(self):
        if self.resource_id is None and (self.quantity != 0 or self.rarity is not None):
            raise ValueError("An empty outcome must have quantity 0 and no rarity")
        if self.quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {self.quantity}")

    @classmethod
    def nothing(cls) -> RewardOutcome:
        return cls(resource_id=None, quantity=0, rarity=None)

    @property
    def found(self) -> bool:
        return self.resource_id is not None


@dataclass(frozen=True)
class Modifier:
    """
    A read-only reward rule from a companion ability or a crafted tool.

    ``locations`` / ``categories`` of None mean unrestricted.
    """

    id: str
    name: str
    effect_kind: EffectKind
    magnitude: float
    locations: frozenset[Location] | None = None
    categories: frozenset[ResourceCategory] | None = None
    emoji: str = ""

    def applies_to(self, location: Location, category: ResourceCategory | None) -> bool:
        """Check location and category restrictions."""
        if self.locations is not None and location not in self.locations:
            return False
        if self.categories is not None and category not in self.categories:
            return False
        return True

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}".strip()
