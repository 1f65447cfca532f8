"""
Inventory and learner game state.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from loguru import logger

from src.core.errors import ConfigurationError

from .catalog import RAFT_COMPONENTS, get_resource
from .companions import get_companion, newly_unlocked
from .models import Modifier
from .progression import Progress


class Inventory:
    """
    Resource id -> quantity, each capped at the resource's max stack.

    Resources that are not in the catalog are never stored.
    """

    def __init__(self, items: Mapping[str, int] | None = None):
        self._items: dict[str, int] = {}
        for resource_id, quantity in (items or {}).items():
            self.add(resource_id, quantity)

    def add(self, resource_id: str, quantity: int) -> int:
        """
        Add up to ``quantity`` of a resource.

        Returns:
            The amount actually added after the stack cap
        """
        if quantity <= 0:
            return 0
        try:
            resource = get_resource(resource_id)
        except ConfigurationError as e:
            logger.warning(f"Inventory add skipped: {e}")
            return 0

        current = self._items.get(resource_id, 0)
        new_total = min(current + quantity, resource.max_stack)
        self._items[resource_id] = new_total
        return new_total - current

    def remove(self, resource_id: str, quantity: int) -> bool:
        """Remove ``quantity`` if available; False (and no change) otherwise."""
        current = self._items.get(resource_id, 0)
        if quantity <= 0 or current < quantity:
            return False
        if current == quantity:
            del self._items[resource_id]
        else:
            self._items[resource_id] = current - quantity
        return True

    def count(self, resource_id: str) -> int:
        return self._items.get(resource_id, 0)

    def to_dict(self) -> dict[str, int]:
        return dict(self._items)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(sorted(self._items.items()))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Inventory):
            return NotImplemented
        return self._items == other._items


@dataclass
class LearnerState:
    """Everything the game remembers about one learner between sessions."""

    progress: Progress = field(default_factory=Progress)
    inventory: Inventory = field(default_factory=Inventory)
    crafted_items: list[str] = field(default_factory=list)
    unlocked_companions: list[str] = field(default_factory=list)
    active_companion: str | None = None

    @property
    def level(self) -> int:
        return self.progress.level

    @property
    def companion_modifier(self) -> Modifier | None:
        companion = get_companion(self.active_companion)
        return companion.modifier if companion else None

    @property
    def raft_progress(self) -> dict[str, bool]:
        return {part: part in self.crafted_items for part in RAFT_COMPONENTS}

    @property
    def raft_percent(self) -> float:
        parts = self.raft_progress
        return sum(parts.values()) / len(parts) * 100

    @property
    def has_escaped(self) -> bool:
        return "raft" in self.crafted_items

    def unlock_companions(self, level: int) -> list[str]:
        """Unlock every companion available at ``level``; returns the new ids."""
        unlocked = newly_unlocked(level, self.unlocked_companions)
        self.unlocked_companions.extend(unlocked)
        for companion_id in unlocked:
            logger.info(f"Companion unlocked: {companion_id}")
        return unlocked

    def set_active_companion(self, companion_id: str | None) -> bool:
        """Make an unlocked companion active (None to dismiss). False if locked."""
        if companion_id is not None and companion_id not in self.unlocked_companions:
            return False
        self.active_companion = companion_id
        return True
