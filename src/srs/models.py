"""
Spaced Repetition Data Model.

- CardStatus: lifecycle stage of an item
- RecallQuality: the four review buttons, with SM-2 score and XP reward
- ReviewableItem: a learning unit plus its scheduling fields
- SchedulingResult: pure output of the scheduler
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

# Ease factor bounds
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3


class CardStatus(str, Enum):
    """Lifecycle stage of a reviewable item."""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class RecallQuality(str, Enum):
    """Self-reported recall quality, ordered worst to best."""

    FAIL = "fail"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def score(self) -> int:
        """SM-2 quality score (0-5 scale)."""
        return _QUALITY_SCORES[self]

    @property
    def xp(self) -> int:
        """XP awarded for one review at this quality."""
        return _QUALITY_XP[self]

    @classmethod
    def parse(cls, value: str) -> RecallQuality:
        """Accept enum values plus the "again" alias used on review buttons."""
        normalized = value.strip().lower()
        if normalized == "again":
            return cls.FAIL
        return cls(normalized)


_QUALITY_SCORES = {
    RecallQuality.FAIL: 0,
    RecallQuality.HARD: 2,
    RecallQuality.GOOD: 3,
    RecallQuality.EASY: 5,
}

_QUALITY_XP = {
    RecallQuality.FAIL: 0,
    RecallQuality.HARD: 5,
    RecallQuality.GOOD: 10,
    RecallQuality.EASY: 15,
}


@dataclass(frozen=True)
class SchedulingResult:
    """New scheduling fields for an item after one review."""

    repetitions: int
    ease_factor: float
    interval: int
    next_due_at: datetime
    status: CardStatus


@dataclass(frozen=True)
class ReviewableItem:
    """
    A learning unit with SM-2 scheduling state.

    ``front`` and ``back`` are opaque to the scheduler. Items are
    immutable; ``apply`` returns an updated copy.
    """

    id: str
    front: str
    back: str
    next_due_at: datetime
    repetitions: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0  # Days
    status: CardStatus = CardStatus.NEW
    last_reviewed_at: datetime | None = None
    created_at: datetime | None = None

    # Display metadata
    category: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    def apply(self, result: SchedulingResult, reviewed_at: datetime) -> ReviewableItem:
        """Merge a scheduling result into a copy of this item."""
        return replace(
            self,
            repetitions=result.repetitions,
            ease_factor=result.ease_factor,
            interval=result.interval,
            next_due_at=result.next_due_at,
            status=result.status,
            last_reviewed_at=reviewed_at,
        )

    def is_due(self, now: datetime) -> bool:
        return self.next_due_at <= now


def create_item(
    front: str,
    back: str,
    now: datetime,
    category: str | None = None,
    tags: tuple[str, ...] = (),
    item_id: str | None = None,
) -> ReviewableItem:
    """Create a new item with default SM-2 values, due immediately."""
    return ReviewableItem(
        id=item_id or str(uuid.uuid4()),
        front=front,
        back=back,
        next_due_at=now,
        created_at=now,
        category=category,
        tags=tuple(tags),
    )
