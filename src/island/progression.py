"""
Learner progression: XP, levels and daily streaks.

XP needed to clear a level is ``floor(100 * level ** 1.8)``, softened to
70% for levels 1-5 so the first locations unlock quickly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta


def xp_required_for_level(level: int) -> int:
    """XP needed to advance from ``level`` to ``level + 1``."""
    base = math.floor(100 * level ** 1.8)
    if level <= 5:
        return math.floor(base * 0.7)
    return base


@dataclass(frozen=True)
class XPEvent:
    """One XP award reported to the progression system."""

    type: str  # review, crafting, streak, ...
    amount: int
    description: str
    timestamp: datetime


@dataclass(frozen=True)
class LevelChange:
    leveled_up: bool
    old_level: int
    new_level: int


@dataclass
class Progress:
    """Level, XP and streak state for one learner."""

    level: int = 1
    current_xp: int = 0
    total_xp: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: date | None = None
    total_items_reviewed: int = 0

    def add_xp(self, event: XPEvent) -> LevelChange:
        """Add XP, rolling over as many levels as it covers."""
        old_level = self.level
        self.total_xp += event.amount
        self.current_xp += event.amount

        while self.current_xp >= xp_required_for_level(self.level):
            self.current_xp -= xp_required_for_level(self.level)
            self.level += 1

        return LevelChange(
            leveled_up=self.level > old_level,
            old_level=old_level,
            new_level=self.level,
        )

    def update_streak(self, today: date) -> int:
        """
        Record activity on ``today``.

        Same day: unchanged. Day after the last activity: +1.
        Otherwise the streak restarts at 1.
        """
        if self.last_activity_date == today:
            return self.current_streak

        if self.last_activity_date == today - timedelta(days=1):
            self.current_streak += 1
        else:
            self.current_streak = 1

        self.longest_streak = max(self.longest_streak, self.current_streak)
        self.last_activity_date = today
        return self.current_streak

    @property
    def xp_to_next_level(self) -> int:
        return xp_required_for_level(self.level) - self.current_xp

    @property
    def level_percent(self) -> float:
        required = xp_required_for_level(self.level)
        return min(self.current_xp / required * 100, 100.0)
