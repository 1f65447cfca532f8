"""
SM-2 Spaced Repetition Scheduler.

A four-button variant of SuperMemo SM-2:

    Button   Score   Outcome
    fail     0       failure, reset
    hard     2       failure, reset (below the pass threshold of 3)
    good     3       success
    easy     5       success, interval x 1.3

Ease factor is recomputed on every review, including failures, so it
tracks the recent difficulty trend:

    EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from .models import (
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    CardStatus,
    RecallQuality,
    SchedulingResult,
)

PASS_THRESHOLD = 3


class SchedulingSnapshot(Protocol):
    """The scheduling fields the algorithm reads from an item."""

    repetitions: int
    ease_factor: float
    interval: int
    status: CardStatus


@dataclass
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = DEFAULT_EASE_FACTOR
    minimum_easiness: float = MIN_EASE_FACTOR
    first_interval: int = 1  # Days after first success (and after any failure)
    second_interval: int = 6  # Days after second consecutive success
    easy_bonus: float = 1.3


def round_half_up(value: float) -> int:
    """Round .5 upwards, unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))


class SM2Scheduler:
    """
    Pure SM-2 scheduler.

    ``schedule`` is total over RecallQuality and never mutates its input.
    """

    def __init__(self, config: SM2Config | None = None):
        self.config = config or SM2Config()

    def schedule(
        self,
        item: SchedulingSnapshot,
        quality: RecallQuality,
        now: datetime,
    ) -> SchedulingResult:
        """
        Calculate the next scheduling state for one review.

        Args:
            item: Current scheduling fields
            quality: Recall quality reported by the learner
            now: Review timestamp

        Returns:
            SchedulingResult with the new fields
        """
        q = quality.score
        ef_delta = 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)
        new_ef = max(self.config.minimum_easiness, item.ease_factor + ef_delta)

        if q < PASS_THRESHOLD:
            new_repetitions = 0
            new_interval = self.config.first_interval
            new_status = (
                CardStatus.LEARNING if item.status == CardStatus.NEW else CardStatus.RELEARNING
            )
        else:
            new_repetitions = item.repetitions + 1

            if item.repetitions == 0:
                new_interval = self.config.first_interval
            elif item.repetitions == 1:
                new_interval = self.config.second_interval
            else:
                new_interval = round_half_up(item.interval * new_ef)

            if quality == RecallQuality.EASY:
                new_interval = round_half_up(new_interval * self.config.easy_bonus)

            new_interval = max(self.config.first_interval, new_interval)
            new_status = CardStatus.REVIEW

        return SchedulingResult(
            repetitions=new_repetitions,
            ease_factor=new_ef,
            interval=new_interval,
            next_due_at=now + timedelta(days=new_interval),
            status=new_status,
        )

    def preview_all_intervals(
        self,
        item: SchedulingSnapshot,
        now: datetime,
    ) -> dict[RecallQuality, int]:
        """Interval in days that each button would produce."""
        return {
            quality: self.schedule(item, quality, now).interval
            for quality in RecallQuality
        }

    def preview_labels(
        self,
        item: SchedulingSnapshot,
        now: datetime,
    ) -> dict[RecallQuality, str]:
        """Human-readable interval per button, for display."""
        return {
            quality: format_interval(days)
            for quality, days in self.preview_all_intervals(item, now).items()
        }


def format_interval(days: int) -> str:
    """Format an interval in days as "1 day", "3 weeks", "2 months", ..."""
    if days < 1:
        return "< 1 day"
    if days == 1:
        return "1 day"
    if days < 7:
        return f"{days} days"
    if days < 30:
        weeks = round_half_up(days / 7)
        return "1 week" if weeks == 1 else f"{weeks} weeks"
    if days < 365:
        months = round_half_up(days / 30)
        return "1 month" if months == 1 else f"{months} months"
    years = round_half_up(days / 365)
    return "1 year" if years == 1 else f"{years} years"
