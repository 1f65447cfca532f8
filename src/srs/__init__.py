"""
Spaced repetition core.

Components:
- ReviewableItem / RecallQuality / CardStatus: item model
- SM2Scheduler: four-button SM-2 scheduling
- due_items: ordered due queue
"""

from .due_queue import STATUS_PRIORITY, card_counts, due_items
from .models import (
    CardStatus,
    RecallQuality,
    ReviewableItem,
    SchedulingResult,
    create_item,
)
from .scheduler import SM2Config, SM2Scheduler, format_interval

__all__ = [
    # Model
    "CardStatus",
    "RecallQuality",
    "ReviewableItem",
    "SchedulingResult",
    "create_item",
    # Scheduling
    "SM2Config",
    "SM2Scheduler",
    "format_interval",
    # Queue
    "STATUS_PRIORITY",
    "due_items",
    "card_counts",
]
