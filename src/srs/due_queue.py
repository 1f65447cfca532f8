"""
Due queue builder.

Orders the items whose next-due time has passed:
1. Status priority: learning, relearning, review, new
2. Most overdue first within a status
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .models import CardStatus, ReviewableItem

STATUS_PRIORITY: dict[CardStatus, int] = {
    CardStatus.LEARNING: 0,
    CardStatus.RELEARNING: 1,
    CardStatus.REVIEW: 2,
    CardStatus.NEW: 3,
}


def due_items(
    items: Iterable[ReviewableItem],
    now: datetime,
    limit: int | None = None,
) -> list[ReviewableItem]:
    """
    Build the ordered list of items due at ``now``.

    The sort is stable, so ties keep their input order and repeated calls
    with the same input give the same queue.

    Args:
        items: Full item collection
        now: Reference time
        limit: Optional maximum queue length, applied after sorting

    Returns:
        New list of due items
    """
    due = sorted(
        (item for item in items if item.next_due_at <= now),
        key=lambda item: (STATUS_PRIORITY[item.status], item.next_due_at),
    )
    if limit is not None:
        return due[: max(0, limit)]
    return due


def card_counts(items: Iterable[ReviewableItem], now: datetime) -> dict[str, int]:
    """Count items by status bucket plus the number currently due."""
    counts = {"new": 0, "learning": 0, "review": 0, "due": 0}
    for item in items:
        if item.status == CardStatus.NEW:
            counts["new"] += 1
        elif item.status in (CardStatus.LEARNING, CardStatus.RELEARNING):
            counts["learning"] += 1
        else:
            counts["review"] += 1
        if item.next_due_at <= now:
            counts["due"] += 1
    return counts
