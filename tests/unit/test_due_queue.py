"""Tests for the due queue builder."""

from datetime import timedelta

from src.srs.due_queue import card_counts, due_items
from src.srs.models import CardStatus


class TestDueItems:
    def test_orders_by_status_priority(self, make_item, now):
        items = [
            make_item("new", status=CardStatus.NEW),
            make_item("review", status=CardStatus.REVIEW),
            make_item("relearning", status=CardStatus.RELEARNING),
            make_item("learning", status=CardStatus.LEARNING),
        ]

        queue = due_items(items, now)

        assert [item.id for item in queue] == ["learning", "relearning", "review", "new"]

    def test_most_overdue_first_within_status(self, make_item, now):
        items = [
            make_item("a", next_due_at=now - timedelta(days=1), status=CardStatus.REVIEW),
            make_item("b", next_due_at=now - timedelta(days=5), status=CardStatus.REVIEW),
            make_item("c", next_due_at=now - timedelta(hours=1), status=CardStatus.REVIEW),
        ]

        queue = due_items(items, now)

        assert [item.id for item in queue] == ["b", "a", "c"]

    def test_future_items_excluded_and_boundary_included(self, make_item, now):
        items = [
            make_item("due-now", next_due_at=now),
            make_item("tomorrow", next_due_at=now + timedelta(days=1)),
        ]

        queue = due_items(items, now)

        assert [item.id for item in queue] == ["due-now"]

    def test_ties_keep_input_order(self, make_item, now):
        items = [make_item(f"item-{i}") for i in range(5)]

        first = due_items(items, now)
        second = due_items(items, now)

        assert [item.id for item in first] == [f"item-{i}" for i in range(5)]
        assert first == second

    def test_limit_applied_after_sorting(self, make_item, now):
        items = [
            make_item("new-1", status=CardStatus.NEW),
            make_item("new-2", status=CardStatus.NEW),
            make_item("learning", status=CardStatus.LEARNING),
        ]

        queue = due_items(items, now, limit=2)

        assert [item.id for item in queue] == ["learning", "new-1"]

    def test_returns_new_list(self, make_item, now):
        items = [make_item("x")]

        queue = due_items(items, now)
        queue.clear()

        assert len(items) == 1

    def test_empty_collection(self, now):
        assert due_items([], now) == []


class TestCardCounts:
    def test_counts_by_bucket(self, make_item, now):
        items = [
            make_item("n1", status=CardStatus.NEW),
            make_item("n2", status=CardStatus.NEW, next_due_at=now + timedelta(days=2)),
            make_item("l", status=CardStatus.LEARNING),
            make_item("rl", status=CardStatus.RELEARNING),
            make_item("r", status=CardStatus.REVIEW, next_due_at=now + timedelta(days=3)),
        ]

        counts = card_counts(items, now)

        assert counts == {"new": 2, "learning": 2, "review": 1, "due": 3}
