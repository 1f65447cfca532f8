"""
Tests for the SM-2 scheduler.

Covers the four review buttons, ease factor bounds, interval growth and
the display helpers.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from src.srs.models import CardStatus, RecallQuality, create_item
from src.srs.scheduler import SM2Config, SM2Scheduler, format_interval, round_half_up


@pytest.fixture
def scheduler():
    return SM2Scheduler()


class TestSuccessfulReviews:
    def test_first_good_review_schedules_one_day(self, scheduler, make_item, now):
        item = make_item(repetitions=0, ease_factor=2.5, interval=0, status=CardStatus.NEW)

        result = scheduler.schedule(item, RecallQuality.GOOD, now)

        assert result.repetitions == 1
        assert result.interval == 1
        assert result.status == CardStatus.REVIEW
        assert result.next_due_at == now + timedelta(days=1)

    def test_second_good_review_schedules_six_days(self, scheduler, make_item, now):
        item = make_item(repetitions=1, interval=1, status=CardStatus.REVIEW)

        result = scheduler.schedule(item, RecallQuality.GOOD, now)

        assert result.repetitions == 2
        assert result.interval == 6

    def test_easy_review_multiplies_by_ease_and_bonus(self, scheduler, make_item, now):
        item = make_item(repetitions=2, ease_factor=2.5, interval=6, status=CardStatus.REVIEW)

        result = scheduler.schedule(item, RecallQuality.EASY, now)

        assert result.ease_factor > 2.5
        assert result.ease_factor == pytest.approx(2.6)
        # round(round(6 * 2.6) * 1.3) = round(16 * 1.3) = 21
        assert result.interval == 21
        assert result.interval == round_half_up(round_half_up(6 * result.ease_factor) * 1.3)

    def test_good_review_lowers_ease(self, scheduler, make_item, now):
        result = scheduler.schedule(make_item(), RecallQuality.GOOD, now)

        assert result.ease_factor == pytest.approx(2.36)

    def test_easy_on_second_review_gets_bonus(self, scheduler, make_item, now):
        item = make_item(repetitions=1, interval=1, status=CardStatus.REVIEW)

        result = scheduler.schedule(item, RecallQuality.EASY, now)

        assert result.interval == 8  # round(6 * 1.3)

    def test_interval_never_below_one_day_on_success(self, scheduler, make_item, now):
        item = make_item(repetitions=3, ease_factor=1.3, interval=0, status=CardStatus.REVIEW)

        result = scheduler.schedule(item, RecallQuality.GOOD, now)

        assert result.interval >= 1


class TestFailedReviews:
    @pytest.mark.parametrize("quality", [RecallQuality.FAIL, RecallQuality.HARD])
    def test_failure_resets_repetitions(self, scheduler, make_item, now, quality):
        item = make_item(repetitions=5, interval=40, status=CardStatus.REVIEW)

        result = scheduler.schedule(item, quality, now)

        assert result.repetitions == 0
        assert result.interval == 1
        assert result.next_due_at == now + timedelta(days=1)

    def test_failed_new_item_moves_to_learning(self, scheduler, make_item, now):
        result = scheduler.schedule(make_item(status=CardStatus.NEW), RecallQuality.FAIL, now)

        assert result.status == CardStatus.LEARNING

    def test_failed_review_item_moves_to_relearning(self, scheduler, make_item, now):
        item = make_item(repetitions=2, interval=6, status=CardStatus.REVIEW)

        result = scheduler.schedule(item, RecallQuality.HARD, now)

        assert result.status == CardStatus.RELEARNING

    def test_ease_still_changes_on_failure(self, scheduler, make_item, now):
        fail = scheduler.schedule(make_item(), RecallQuality.FAIL, now)
        hard = scheduler.schedule(make_item(), RecallQuality.HARD, now)

        assert fail.ease_factor == pytest.approx(1.7)
        assert hard.ease_factor == pytest.approx(2.18)

    def test_ease_never_drops_below_floor(self, scheduler, make_item, now):
        item = make_item(ease_factor=1.3)

        for _ in range(5):
            result = scheduler.schedule(item, RecallQuality.FAIL, now)
            assert result.ease_factor >= 1.3
            item = item.apply(result, now)

        assert item.ease_factor == pytest.approx(1.3)


class TestSchedulerPurity:
    def test_schedule_does_not_mutate_item(self, scheduler, make_item, now):
        item = make_item()

        scheduler.schedule(item, RecallQuality.EASY, now)

        assert item.repetitions == 0
        assert item.interval == 0
        assert item.status == CardStatus.NEW

    def test_apply_merges_result_and_stamps_review(self, scheduler, make_item, now):
        item = make_item()
        result = scheduler.schedule(item, RecallQuality.GOOD, now)

        updated = item.apply(result, now)

        assert updated.id == item.id
        assert updated.front == item.front
        assert updated.last_reviewed_at == now
        assert updated.next_due_at == result.next_due_at

    def test_custom_config_intervals(self, make_item, now):
        scheduler = SM2Scheduler(SM2Config(first_interval=2, second_interval=10))

        first = scheduler.schedule(make_item(), RecallQuality.GOOD, now)
        second = scheduler.schedule(make_item(repetitions=1, interval=2), RecallQuality.GOOD, now)

        assert first.interval == 2
        assert second.interval == 10


class TestPreviews:
    def test_preview_covers_every_button(self, scheduler, make_item, now):
        item = make_item(repetitions=2, interval=6, status=CardStatus.REVIEW)

        intervals = scheduler.preview_all_intervals(item, now)

        assert set(intervals) == set(RecallQuality)
        assert intervals[RecallQuality.FAIL] == 1
        assert intervals[RecallQuality.HARD] == 1
        assert intervals[RecallQuality.EASY] > intervals[RecallQuality.GOOD]

    def test_preview_labels_are_formatted(self, scheduler, make_item, now):
        labels = scheduler.preview_labels(make_item(), now)

        assert labels[RecallQuality.GOOD] == "1 day"

    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, "< 1 day"),
            (1, "1 day"),
            (3, "3 days"),
            (7, "1 week"),
            (14, "2 weeks"),
            (30, "1 month"),
            (45, "2 months"),
            (365, "1 year"),
            (800, "2 years"),
        ],
    )
    def test_format_interval(self, days, expected):
        assert format_interval(days) == expected


class TestModelHelpers:
    def test_create_item_is_new_and_due(self, now):
        item = create_item("Q", "A", now, tags=("t1",))

        assert item.repetitions == 0
        assert item.ease_factor == 2.5
        assert item.interval == 0
        assert item.status == CardStatus.NEW
        assert item.is_due(now)
        assert item.tags == ("t1",)

    def test_create_item_generates_unique_ids(self, now):
        assert create_item("Q", "A", now).id != create_item("Q", "A", now).id

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("again", RecallQuality.FAIL),
            ("fail", RecallQuality.FAIL),
            (" Good ", RecallQuality.GOOD),
            ("EASY", RecallQuality.EASY),
        ],
    )
    def test_parse_quality(self, raw, expected):
        assert RecallQuality.parse(raw) == expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            RecallQuality.parse("perfect")

    def test_quality_scores_and_xp(self):
        assert [q.score for q in RecallQuality] == [0, 2, 3, 5]
        assert [q.xp for q in RecallQuality] == [0, 5, 10, 15]
