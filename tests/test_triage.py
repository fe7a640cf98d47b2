"""Tests for triage classification."""

from datetime import date, datetime, timedelta

import pytest

from action_center.core.errors import ValidationError
from action_center.core.tasks import Task, TaskStatus
from action_center.core.triage import (
    Bucket,
    bucket_for,
    classify,
    completions_by_day,
    filter_completed_on,
    sort_scheduled,
)


def make_task(task_id, status=TaskStatus.PENDING, due_date=None, snoozed_until=None,
              updated_at=None):
    stamp = updated_at or datetime(2025, 1, 10, 9, 0)
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        project="Work",
        status=status,
        created_at=datetime(2025, 1, 1, 9, 0),
        updated_at=stamp,
        due_date=due_date,
        snoozed_until=snoozed_until,
    )


@pytest.fixture
def sample_tasks(today):
    """One task per bucket, plus a lapsed snooze."""
    return [
        make_task("overdue", due_date=today - timedelta(days=3)),
        make_task("today", due_date=today, status=TaskStatus.IN_PROGRESS),
        make_task("upcoming", due_date=today + timedelta(days=2)),
        make_task("scheduled", due_date=today + timedelta(days=30)),
        make_task("done", status=TaskStatus.DONE, due_date=today - timedelta(days=10)),
        make_task("someday"),
        make_task(
            "woke",
            status=TaskStatus.SNOOZED,
            snoozed_until=today - timedelta(days=1),
            due_date=today + timedelta(days=1),
        ),
    ]


class TestBucketFor:
    def test_due_today(self, today):
        assert bucket_for(make_task("1", due_date=today), today) == Bucket.DUE_TODAY

    def test_yesterday_is_overdue(self, today):
        assert bucket_for(make_task("1", due_date=today - timedelta(days=1)), today) == Bucket.OVERDUE

    def test_tomorrow_is_upcoming(self, today):
        assert bucket_for(make_task("1", due_date=today + timedelta(days=1)), today) == Bucket.UPCOMING

    def test_plus_six_is_upcoming(self, today):
        assert bucket_for(make_task("1", due_date=today + timedelta(days=6)), today) == Bucket.UPCOMING

    def test_plus_seven_is_scheduled(self, today):
        assert bucket_for(make_task("1", due_date=today + timedelta(days=7)), today) == Bucket.SCHEDULED

    def test_no_due_date_is_unscheduled(self, today):
        assert bucket_for(make_task("1"), today) == Bucket.UNSCHEDULED

    def test_done_overrides_dates(self, today):
        task = make_task("1", status=TaskStatus.DONE, due_date=today - timedelta(days=5))
        assert bucket_for(task, today) == Bucket.COMPLETED

    def test_done_without_date_is_completed(self, today):
        assert bucket_for(make_task("1", status=TaskStatus.DONE), today) == Bucket.COMPLETED

    def test_snoozed_task_classified_by_due_date(self, today):
        task = make_task("1", status=TaskStatus.SNOOZED, snoozed_until=today, due_date=today)
        assert bucket_for(task, today) == Bucket.DUE_TODAY


class TestClassify:
    def test_each_task_lands_in_expected_bucket(self, sample_tasks, today):
        result = classify(sample_tasks, today)
        assert [t.id for t in result.overdue] == ["overdue"]
        assert [t.id for t in result.due_today] == ["today"]
        assert [t.id for t in result.upcoming] == ["woke", "upcoming"]
        assert [t.id for t in result.scheduled] == ["scheduled"]
        assert [t.id for t in result.completed] == ["done"]
        assert [t.id for t in result.unscheduled] == ["someday"]

    def test_partition_is_total_and_disjoint(self, today):
        statuses = list(TaskStatus)
        tasks = []
        for offset in range(-10, 20):
            for status in statuses:
                tasks.append(
                    make_task(
                        f"{offset}-{status.value}",
                        status=status,
                        due_date=today + timedelta(days=offset),
                        snoozed_until=today - timedelta(days=1),
                    )
                )
        tasks.extend(make_task(f"none-{s.value}", status=s) for s in statuses)

        result = classify(tasks, today)
        seen = [t.id for b in Bucket for t in result.get(b)]
        assert sorted(seen) == sorted(t.id for t in tasks)
        assert len(seen) == len(set(seen))

    def test_window_boundaries_across_many_days(self):
        """today+6 is always upcoming and today+7 always scheduled."""
        start = date(2024, 12, 20)
        for i in range(60):
            day = start + timedelta(days=i)
            tasks = [
                make_task("plus6", due_date=day + timedelta(days=6)),
                make_task("plus7", due_date=day + timedelta(days=7)),
            ]
            result = classify(tasks, day)
            assert [t.id for t in result.upcoming] == ["plus6"]
            assert [t.id for t in result.scheduled] == ["plus7"]

    def test_lapsed_snooze_is_returned_as_pending(self, sample_tasks, today):
        result = classify(sample_tasks, today)
        woke = next(t for t in result.upcoming if t.id == "woke")
        assert woke.status == TaskStatus.PENDING

    def test_overdue_sorted_by_due_date(self, today):
        tasks = [
            make_task("a", due_date=today - timedelta(days=1)),
            make_task("b", due_date=today - timedelta(days=5)),
            make_task("c", due_date=today - timedelta(days=3)),
        ]
        assert [t.id for t in classify(tasks, today).overdue] == ["b", "c", "a"]

    def test_same_due_date_keeps_input_order(self, today):
        due = today + timedelta(days=2)
        tasks = [make_task("first", due_date=due), make_task("second", due_date=due)]
        assert [t.id for t in classify(tasks, today).upcoming] == ["first", "second"]

    def test_scheduled_furthest_first(self, today):
        tasks = [
            make_task("near", due_date=today + timedelta(days=8)),
            make_task("far", due_date=today + timedelta(days=40)),
        ]
        result = classify(tasks, today, scheduled_order="furthest")
        assert [t.id for t in result.scheduled] == ["far", "near"]

    def test_invalid_scheduled_order(self, today):
        with pytest.raises(ValidationError):
            classify([], today, scheduled_order="random")

    def test_completed_most_recent_first(self, today):
        tasks = [
            make_task("old", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 2, 10, 0)),
            make_task("new", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 14, 10, 0)),
        ]
        assert [t.id for t in classify(tasks, today).completed] == ["new", "old"]

    def test_completed_on_filters_to_day(self, today):
        tasks = [
            make_task("a", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 14, 8, 0)),
            make_task("b", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 13, 23, 59)),
            make_task("c", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 14, 22, 0)),
        ]
        result = classify(tasks, today, completed_on=date(2025, 1, 14))
        assert [t.id for t in result.completed] == ["c", "a"]

    def test_counts(self, sample_tasks, today):
        counts = classify(sample_tasks, today).counts()
        assert counts == {
            "completed": 1,
            "overdue": 1,
            "due_today": 1,
            "upcoming": 2,
            "scheduled": 1,
            "unscheduled": 1,
        }

    def test_empty(self, today):
        result = classify([], today)
        assert all(v == 0 for v in result.counts().values())
        assert result.today == today


class TestHelpers:
    def test_sort_scheduled_closest(self, today):
        tasks = [
            make_task("far", due_date=today + timedelta(days=20)),
            make_task("near", due_date=today + timedelta(days=9)),
        ]
        assert [t.id for t in sort_scheduled(tasks)] == ["near", "far"]

    def test_filter_completed_on_ignores_open_tasks(self):
        tasks = [make_task("open", updated_at=datetime(2025, 1, 14, 8, 0))]
        assert filter_completed_on(tasks, date(2025, 1, 14)) == []

    def test_completions_by_day(self):
        tasks = [
            make_task("a", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 3, 8, 0)),
            make_task("b", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 3, 20, 0)),
            make_task("c", status=TaskStatus.DONE, updated_at=datetime(2025, 1, 9, 8, 0)),
            make_task("d", status=TaskStatus.DONE, updated_at=datetime(2025, 2, 1, 8, 0)),
            make_task("e", status=TaskStatus.PENDING, updated_at=datetime(2025, 1, 3, 8, 0)),
        ]
        assert completions_by_day(tasks, 2025, 1) == {date(2025, 1, 3): 2, date(2025, 1, 9): 1}
