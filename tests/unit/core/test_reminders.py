"""Tests for the reminder heap: auto slot rebuilds, manual entries, expiry."""

from datetime import date, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from core.domain.models import InvalidDateFormat, ReminderKind
from core.services.reminders import ReminderScheduler

NOW = datetime(2024, 2, 10, 9, 30)


@pytest.fixture
def scheduler() -> ReminderScheduler:
    return ReminderScheduler()


class TestRebuild:
    def test_rebuild_inserts_single_prediction_reminder(self, scheduler: ReminderScheduler) -> None:
        reminder = scheduler.rebuild_from_prediction(date(2024, 2, 26))

        assert reminder is not None
        assert reminder.kind is ReminderKind.AUTO
        assert reminder.when == datetime(2024, 2, 26)
        assert reminder.message == "Predicted next period: 2024-02-26"
        assert len(scheduler) == 1

    def test_rebuild_replaces_previous_prediction(self, scheduler: ReminderScheduler) -> None:
        scheduler.rebuild_from_prediction(date(2024, 2, 26))
        scheduler.rebuild_from_prediction(date(2024, 2, 28))

        upcoming = scheduler.list_upcoming(NOW)
        assert [r.message for r in upcoming] == ["Predicted next period: 2024-02-28"]

    def test_rebuild_without_prediction_clears_auto_slot(
        self, scheduler: ReminderScheduler
    ) -> None:
        scheduler.rebuild_from_prediction(date(2024, 2, 26))
        assert scheduler.rebuild_from_prediction(None) is None
        assert len(scheduler) == 0

    def test_rebuild_keeps_manual_reminders(self, scheduler: ReminderScheduler) -> None:
        scheduler.add_manual("2024-03-01", "Buy supplies")
        scheduler.rebuild_from_prediction(date(2024, 2, 26))
        scheduler.rebuild_from_prediction(None)

        upcoming = scheduler.list_upcoming(NOW)
        assert [r.message for r in upcoming] == ["Buy supplies"]
        assert upcoming[0].kind is ReminderKind.MANUAL


class TestManual:
    def test_add_manual_rejects_bad_date(self, scheduler: ReminderScheduler) -> None:
        with pytest.raises(InvalidDateFormat):
            scheduler.add_manual("next week", "Doctor")
        assert len(scheduler) == 0

    def test_ordering_with_stable_ties(self, scheduler: ReminderScheduler) -> None:
        scheduler.add_manual("2024-03-05", "late")
        scheduler.add_manual("2024-02-20", "first tie")
        scheduler.rebuild_from_prediction(date(2024, 2, 20))
        scheduler.add_manual("2024-02-20", "second tie")

        upcoming = scheduler.list_upcoming(NOW)

        assert [r.message for r in upcoming] == [
            "first tie",
            "Predicted next period: 2024-02-20",
            "second tie",
            "late",
        ]


class TestExpiryAndListing:
    def test_purge_removes_only_past_entries(self, scheduler: ReminderScheduler) -> None:
        scheduler.add_manual("2024-02-09", "yesterday")
        scheduler.add_manual("2024-02-10", "today, midnight")
        scheduler.add_manual("2024-02-11", "tomorrow")

        purged = scheduler.purge_expired(datetime(2024, 2, 10))

        assert purged == 1
        assert [r.message for r in scheduler.list_upcoming(datetime(2024, 2, 10))] == [
            "today, midnight",
            "tomorrow",
        ]

    def test_list_upcoming_respects_limit_without_consuming(
        self, scheduler: ReminderScheduler
    ) -> None:
        for offset in range(15):
            scheduler.add_manual(date(2024, 3, 1) + timedelta(days=offset), f"r{offset}")

        first = scheduler.list_upcoming(NOW, limit=10)
        second = scheduler.list_upcoming(NOW, limit=10)

        assert len(first) == 10
        assert first == second
        assert len(scheduler) == 15
        assert scheduler.list_upcoming(NOW, limit=0) == []

    @given(
        st.lists(
            st.dates(min_value=date(2024, 1, 1), max_value=date(2024, 12, 31)),
            max_size=30,
        ),
        st.datetimes(min_value=datetime(2024, 1, 1), max_value=datetime(2025, 1, 1)),
    )
    def test_purge_splits_exactly_at_now(self, days: list[date], now: datetime) -> None:
        scheduler = ReminderScheduler()
        for day in days:
            scheduler.add_manual(day, day.isoformat())

        scheduler.purge_expired(now)
        remaining = scheduler.list_upcoming(now, limit=len(days) + 1)

        expected = sorted(d for d in days if datetime.combine(d, datetime.min.time()) >= now)
        assert [r.when.date() for r in remaining] == expected
        assert all(r.when >= now for r in remaining)
