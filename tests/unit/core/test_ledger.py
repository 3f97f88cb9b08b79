"""
Tests for the chronologically ordered cycle ledger.

Covers:
- Duration and cycle length derivation on insert
- Ordering and uniqueness by start date
- Exact add/delete inversion
- Restore and start+end removal used by undo/redo
"""

from datetime import date, timedelta

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from core.domain.dates import days_between
from core.domain.models import DuplicateStart, EndBeforeStart, InvalidDateFormat, NotFound
from core.services.ledger import CycleLedger

starts = st.lists(
    st.dates(min_value=date(2000, 1, 1), max_value=date(2030, 12, 31)),
    min_size=1,
    max_size=15,
    unique=True,
)


def _assert_linked(ledger: CycleLedger) -> None:
    records = ledger.all()
    if records:
        assert records[0].cycle_length == 0
    for previous, current in zip(records, records[1:]):
        assert previous.start_date < current.start_date
        assert current.cycle_length == days_between(previous.start_date, current.start_date)


class TestAdd:
    def test_scenario_second_record_lengths(self) -> None:
        ledger = CycleLedger()
        first = ledger.add("2024-01-01", "2024-01-05")
        second = ledger.add("2024-01-29", "2024-02-02")

        assert first.duration_days == 4
        assert first.cycle_length == 0
        assert second.duration_days == 4
        assert second.cycle_length == 28
        assert ledger.latest_start() == date(2024, 1, 29)

    def test_same_day_cycle_has_zero_duration(self) -> None:
        record = CycleLedger().add("2024-01-01", "2024-01-01")
        assert record.duration_days == 0

    def test_rejects_end_before_start(self) -> None:
        ledger = CycleLedger()
        with pytest.raises(EndBeforeStart):
            ledger.add("2024-01-05", "2024-01-01")
        assert len(ledger) == 0

    def test_rejects_bad_format(self) -> None:
        ledger = CycleLedger()
        with pytest.raises(InvalidDateFormat):
            ledger.add("01/05/2024", "2024-01-06")
        with pytest.raises(InvalidDateFormat):
            ledger.add("2024-01-05", "tomorrow")
        assert len(ledger) == 0

    def test_rejects_duplicate_start(self) -> None:
        ledger = CycleLedger()
        ledger.add("2024-01-01", "2024-01-05")
        with pytest.raises(DuplicateStart):
            ledger.add("2024-01-01", "2024-01-03")
        assert len(ledger) == 1
        assert ledger.all()[0].end_date == date(2024, 1, 5)

    def test_out_of_order_insert_relinks_successor(self) -> None:
        ledger = CycleLedger()
        ledger.add("2024-01-01", "2024-01-05")
        ledger.add("2024-02-26", "2024-03-01")
        middle = ledger.add("2024-01-29", "2024-02-02")

        assert middle.cycle_length == 28
        assert [r.cycle_length for r in ledger.all()] == [0, 28, 28]

    def test_insert_before_first_resets_old_first(self) -> None:
        ledger = CycleLedger()
        ledger.add("2024-02-01", "2024-02-04")
        earliest = ledger.add("2024-01-01", "2024-01-04")

        assert earliest.cycle_length == 0
        assert ledger.all()[1].cycle_length == 31

    @given(starts)
    def test_any_insert_order_yields_ascending_linked_ledger(self, days: list[date]) -> None:
        ledger = CycleLedger()
        for day in days:
            ledger.add(day, day + timedelta(days=4))

        assert [r.start_date for r in ledger.all()] == sorted(days)
        _assert_linked(ledger)


class TestDelete:
    def test_delete_on_empty_ledger_is_not_found(self) -> None:
        with pytest.raises(NotFound):
            CycleLedger().delete_by_start("2024-01-01")

    def test_delete_returns_removed_record(self) -> None:
        ledger = CycleLedger()
        ledger.add("2024-01-01", "2024-01-05")
        removed = ledger.delete_by_start("2024-01-01")

        assert removed.start_date == date(2024, 1, 1)
        assert ledger.latest_start() is None

    def test_delete_relinks_successor(self) -> None:
        ledger = CycleLedger()
        ledger.add("2024-01-01", "2024-01-05")
        ledger.add("2024-01-29", "2024-02-02")
        ledger.add("2024-02-26", "2024-03-01")
        ledger.delete_by_start("2024-01-29")

        assert [r.cycle_length for r in ledger.all()] == [0, 56]

    @given(starts, st.dates(min_value=date(2000, 1, 1), max_value=date(2030, 12, 31)))
    def test_add_then_delete_restores_prior_state(self, days: list[date], extra: date) -> None:
        ledger = CycleLedger()
        for day in days:
            ledger.add(day, day + timedelta(days=3))
        assume(extra not in days)
        before = ledger.all()

        ledger.add(extra, extra + timedelta(days=5))
        ledger.delete_by_start(extra)

        assert ledger.all() == before


class TestRestoreAndRemove:
    def test_restore_reinserts_in_order(self) -> None:
        ledger = CycleLedger()
        ledger.add("2024-01-01", "2024-01-05")
        middle = ledger.add("2024-01-29", "2024-02-02")
        ledger.add("2024-02-26", "2024-03-01")
        ledger.delete_by_start("2024-01-29")

        ledger.restore(middle)

        assert ledger.all()[1] == middle
        _assert_linked(ledger)

    def test_restore_rejects_taken_start(self) -> None:
        ledger = CycleLedger()
        record = ledger.add("2024-01-01", "2024-01-05")
        with pytest.raises(DuplicateStart):
            ledger.restore(record)

    def test_remove_matches_start_and_end(self) -> None:
        ledger = CycleLedger()
        record = ledger.add("2024-01-01", "2024-01-05")
        other_span = record.model_copy(update={"end_date": date(2024, 1, 6), "duration_days": 5})

        assert ledger.remove(other_span) is False
        assert ledger.remove(record) is True
        assert ledger.remove(record) is False
        assert len(ledger) == 0


class TestLoad:
    def test_load_sorts_and_relinks(self) -> None:
        source = CycleLedger()
        late = source.add("2024-02-26", "2024-03-01")
        early = source.add("2024-01-01", "2024-01-05")

        ledger = CycleLedger([late, early])

        assert [r.start_date for r in ledger.all()] == [date(2024, 1, 1), date(2024, 2, 26)]
        assert ledger.all()[1].cycle_length == 56

    def test_load_rejects_duplicates(self) -> None:
        record = CycleLedger().add("2024-01-01", "2024-01-05")
        with pytest.raises(DuplicateStart):
            CycleLedger([record, record])
