"""
Chronologically ordered store of cycle records.

The ledger is a plain data structure: it validates, orders and links records
but never triggers statistics or reminder work itself. The session does that
after each successful mutation.

Invariants kept after every insert and removal:
- records are sorted by ``start_date`` and unique by it
- the first record has ``cycle_length == 0``
- every other record has ``cycle_length == days_between(previous.start, start)``
"""

import bisect
from collections.abc import Iterable
from datetime import date

import structlog

from core.domain.dates import days_between, parse_date
from core.domain.models import CycleRecord, DuplicateStart, EndBeforeStart, NotFound

logger = structlog.get_logger(__name__)


def _start_key(record: CycleRecord) -> date:
    return record.start_date


class CycleLedger:
    """Ordered collection of ``CycleRecord`` keyed by start date."""

    def __init__(self, records: Iterable[CycleRecord] = ()) -> None:
        self._records: list[CycleRecord] = []
        self.logger = logger.bind(component="cycle_ledger")
        self.load(records)

    def __len__(self) -> int:
        return len(self._records)

    def load(self, records: Iterable[CycleRecord]) -> None:
        """Replace the contents with ``records``, re-deriving cycle lengths."""
        ordered = sorted(records, key=_start_key)
        for previous, current in zip(ordered, ordered[1:]):
            if previous.start_date == current.start_date:
                raise DuplicateStart(current.start_date)
        self._records = ordered
        self._relink(0, len(self._records))
        self.logger.debug("ledger_loaded", count=len(self._records))

    def add(self, start: str | date, end: str | date) -> CycleRecord:
        """Validate and insert a new cycle, returning the stored record."""
        start_day = parse_date(start)
        end_day = parse_date(end)

        duration = days_between(start_day, end_day)
        if duration < 0:
            raise EndBeforeStart(start_day, end_day)
        if self._index_of(start_day) is not None:
            raise DuplicateStart(start_day)

        position = bisect.bisect_left(self._records, start_day, key=_start_key)
        record = CycleRecord(
            start_date=start_day,
            end_date=end_day,
            duration_days=duration,
            cycle_length=self._gap_before(position, start_day),
        )
        self._records.insert(position, record)
        self._relink(position + 1, position + 2)
        return record

    def delete_by_start(self, start: str | date) -> CycleRecord:
        """Remove and return the record starting on ``start``."""
        start_day = parse_date(start)
        index = self._index_of(start_day)
        if index is None:
            raise NotFound(start_day)
        removed = self._records.pop(index)
        self._relink(index, index + 1)
        return removed

    def remove(self, record: CycleRecord) -> bool:
        """Remove the record with the same start and end; False when absent."""
        index = self._index_of(record.start_date)
        if index is None or not self._records[index].same_span(record):
            return False
        self._records.pop(index)
        self._relink(index, index + 1)
        return True

    def restore(self, record: CycleRecord) -> CycleRecord:
        """Re-insert a previously removed record at its chronological position."""
        if self._index_of(record.start_date) is not None:
            raise DuplicateStart(record.start_date)
        position = bisect.bisect_left(self._records, record.start_date, key=_start_key)
        self._records.insert(position, record)
        self._relink(position, position + 2)
        return self._records[position]

    def all(self) -> list[CycleRecord]:
        return list(self._records)

    def latest_start(self) -> date | None:
        return self._records[-1].start_date if self._records else None

    def _index_of(self, start: date) -> int | None:
        index = bisect.bisect_left(self._records, start, key=_start_key)
        if index < len(self._records) and self._records[index].start_date == start:
            return index
        return None

    def _gap_before(self, position: int, start: date) -> int:
        if position == 0:
            return 0
        return days_between(self._records[position - 1].start_date, start)

    def _relink(self, first: int, stop: int) -> None:
        """Replace records in ``[first, stop)`` whose cycle length went stale."""
        for index in range(max(first, 0), min(stop, len(self._records))):
            record = self._records[index]
            expected = self._gap_before(index, record.start_date)
            if record.cycle_length != expected:
                self._records[index] = record.model_copy(update={"cycle_length": expected})
