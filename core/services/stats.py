"""
Derived statistics over the cycle ledger.

Simple averaging only: the prediction is the latest start plus the truncated
mean of all known cycle lengths.
"""

from collections.abc import Sequence
from datetime import date
from statistics import mean

from core.domain.dates import add_days
from core.domain.models import CycleRecord, CycleSummary

DEFAULT_CYCLE_LENGTH = 28


class StatsEngine:
    """Stateless calculator; every method takes the ledger's records in order."""

    def __init__(self, default_cycle_length: int = DEFAULT_CYCLE_LENGTH) -> None:
        if default_cycle_length <= 0:
            raise ValueError("default_cycle_length must be positive")
        self.default_cycle_length = default_cycle_length

    @staticmethod
    def _known_lengths(records: Sequence[CycleRecord]) -> list[int]:
        return [r.cycle_length for r in records if r.cycle_length > 0]

    def average_cycle_length(self, records: Sequence[CycleRecord]) -> int:
        lengths = self._known_lengths(records)
        if not lengths:
            return self.default_cycle_length
        return sum(lengths) // len(lengths)

    def predict_next_start(self, records: Sequence[CycleRecord]) -> date | None:
        if not records:
            return None
        latest = max(r.start_date for r in records)
        return add_days(latest, self.average_cycle_length(records))

    def summary(self, records: Sequence[CycleRecord]) -> CycleSummary:
        if not records:
            return CycleSummary(count=0)

        durations = [r.duration_days for r in records]
        summary = CycleSummary(
            count=len(records),
            avg_duration=float(mean(durations)),
            min_duration=min(durations),
            max_duration=max(durations),
        )

        lengths = self._known_lengths(records)
        if not lengths:
            return summary
        return summary.model_copy(
            update={
                "avg_cycle_length": float(mean(lengths)),
                "min_cycle_length": min(lengths),
                "max_cycle_length": max(lengths),
            }
        )
