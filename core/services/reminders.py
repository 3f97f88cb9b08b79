"""
Time-ordered reminder queue.

Auto-generated prediction reminders and manually entered ones live in a
single binary heap ordered by ``(when, sequence)``. The sequence number keeps
ties in insertion order. Rebuilding from a new prediction only swaps the one
AUTO entry, so manual reminders survive every ledger change.
"""

import heapq
import itertools
from datetime import date, datetime

import structlog

from core.domain.dates import format_date, parse_date, to_timestamp
from core.domain.models import Reminder, ReminderKind

logger = structlog.get_logger(__name__)

PREDICTION_MESSAGE = "Predicted next period: {date}"

_HeapItem = tuple[datetime, int, Reminder]


class ReminderScheduler:
    """Min-heap of reminders with a single auto-prediction slot."""

    def __init__(self) -> None:
        self._heap: list[_HeapItem] = []
        self._sequence = itertools.count()
        self.logger = logger.bind(component="reminder_scheduler")

    def __len__(self) -> int:
        return len(self._heap)

    def _push(self, reminder: Reminder) -> None:
        heapq.heappush(self._heap, (reminder.when, next(self._sequence), reminder))

    def rebuild_from_prediction(self, predicted: date | None) -> Reminder | None:
        """Replace the AUTO reminder with one for ``predicted`` (or none)."""
        kept = [item for item in self._heap if item[2].kind is not ReminderKind.AUTO]
        if len(kept) != len(self._heap):
            self._heap = kept
            heapq.heapify(self._heap)

        if predicted is None:
            self.logger.debug("auto_reminder_cleared")
            return None

        reminder = Reminder(
            when=to_timestamp(predicted),
            message=PREDICTION_MESSAGE.format(date=format_date(predicted)),
            kind=ReminderKind.AUTO,
        )
        self._push(reminder)
        self.logger.debug("auto_reminder_scheduled", when=format_date(predicted))
        return reminder

    def add_manual(self, when: str | date, message: str) -> Reminder:
        day = parse_date(when)
        reminder = Reminder(when=to_timestamp(day), message=message, kind=ReminderKind.MANUAL)
        self._push(reminder)
        self.logger.info("manual_reminder_added", when=format_date(day))
        return reminder

    def purge_expired(self, now: datetime) -> int:
        """Pop every reminder strictly before ``now``; returns how many went."""
        purged = 0
        while self._heap and self._heap[0][0] < now:
            heapq.heappop(self._heap)
            purged += 1
        if purged:
            self.logger.info("reminders_purged", count=purged)
        return purged

    def list_upcoming(self, now: datetime, limit: int = 10) -> list[Reminder]:
        """Purge expired entries, then return the earliest ``limit`` reminders."""
        self.purge_expired(now)
        if limit <= 0:
            return []
        return [item[2] for item in heapq.nsmallest(limit, self._heap)]
