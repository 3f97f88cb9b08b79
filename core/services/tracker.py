"""
Tracking session: the single entry point the CLI (or any other front end) uses.

Key patterns:
- Explicit session object instead of a module-level tracker instance
- Protocol-based persistence so storage adapters stay outside the core
- Result values at the boundary; leaf components raise, the session reports
- One orchestration path: mutate ledger -> record history -> refresh reminders
"""

from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import Protocol

import structlog

from core.config import AppConfig, TrackerConfig
from core.domain.dates import days_from_today, format_date
from core.domain.models import (
    ActionKind,
    CycleRecord,
    CycleSummary,
    DailyLog,
    Outcome,
    Prediction,
    Reminder,
    TrackerError,
)
from core.services.daily_log import DailyLogBook
from core.services.history import ActionHistory
from core.services.ledger import CycleLedger
from core.services.reminders import ReminderScheduler
from core.services.result import Result
from core.services.stats import StatsEngine

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class CycleRepository(Protocol):
    """
    Whole-snapshot persistence used at session boundaries.

    Why Protocol over ABC: Structural typing, easier faking in tests.
    """

    def load_cycles(self) -> list[CycleRecord]: ...

    def save_cycles(self, records: Iterable[CycleRecord]) -> None: ...

    def load_logs(self) -> list[DailyLog]: ...

    def save_logs(self, logs: Iterable[DailyLog]) -> None: ...


class TrackerSession:
    """
    Owns one ledger, its history, the derived reminder queue and the daily logs.

    Design principles:
    - Every successful mutation refreshes the prediction reminder
    - A failed add/delete leaves ledger and history untouched
    - ``now`` is read from the clock once per operation that needs it
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        records: Iterable[CycleRecord] = (),
        logs: Iterable[DailyLog] = (),
        clock: Clock = datetime.now,
    ) -> None:
        self.config = config or TrackerConfig()
        self.clock = clock
        self.ledger = CycleLedger(records)
        self.history = ActionHistory()
        self.stats = StatsEngine(self.config.default_cycle_length)
        self.reminders = ReminderScheduler()
        self.daily_logs = DailyLogBook(logs)
        self.logger = logger.bind(component="tracker_session")
        self._refresh_reminders()

    @classmethod
    def from_repository(
        cls,
        repository: CycleRepository,
        config: AppConfig | TrackerConfig | None = None,
        clock: Clock = datetime.now,
    ) -> "TrackerSession":
        tracker_config = config.tracker if isinstance(config, AppConfig) else config
        session = cls(
            config=tracker_config,
            records=repository.load_cycles(),
            logs=repository.load_logs(),
            clock=clock,
        )
        session.logger.info(
            "session_loaded", cycles=len(session.ledger), daily_logs=len(session.daily_logs)
        )
        return session

    def save(self, repository: CycleRepository) -> None:
        repository.save_cycles(self.ledger.all())
        repository.save_logs(self.daily_logs.all())
        self.logger.info(
            "session_saved", cycles=len(self.ledger), daily_logs=len(self.daily_logs)
        )

    # Mutating operations

    def add_cycle(self, start: str | date, end: str | date) -> Result[CycleRecord, TrackerError]:
        try:
            record = self.ledger.add(start, end)
        except TrackerError as e:
            self.logger.warning("cycle_add_rejected", start=str(start), end=str(end), error=str(e))
            return Result.err(e)

        self.history.record(ActionKind.ADD, record)
        self._refresh_reminders()
        self.logger.info(
            "cycle_added",
            start=format_date(record.start_date),
            duration_days=record.duration_days,
            cycle_length=record.cycle_length,
        )
        return Result.ok(record)

    def delete_cycle(self, start: str | date) -> Result[CycleRecord, TrackerError]:
        try:
            record = self.ledger.delete_by_start(start)
        except TrackerError as e:
            self.logger.warning("cycle_delete_rejected", start=str(start), error=str(e))
            return Result.err(e)

        self.history.record(ActionKind.DELETE, record)
        self._refresh_reminders()
        self.logger.info("cycle_deleted", start=format_date(record.start_date))
        return Result.ok(record)

    def undo(self) -> Outcome:
        outcome = self.history.undo_last(self.ledger)
        if outcome.changed:
            self._refresh_reminders()
        return outcome

    def redo(self) -> Outcome:
        outcome = self.history.redo_last(self.ledger)
        if outcome.changed:
            self._refresh_reminders()
        return outcome

    def add_manual_reminder(self, when: str | date, message: str) -> Result[Reminder, TrackerError]:
        try:
            reminder = self.reminders.add_manual(when, message)
        except TrackerError as e:
            self.logger.warning("manual_reminder_rejected", when=str(when), error=str(e))
            return Result.err(e)
        return Result.ok(reminder)

    def log_daily(
        self, day: str | date, symptoms: str = "", mood: str = ""
    ) -> Result[DailyLog, TrackerError]:
        try:
            return Result.ok(self.daily_logs.log(day, symptoms, mood))
        except TrackerError as e:
            self.logger.warning("daily_log_rejected", date=str(day), error=str(e))
            return Result.err(e)

    # Read-only operations

    def list_cycles(self) -> list[CycleRecord]:
        return self.ledger.all()

    def list_daily_logs(self) -> list[DailyLog]:
        return self.daily_logs.all()

    def predict_next(self) -> Prediction | None:
        records = self.ledger.all()
        predicted = self.stats.predict_next_start(records)
        if predicted is None:
            return None
        today = self.clock().date()
        return Prediction(
            next_start=predicted,
            days_until=days_from_today(predicted, today),
            average_cycle_length=self.stats.average_cycle_length(records),
        )

    def analytics(self) -> CycleSummary:
        return self.stats.summary(self.ledger.all())

    def list_reminders(self, limit: int | None = None) -> list[Reminder]:
        if limit is None:
            limit = self.config.reminder_list_limit
        return self.reminders.list_upcoming(self.clock(), limit)

    def days_until(self, when: datetime | date) -> int:
        """Signed days from today to ``when``, for countdown displays."""
        day = when.date() if isinstance(when, datetime) else when
        return days_from_today(day, self.clock().date())

    def _refresh_reminders(self) -> None:
        predicted = self.stats.predict_next_start(self.ledger.all())
        self.reminders.rebuild_from_prediction(predicted)
