"""Keyed store of daily symptom and mood notes."""

from collections.abc import Iterable
from datetime import date

import structlog

from core.domain.dates import parse_date
from core.domain.models import DailyLog

logger = structlog.get_logger(__name__)

SYMPTOM_SEPARATOR = "; "


class DailyLogBook:
    """One ``DailyLog`` per calendar day.

    Logging a day twice merges: new symptoms are appended, a new mood replaces
    the old one, and blank input leaves the existing value alone.
    """

    def __init__(self, logs: Iterable[DailyLog] = ()) -> None:
        self._logs: dict[date, DailyLog] = {}
        self.logger = logger.bind(component="daily_log_book")
        self.load(logs)

    def __len__(self) -> int:
        return len(self._logs)

    def load(self, logs: Iterable[DailyLog]) -> None:
        self._logs = {log.log_date: log for log in logs}

    def log(self, day: str | date, symptoms: str = "", mood: str = "") -> DailyLog:
        log_date = parse_date(day)
        symptoms = symptoms.strip()
        mood = mood.strip()

        existing = self._logs.get(log_date)
        if existing is None:
            entry = DailyLog(log_date=log_date, symptoms=symptoms, mood=mood)
        else:
            merged = existing.symptoms
            if symptoms:
                merged = f"{merged}{SYMPTOM_SEPARATOR}{symptoms}" if merged else symptoms
            entry = existing.model_copy(
                update={"symptoms": merged, "mood": mood or existing.mood}
            )

        self._logs[log_date] = entry
        self.logger.info(
            "daily_log_recorded", date=log_date.isoformat(), merged=existing is not None
        )
        return entry

    def get(self, day: str | date) -> DailyLog | None:
        return self._logs.get(parse_date(day))

    def all(self) -> list[DailyLog]:
        return [self._logs[d] for d in sorted(self._logs)]
