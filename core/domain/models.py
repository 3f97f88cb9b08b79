"""
Domain models for cycle tracking.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation and are frozen so that the ledger, the
action history and the reminder queue can hand them around without copies
leaking mutations back into each other.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class TrackerError(Exception):
    """Base class for expected, recoverable tracker failures."""


class InvalidDateFormat(TrackerError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")
        self.value = value


class EndBeforeStart(TrackerError):
    def __init__(self, start: date, end: date) -> None:
        super().__init__(f"End date {end.isoformat()} is before start date {start.isoformat()}")
        self.start = start
        self.end = end


class DuplicateStart(TrackerError):
    def __init__(self, start: date) -> None:
        super().__init__(f"A cycle starting {start.isoformat()} already exists")
        self.start = start


class NotFound(TrackerError):
    def __init__(self, start: date) -> None:
        super().__init__(f"No cycle starts on {start.isoformat()}")
        self.start = start


class ActionKind(str, Enum):
    """Reversible ledger operations."""

    ADD = "add"
    DELETE = "delete"

    def inverse(self) -> "ActionKind":
        return ActionKind.DELETE if self is ActionKind.ADD else ActionKind.ADD


class ReminderKind(str, Enum):
    """Reminder namespaces sharing one ordered queue."""

    AUTO = "auto"  # derived from the current prediction
    MANUAL = "manual"


class OutcomeStatus(str, Enum):
    """Result of an undo or redo request."""

    APPLIED = "applied"
    ALREADY_MISSING = "already_missing"
    ALREADY_PRESENT = "already_present"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"


class CycleRecord(BaseModel):
    """One observed cycle: bleeding span plus distance from the previous start."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    duration_days: int = Field(ge=0, description="Days from start to end")
    cycle_length: int = Field(
        default=0, ge=0, description="Days since the previous cycle's start, 0 if none"
    )

    @model_validator(mode="after")
    def duration_matches_dates(self) -> "CycleRecord":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.duration_days != (self.end_date - self.start_date).days:
            raise ValueError("duration_days must equal end_date - start_date")
        return self

    def same_span(self, other: "CycleRecord") -> bool:
        return self.start_date == other.start_date and self.end_date == other.end_date


class ActionEntry(BaseModel):
    """A ledger operation and the record snapshot it applied to."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    record: CycleRecord

    def inverse(self) -> "ActionEntry":
        return ActionEntry(kind=self.kind.inverse(), record=self.record.model_copy())


class Outcome(BaseModel):
    """What an undo/redo request did to the ledger."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    entry: ActionEntry | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def changed(self) -> bool:
        """True when the ledger contents were mutated."""
        return self.status is OutcomeStatus.APPLIED


class Reminder(BaseModel):
    """A dated notification, either derived from the prediction or entered by hand."""

    model_config = ConfigDict(frozen=True)

    when: datetime
    message: str
    kind: ReminderKind = ReminderKind.MANUAL


class DailyLog(BaseModel):
    """Free-form symptoms and mood for one calendar day."""

    model_config = ConfigDict(frozen=True)

    log_date: date
    symptoms: str = ""
    mood: str = ""


class Prediction(BaseModel):
    """Next expected cycle start relative to today."""

    model_config = ConfigDict(frozen=True)

    next_start: date
    days_until: int = Field(description="Negative when the predicted date has passed")
    average_cycle_length: int = Field(gt=0)


class CycleSummary(BaseModel):
    """Aggregate statistics over the whole ledger."""

    count: int = Field(ge=0)
    avg_duration: float | None = None
    min_duration: int | None = None
    max_duration: int | None = None
    avg_cycle_length: float | None = None
    min_cycle_length: int | None = None
    max_cycle_length: int | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_cycle_length_data(self) -> bool:
        """False means "insufficient data": fewer than two cycles with a known gap."""
        return self.avg_cycle_length is not None
