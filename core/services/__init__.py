"""
Core services for the application.

This package contains the cycle ledger, undo/redo history, statistics,
reminder scheduling and the session object that ties them together.
"""

from .daily_log import DailyLogBook
from .history import ActionHistory
from .ledger import CycleLedger
from .reminders import ReminderScheduler
from .result import Result
from .stats import StatsEngine
from .tracker import CycleRepository, TrackerSession

__all__ = [
    "ActionHistory",
    "CycleLedger",
    "CycleRepository",
    "DailyLogBook",
    "ReminderScheduler",
    "Result",
    "StatsEngine",
    "TrackerSession",
]
