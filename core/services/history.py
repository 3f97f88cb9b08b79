"""
Linear undo/redo history of reversible ledger operations.

Each stack entry names the operation that was last applied to the ledger.
Popping an entry applies its inverse and pushes the inverse entry onto the
opposite stack, so undo and redo share one code path and an "undo of an add"
can never be mistaken for a "redo of a delete".
"""

import structlog

from core.domain.models import (
    ActionEntry,
    ActionKind,
    CycleRecord,
    DuplicateStart,
    Outcome,
    OutcomeStatus,
)
from core.services.ledger import CycleLedger

logger = structlog.get_logger(__name__)


class ActionHistory:
    """Two LIFO stacks of ``ActionEntry`` snapshots."""

    def __init__(self) -> None:
        self._undo: list[ActionEntry] = []
        self._redo: list[ActionEntry] = []
        self.logger = logger.bind(component="action_history")

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def record(self, kind: ActionKind, record: CycleRecord) -> ActionEntry:
        """Remember a freshly applied action; any new action drops the redo trail."""
        entry = ActionEntry(kind=kind, record=record.model_copy())
        self._undo.append(entry)
        if self._redo:
            self.logger.debug("redo_trail_cleared", dropped=len(self._redo))
        self._redo.clear()
        return entry

    def undo_last(self, ledger: CycleLedger) -> Outcome:
        if not self._undo:
            return Outcome(status=OutcomeStatus.NOTHING_TO_UNDO)
        entry = self._undo.pop()
        outcome = self._revert(entry, ledger)
        self._redo.append(entry.inverse())
        self.logger.info(
            "undo_applied",
            kind=entry.kind.value,
            start=entry.record.start_date.isoformat(),
            status=outcome.status.value,
        )
        return outcome

    def redo_last(self, ledger: CycleLedger) -> Outcome:
        if not self._redo:
            return Outcome(status=OutcomeStatus.NOTHING_TO_REDO)
        entry = self._redo.pop()
        outcome = self._revert(entry, ledger)
        self._undo.append(entry.inverse())
        self.logger.info(
            "redo_applied",
            kind=entry.kind.value,
            start=entry.record.start_date.isoformat(),
            status=outcome.status.value,
        )
        return outcome

    @staticmethod
    def _revert(entry: ActionEntry, ledger: CycleLedger) -> Outcome:
        """Apply the inverse of ``entry`` to the ledger."""
        snapshot = entry.record.model_copy()

        if entry.kind is ActionKind.ADD:
            if not ledger.remove(snapshot):
                return Outcome(status=OutcomeStatus.ALREADY_MISSING, entry=entry)
            return Outcome(status=OutcomeStatus.APPLIED, entry=entry)

        try:
            ledger.restore(snapshot)
        except DuplicateStart:
            return Outcome(status=OutcomeStatus.ALREADY_PRESENT, entry=entry)
        return Outcome(status=OutcomeStatus.APPLIED, entry=entry)
