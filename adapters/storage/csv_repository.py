"""
CSV snapshot storage for cycles and daily logs.

File layout (headerless, one row per entry):
- cycles:     start,end,duration_days,cycle_length
- daily logs: date,symptoms,mood

Commas inside free text are written as ';' so rows stay four/three columns
wide. Unreadable rows are skipped with a warning rather than aborting the
load. The stored cycle length is not trusted: the ledger re-derives it
when the session is built.
"""

import csv
from collections.abc import Iterable
from pathlib import Path

import structlog
from pydantic import ValidationError

from core.config import StorageConfig
from core.domain.dates import format_date, parse_date
from core.domain.models import CycleRecord, DailyLog, TrackerError

logger = structlog.get_logger(__name__)


def _clean_text(value: str) -> str:
    return value.replace(",", ";").replace("\n", " ").strip()


def _read_rows(path: Path) -> list[list[str]]:
    if not path.exists():
        return []
    with path.open(newline="", encoding="utf-8") as f:
        rows = [[cell.strip() for cell in row] for row in csv.reader(f)]
    return [row for row in rows if any(row)]


class CsvCycleRepository:
    """Implements the ``CycleRepository`` protocol over two CSV files."""

    def __init__(self, cycles_path: Path, logs_path: Path) -> None:
        self.cycles_path = Path(cycles_path)
        self.logs_path = Path(logs_path)
        self.logger = logger.bind(component="csv_repository", cycles_path=str(self.cycles_path))

    @classmethod
    def from_config(cls, config: StorageConfig) -> "CsvCycleRepository":
        return cls(config.cycles_path, config.logs_path)

    def load_cycles(self) -> list[CycleRecord]:
        records: list[CycleRecord] = []
        seen: set = set()
        for line_no, row in enumerate(_read_rows(self.cycles_path), start=1):
            if len(row) < 4:
                self.logger.warning("cycle_row_skipped", line=line_no, reason="too few columns")
                continue
            try:
                start = parse_date(row[0])
                end = parse_date(row[1])
                # cycle_length is re-derived by the ledger; older files hold negatives
                record = CycleRecord(start_date=start, end_date=end, duration_days=int(row[2]))
            except (TrackerError, ValidationError, ValueError) as e:
                self.logger.warning("cycle_row_skipped", line=line_no, reason=str(e))
                continue
            if record.start_date in seen:
                self.logger.warning("cycle_row_skipped", line=line_no, reason="duplicate start")
                continue
            seen.add(record.start_date)
            records.append(record)

        self.logger.info("cycles_loaded", count=len(records))
        return records

    def save_cycles(self, records: Iterable[CycleRecord]) -> None:
        rows = [
            [format_date(r.start_date), format_date(r.end_date), r.duration_days, r.cycle_length]
            for r in records
        ]
        self._write_rows(self.cycles_path, rows)
        self.logger.info("cycles_saved", count=len(rows))

    def load_logs(self) -> list[DailyLog]:
        logs: dict = {}
        for line_no, row in enumerate(_read_rows(self.logs_path), start=1):
            if len(row) < 3:
                self.logger.warning("log_row_skipped", line=line_no, reason="too few columns")
                continue
            try:
                day = parse_date(row[0])
            except TrackerError as e:
                self.logger.warning("log_row_skipped", line=line_no, reason=str(e))
                continue
            logs[day] = DailyLog(log_date=day, symptoms=row[1], mood=row[2])

        self.logger.info("daily_logs_loaded", count=len(logs))
        return list(logs.values())

    def save_logs(self, logs: Iterable[DailyLog]) -> None:
        rows = [
            [format_date(log.log_date), _clean_text(log.symptoms), _clean_text(log.mood)]
            for log in logs
        ]
        self._write_rows(self.logs_path, rows)
        self.logger.info("daily_logs_saved", count=len(rows))

    @staticmethod
    def _write_rows(path: Path, rows: list[list]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as f:
            csv.writer(f, lineterminator="\n").writerows(rows)
