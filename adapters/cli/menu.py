"""
Interactive menu for the tracker.

Thin presentation layer: every choice maps to one ``TrackerSession`` call and
a rich rendering of its result. The snapshot is loaded when the menu starts
and written back on "Save & Exit".

Run with: period-tracker
"""

from collections.abc import Callable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from adapters.storage.csv_repository import CsvCycleRepository
from core.config import AppConfig, config_summary_rows, configure_logging, get_config
from core.domain.dates import format_date
from core.domain.models import (
    ActionKind,
    CycleSummary,
    Outcome,
    OutcomeStatus,
    Prediction,
    Reminder,
)
from core.services.tracker import CycleRepository, TrackerSession

MENU_ITEMS = [
    ("1", "Add New Cycle"),
    ("2", "Delete Cycle (by start date)"),
    ("3", "Undo (last add/delete)"),
    ("4", "Redo"),
    ("5", "Log Daily Symptom & Mood"),
    ("6", "View Cycle History"),
    ("7", "Predict Next Period"),
    ("8", "Reminders (show / add manual)"),
    ("9", "Analytics Summary"),
    ("10", "View Daily Logs"),
    ("11", "Save & Exit"),
]

OUTCOME_MESSAGES = {
    OutcomeStatus.NOTHING_TO_UNDO: "Nothing to undo.",
    OutcomeStatus.NOTHING_TO_REDO: "Nothing to redo.",
    OutcomeStatus.ALREADY_MISSING: "Cycle starting {start} was already gone; nothing removed.",
    OutcomeStatus.ALREADY_PRESENT: "A cycle starting {start} already exists; nothing restored.",
}

Ask = Callable[[str], str]


def render_cycles(session: TrackerSession) -> Table | str:
    cycles = session.list_cycles()
    if not cycles:
        return "[yellow]No cycles recorded yet.[/yellow]"

    table = Table(title="Menstrual Cycle History")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Days", justify="right")
    table.add_column("Cycle Length", justify="right")
    for record in cycles:
        table.add_row(
            format_date(record.start_date),
            format_date(record.end_date),
            str(record.duration_days),
            str(record.cycle_length) if record.cycle_length > 0 else "N/A",
        )
    return table


def render_daily_logs(session: TrackerSession) -> Table | str:
    logs = session.list_daily_logs()
    if not logs:
        return "[yellow]No logs yet.[/yellow]"

    table = Table(title="Daily Symptom Logs & Mood")
    table.add_column("Date", style="cyan")
    table.add_column("Symptoms")
    table.add_column("Mood")
    for log in logs:
        table.add_row(format_date(log.log_date), escape(log.symptoms), escape(log.mood))
    return table


def render_prediction(prediction: Prediction | None) -> str:
    if prediction is None:
        return "[yellow]Add at least one cycle to predict.[/yellow]"
    lines = [
        f"Average cycle length: {prediction.average_cycle_length} days",
        f"Next predicted period start: [bold]{format_date(prediction.next_start)}[/bold]",
    ]
    if prediction.days_until >= 0:
        lines.append(f"Days left until next period: {prediction.days_until}")
    else:
        lines.append(f"Predicted date is in the past by {-prediction.days_until} day(s).")
    return "\n".join(lines)


def render_summary(summary: CycleSummary) -> str:
    if summary.count == 0:
        return "[yellow]No cycles to analyze.[/yellow]"
    lines = [
        f"Cycles recorded: {summary.count}",
        f"Duration (days) - Avg: {summary.avg_duration:.2f}, "
        f"Min: {summary.min_duration}, Max: {summary.max_duration}",
    ]
    if summary.has_cycle_length_data:
        lines.append(
            f"Cycle length (days) - Avg: {summary.avg_cycle_length:.2f}, "
            f"Min: {summary.min_cycle_length}, Max: {summary.max_cycle_length}"
        )
    else:
        lines.append("Cycle length data insufficient (need >=2 cycles to compute lengths).")
    return "\n".join(lines)


def render_reminders(session: TrackerSession, reminders: list[Reminder]) -> str:
    if not reminders:
        return "[yellow]No upcoming reminders.[/yellow]"
    return "\n".join(
        f"{i}. {escape(r.message)} (Date: [bold]{format_date(r.when.date())}[/bold], "
        f"in {session.days_until(r.when)} day(s))"
        for i, r in enumerate(reminders, start=1)
    )


def render_outcome(action: str, outcome: Outcome) -> str:
    start = format_date(outcome.entry.record.start_date) if outcome.entry else ""
    if outcome.changed:
        verb = "removed" if outcome.entry and outcome.entry.kind is ActionKind.ADD else "restored"
        return f"[green]{action}: {verb} cycle starting {start}[/green]"
    return f"[yellow]{OUTCOME_MESSAGES[outcome.status].format(start=start)}[/yellow]"


class TrackerMenu:
    """Menu loop over one session; ``ask`` is injectable for tests."""

    def __init__(
        self,
        session: TrackerSession,
        repository: CycleRepository,
        console: Console | None = None,
        ask: Ask | None = None,
    ) -> None:
        self.session = session
        self.repository = repository
        self.console = console or Console()
        self.ask: Ask = ask or (lambda prompt: Prompt.ask(prompt, console=self.console))
        self._handlers: dict[str, Callable[[], None]] = {
            "1": self.add_cycle,
            "2": self.delete_cycle,
            "3": self.undo,
            "4": self.redo,
            "5": self.log_daily,
            "6": lambda: self.console.print(render_cycles(self.session)),
            "7": lambda: self.console.print(render_prediction(self.session.predict_next())),
            "8": self.reminders,
            "9": lambda: self.console.print(render_summary(self.session.analytics())),
            "10": lambda: self.console.print(render_daily_logs(self.session)),
        }

    def header(self, title: str) -> None:
        self.console.print(Panel(title, style="bold cyan"))

    def show_menu(self) -> None:
        pending = {
            "3": self.session.history.undo_depth,
            "4": self.session.history.redo_depth,
        }
        body = "\n".join(
            f"{key}. {label}" + (f" ({pending[key]} pending)" if pending.get(key) else "")
            for key, label in MENU_ITEMS
        )
        self.console.print(Panel(body, title="Period Tracker", expand=False))

    def run(self) -> None:
        try:
            while True:
                self.show_menu()
                choice = self.ask("Enter choice (1-11)").strip()
                if choice == "11":
                    break
                handler = self._handlers.get(choice)
                if handler is None:
                    self.console.print("[red]Invalid choice (1-11).[/red]")
                    continue
                handler()
        except (EOFError, KeyboardInterrupt):
            self.console.print("\n[yellow]Input closed.[/yellow]")
        self.save_and_exit()

    def add_cycle(self) -> None:
        self.header("Add New Cycle Entry")
        start = self.ask("Enter START date (YYYY-MM-DD)")
        end = self.ask("Enter END date (YYYY-MM-DD)")
        result = self.session.add_cycle(start, end)
        if result.is_err():
            self.console.print(f"[red]{escape(str(result.unwrap_err()))}[/red]")
            return
        record = result.unwrap()
        self.console.print(
            f"[green]Cycle recorded: {format_date(record.start_date)} -> "
            f"{format_date(record.end_date)}[/green]"
        )
        self.console.print(f"[yellow]Duration: {record.duration_days} days[/yellow]")

    def delete_cycle(self) -> None:
        self.header("Delete Cycle Entry (by start date)")
        if not self.session.list_cycles():
            self.console.print("[yellow]No cycles to delete.[/yellow]")
            return
        start = self.ask("Enter START date of cycle to delete (YYYY-MM-DD)")
        result = self.session.delete_cycle(start)
        if result.is_err():
            self.console.print(f"[red]{escape(str(result.unwrap_err()))}[/red]")
            return
        self.console.print(
            f"[green]Deleted cycle starting {format_date(result.unwrap().start_date)}[/green]"
        )

    def undo(self) -> None:
        self.header("Undo (last cycle action)")
        self.console.print(render_outcome("Undo", self.session.undo()))

    def redo(self) -> None:
        self.header("Redo (re-apply last undone)")
        self.console.print(render_outcome("Redo", self.session.redo()))

    def log_daily(self) -> None:
        self.header("Log Daily Symptom & Mood")
        day = self.ask("Enter DATE (YYYY-MM-DD)")
        symptoms = self.ask("Enter SYMPTOMS")
        mood = self.ask("Enter MOOD")
        result = self.session.log_daily(day, symptoms, mood)
        if result.is_err():
            self.console.print(f"[red]{escape(str(result.unwrap_err()))}[/red]")
            return
        self.console.print(f"[green]Logged for {format_date(result.unwrap().log_date)}[/green]")

    def reminders(self) -> None:
        choice = self.ask("a) Show reminders   b) Add manual reminder").strip().lower()
        if choice == "a":
            self.header("Upcoming Reminders")
            self.console.print(render_reminders(self.session, self.session.list_reminders()))
        elif choice == "b":
            self.header("Add Manual Reminder")
            when = self.ask("Enter date (YYYY-MM-DD)")
            message = self.ask("Enter reminder message")
            result = self.session.add_manual_reminder(when, message)
            if result.is_err():
                self.console.print(f"[red]{escape(str(result.unwrap_err()))}[/red]")
                return
            self.console.print(
                f"[green]Reminder added for {format_date(result.unwrap().when.date())}[/green]"
            )
        else:
            self.console.print("[red]Invalid option[/red]")

    def save_and_exit(self) -> None:
        self.header("Saving & Exiting")
        self.session.save(self.repository)
        self.console.print("[green]Data saved.[/green]")


def build_menu(config: AppConfig, console: Console | None = None) -> TrackerMenu:
    repository = CsvCycleRepository.from_config(config.storage)
    session = TrackerSession.from_repository(repository, config)
    return TrackerMenu(session, repository, console=console)


def main() -> None:
    config = get_config()
    configure_logging(config.logging)
    console = Console()
    if config.debug:
        table = Table(title="Configuration")
        table.add_column("Setting")
        table.add_column("Value")
        for label, value in config_summary_rows(config):
            table.add_row(label, value)
        console.print(table)
    build_menu(config, console).run()


if __name__ == "__main__":
    main()
