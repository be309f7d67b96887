"""Rich terminal formatting helpers and terminal stand-ins for device ports."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from alarmed.history import alarm_label, sorted_history
from alarmed.models import Alarm, AlarmHistory, Question
from alarmed.ports import Navigator, Notifier, SoundPlayer
from alarmed.quotes import streak_message
from alarmed.schedule import (
    format_relative,
    format_repeat_days,
    format_time_12h,
    next_trigger,
)

console = Console()


def print_alarm_list(alarms: list[Alarm], now: Optional[datetime] = None) -> None:
    """Print all alarms with their schedule and next ring time."""
    if not alarms:
        console.print(Panel("No alarms.", title="Alarms", border_style="dim"))
        return

    table = Table(show_header=True, box=None, pad_edge=False)
    table.add_column("id", width=5)
    table.add_column("time", width=9)
    table.add_column("label")
    table.add_column("repeat")
    table.add_column("quiz")
    table.add_column("next")

    for alarm in alarms:
        categories = "/".join(sorted(c.value for c in alarm.question_categories))
        quiz = f"{alarm.question_count} {alarm.question_difficulty.value} {categories}"
        if alarm.is_active:
            upcoming = format_relative(next_trigger(alarm.time, alarm.repeat_days, now), now)
            style = "bold cyan"
        else:
            upcoming = "off"
            style = "dim"
        table.add_row(
            f"#{alarm.id}",
            format_time_12h(alarm.time),
            alarm.label or "Alarm",
            format_repeat_days(alarm.repeat_days),
            quiz,
            upcoming,
            style=style,
        )

    console.print(Panel(table, title="Alarms", border_style="blue"))


def print_history(history: list[AlarmHistory], alarms: list[Alarm], limit: int = 20) -> None:
    """Print wake-up records, newest first."""
    if not history:
        console.print(Panel("No wake-ups recorded yet.", title="History", border_style="dim"))
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("date", width=12)
    table.add_column("status", width=10)
    table.add_column("detail")

    for record in sorted_history(history)[:limit]:
        label = alarm_label(record, alarms)
        woke = record.wake_up_time.strftime("%I:%M %p").lstrip("0")
        if record.dismissed:
            table.add_row(record.date.strftime("%a %b %d"), "Missed", f"{label} - {woke}", style="red")
            continue
        detail = f"{label} - {woke}  {record.questions_correct}/{record.questions_answered} correct"
        if record.snooze_count:
            detail += f", {record.snooze_count} {'snooze' if record.snooze_count == 1 else 'snoozes'}"
        table.add_row(record.date.strftime("%a %b %d"), "Completed", detail, style="green")

    console.print(Panel(table, title="History", border_style="blue"))


def print_streak(streak: int) -> None:
    lines = f"{streak} {'day' if streak == 1 else 'days'}\n{streak_message(streak)}"
    console.print(Panel(Text(lines, justify="center"), title="Streak", border_style="yellow"))


def print_question(question: Question, number: int, total: int, time_left: float) -> None:
    """Print a quiz question with its countdown and any answer options."""
    seconds = int(time_left)
    colour = "red" if seconds <= 10 else "yellow" if seconds <= 30 else "blue"
    header = (
        f"Question {number} of {total}  "
        f"[{question.category.value.capitalize()}]  [{colour}]{seconds}s[/{colour}]"
    )
    body = question.question
    if question.options:
        body += "\n" + "\n".join(f"  {i}. {opt}" for i, opt in enumerate(question.options, 1))
    console.print(Panel(body, title=header, border_style="cyan"))


def print_quotes(quotes: list[str]) -> None:
    if not quotes:
        console.print(Panel("No quotes.", title="Quotes", border_style="dim"))
        return
    body = "\n".join(f"{i}. {q}" for i, q in enumerate(quotes, 1))
    console.print(Panel(body, title="Quotes", border_style="blue"))


def print_quote(message: str) -> None:
    """Print a motivational quote in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")


# ---------------------------------------------------------------------------
# Terminal adapters
# ---------------------------------------------------------------------------


class TerminalSoundPlayer(SoundPlayer):
    """Rings the terminal bell instead of playing audio."""

    def __init__(self) -> None:
        self.volume = 0.0
        self.playing = False

    def load(self, sound: str, volume: float, loop: bool = True) -> None:
        self.volume = volume

    def play(self) -> None:
        self.playing = True
        console.print("\a", end="")

    def stop(self) -> None:
        self.playing = False

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def unload(self) -> None:
        self.playing = False


class TerminalNavigator(Navigator):
    def alarm_ringing(self, alarm_id: int) -> None:
        console.print(f"\n[bold red]Alarm #{alarm_id} is ringing![/bold red]")

    def session_ended(self) -> None:
        print_info("Back to your alarms.")


class TerminalNotifier(Notifier):
    def remind_keep_running(self, active_count: int) -> None:
        print_warning(
            f"You have {active_count} active alarm{'s' if active_count != 1 else ''}. "
            "Keep alarmed running for them to ring."
        )
