"""alarmed CLI -- an alarm clock you can only silence by thinking."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError

from alarmed import config as cfg
from alarmed import db, display
from alarmed.app import AlarmApp
from alarmed.models import (
    AlarmCreate,
    AlarmUpdate,
    ChallengeState,
    QuestionCategory,
    QuestionDifficulty,
)
from alarmed.quotes import load_quotes_file
from alarmed.ringing import RingingSession
from alarmed.schedule import normalize_time, parse_repeat_days
from alarmed.state import AppState

app = typer.Typer(
    name="alarmed",
    help="An alarm clock you switch off by answering questions.",
    no_args_is_help=True,
)

log = logging.getLogger(__name__)


def _state() -> AppState:
    """Load the application state from the configured database."""
    return AppState(db.get_connection())


def _build_app(state: AppState) -> AlarmApp:
    return AlarmApp(
        state,
        sound=display.TerminalSoundPlayer(),
        navigator=display.TerminalNavigator(),
        notifier=display.TerminalNotifier(),
        config=cfg.load_config(),
    )


def _fail(state: AppState, message: str) -> None:
    display.print_warning(message)
    state.close()
    raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else cfg.load_config().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Alarm management
# ---------------------------------------------------------------------------


def _parse_schedule(
    state: AppState, alarm_time: Optional[str], repeat: Optional[str]
) -> tuple[Optional[str], Optional[set]]:
    try:
        t = normalize_time(alarm_time) if alarm_time is not None else None
        days = parse_repeat_days(repeat) if repeat is not None else None
    except ValueError as exc:
        _fail(state, str(exc))
    return t, days


@app.command()
def add(
    alarm_time: str = typer.Argument(..., metavar="TIME", help="Clock time, e.g. 07:30"),
    label: str = typer.Option("", "--label", "-l", help="Optional name"),
    repeat: str = typer.Option(
        "once", "--repeat", "-r", help="once, daily, weekdays, weekends or mon,wed,fri"
    ),
    questions: int = typer.Option(3, "--questions", "-q", help="Correct answers needed (1-5)"),
    difficulty: QuestionDifficulty = typer.Option(QuestionDifficulty.MEDIUM, "--difficulty", "-d"),
    category: List[QuestionCategory] = typer.Option(
        [QuestionCategory.MATH], "--category", "-c", help="Repeat for several categories"
    ),
    no_vibrate: bool = typer.Option(False, "--no-vibrate", help="Do not vibrate"),
) -> None:
    """Add a new alarm."""
    state = _state()
    t, days = _parse_schedule(state, alarm_time, repeat)
    try:
        alarm_in = AlarmCreate(
            time=t,
            label=label,
            repeat_days=days,
            question_count=questions,
            question_difficulty=difficulty,
            question_categories=set(category),
            vibrate=not no_vibrate,
        )
    except ValidationError as exc:
        _fail(state, f"Invalid alarm: {exc.errors()[0]['msg']}")
    alarm = state.add_alarm(alarm_in)
    display.print_success(f"Added alarm #{alarm.id} at {alarm.time}")
    state.close()


@app.command()
def edit(
    alarm_id: int = typer.Argument(..., help="ID of the alarm to change"),
    alarm_time: Optional[str] = typer.Option(None, "--time", "-t", help="New clock time"),
    label: Optional[str] = typer.Option(None, "--label", "-l"),
    repeat: Optional[str] = typer.Option(None, "--repeat", "-r"),
    questions: Optional[int] = typer.Option(None, "--questions", "-q"),
    difficulty: Optional[QuestionDifficulty] = typer.Option(None, "--difficulty", "-d"),
    category: Optional[List[QuestionCategory]] = typer.Option(None, "--category", "-c"),
    vibrate: Optional[bool] = typer.Option(None, "--vibrate/--no-vibrate"),
) -> None:
    """Change an existing alarm."""
    state = _state()
    t, days = _parse_schedule(state, alarm_time, repeat)
    changes = {
        "time": t,
        "label": label,
        "repeat_days": days,
        "question_count": questions,
        "question_difficulty": difficulty,
        "question_categories": set(category) if category else None,
        "vibrate": vibrate,
    }
    try:
        update = AlarmUpdate(**{k: v for k, v in changes.items() if v is not None})
    except ValidationError as exc:
        _fail(state, f"Invalid change: {exc.errors()[0]['msg']}")
    alarm = state.update_alarm(alarm_id, update)
    if alarm is None:
        _fail(state, f"Alarm #{alarm_id} not found.")
    display.print_success(f"Updated alarm #{alarm.id}")
    state.close()


@app.command()
def delete(alarm_id: int = typer.Argument(..., help="ID of the alarm to delete")) -> None:
    """Delete an alarm. Its history is kept."""
    state = _state()
    if not state.delete_alarm(alarm_id):
        _fail(state, f"Alarm #{alarm_id} not found.")
    display.print_success(f"Deleted alarm #{alarm_id}")
    state.close()


@app.command()
def toggle(alarm_id: int = typer.Argument(..., help="ID of the alarm to switch on/off")) -> None:
    """Switch an alarm on or off without deleting it."""
    state = _state()
    alarm = state.toggle_alarm(alarm_id)
    if alarm is None:
        _fail(state, f"Alarm #{alarm_id} not found.")
    display.print_success(f"Alarm #{alarm.id} is now {'on' if alarm.is_active else 'off'}")
    state.close()


@app.command(name="list")
def list_alarms(
    clear: bool = typer.Option(False, "--clear", help="Delete all alarms"),
) -> None:
    """List your alarms and when they ring next."""
    state = _state()
    if clear:
        if typer.confirm("Delete all alarms?", default=False):
            state.clear_alarms()
            display.print_success("All alarms deleted.")
        state.close()
        return
    display.print_alarm_list(state.alarms)
    state.close()


# ---------------------------------------------------------------------------
# History & streak
# ---------------------------------------------------------------------------


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of records to show"),
    clear: bool = typer.Option(False, "--clear", help="Delete all history"),
) -> None:
    """See past wake-ups."""
    state = _state()
    if clear:
        if typer.confirm("Delete all history?", default=False):
            state.clear_history()
            display.print_success("History cleared.")
        state.close()
        return
    display.print_streak(state.streak())
    display.print_history(state.history, state.alarms, limit=limit)
    state.close()


@app.command()
def streak() -> None:
    """How many days in a row you got up."""
    state = _state()
    display.print_streak(state.streak())
    state.close()


# ---------------------------------------------------------------------------
# Ringing
# ---------------------------------------------------------------------------


def _run_challenge(session: RingingSession) -> None:
    """Drive a ringing session from the terminal until it is finished."""
    alarm = session.alarm
    while True:
        status = session.status
        if status is ChallengeState.COMPLETED:
            display.print_success("Alarm dismissed. Good morning!")
            display.print_quote(session.quote)
            typer.prompt("Press Enter to continue", default="", show_default=False)
            session.finish()
            return
        if status in (ChallengeState.OUT_OF_QUESTIONS, ChallengeState.NO_QUESTIONS):
            display.print_warning("Out of questions! Start over to keep going.")
            typer.confirm("Start over?", default=True, abort=True)
            session.snooze()
            continue
        if status is not ChallengeState.PRESENTING:
            return

        question = session.current_question
        serial = session.question_serial
        if session.sound_error:
            display.print_warning(f"Sound problem: {session.sound_error}")
        display.print_question(
            question, session.challenge.correct + 1, alarm.question_count, session.time_left
        )
        raw = typer.prompt("Answer (or 'snooze')", default="", show_default=False)
        session.scheduler.tick()
        if session.question_serial != serial or session.status is not ChallengeState.PRESENTING:
            display.print_warning("Time's up!")
            continue
        if raw.strip().lower() == "snooze":
            session.snooze()
            display.print_info("Starting over with new questions.")
            continue
        if question.options and raw.strip().isdigit():
            choice = int(raw.strip())
            if 1 <= choice <= len(question.options):
                raw = question.options[choice - 1]
        if session.submit(raw):
            display.print_success("Correct!")
        else:
            display.print_warning(f"The answer was {question.answer}.")
        session.advance()


@app.command()
def ring(alarm_id: int = typer.Argument(..., help="ID of the alarm to ring now")) -> None:
    """Ring an alarm right now (try out its challenge).

    Timers only advance between answers: the question countdown is checked
    after each input and the crescendo rises at most one step per answer.
    """
    state = _state()
    alarm = state.get_alarm(alarm_id)
    if alarm is None:
        _fail(state, f"Alarm #{alarm_id} not found.")
    runner = _build_app(state)
    session = runner.trigger(alarm)
    try:
        if session is not None:
            _run_challenge(session)
    finally:
        runner.end_session()
        runner.shutdown()
        state.close()


@app.command()
def run(
    resolution: float = typer.Option(1.0, "--resolution", help="Seconds between scheduler ticks"),
) -> None:
    """Stay in the foreground and ring alarms when they are due.

    While an alarm is ringing, the crescendo and question countdown advance
    only when an answer is entered.
    """
    state = _state()
    runner = _build_app(state)
    display.print_info("Watching your alarms. Keep this running; Ctrl-C to stop.")
    runner.on_foreground()
    try:
        while True:
            runner.scheduler.tick()
            if runner.session is not None:
                try:
                    _run_challenge(runner.session)
                finally:
                    runner.end_session()
            time.sleep(resolution)
    except (KeyboardInterrupt, typer.Abort):
        display.print_info("\nStopped watching.")
        runner.on_background()
    finally:
        runner.shutdown()
        state.close()


# ---------------------------------------------------------------------------
# Quotes & sound settings
# ---------------------------------------------------------------------------


@app.command()
def quotes(
    add_quote: Optional[str] = typer.Option(None, "--add", help="Add a quote"),
    edit_index: Optional[int] = typer.Option(None, "--edit", help="Number of the quote to replace"),
    text: Optional[str] = typer.Option(None, "--text", help="New text for --edit"),
    remove: Optional[int] = typer.Option(None, "--remove", help="Number of the quote to delete"),
    import_file: Optional[Path] = typer.Option(
        None, "--import", help="Add every '- ' bullet from a Markdown file"
    ),
) -> None:
    """List or manage the quotes shown after waking up."""
    state = _state()
    try:
        if add_quote:
            state.add_quote(add_quote.strip())
            display.print_success("Quote added.")
        elif edit_index is not None:
            if not text:
                _fail(state, "Use --text with --edit.")
            state.update_quote(edit_index - 1, text.strip())
            display.print_success(f"Quote {edit_index} updated.")
        elif remove is not None:
            state.delete_quote(remove - 1)
            display.print_success(f"Quote {remove} deleted.")
        elif import_file is not None:
            new = load_quotes_file(import_file)
            for quote in new:
                state.add_quote(quote)
            display.print_success(f"Imported {len(new)} quote{'s' if len(new) != 1 else ''}.")
        else:
            display.print_quotes(state.quotes)
    except IndexError:
        _fail(state, "No quote with that number.")
    except OSError as exc:
        _fail(state, f"Could not read {import_file}: {exc}")
    state.close()


@app.command()
def settings(
    volume: Optional[float] = typer.Option(None, "--volume", help="Alarm volume, 0.0-1.0"),
    crescendo: Optional[bool] = typer.Option(
        None, "--crescendo/--no-crescendo", help="Gradually raise the volume"
    ),
) -> None:
    """Show or change sound settings."""
    state = _state()
    if volume is not None:
        try:
            state.set_volume(volume)
        except ValueError as exc:
            _fail(state, str(exc))
        display.print_success(f"Volume set to {round(volume * 100)}%")
    if crescendo is not None:
        state.set_crescendo_enabled(crescendo)
        display.print_success(f"Crescendo {'on' if crescendo else 'off'}")
    if volume is None and crescendo is None:
        display.print_info(f"Volume: {round(state.volume * 100)}%")
        display.print_info(f"Crescendo: {'on' if state.crescendo_enabled else 'off'}")
    state.close()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.command()
def config(
    db_path: Optional[str] = typer.Option(None, "--db-path", help="Set a custom database file path"),
    reset: bool = typer.Option(False, "--reset", help="Reset to default local DB"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure where data is stored and how much is logged."""
    if db_path:
        result = cfg.set_db_path(db_path)
        display.print_success(f"Database path set to: {result.db_path}")
    elif reset:
        cfg.reset_db_path()
        display.print_success("Reset to default local database.")
    elif log_level:
        try:
            cfg.set_log_level(log_level)
        except ValueError as exc:
            display.print_warning(str(exc))
            raise typer.Exit(1)
        display.print_success(f"Log level set to {log_level.upper()}")
    elif show:
        current = cfg.load_config()
        if current.db_path:
            display.print_info(f"Database: {current.db_path}")
        else:
            display.print_info(f"Database: {cfg.get_db_path()} (default)")
        display.print_info(f"Poll interval: {current.poll_interval_seconds:g}s")
        display.print_info(f"Question time limit: {current.question_time_limit_seconds}s")
        display.print_info(f"Log level: {current.log_level}")
    else:
        display.print_info("Use --db-path, --reset, --log-level, or --show.")
