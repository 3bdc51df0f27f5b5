"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of sessions, the live session view,
the exercise catalog and personal records.
"""

from datetime import datetime

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from ..core.exercises import ExerciseInfo
from ..core.max_filter import MaxFilterSettings
from ..core.models import (
    CustomWorkout,
    FitnessSession,
    OneRepMaxRecord,
    SessionState,
    format_duration,
)
from ..core.one_rep_max import Formula
from ..core.session_controller import SessionController
from ..core.set_input import SetInput
from ..core.summary import summarize_exercise

console = Console()

_STATE_STYLES = {
    SessionState.INACTIVE: "dim",
    SessionState.ACTIVE: "bold green",
    SessionState.PAUSED: "bold yellow",
    SessionState.COMPLETED: "bold cyan",
}


def _session_date(session: FitnessSession) -> str:
    if session.start_time is not None:
        return session.start_time.strftime("%Y-%m-%d %H:%M")
    if session.exercise_sessions:
        return session.exercise_sessions[0].start_time.strftime("%Y-%m-%d %H:%M")
    return "-"


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def format_session_table(sessions: list[FitnessSession]) -> Table:
    """
    Create a Rich table displaying session history.

    Args:
        sessions: List of sessions to display

    Returns:
        Rich Table object
    """
    table = Table(title="Session History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("State", style="magenta")
    table.add_column("Duration", justify="right")
    table.add_column("Exercises", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Volume", justify="right", style="bold")

    for i, session in enumerate(sessions, 1):
        duration = session.duration(datetime.now())
        volume = sum(e.total_volume for e in session.exercise_sessions)
        table.add_row(
            str(i),
            _session_date(session),
            session.state.value,
            format_duration(duration),
            str(session.total_exercises),
            str(session.total_sets),
            str(session.total_reps),
            str(int(volume)) if volume > 0 else "-",
        )

    return table


def print_history(sessions: list[FitnessSession]) -> None:
    """
    Print session history to console.

    Args:
        sessions: Sessions to display
    """
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_session_table(sessions))


def format_session_label(session: FitnessSession) -> str:
    return (
        f"{_session_date(session)} "
        f"({session.total_exercises} exercises, {session.total_sets} sets)"
    )


def print_session_detail(session: FitnessSession) -> None:
    """Print every exercise of a stored session with its sets."""
    console.print(f"[bold]{_session_date(session)}[/bold]  ({session.state.value})")
    for exercise in session.exercise_sessions:
        summary = summarize_exercise(exercise, [])
        console.print(f"  [cyan]{exercise.exercise.name}[/cyan]  {summary.text()}")
        for n, record in enumerate(exercise.sets, 1):
            console.print(f"    {n}. {record.display()}")
    if session.notes:
        console.print(f"  [dim]{session.notes}[/dim]")


# ---------------------------------------------------------------------------
# Live session
# ---------------------------------------------------------------------------


def render_session(controller: SessionController) -> Group:
    """Renderable snapshot of the controlled session (used by the live view)."""
    session = controller.session
    state = session.state
    header = Text.assemble(
        ("Session ", "bold"),
        (state.value.upper(), _STATE_STYLES[state]),
        "  ",
        (format_duration(controller.current_duration()), "bold"),
    )
    if controller.workout is not None:
        header.append(f"  [{controller.workout.name}]", style="dim")

    table = Table(show_header=True, header_style="dim", expand=False)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Timer", justify="right")
    table.add_column("Drafts")
    table.add_column("Summary")

    for i, exercise in enumerate(session.exercise_sessions):
        running = controller.is_exercise_running(i)
        timer = format_duration(controller.exercise_running_time(i))
        drafts = [
            f"{n}:{_draft_text(row)}"
            for n, row in enumerate(controller.inputs.peek(i), 1)
            if row.is_valid
        ]
        table.add_row(
            str(i + 1),
            exercise.exercise.name,
            Text(timer, style="bold green" if running else ""),
            ", ".join(drafts) or "-",
            controller.summary_text(i),
        )

    footer = Text(controller.session_summary().text(), style="dim")
    return Group(header, table, footer)


def _draft_text(row: SetInput) -> str:
    parts = [
        f"{label}={value}"
        for label, value in (
            ("reps", row.reps),
            ("weight", row.weight),
            ("time", row.time),
            ("distance", row.distance),
        )
        if value.strip()
    ]
    return " ".join(parts)


def print_session(controller: SessionController) -> None:
    console.print(render_session(controller))


# ---------------------------------------------------------------------------
# Catalog and workouts
# ---------------------------------------------------------------------------


def print_catalog(exercises: list[ExerciseInfo]) -> None:
    """
    Print exercises grouped by category.

    Args:
        exercises: Catalog entries to display
    """
    table = Table(title="Exercises")
    table.add_column("Category", style="magenta")
    table.add_column("Exercise", style="cyan")
    table.add_column("Tracks")

    last_category = None
    for info in exercises:
        category = info.category if info.category != last_category else ""
        last_category = info.category
        table.add_row(category, info.display_name, ", ".join(info.tracked_fields))

    console.print(table)


def print_workouts(workouts: list[CustomWorkout]) -> None:
    if not workouts:
        console.print("[yellow]No custom workouts saved yet.[/yellow]")
        return

    table = Table(title="Custom Workouts")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="cyan")
    table.add_column("Exercises")
    table.add_column("Sets", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Last used", style="dim")

    for i, workout in enumerate(workouts, 1):
        table.add_row(
            str(i),
            workout.name,
            "\n".join(f"{slot.exercise.name} ({slot.display()})" for slot in workout.exercises),
            str(workout.total_sets),
            str(workout.use_count),
            workout.last_used.strftime("%Y-%m-%d") if workout.last_used else "never",
        )

    console.print(table)


# ---------------------------------------------------------------------------
# Personal records
# ---------------------------------------------------------------------------


def format_records_table(records: list[OneRepMaxRecord], title: str = "Personal Records") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Lift", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Date")
    table.add_column("Notes", style="dim")

    for record in records:
        table.add_row(
            record.id[:8],
            record.lift_name + (" *" if record.is_custom else ""),
            record.record_type.value,
            record.formatted_value,
            record.date.strftime("%Y-%m-%d"),
            record.notes or "",
        )

    return table


def print_records(records: list[OneRepMaxRecord], title: str = "Personal Records") -> None:
    if not records:
        console.print("[yellow]No personal records yet.[/yellow]")
        return
    console.print(format_records_table(records, title))


def print_rep_max_table(
    lift_name: str,
    one_rep_max: float,
    estimates: dict[int, float],
    formula: Formula,
) -> None:
    """
    Print estimated working weights for each rep tier.

    Args:
        lift_name: Lift the estimates are for
        one_rep_max: Best single in lbs
        estimates: {reps: weight} from the calculator
        formula: Formula used, shown in the title
    """
    table = Table(title=f"{lift_name} rep maxes ({formula.label})")
    table.add_column("Reps", justify="right", style="cyan")
    table.add_column("Weight (lbs)", justify="right", style="bold")
    table.add_column("% 1RM", justify="right", style="dim")

    table.add_row("1", f"{one_rep_max:.1f}", "100%")
    for reps, weight in estimates.items():
        table.add_row(str(reps), f"{weight:.1f}", f"{weight / one_rep_max * 100:.0f}%")

    console.print(table)


def print_filter_settings(settings: MaxFilterSettings) -> None:
    def on(flag: bool) -> str:
        return "[green]on[/green]" if flag else "[red]off[/red]"

    console.print("[bold]Record filters[/bold]")
    for name, shown in settings.record_types.items():
        console.print(f"  type {name:<9} {on(shown)}")
    console.print(f"  major lifts    {on(settings.show_major_lifts)}")
    console.print(f"  custom lifts   {on(settings.show_custom_lifts)}")
    console.print(f"  estimations    {on(settings.show_rep_estimations)}")
    tiers = ", ".join(
        f"{reps}{'' if shown else ' (off)'}" for reps, shown in sorted(settings.rep_tiers.items())
    )
    console.print(f"  rep tiers      {tiers}")
    console.print(f"  formula        {settings.formula.label}")
    console.print(f"  sort           {settings.sort_by.value} {settings.sort_order.value}")


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
