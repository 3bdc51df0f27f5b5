"""Session commands: train (interactive session), history, delete-session."""

import json
from typing import Annotated, Optional

import typer
from rich.live import Live

from ...core.exercises import find_exercise
from ...core.models import CustomExercise, ExerciseRef
from ...core.session_controller import SessionController
from ...core.ticker import Ticker
from ...io.serializers import ValidationError, fitness_session_to_dict
from ...io.session_store import SessionStore
from .. import views
from ..app import HistoryOption, app, get_store

_FIELD_ALIASES = {
    "reps": "reps", "r": "reps",
    "weight": "weight", "w": "weight",
    "time": "time", "t": "time",
    "distance": "distance", "d": "distance",
}

_TRAIN_HELP = """\
[bold]Session[/bold]      start | pause | resume | stop | save | done | quit
[bold]Exercises[/bold]    add NAME | custom NAME | rm N | workout N
[bold]Timers[/bold]       timer N            start/pause exercise N's timer
[bold]Sets[/bold]         set N reps=8 weight=135 time=1:30 distance=0.5
             draft N reps=8 weight=135   (committed on save/done)
             del N S            remove set S of exercise N
[bold]View[/bold]         show | watch (live, Enter to leave) | help"""


class _LiveRefresher:
    """Tick target: redraws the live view while one is open."""

    def __init__(self) -> None:
        self.controller: SessionController | None = None
        self.live: Live | None = None

    def refresh(self) -> None:
        live, controller = self.live, self.controller
        if live is not None and controller is not None:
            live.update(views.render_session(controller), refresh=True)


def _parse_fields(tokens: list[str]) -> dict[str, str] | None:
    """Parse ``key=value`` tokens into draft-row fields; None on any bad token."""
    fields: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        name = _FIELD_ALIASES.get(key.lower())
        if not sep or name is None:
            return None
        fields[name] = value
    return fields


def _exercise_index(controller: SessionController, token: str) -> int | None:
    """1-based exercise number → 0-based index; prints an error if invalid."""
    try:
        index = int(token) - 1
    except ValueError:
        index = -1
    if not 0 <= index < len(controller.exercises):
        views.print_error(f"No exercise #{token}. Use 'show' to list exercises.")
        return None
    return index


def _first_blank_row(controller: SessionController, index: int) -> int:
    rows = controller.draft_rows(index)
    for i, row in enumerate(rows):
        if not row.is_valid:
            return i
    controller.add_draft_row(index)
    return len(rows)


def _cmd_add(controller: SessionController, args: list[str]) -> None:
    name = " ".join(args)
    info = find_exercise(name) if name else None
    if info is None:
        views.print_error(f"Unknown exercise '{name}'. See 'liftlog exercises'.")
        return
    if controller.add_exercise(ExerciseRef.of_builtin(info.display_name)) is not None:
        views.print_success(f"Added {info.display_name} as #{len(controller.exercises)}")


def _cmd_custom(controller: SessionController, args: list[str]) -> None:
    try:
        exercise = CustomExercise(name=" ".join(args))
    except ValueError as e:
        views.print_error(str(e))
        return
    if controller.add_exercise(ExerciseRef.of_custom(exercise)) is not None:
        views.print_success(f"Added custom exercise {exercise.name} as #{len(controller.exercises)}")


def _cmd_workout(controller: SessionController, store: SessionStore, args: list[str]) -> None:
    try:
        workouts = store.load_custom_workouts()
    except ValidationError as e:
        views.print_error(str(e))
        return
    try:
        workout = workouts[int(args[0]) - 1] if args else None
    except (ValueError, IndexError):
        workout = None
    if workout is None:
        views.print_error("Pick a workout number from 'liftlog workouts'.")
        return
    if not controller.load_workout(workout):
        views.print_error("Stop or finish the current session before loading a workout.")
        return
    store.save_custom_workout(workout)
    views.print_success(f"Started workout {workout.name}")


def _cmd_timer(controller: SessionController, args: list[str]) -> None:
    index = _exercise_index(controller, args[0]) if args else None
    if index is None:
        return
    if controller.is_exercise_running(index):
        controller.pause_exercise_timer(index)
        views.print_info(f"Timer #{index + 1} paused")
    elif controller.start_exercise_timer(index):
        views.print_info(f"Timer #{index + 1} running")
    else:
        views.print_warning("Exercise timers run only while the session is active.")


def _cmd_set(controller: SessionController, args: list[str], commit: bool) -> None:
    index = _exercise_index(controller, args[0]) if args else None
    if index is None:
        return
    fields = _parse_fields(args[1:])
    if not fields:
        views.print_error("Give fields as reps=8 weight=135 time=1:30 distance=0.5")
        return
    row = _first_blank_row(controller, index)
    controller.update_draft_row(index, row, **fields)
    if not commit:
        views.print_info(f"Draft saved for #{index + 1}")
        return
    record = controller.add_set_to_exercise(index, row)
    if record is None:
        controller.inputs.reset_row(index, row)
        views.print_error("Invalid set: check the numbers you entered.")
        return
    views.print_success(f"#{index + 1}: {record.display()}  ({controller.summary_text(index)})")


def _cmd_del(controller: SessionController, args: list[str]) -> None:
    index = _exercise_index(controller, args[0]) if args else None
    if index is None:
        return
    try:
        set_number = int(args[1])
    except (IndexError, ValueError):
        set_number = 0
    if not controller.remove_set(index, set_number - 1):
        views.print_error(f"Exercise #{index + 1} has no set {set_number or ''}".rstrip())


def _cmd_watch(controller: SessionController, refresher: _LiveRefresher) -> None:
    with Live(views.render_session(controller), console=views.console, auto_refresh=False) as live:
        refresher.live = live
        try:
            views.console.input("")
        finally:
            refresher.live = None


def _finish(controller: SessionController) -> None:
    finished = controller.complete()
    if finished is None:
        views.print_warning("No running session to finish.")
        return
    views.print_success("Session complete")
    views.print_session_detail(finished)


def run_training_repl(controller: SessionController, store: SessionStore, refresher: _LiveRefresher) -> None:
    """Read-eval loop driving one controller until quit or end of input."""
    views.console.print(_TRAIN_HELP)
    while True:
        try:
            line = views.console.input("[bold cyan]liftlog>[/bold cyan] ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        command, *args = line.split() or ["show"]
        command = command.lower()

        if command in ("quit", "exit", "q"):
            if controller.session.is_running and not views.confirm_action(
                "Session still running. Quit without finishing?"
            ):
                continue
            break
        elif command in ("help", "?"):
            views.console.print(_TRAIN_HELP)
        elif command in ("show", "status"):
            views.print_session(controller)
        elif command == "watch":
            _cmd_watch(controller, refresher)
        elif command == "add":
            _cmd_add(controller, args)
        elif command == "custom":
            _cmd_custom(controller, args)
        elif command == "rm":
            index = _exercise_index(controller, args[0]) if args else None
            if index is not None and controller.remove_exercise(index):
                views.print_success(f"Removed exercise #{index + 1}")
        elif command == "workout":
            _cmd_workout(controller, store, args)
        elif command == "start":
            if controller.start():
                views.print_success("Session started")
            else:
                views.print_warning("Add at least one exercise to an inactive session first.")
        elif command == "pause":
            if not controller.pause():
                views.print_warning("Session is not active.")
        elif command == "resume":
            if not controller.resume():
                views.print_warning("Session is not paused.")
        elif command == "stop":
            if controller.stop():
                views.print_info("Session stopped. 'start' begins it again.")
        elif command == "save":
            if controller.save():
                views.print_success("Session saved")
            else:
                views.print_warning("Nothing to save yet.")
        elif command in ("done", "complete", "finish"):
            _finish(controller)
        elif command == "timer":
            _cmd_timer(controller, args)
        elif command in ("set", "draft"):
            _cmd_set(controller, args, commit=command == "set")
        elif command == "del":
            _cmd_del(controller, args)
        else:
            views.print_error(f"Unknown command: {command}. Type 'help'.")


@app.command()
def train(
    history_path: HistoryOption = None,
    fresh: Annotated[
        bool,
        typer.Option("--fresh", help="Ignore a saved, unfinished session"),
    ] = False,
) -> None:
    """
    Run an interactive training session.

    Add exercises, start the session clock, time exercises and log sets.
    'done' completes the session and appends it to history.
    """
    store = get_store(history_path)

    resumed = None if fresh else store.load_current_session()
    refresher = _LiveRefresher()
    ticker = Ticker(callback=refresher.refresh)
    controller = SessionController(store=store, ticker=ticker, session=resumed)
    refresher.controller = controller
    if resumed is not None:
        controller.has_been_saved = True
        views.print_info(f"Resuming saved session ({resumed.state.value})")

    try:
        run_training_repl(controller, store, refresher)
    finally:
        controller.close()


@app.command()
def history(
    history_path: HistoryOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of sessions to show"),
    ] = None,
    detail: Annotated[
        Optional[int],
        typer.Option("--detail", "-d", help="Show every set of session #N"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Display session history as a table.
    """
    store = get_store(history_path)

    try:
        sessions = store.load_sessions()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if detail is not None:
        if detail < 1 or detail > len(sessions):
            views.print_error(f"Session # must be between 1 and {len(sessions)}")
            raise typer.Exit(1)
        views.print_session_detail(sessions[detail - 1])
        return

    if limit is not None:
        sessions = sessions[-limit:]

    if json_out:
        print(json.dumps([fitness_session_to_dict(s) for s in sessions], indent=2))
        return

    views.print_history(sessions)


@app.command("delete-session")
def delete_session(
    session_number: Annotated[
        int,
        typer.Argument(help="Session # to delete (see # column in history)"),
    ],
    history_path: HistoryOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove a session by its # in history.
    """
    store = get_store(history_path)

    try:
        sessions = store.load_sessions()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not sessions:
        views.print_error("No sessions in history.")
        raise typer.Exit(1)

    if session_number < 1 or session_number > len(sessions):
        views.print_error(f"Session # must be between 1 and {len(sessions)}")
        raise typer.Exit(1)

    target = sessions[session_number - 1]
    label = views.format_session_label(target)
    views.console.print(f"Session to delete: [bold]{label}[/bold]")

    if not force and not views.confirm_action("Delete this session?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_session_at(session_number - 1)
    views.print_success(f"Deleted session #{session_number}: {label}")
