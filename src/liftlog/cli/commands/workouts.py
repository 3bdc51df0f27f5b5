"""Catalog and template commands: exercises, workouts, create-workout, delete-workout."""

import re
from typing import Annotated, Optional

import typer

from ...core.exercises import EXERCISE_REGISTRY, categories, exercises_in_category, find_exercise
from ...core.models import CustomExercise, CustomWorkout, ExerciseRef, WorkoutExercise
from ...io.serializers import ValidationError
from .. import views
from ..app import HistoryOption, app, get_store

# NAME[:SETS[xREPS][@WEIGHT]]  e.g. "Bench Press:3x5@185"
_SLOT_RE = re.compile(
    r"^(?P<name>[^:]+?)\s*"
    r"(?::\s*(?P<sets>\d+)(?:\s*x\s*(?P<reps>\d+))?(?:\s*@\s*(?P<weight>\d+(?:\.\d+)?))?)?\s*$",
    re.IGNORECASE,
)


def parse_workout_slot(text: str, allow_custom: bool = False) -> WorkoutExercise:
    """
    Parse one template slot.

    Accepted format::

        NAME[:SETS[xREPS][@WEIGHT]]
        Bench Press:3x5@185    → 3 sets of 5 at 185 lbs
        Plank                  → 3 sets, nothing prescribed

    Args:
        text: Slot text
        allow_custom: Unknown names become custom exercises instead of errors

    Raises:
        ValueError: If the text is malformed or the exercise is unknown
    """
    m = _SLOT_RE.match(text.strip())
    if m is None:
        raise ValueError(f"Invalid exercise slot '{text}'. Expected NAME[:SETSxREPS@WEIGHT]")

    name = m.group("name").strip()
    info = find_exercise(name)
    if info is not None:
        ref = ExerciseRef.of_builtin(info.display_name)
    elif allow_custom:
        ref = ExerciseRef.of_custom(CustomExercise(name=name))
    else:
        raise ValueError(f"Unknown exercise '{name}'. Use --allow-custom to create it.")

    return WorkoutExercise(
        exercise=ref,
        sets=int(m.group("sets")) if m.group("sets") else 3,
        reps=int(m.group("reps")) if m.group("reps") else None,
        weight=float(m.group("weight")) if m.group("weight") else None,
    )


@app.command()
def exercises(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only show this category"),
    ] = None,
) -> None:
    """
    List the built-in exercise catalog.
    """
    if category is None:
        views.print_catalog(list(EXERCISE_REGISTRY.values()))
        return

    matching = [c for c in categories() if c.lower() == category.lower()]
    if not matching:
        views.print_error(f"Unknown category '{category}'. Valid: {', '.join(categories())}")
        raise typer.Exit(1)
    views.print_catalog(exercises_in_category(matching[0]))


@app.command()
def workouts(history_path: HistoryOption = None) -> None:
    """
    List saved custom workouts. Start one with 'workout N' inside 'train'.
    """
    store = get_store(history_path)
    try:
        views.print_workouts(store.load_custom_workouts())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command("create-workout")
def create_workout(
    name: Annotated[str, typer.Argument(help="Workout name")],
    exercise: Annotated[
        list[str],
        typer.Option(
            "--exercise", "-x",
            help="Exercise slot NAME[:SETSxREPS@WEIGHT], repeatable",
        ),
    ],
    description: Annotated[
        Optional[str],
        typer.Option("--description", help="Short description"),
    ] = None,
    rest: Annotated[
        float,
        typer.Option("--rest", help="Rest between sets in seconds"),
    ] = 60.0,
    allow_custom: Annotated[
        bool,
        typer.Option("--allow-custom", help="Create custom exercises for unknown names"),
    ] = False,
    history_path: HistoryOption = None,
) -> None:
    """
    Save a reusable workout template.

    Example:
        liftlog create-workout "Push A" -x "Bench Press:3x5@185" -x "Overhead Press:3x8"
    """
    try:
        slots = [parse_workout_slot(text, allow_custom) for text in exercise]
        for slot in slots:
            slot.rest_time = rest
        workout = CustomWorkout(name=name, exercises=slots, description=description)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(history_path)
    try:
        store.save_custom_workout(workout)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Saved workout {workout.name} ({len(slots)} exercises, {workout.total_sets} sets)")


@app.command("delete-workout")
def delete_workout(
    workout_number: Annotated[int, typer.Argument(help="Workout # (see 'workouts')")],
    history_path: HistoryOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove a saved workout template.
    """
    store = get_store(history_path)
    try:
        saved = store.load_custom_workouts()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if workout_number < 1 or workout_number > len(saved):
        views.print_error(f"Workout # must be between 1 and {len(saved)}")
        raise typer.Exit(1)

    target = saved[workout_number - 1]
    if not force and not views.confirm_action(f"Delete workout {target.name}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_custom_workout(target.id)
    views.print_success(f"Deleted workout {target.name}")
