"""
CLI entry point using Typer.

Provides commands for workout tracking:
- train: Run an interactive training session
- history: Display session history
- delete-session: Remove a session from history
- exercises: List the exercise catalog
- workouts / create-workout / delete-workout: Manage workout templates
- 1rm: Personal records and rep-max estimation
"""

from typing import Annotated

import typer

from . import views
from .app import app, setup_logging

# Importing the command modules registers their commands on the apps
from .commands import maxes, session, workouts  # noqa: F401


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """
    Workout session tracker. Run without a command for interactive mode.
    """
    setup_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # A sub-command was given, let it handle things

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]liftlog[/bold cyan] - workout session tracker")
    views.console.print()

    menu = {
        "1": ("train",     "Start a training session"),
        "2": ("history",   "Show session history"),
        "3": ("workouts",  "Show custom workouts"),
        "4": ("exercises", "Browse exercises"),
        "5": ("records",   "Show personal records"),
        "6": ("table",     "Rep-max table for a lift"),
        "0": ("quit",      "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    cmd_map = {k: v[0] for k, v in menu.items()}
    chosen = cmd_map.get(choice)

    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    # Invoke the chosen sub-command via typer
    if chosen == "train":
        ctx.invoke(session.train)
    elif chosen == "history":
        ctx.invoke(session.history)
    elif chosen == "workouts":
        ctx.invoke(workouts.workouts)
    elif chosen == "exercises":
        ctx.invoke(workouts.exercises)
    elif chosen == "records":
        ctx.invoke(maxes.list_records)
    elif chosen == "table":
        lift = views.console.input("Lift: ").strip()
        if not lift:
            views.print_error("No lift given.")
            raise typer.Exit(1)
        ctx.invoke(maxes.table, lift=lift)


if __name__ == "__main__":
    app()
