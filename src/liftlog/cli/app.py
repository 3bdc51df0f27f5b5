"""Shared Typer app objects, shared option types, store and logging utilities."""

import logging
import os
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import LOG_LEVEL_ENV
from ..io.record_store import RecordStore, get_default_record_path
from ..io.session_store import SessionStore, get_default_history_path

# Shared --history-path option type used by session commands
HistoryOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to sessions JSONL file"),
]

# Shared --records-path option type used by the 1rm commands
RecordsOption = Annotated[
    Optional[Path],
    typer.Option("--records-path", "-r", help="Path to records JSON file"),
]

app = typer.Typer(
    name="liftlog",
    help="Workout session tracker with timers, set logging and one-rep-max records.",
    no_args_is_help=False,
    invoke_without_command=True,
)

onerm_app = typer.Typer(
    name="1rm",
    help="Personal records and rep-max estimation.",
    no_args_is_help=True,
)
app.add_typer(onerm_app, name="1rm")


def get_store(history_path: Path | None) -> SessionStore:
    """Get session store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return SessionStore(history_path)


def get_record_store(records_path: Path | None) -> RecordStore:
    """Get record store from path or default location."""
    if records_path is None:
        records_path = get_default_record_path()
    return RecordStore(records_path)


def setup_logging(verbose: bool = False) -> None:
    """
    Configure root logging for the CLI.

    WARNING by default; --verbose raises it to DEBUG, and $LIFTLOG_LOG_LEVEL
    (DEBUG, INFO, WARNING, ERROR) sets it explicitly.
    """
    level = logging.WARNING
    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = logging.getLevelName(env_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("liftlog").setLevel(level)
