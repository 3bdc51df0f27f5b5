"""Personal record commands: the '1rm' sub-app."""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import recent_records_limit
from ...core.max_filter import MaxFilterSettings, SortOption, SortOrder
from ...core.models import OneRepMaxRecord, RecordType
from ...core.one_rep_max import (
    Formula,
    UnsupportedRepCountError,
    estimate_one_rep_max,
    rep_max_table,
)
from ...core.one_rep_max_manager import OneRepMaxManager
from ...io.record_store import RecordStore
from ...io.serializers import ValidationError
from .. import views
from ..app import RecordsOption, get_record_store, onerm_app


def _load_manager(records_path: Path | None) -> tuple[RecordStore, OneRepMaxManager]:
    store = get_record_store(records_path)
    try:
        return store, OneRepMaxManager(store)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _load_settings(store: RecordStore) -> MaxFilterSettings:
    try:
        return store.load_filter_settings()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _resolve_lift(manager: OneRepMaxManager, lift: str) -> str | None:
    """Case-insensitive match against major and custom lifts."""
    for name in manager.get_all_lifts():
        if name.lower() == lift.strip().lower():
            return name
    return None


@onerm_app.command("add")
def add_record(
    lift: Annotated[str, typer.Argument(help="Lift name, e.g. 'Bench Press'")],
    value: Annotated[float, typer.Argument(help="Record value (lbs, seconds, miles or reps)")],
    record_type: Annotated[
        RecordType,
        typer.Option("--type", "-t", help="Record type"),
    ] = RecordType.WEIGHT,
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Date YYYY-MM-DD (default: today)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Free-form notes"),
    ] = None,
    custom: Annotated[
        bool,
        typer.Option("--custom", help="Create the lift as a custom lift if needed"),
    ] = False,
    records_path: RecordsOption = None,
) -> None:
    """
    Record a personal best. Lighter records of the same lift are replaced.
    """
    _, manager = _load_manager(records_path)

    name = _resolve_lift(manager, lift)
    if name is None:
        if not custom:
            views.print_error(f"Unknown lift '{lift}'. Use --custom to add it as a custom lift.")
            raise typer.Exit(1)
        name = lift.strip()
        manager.add_custom_lift(name)

    try:
        when = datetime.strptime(date, "%Y-%m-%d") if date else datetime.now()
        record = OneRepMaxRecord(
            lift_name=name,
            value=value,
            record_type=record_type,
            date=when,
            notes=notes,
            is_custom=manager.is_custom_lift(name),
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    manager.add_record(record)
    views.print_success(f"Recorded {name}: {record.formatted_value}  (id {record.id[:8]})")


@onerm_app.command("list")
def list_records(
    lift: Annotated[
        Optional[str],
        typer.Option("--lift", "-l", help="Only this lift"),
    ] = None,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Ignore the saved filters"),
    ] = False,
    recent: Annotated[
        bool,
        typer.Option("--recent", help="Only the most recent records"),
    ] = False,
    records_path: RecordsOption = None,
) -> None:
    """
    Show personal records, filtered and sorted by the saved filter settings.
    """
    store, manager = _load_manager(records_path)

    if recent:
        views.print_records(manager.recent_records(recent_records_limit()), title="Recent Records")
        return

    if show_all:
        records = list(manager.records)
    else:
        records = manager.filtered_records(_load_settings(store))
    if lift is not None:
        records = [r for r in records if r.lift_name.lower() == lift.lower()]

    views.print_records(records)


@onerm_app.command("delete")
def delete_record(
    record_id: Annotated[str, typer.Argument(help="Record ID or unique prefix (see 'list')")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    records_path: RecordsOption = None,
) -> None:
    """
    Delete a personal record.
    """
    _, manager = _load_manager(records_path)

    record = manager.find_record(record_id)
    if record is None:
        views.print_error(f"No single record matches '{record_id}'")
        raise typer.Exit(1)

    label = f"{record.lift_name} {record.formatted_value} ({record.date:%Y-%m-%d})"
    if not force and not views.confirm_action(f"Delete {label}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    manager.delete_record(record.id)
    views.print_success(f"Deleted {label}")


@onerm_app.command("table")
def table(
    lift: Annotated[str, typer.Argument(help="Lift name")],
    formula: Annotated[
        Optional[Formula],
        typer.Option("--formula", "-f", help="Override the saved formula"),
    ] = None,
    records_path: RecordsOption = None,
) -> None:
    """
    Show rep-max estimates from the lift's best weight record.
    """
    store, manager = _load_manager(records_path)
    settings = _load_settings(store)
    if formula is not None:
        settings.formula = formula

    name = _resolve_lift(manager, lift) or lift
    best = manager.get_personal_record(name, RecordType.WEIGHT)
    if best is None:
        views.print_error(f"No weight record for {name}")
        raise typer.Exit(1)

    if not settings.show_rep_estimations:
        views.print_warning("Rep estimations are turned off (see '1rm filters').")

    views.print_rep_max_table(name, best.value, manager.rep_max_estimates(name, settings), settings.formula)


@onerm_app.command("estimate")
def estimate(
    weight: Annotated[float, typer.Argument(help="Weight lifted (lbs)")],
    reps: Annotated[int, typer.Argument(help="Reps completed")],
    formula: Annotated[
        Formula,
        typer.Option("--formula", "-f", help="Estimation formula"),
    ] = Formula.EPLEY,
) -> None:
    """
    Estimate a one-rep max from a set, with the matching rep-max table.
    """
    if weight <= 0 or reps < 1:
        views.print_error("Weight and reps must be positive")
        raise typer.Exit(1)

    try:
        one_rep_max = estimate_one_rep_max(weight, reps, formula)
    except UnsupportedRepCountError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_info(f"Estimated 1RM ({formula.label}): {one_rep_max:.1f} lbs")
    views.print_rep_max_table(f"{weight:g} x {reps}", one_rep_max, rep_max_table(one_rep_max, formula=formula), formula)


@onerm_app.command("lifts")
def lifts(records_path: RecordsOption = None) -> None:
    """
    List major and custom lifts with their current best weight.
    """
    _, manager = _load_manager(records_path)
    for name in manager.get_all_lifts():
        best = manager.get_personal_record(name)
        marker = " *" if manager.is_custom_lift(name) else ""
        value = best.formatted_value if best else "-"
        views.console.print(f"  {name}{marker:<3} {value}")


@onerm_app.command("add-lift")
def add_lift(
    name: Annotated[str, typer.Argument(help="Custom lift name")],
    records_path: RecordsOption = None,
) -> None:
    """
    Add a custom lift.
    """
    _, manager = _load_manager(records_path)
    if not name.strip() or not manager.add_custom_lift(name.strip()):
        views.print_error(f"'{name}' is empty or already a lift")
        raise typer.Exit(1)
    views.print_success(f"Added custom lift {name.strip()}")


@onerm_app.command("remove-lift")
def remove_lift(
    name: Annotated[str, typer.Argument(help="Custom lift name")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    records_path: RecordsOption = None,
) -> None:
    """
    Remove a custom lift and its records.
    """
    _, manager = _load_manager(records_path)
    if not manager.is_custom_lift(name):
        views.print_error(f"'{name}' is not a custom lift")
        raise typer.Exit(1)
    if not force and not views.confirm_action(f"Remove {name} and all its records?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)
    manager.remove_custom_lift(name)
    views.print_success(f"Removed custom lift {name}")


@onerm_app.command("filters")
def filters(
    hide_type: Annotated[
        Optional[list[RecordType]],
        typer.Option("--hide-type", help="Hide a record type (repeatable)"),
    ] = None,
    show_type: Annotated[
        Optional[list[RecordType]],
        typer.Option("--show-type", help="Show a record type (repeatable)"),
    ] = None,
    major: Annotated[
        Optional[bool],
        typer.Option("--major/--no-major", help="Show major lifts"),
    ] = None,
    custom: Annotated[
        Optional[bool],
        typer.Option("--custom/--no-custom", help="Show custom lifts"),
    ] = None,
    estimations: Annotated[
        Optional[bool],
        typer.Option("--estimations/--no-estimations", help="Show rep-max estimations"),
    ] = None,
    toggle_tier: Annotated[
        Optional[list[int]],
        typer.Option("--toggle-tier", help="Toggle a rep tier: 2, 3, 5 or 10 (repeatable)"),
    ] = None,
    formula: Annotated[
        Optional[Formula],
        typer.Option("--formula", help="Estimation formula"),
    ] = None,
    sort: Annotated[
        Optional[SortOption],
        typer.Option("--sort", help="Sort records by"),
    ] = None,
    order: Annotated[
        Optional[SortOrder],
        typer.Option("--order", help="Sort order"),
    ] = None,
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Restore default filters"),
    ] = False,
    records_path: RecordsOption = None,
) -> None:
    """
    Show or change record filters. Without options, prints the current ones.
    """
    store = get_record_store(records_path)
    settings = _load_settings(store)
    changed = False

    if reset:
        settings.reset_to_defaults()
        changed = True
    for record_type in hide_type or []:
        settings.record_types[record_type.value] = False
        changed = True
    for record_type in show_type or []:
        settings.record_types[record_type.value] = True
        changed = True
    if major is not None:
        settings.show_major_lifts = major
        changed = True
    if custom is not None:
        settings.show_custom_lifts = custom
        changed = True
    if estimations is not None:
        settings.show_rep_estimations = estimations
        changed = True
    for reps in toggle_tier or []:
        try:
            settings.toggle_rep_tier(reps)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        changed = True
    if formula is not None:
        settings.formula = formula
        changed = True
    if sort is not None:
        settings.sort_by = sort
        changed = True
    if order is not None:
        settings.sort_order = order
        changed = True

    if changed:
        store.save_filter_settings(settings)
        views.print_success("Filters saved")
    views.print_filter_settings(settings)
