from __future__ import annotations

import math
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schedulr.config import DAYS, DEFAULT_COLORS, DEFAULT_GRID
from schedulr.conflicts import find_conflicts
from schedulr.export_json import ImportFormatError, export_events_to_json, import_events_from_json
from schedulr.grid import layout
from schedulr.model import Event
from schedulr.storage import KeyValueStore
from schedulr.theme import get_theme, toggle_theme
from schedulr.timetable import EventNotFound, Timetable


console = Console()

STYLES = {
    "light": {"header": "bold blue", "event": "black", "conflict": "bold red", "muted": "grey50"},
    "dark": {"header": "bold cyan", "event": "white", "conflict": "bold bright_red", "muted": "grey62"},
}


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    # prompts contain literal brackets like "[1]" or "[#4C586B]"
    return console.input(escape(msg))


def run_interactive(timetable: Timetable, store: KeyValueStore) -> None:
    """
    Interactive menu loop over one timetable.
    """
    while True:
        style = STYLES[get_theme(store)]
        _print_header(timetable, style)

        choice = _prompt(
            "\n[1] Week grid\n"
            "[2] Add class\n"
            "[3] Edit class\n"
            "[4] Delete class\n"
            "[5] Duplicate class\n"
            "[6] Move class\n"
            "[7] Show conflicts\n"
            "[8] Export .json\n"
            "[9] Import .json\n"
            "[10] New timetable / saved timetables\n"
            "[11] Toggle theme\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        try:
            if choice == "1":
                _flow_week_grid(timetable, style)
            elif choice == "2":
                _flow_add(timetable)
            elif choice == "3":
                _flow_edit(timetable, style)
            elif choice == "4":
                _flow_delete(timetable, style)
            elif choice == "5":
                _flow_duplicate(timetable, style)
            elif choice == "6":
                _flow_move(timetable, style)
            elif choice == "7":
                _flow_conflicts(timetable, style)
            elif choice == "8":
                _flow_export(timetable)
            elif choice == "9":
                _flow_import(timetable)
            elif choice == "10":
                _flow_saved(timetable)
            elif choice == "11":
                _println(f"Theme: {toggle_theme(store)}")
            else:
                _println("Invalid choice.")
        except EventNotFound as e:
            _println(f"Not found: {escape(str(e.args[0]))}")
        except ValueError as e:
            _println(f"[red]{escape(str(e))}[/]")
        except OSError as e:
            _println(f"[red]Could not write: {escape(str(e))}[/]")


def _print_header(timetable: Timetable, style: dict[str, str]) -> None:
    _println(f"\n[{style['header']}]=== Schedulr (interactive) ===[/]")
    n_conf = len(timetable.conflicts)
    conf = f"[{style['conflict']}]{n_conf} in conflict[/]" if n_conf else "no conflicts"
    _println(f"Classes: {len(timetable.events)} | {conf}")


def _event_label(ev: Event, conflicts: set[str], style: dict[str, str]) -> str:
    text = f"{ev.start_time}-{ev.end_time} {escape(ev.subject)}"
    if ev.id in conflicts:
        return f"[{style['conflict']}]{text} ⚠[/]"
    return f"[{style['event']}]{text}[/]"


def _flow_week_grid(timetable: Timetable, style: dict[str, str]) -> None:
    """
    Draw the week as a table with one row per grid hour.

    Uses the layout engine on a virtual canvas of one pixel per hour, so the
    top edge of each rectangle is directly the row index.
    """
    events = timetable.sorted_events()
    conflicts = timetable.conflicts
    hours = DEFAULT_GRID.hours
    cells: dict[tuple[int, int], list[str]] = {}

    for ev in events:
        rect = layout(ev, canvas_height_px=len(hours), canvas_width_px=len(DAYS))
        row = math.floor(rect.top_px)
        col = DAYS.index(ev.day)
        if not (0 <= row < len(hours)):
            continue
        cells.setdefault((row, col), []).append(_event_label(ev, conflicts, style))
        # continuation marks for the rows the block still covers
        last_row = min(len(hours) - 1, int(rect.top_px + rect.height_px - 1e-9))
        for r in range(row + 1, last_row + 1):
            cells.setdefault((r, col), []).append(f"[{style['muted']}]│[/]")

    table = Table(title="Week", box=box.SIMPLE, header_style=style["header"])
    table.add_column("Time", justify="right")
    for day in DAYS:
        table.add_column(day[:3])

    for r, hour in enumerate(hours):
        row = [f"{hour:02d}:00"]
        for c in range(len(DAYS)):
            row.append("\n".join(cells.get((r, c), [])))
        table.add_row(*row)

    console.print(table)


def _pick_event(timetable: Timetable, style: dict[str, str], title: str) -> Optional[Event]:
    events = timetable.sorted_events()
    if not events:
        _println("No classes scheduled.")
        return None

    conflicts = timetable.conflicts
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Day")
    table.add_column("Class")
    table.add_column("Teacher")
    for i, ev in enumerate(events, start=1):
        table.add_row(str(i), ev.day, _event_label(ev, conflicts, style), escape(ev.teacher))
    console.print(table)

    pick = _prompt("Enter number [blank = back]: ").strip()
    if not pick:
        return None
    if not pick.isdigit() or not (1 <= int(pick) <= len(events)):
        _println("Out of range.")
        return None
    return events[int(pick) - 1]


def _ask(label: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    value = _prompt(f"{label}{suffix}: ").strip()
    return value or default


def _ask_day(default: str) -> str:
    value = _ask("Day (Monday..Sunday)", default)
    for day in DAYS:
        if day.lower().startswith(value.lower()[:3]) and len(value) >= 3:
            return day
    return value


def _form(defaults: dict[str, str]) -> dict[str, str]:
    return {
        "subject": _ask("Subject", defaults.get("subject", "")),
        "teacher": _ask("Teacher", defaults.get("teacher", "")),
        "day": _ask_day(defaults.get("day", "Monday")),
        "startTime": _ask("Start (HH:MM)", defaults.get("startTime", "09:00")),
        "endTime": _ask("End (HH:MM)", defaults.get("endTime", "10:00")),
        "color": _ask("Color", defaults.get("color", DEFAULT_COLORS[0])),
        "description": _ask("Description", defaults.get("description", "")),
    }


def _flow_add(timetable: Timetable) -> None:
    ev = timetable.add(_form({}))
    _println(f"Class added successfully! ({ev.day} {ev.start_time}-{ev.end_time})")
    if ev.id in timetable.conflicts:
        _println("[bold red]Time conflict detected![/]")


def _flow_edit(timetable: Timetable, style: dict[str, str]) -> None:
    ev = _pick_event(timetable, style, "Edit class")
    if ev is None:
        return
    timetable.update(ev.id, _form(ev.to_dict()))
    _println("Class updated successfully!")


def _flow_delete(timetable: Timetable, style: dict[str, str]) -> None:
    ev = _pick_event(timetable, style, "Delete class")
    if ev is None:
        return
    if _prompt(f"Delete {ev.subject}? [y/N]: ").strip().lower() != "y":
        return
    timetable.delete(ev.id)
    _println("Class deleted successfully!")


def _flow_duplicate(timetable: Timetable, style: dict[str, str]) -> None:
    ev = _pick_event(timetable, style, "Duplicate class")
    if ev is None:
        return
    timetable.duplicate(ev.id)
    _println("Class duplicated successfully!")


def _flow_move(timetable: Timetable, style: dict[str, str]) -> None:
    ev = _pick_event(timetable, style, "Move class")
    if ev is None:
        return
    day = _ask_day(ev.day)
    start = _ask("New start (HH:MM)", ev.start_time)
    moved = timetable.reschedule(ev.id, day, start)
    _println(f"Moved to {moved.day} {moved.start_time}-{moved.end_time}")


def _flow_conflicts(timetable: Timetable, style: dict[str, str]) -> None:
    confs = find_conflicts(timetable.events)
    if not confs:
        _println("No conflicts found.")
        return

    table = Table(title=f"Conflicts ({len(confs)})", box=box.SIMPLE, header_style=style["header"])
    table.add_column("Day")
    table.add_column("Class A")
    table.add_column("Class B")
    for a, b in confs:
        table.add_row(
            a.day,
            f"{a.start_time}-{a.end_time} {escape(a.subject)}",
            f"{b.start_time}-{b.end_time} {escape(b.subject)}",
        )
    console.print(table)


def _flow_export(timetable: Timetable) -> None:
    default_path = Path.home() / "Downloads" / "schedulr-timetable.json"
    out_in = _prompt(f"Output file [{default_path}]: ").strip()
    out_path = Path(out_in).expanduser() if out_in else default_path
    if out_path.suffix.lower() != ".json":
        out_path = out_path.with_suffix(".json")

    n = export_events_to_json(timetable.events, out_path)
    _println(f"Timetable exported successfully! {n} classes -> {escape(str(out_path.resolve()))}")


def _flow_import(timetable: Timetable) -> None:
    path_in = _prompt("File to import [blank = back]: ").strip()
    if not path_in:
        return
    try:
        events = import_events_from_json(Path(path_in).expanduser())
    except ImportFormatError as e:
        _println(f"[red]{escape(str(e))}[/]")
        return
    timetable.replace_all(events)
    _println(f"Timetable imported successfully! ({len(events)} classes)")


def _flow_saved(timetable: Timetable) -> None:
    while True:
        saved = timetable.saved_timetables()
        table = Table(title="Saved timetables", box=box.SIMPLE)
        table.add_column("#", justify="right")
        table.add_column("Name")
        table.add_column("Classes", justify="right")
        for i, s in enumerate(saved, start=1):
            table.add_row(str(i), escape(s.name), str(len(s.events)))
        console.print(table)

        action = _prompt("[n] New timetable  [l] Load  [d] Delete  [blank] Back: ").strip().lower()
        if not action:
            return
        if action == "n":
            archived = timetable.new_timetable()
            if archived is None:
                _println("New empty timetable created!")
            else:
                _println(f'Timetable saved as "{escape(archived.name)}"! Starting a new timetable.')
            continue
        if action not in ("l", "d"):
            _println("Invalid choice.")
            continue

        pick = _prompt("Number: ").strip()
        if not pick.isdigit() or not (1 <= int(pick) <= len(saved)):
            _println("Out of range.")
            continue
        chosen = saved[int(pick) - 1]
        if action == "l":
            timetable.load_saved(chosen.id)
            _println(f'Loaded "{escape(chosen.name)}"')
        else:
            timetable.delete_saved(chosen.id)
            _println("Timetable deleted successfully!")
