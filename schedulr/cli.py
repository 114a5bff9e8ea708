"""
CLI (Command Line Interface).

This module provides quick terminal commands for power users and for testing, e.g.:

    schedulr list
    schedulr add --subject Maths --day Monday --start 09:00 --end 10:30
    schedulr move <id> --day Tuesday --start 14:00
    schedulr drag <id> --to 110,373
    schedulr conflicts
    schedulr export <file.json>
    schedulr interactive

Note:
- The interactive UI lives in schedulr/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from schedulr.config import DAYS, DEFAULT_COLORS, DEFAULT_GRID
from schedulr.conflicts import find_conflicts
from schedulr.drag import Box, DragController, MoveUpdate, PointerEvent
from schedulr.export_json import ImportFormatError, export_events_to_json, import_events_from_json
from schedulr.grid import layout
from schedulr.logger import setup_logger
from schedulr.model import Event
from schedulr.storage import JsonFileStore
from schedulr.theme import get_theme, set_theme, toggle_theme
from schedulr.timetable import EventNotFound, Timetable


logger = logging.getLogger(__name__)

DEFAULT_CANVAS = (700.0, DEFAULT_GRID.total_hours * 60.0)


def _open(args: argparse.Namespace) -> tuple[JsonFileStore, Timetable]:
    store = JsonFileStore(args.store)
    return store, Timetable(store)


def _event_line(ev: Event, conflicts: Optional[set[str]] = None) -> str:
    bits = [ev.id, f"{ev.day[:3]} {ev.start_time}-{ev.end_time}", ev.subject]
    if ev.teacher:
        bits.append(ev.teacher)
    line = " | ".join(bits)
    if conflicts and ev.id in conflicts:
        line += "  [CONFLICT]"
    return line


def _parse_pair(text: str, sep: str) -> tuple[float, float]:
    """
    Parse '110,373' / '700x780' into two floats.
    """
    parts = (text or "").lower().split(sep)
    if len(parts) != 2:
        raise ValueError(f"Expected two numbers separated by {sep!r}: {text!r}")
    return float(parts[0]), float(parts[1])


def _cmd_list(args: argparse.Namespace, timetable: Timetable) -> int:
    events = timetable.sorted_events()
    if not events:
        print("No classes scheduled.")
        return 0

    conflicts = timetable.conflicts
    for ev in events:
        print(_event_line(ev, conflicts))
    print(f"{len(events)} classes, {len(conflicts)} in conflict")
    return 0


def _cmd_add(args: argparse.Namespace, timetable: Timetable) -> int:
    data = {
        "subject": args.subject,
        "teacher": args.teacher or "",
        "day": args.day,
        "startTime": args.start,
        "endTime": args.end,
        "color": args.color or DEFAULT_COLORS[len(timetable.events) % len(DEFAULT_COLORS)],
        "description": args.description or "",
    }
    ev = timetable.add(data)
    print(f"Added: {_event_line(ev)}")
    if ev.id in timetable.conflicts:
        print("Warning: time conflict detected!")
    return 0


def _cmd_edit(args: argparse.Namespace, timetable: Timetable) -> int:
    data = timetable.get(args.event_id).to_dict()
    overrides = {
        "subject": args.subject,
        "teacher": args.teacher,
        "day": args.day,
        "startTime": args.start,
        "endTime": args.end,
        "color": args.color,
        "description": args.description,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})

    ev = timetable.update(args.event_id, data)
    print(f"Updated: {_event_line(ev)}")
    return 0


def _cmd_remove(args: argparse.Namespace, timetable: Timetable) -> int:
    ev = timetable.delete(args.event_id)
    print(f"Removed: {_event_line(ev)}")
    return 0


def _cmd_duplicate(args: argparse.Namespace, timetable: Timetable) -> int:
    ev = timetable.duplicate(args.event_id)
    print(f"Duplicated: {_event_line(ev)}")
    return 0


def _cmd_move(args: argparse.Namespace, timetable: Timetable) -> int:
    ev = timetable.get(args.event_id)
    day = args.day or ev.day
    start = args.start or ev.start_time
    moved = timetable.reschedule(ev.id, day, start)
    print(f"Moved: {_event_line(moved)}")
    return 0


def _cmd_drag(args: argparse.Namespace, timetable: Timetable) -> int:
    """
    Replay a pointer drag on a virtual canvas whose top-left corner is (0, 0).

    The pointer grabs the block at --grab (offset from the block's top-left
    corner), moves to --to and is released there.
    """
    ev = timetable.get(args.event_id)
    width, height = _parse_pair(args.canvas, "x")
    grab_x, grab_y = _parse_pair(args.grab, ",")
    to_x, to_y = _parse_pair(args.to, ",")

    canvas = Box(left=0.0, top=0.0, width=width, height=height)
    left, top, _, _ = layout(ev, height, width).to_pixels(width)

    selected: list[Event] = []

    def commit(event_id: str, update: MoveUpdate) -> None:
        timetable.move(event_id, update)

    controller = DragController(on_select=selected.append, on_commit_move=commit)
    with controller:
        controller.pointer_down(ev, PointerEvent(x=left + grab_x, y=top + grab_y), canvas)
        controller.pointer_move(PointerEvent(x=to_x, y=to_y))
        controller.pointer_up(PointerEvent(x=to_x, y=to_y))

    if selected:
        print(f"No movement (click): {_event_line(selected[0])}")
        return 0

    print(f"Dragged: {_event_line(timetable.get(ev.id))}")
    return 0


def _cmd_conflicts(args: argparse.Namespace, timetable: Timetable) -> int:
    """
    Print all detected conflicts, grouped as pairs.
    """
    confs = find_conflicts(timetable.events)
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        print(f"- {a.day} {a.start_time}-{a.end_time} {a.subject}  <->  {b.start_time}-{b.end_time} {b.subject}")
    return 0


def _cmd_grid(args: argparse.Namespace, timetable: Timetable) -> int:
    """
    Print the on-screen rectangle of every event for a canvas size.
    """
    conflicts = timetable.conflicts
    for ev in timetable.sorted_events():
        r = layout(ev, args.height, args.width)
        mark = " !" if ev.id in conflicts else ""
        print(
            f"{ev.id} | {ev.subject} | top={r.top_px:.1f}px height={r.height_px:.1f}px "
            f"left={r.left_percent:.2f}% width={r.width_percent:.2f}%{mark}"
        )
    return 0


def _cmd_export(args: argparse.Namespace, timetable: Timetable) -> int:
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .json path.")
        return 1

    n = export_events_to_json(timetable.events, out_path)
    print(f"Exported {n} classes to: {out_path}")
    return 0


def _cmd_import(args: argparse.Namespace, timetable: Timetable) -> int:
    events = import_events_from_json(args.path)
    timetable.replace_all(events)
    print(f"Imported {len(events)} classes from: {args.path}")
    return 0


def _cmd_new(args: argparse.Namespace, timetable: Timetable) -> int:
    saved = timetable.new_timetable()
    if saved is None:
        print("New empty timetable created!")
    else:
        print(f'Timetable saved as "{saved.name}"! Starting a new timetable.')
    return 0


def _cmd_saved(args: argparse.Namespace, timetable: Timetable) -> int:
    if args.action == "list":
        saved = timetable.saved_timetables()
        if not saved:
            print("No saved timetables.")
            return 0
        for s in saved:
            print(f"{s.id} | {s.name} | {len(s.events)} classes")
        return 0

    if not args.saved_id:
        print(f"Please provide the id of the saved timetable to {args.action}.")
        return 1

    if args.action == "load":
        s = timetable.load_saved(args.saved_id)
        print(f'Loaded "{s.name}"')
    else:
        s = timetable.delete_saved(args.saved_id)
        print(f'Deleted "{s.name}"')
    return 0


def _cmd_theme(args: argparse.Namespace, store: JsonFileStore) -> int:
    if args.value is None:
        print(get_theme(store))
    elif args.value == "toggle":
        print(toggle_theme(store))
    else:
        print(set_theme(store, args.value))
    return 0


def _add_event_fields(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--subject", required=required, help="Subject name")
    p.add_argument("--day", required=required, choices=DAYS, help="Weekday")
    p.add_argument("--start", required=required, help="Start time HH:MM")
    p.add_argument("--end", required=required, help="End time HH:MM")
    p.add_argument("--teacher", help="Teacher name")
    p.add_argument("--color", help="Display colour, e.g. #4C586B")
    p.add_argument("--description", help="Free-text notes")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="schedulr", description="Schedulr weekly timetable CLI")
    parser.add_argument("--store", type=str, default=None, help="Store file (default: ~/.schedulr/store.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all classes")

    p_add = sub.add_parser("add", help="Add a class")
    _add_event_fields(p_add, required=True)

    p_edit = sub.add_parser("edit", help="Edit a class")
    p_edit.add_argument("event_id", type=str)
    _add_event_fields(p_edit, required=False)

    p_remove = sub.add_parser("remove", help="Delete a class")
    p_remove.add_argument("event_id", type=str)

    p_dup = sub.add_parser("duplicate", help="Duplicate a class")
    p_dup.add_argument("event_id", type=str)

    p_move = sub.add_parser("move", help="Move a class, keeping its duration")
    p_move.add_argument("event_id", type=str)
    p_move.add_argument("--day", choices=DAYS, help="New weekday")
    p_move.add_argument("--start", help="New start time HH:MM")

    p_drag = sub.add_parser("drag", help="Replay a pointer drag on a virtual canvas")
    p_drag.add_argument("event_id", type=str)
    p_drag.add_argument("--to", required=True, help="Release point X,Y in canvas pixels")
    p_drag.add_argument("--grab", default="0,0", help="Grab offset X,Y inside the block (default 0,0)")
    p_drag.add_argument(
        "--canvas", default=f"{DEFAULT_CANVAS[0]:g}x{DEFAULT_CANVAS[1]:g}", help="Canvas size WxH in pixels"
    )

    sub.add_parser("conflicts", help="Show time conflicts")

    p_grid = sub.add_parser("grid", help="Print event rectangles for a canvas size")
    p_grid.add_argument("--height", type=float, default=DEFAULT_CANVAS[1], help="Canvas height in px")
    p_grid.add_argument("--width", type=float, default=DEFAULT_CANVAS[0], help="Canvas width in px")

    p_export = sub.add_parser("export", help="Export timetable to .json")
    p_export.add_argument("out", type=str, help="Output file path (e.g. timetable.json)")

    p_import = sub.add_parser("import", help="Import timetable from .json (replaces current)")
    p_import.add_argument("path", type=str, help="Input file path")

    sub.add_parser("new", help="Archive the current timetable and start an empty one")

    p_saved = sub.add_parser("saved", help="Manage saved timetables")
    p_saved.add_argument("action", choices=("list", "load", "delete"))
    p_saved.add_argument("saved_id", nargs="?", default=None)

    p_theme = sub.add_parser("theme", help="Show or change the theme")
    p_theme.add_argument("value", nargs="?", choices=("light", "dark", "toggle"), default=None)

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


COMMANDS = {
    "list": _cmd_list,
    "add": _cmd_add,
    "edit": _cmd_edit,
    "remove": _cmd_remove,
    "duplicate": _cmd_duplicate,
    "move": _cmd_move,
    "drag": _cmd_drag,
    "conflicts": _cmd_conflicts,
    "grid": _cmd_grid,
    "export": _cmd_export,
    "import": _cmd_import,
    "new": _cmd_new,
    "saved": _cmd_saved,
}


def _run(args: argparse.Namespace) -> int:
    store, timetable = _open(args)

    if args.command == "theme":
        return _cmd_theme(args, store)

    if args.command == "interactive":
        from schedulr.interactive import run_interactive

        run_interactive(timetable, store)
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        return 2
    return handler(args, timetable)


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(verbose=args.verbose)
    logger.debug("command=%s store=%s", args.command, args.store)

    try:
        code = _run(args)
    except EventNotFound as e:
        print(f"Not found: {e.args[0]}")
        code = 1
    except ImportFormatError as e:
        print(str(e))
        code = 1
    except ValueError as e:
        # invalid times, days, ordering, numbers
        print(f"Error: {e}")
        code = 1
    except OSError as e:
        print(f"Could not write: {e}")
        code = 1

    raise SystemExit(code)
