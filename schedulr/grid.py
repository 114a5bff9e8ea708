"""
Grid layout: where each event sits on the week canvas.

Vertical positions are pixels (the canvas height depends on the surrounding
layout and changes on resize), horizontal positions are percentages of the
canvas width (one equal column per day). Overlapping events stack on top of
each other instead of splitting the column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from schedulr.config import DEFAULT_GRID, GridConfig
from schedulr.model import Event, day_index
from schedulr.timemath import duration_hours, hour_position


@dataclass(frozen=True)
class Rect:
    top_px: float
    left_percent: float
    width_percent: float
    height_px: float

    def to_pixels(self, canvas_width_px: float) -> tuple[float, float, float, float]:
        """
        Return (left_px, top_px, width_px, height_px) relative to the canvas origin.
        """
        left = self.left_percent / 100 * canvas_width_px
        width = self.width_percent / 100 * canvas_width_px
        return left, self.top_px, width, self.height_px


def pixels_per_hour(canvas_height_px: float, grid: GridConfig = DEFAULT_GRID) -> float:
    return canvas_height_px / grid.total_hours


def column_width_percent(grid: GridConfig = DEFAULT_GRID) -> float:
    return 100 / grid.day_count


def canvas_height(available_px: float, header_px: float) -> float:
    """
    Height of the event canvas: everything below the measured day header.
    """
    return max(0.0, float(available_px) - float(header_px))


def layout(
    event: Event, canvas_height_px: float, canvas_width_px: float, grid: GridConfig = DEFAULT_GRID
) -> Rect:
    """
    Rectangle of one event.

    canvas_width_px does not influence the result (columns are percentages)
    but is part of the call so callers always pass the full canvas size.
    """
    row = pixels_per_hour(canvas_height_px, grid)
    col = column_width_percent(grid)
    return Rect(
        top_px=hour_position(event.start_time, grid) * row,
        left_percent=day_index(event.day) * col,
        width_percent=col,
        height_px=duration_hours(event.start_time, event.end_time) * row,
    )


def layout_all(
    events: Iterable[Event], canvas_height_px: float, canvas_width_px: float, grid: GridConfig = DEFAULT_GRID
) -> dict[str, Rect]:
    """
    Rectangles for every event, keyed by id. Recompute after every resize.
    """
    return {ev.id: layout(ev, canvas_height_px, canvas_width_px, grid) for ev in events}
