"""
Drag-to-reschedule.

DragController turns a stream of pointer events into at most one move of one
event:

    IDLE --pointer_down--> DRAGGING --pointer_move*--> DRAGGING --pointer_up--> IDLE

While dragging, every move recomputes the candidate position (clamped to the
canvas) and reports it through on_drag_update so the caller can redraw.
Nothing is committed until pointer_up. A release without real movement is a
click and opens the event instead (on_select).

Coordinates are plain pixels in one shared space (e.g. window coordinates):
the canvas rectangle, the block rectangle and pointer positions must all use
the same origin.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from schedulr.config import DAYS, DEFAULT_GRID, GridConfig
from schedulr.grid import layout, pixels_per_hour
from schedulr.model import Event, day_index
from schedulr.timemath import duration_minutes, minutes_to_time


logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class Box:
    """Axis-aligned pixel rectangle (left/top is the top-left corner)."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: int = PRIMARY_BUTTON
    pointer_id: int = 1


@dataclass(frozen=True)
class DragPosition:
    """Transient position of the dragged block, for redrawing only."""

    event_id: str
    top_px: float
    left_percent: float
    day: str


@dataclass(frozen=True)
class MoveUpdate:
    """The three fields a committed drag changes."""

    day: str
    start_time: str
    end_time: str

    def to_dict(self) -> dict[str, str]:
        return {"day": self.day, "startTime": self.start_time, "endTime": self.end_time}


@dataclass
class DragSession:
    """
    Everything captured at pointer-down, plus the latest candidate.

    Owned by exactly one DragController and dropped as a whole on release or
    cancel.
    """

    event: Event
    canvas: Box
    pointer_id: int
    pixels_per_hour: float
    block_width: float
    block_height: float
    offset_x: float
    offset_y: float
    duration_minutes: int
    initial_top: float
    initial_left: float
    top: float
    left: float
    day_index: int
    moved: bool = False


SelectHandler = Callable[[Event], Any]
CommitHandler = Callable[[str, MoveUpdate], Any]
UpdateHandler = Callable[[DragPosition], Any]
CaptureHandler = Callable[[int], Any]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class DragController:
    """
    Owns the (single) active drag session.

    Handlers are injected once and reused for every session:
    - on_select(event): release without movement
    - on_commit_move(event_id, MoveUpdate): release after movement
    - on_drag_update(DragPosition): optional, called on every pointer move
    - capture_pointer(pointer_id): optional; if it raises, dragging still works
    """

    def __init__(
        self,
        on_select: SelectHandler,
        on_commit_move: CommitHandler,
        on_drag_update: Optional[UpdateHandler] = None,
        capture_pointer: Optional[CaptureHandler] = None,
        grid: GridConfig = DEFAULT_GRID,
    ) -> None:
        self._on_select = on_select
        self._on_commit_move = on_commit_move
        self._on_drag_update = on_drag_update
        self._capture_pointer = capture_pointer
        self._grid = grid
        self._session: Optional[DragSession] = None

    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self._session is not None else DragState.IDLE

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    def pointer_down(
        self, event: Event, pointer: PointerEvent, canvas: Box, block: Optional[Box] = None
    ) -> bool:
        """
        Start dragging `event`. Returns False if the press was ignored
        (non-primary button, or another drag is already running).

        `block` is the event's current on-screen rectangle; when omitted it is
        computed from the grid layout of `canvas`.
        """
        if pointer.button != PRIMARY_BUTTON:
            return False
        if self._session is not None:
            logger.debug("pointer_down on %s ignored: drag of %s in progress", event.id, self._session.event.id)
            return False

        self._try_capture(pointer.pointer_id)

        if block is None:
            left, top, width, height = layout(event, canvas.height, canvas.width, self._grid).to_pixels(canvas.width)
            block = Box(left=canvas.left + left, top=canvas.top + top, width=width, height=height)

        per_hour = pixels_per_hour(canvas.height, self._grid)
        duration = duration_minutes(event.start_time, event.end_time)
        initial_top = block.top - canvas.top
        initial_left = block.left - canvas.left

        self._session = DragSession(
            event=event,
            canvas=canvas,
            pointer_id=pointer.pointer_id,
            pixels_per_hour=per_hour,
            block_width=canvas.width / self._grid.day_count,
            block_height=duration / 60 * per_hour,
            offset_x=pointer.x - block.left,
            offset_y=pointer.y - block.top,
            duration_minutes=duration,
            initial_top=initial_top,
            initial_left=initial_left,
            top=initial_top,
            left=initial_left,
            day_index=day_index(event.day),
        )
        logger.debug("drag started for %s (%s %s-%s)", event.id, event.day, event.start_time, event.end_time)
        return True

    def pointer_move(self, pointer: PointerEvent) -> Optional[DragPosition]:
        """
        Update the candidate position. Returns None when no drag is active
        or the pointer is not the one that started the drag.
        """
        s = self._session
        if s is None or pointer.pointer_id != s.pointer_id:
            return None

        top = pointer.y - s.canvas.top - s.offset_y
        left = pointer.x - s.canvas.left - s.offset_x
        top = _clamp(top, 0.0, max(0.0, s.canvas.height - s.block_height))
        left = _clamp(left, 0.0, max(0.0, s.canvas.width - s.block_width))

        # "moved" is sticky: returning to the start point is still a drag
        if not s.moved and math.hypot(top - s.initial_top, left - s.initial_left) > self._grid.drag_threshold_px:
            s.moved = True

        s.top = top
        s.left = left
        if s.block_width > 0:
            s.day_index = int(_clamp(_round_half_up(left / s.block_width), 0, self._grid.day_count - 1))

        left_percent = (left / s.canvas.width) * 100 if s.canvas.width else 0.0
        position = DragPosition(event_id=s.event.id, top_px=top, left_percent=left_percent, day=DAYS[s.day_index])
        if self._on_drag_update is not None:
            self._on_drag_update(position)
        return position

    def pointer_up(self, pointer: Optional[PointerEvent] = None) -> Optional[MoveUpdate]:
        """
        Finish the drag.

        The release position itself is not used: the commit is based on the
        last pointer_move. Returns the committed MoveUpdate, or None for a
        click, when no drag is active, or when another pointer was released.
        """
        s = self._session
        if s is None:
            return None
        if pointer is not None and pointer.pointer_id != s.pointer_id:
            return None
        # drop the session first so a raising handler cannot leave it behind
        self._session = None

        if not s.moved:
            logger.debug("drag of %s ended without movement: select", s.event.id)
            self._on_select(s.event)
            return None

        update = self._final_position(s)
        logger.debug("drag of %s committed: %s %s-%s", s.event.id, update.day, update.start_time, update.end_time)
        self._on_commit_move(s.event.id, update)
        return update

    def cancel(self) -> None:
        """Discard the active session (pointer lost). Never commits."""
        if self._session is not None:
            logger.debug("drag of %s cancelled", self._session.event.id)
        self._session = None

    def close(self) -> None:
        """Teardown: same as cancel()."""
        self.cancel()

    def __enter__(self) -> "DragController":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _try_capture(self, pointer_id: int) -> None:
        if self._capture_pointer is None:
            return
        try:
            self._capture_pointer(pointer_id)
        except Exception as e:  # platform refused capture: keep dragging without it
            logger.debug("pointer capture failed for pointer %s: %s", pointer_id, e)

    def _final_position(self, s: DragSession) -> MoveUpdate:
        """
        Convert the candidate top back to a start time.

        Clamp to the canvas, snap to grid.snap_minutes, then re-derive the end
        from the original duration so the duration never changes.
        """
        grid = self._grid
        snap = grid.snap_minutes
        max_start = max(0, grid.total_minutes - s.duration_minutes)

        minutes = (s.top / s.pixels_per_hour) * 60 if s.pixels_per_hour else 0.0
        minutes = _clamp(minutes, 0, max_start)
        quantized = _round_half_up(minutes / snap) * snap
        # snapping up may cross max_start when it is not a multiple of snap
        if quantized > max_start:
            quantized -= snap
        quantized = max(0, quantized)

        start = grid.start_minutes + quantized
        end = start + s.duration_minutes
        return MoveUpdate(day=DAYS[s.day_index], start_time=minutes_to_time(start), end_time=minutes_to_time(end))
