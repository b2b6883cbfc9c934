"""Reconocedor de swipe horizontal de un solo dedo."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from peso_tool.navigation import NavigateNext, NavigatePrev

Point = tuple[float, float]


class Axis(str, Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class SwipeConfig:
    """Thresholds in screen units and milliseconds."""

    dead_zone: float = 10
    min_distance: float = 70
    max_vertical: float = 90
    max_duration_ms: float = 450


@dataclass
class GestureSession:
    start_x: float
    start_y: float
    start_time_ms: float
    dx: float = 0.0
    dy: float = 0.0
    locked_axis: Axis = Axis.NONE


@dataclass(frozen=True)
class DragUpdate:
    """Live horizontal offset; the platform scroll must be suppressed."""

    offset_x: float


@dataclass(frozen=True)
class SnapBack:
    pass


@dataclass(frozen=True)
class Commit:
    command: NavigatePrev | NavigateNext


GestureEvent = DragUpdate | SnapBack | Commit


class GestureRecognizer:
    """Classify pointer movement into drag-follow, commit or snap back."""

    def __init__(self, config: SwipeConfig | None = None) -> None:
        self.config = config or SwipeConfig()
        self.session: GestureSession | None = None

    def start(self, points: Sequence[Point], time_ms: float) -> SnapBack | None:
        """Begin a gesture; a multi-touch start cancels any running one."""
        if len(points) != 1:
            return self.cancel()
        x, y = points[0]
        self.session = GestureSession(start_x=x, start_y=y, start_time_ms=time_ms)
        return None

    def move(self, points: Sequence[Point]) -> DragUpdate | SnapBack | None:
        session = self.session
        if session is None:
            return None
        if len(points) != 1:
            return self.cancel()
        x, y = points[0]
        session.dx = x - session.start_x
        session.dy = y - session.start_y
        if session.locked_axis is Axis.NONE:
            dead = self.config.dead_zone
            if abs(session.dx) < dead and abs(session.dy) < dead:
                return None
            session.locked_axis = (
                Axis.HORIZONTAL if abs(session.dx) > abs(session.dy) else Axis.VERTICAL
            )
        if session.locked_axis is Axis.HORIZONTAL:
            return DragUpdate(offset_x=session.dx)
        return None

    def end(self, point: Point, time_ms: float) -> Commit | SnapBack | None:
        """Finish the gesture and decide commit versus snap back."""
        session = self.session
        if session is None:
            return None
        self.session = None
        dx = point[0] - session.start_x
        dy = point[1] - session.start_y
        elapsed = time_ms - session.start_time_ms
        cfg = self.config
        if (
            session.locked_axis is not Axis.VERTICAL
            and elapsed <= cfg.max_duration_ms
            and abs(dx) >= cfg.min_distance
            and abs(dy) <= cfg.max_vertical
        ):
            return Commit(NavigatePrev() if dx > 0 else NavigateNext())
        return SnapBack()

    def cancel(self) -> SnapBack | None:
        if self.session is None:
            return None
        self.session = None
        return SnapBack()
