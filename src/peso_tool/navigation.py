"""Maquina de estados de navegacion por dia con autoguardado al salir."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from loguru import logger

from peso_tool import dates
from peso_tool.chart import ChartWindow, build_chart_window
from peso_tool.entries import EntryStore
from peso_tool.model import Entry, RepositoryError
from peso_tool.weight import format_weight, parse_weight

MSG_INVALID_WEIGHT = "Invalid weight."
MSG_FUTURE_BLOCKED = "Future dates blocked."
MSG_MISSING_DATE = "Missing date."
MSG_SAVE_FAILED = "Could not save."


@dataclass(frozen=True)
class Viewing:
    """The only state: which day is on screen."""

    selected_day: date


@dataclass(frozen=True)
class NavigatePrev:
    pass


@dataclass(frozen=True)
class NavigateNext:
    pass


@dataclass(frozen=True)
class JumpTo:
    day: date | None


Command = NavigatePrev | NavigateNext | JumpTo


def transition(state: Viewing, command: Command, today: date) -> Viewing | None:
    """Apply a navigation command.

    Returns:
        The new state, or None when the command is rejected (future day or
        missing date).
    """
    if isinstance(command, NavigatePrev):
        return Viewing(dates.shift(state.selected_day, -1))
    if isinstance(command, NavigateNext):
        candidate = dates.shift(state.selected_day, 1)
    elif isinstance(command, JumpTo):
        if command.day is None:
            return None
        candidate = command.day
    else:
        raise TypeError(f"Unknown navigation command: {command!r}")
    if dates.is_future(candidate, today):
        return None
    return Viewing(candidate)


class StatusKind(str, Enum):
    IDLE = "idle"
    SAVED = "saved"
    ERROR = "error"


@dataclass(frozen=True)
class Status:
    """User-visible indicator; ``serial`` identifies who set it."""

    kind: StatusKind = StatusKind.IDLE
    message: str = ""
    serial: int = 0


@dataclass(frozen=True)
class TransitionResult:
    accepted: bool
    state: Viewing
    saved: Entry | None = None

    @property
    def blocked(self) -> bool:
        return not self.accepted


class JournalSession:
    """Owned session state: store, selected day, staged text and status."""

    def __init__(
        self,
        store: EntryStore,
        *,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.store = store
        self._today = today or dates.today
        self.state = Viewing(self._today())
        self.staged_text = self._hydrate(self.state.selected_day)
        self.status = Status()
        self._serial = 0

    @property
    def selected_day(self) -> date:
        return self.state.selected_day

    @property
    def is_today(self) -> bool:
        return self.state.selected_day == self._today()

    def edit(self, text: str) -> None:
        """Stage new input text; any edit resets the status."""
        self.staged_text = text
        self._set_status(StatusKind.IDLE)

    def navigate_prev(self) -> TransitionResult:
        return self.dispatch(NavigatePrev())

    def navigate_next(self) -> TransitionResult:
        return self.dispatch(NavigateNext())

    def jump_to(self, day: date | str | None) -> TransitionResult:
        if isinstance(day, str):
            day = dates.parse_iso(day)
        return self.dispatch(JumpTo(day))

    def dispatch(self, command: Command) -> TransitionResult:
        """Run a navigation command with its side effects.

        On success the staged weight of the day being left is committed
        (when valid), the new day is re-hydrated and the status cleared.
        On rejection nothing changes except the error status.
        """
        next_state = transition(self.state, command, self._today())
        if next_state is None:
            message = (
                MSG_MISSING_DATE
                if isinstance(command, JumpTo) and command.day is None
                else MSG_FUTURE_BLOCKED
            )
            logger.debug("Navigation blocked", command=type(command).__name__)
            self._set_status(StatusKind.ERROR, message)
            return TransitionResult(accepted=False, state=self.state)

        self._set_status(StatusKind.IDLE)
        saved = self._auto_commit()
        self.state = next_state
        self.staged_text = self._hydrate(next_state.selected_day)
        logger.debug(
            "Selected day changed",
            day=next_state.selected_day.isoformat(),
            command=type(command).__name__,
        )
        return TransitionResult(accepted=True, state=next_state, saved=saved)

    def save(self) -> Entry | None:
        """Explicit save of the staged text for the selected day."""
        self._set_status(StatusKind.IDLE)
        day = self.state.selected_day
        if dates.is_future(day, self._today()):
            self._set_status(StatusKind.ERROR, MSG_FUTURE_BLOCKED)
            return None
        parsed = parse_weight(self.staged_text)
        if parsed.value is None:
            self._set_status(StatusKind.ERROR, MSG_INVALID_WEIGHT)
            return None
        entry = self._write(day, parsed.value)
        if entry is None:
            return None
        self.staged_text = format_weight(entry.weight)
        self._set_status(
            StatusKind.SAVED,
            f"Saved {format_weight(entry.weight)} for {dates.format_label(day)}.",
        )
        return entry

    def clear_status(self, serial: int | None = None) -> bool:
        """Reset status to idle unless a newer status replaced ``serial``."""
        if serial is not None and serial != self.status.serial:
            return False
        self._set_status(StatusKind.IDLE)
        return True

    def chart_window(self) -> ChartWindow:
        return build_chart_window(self.store.entries, self.state.selected_day)

    def recent_entries(self, n: int = 7) -> list[Entry]:
        return self.store.recent_window(n)

    def _auto_commit(self) -> Entry | None:
        day = self.state.selected_day
        parsed = parse_weight(self.staged_text)
        if parsed.value is None:
            return None
        existing = self.store.find(day)
        if existing is not None and existing.weight == parsed.value:
            return None
        logger.info("Auto-saving weight", day=day.isoformat(), weight=parsed.value)
        return self._write(day, parsed.value)

    def _write(self, day: date, weight: float) -> Entry | None:
        try:
            return self.store.upsert(day, weight)
        except RepositoryError as exc:
            logger.error(f"Persisting entries failed: {exc}")
            self._set_status(StatusKind.ERROR, MSG_SAVE_FAILED)
            return None

    def _hydrate(self, day: date) -> str:
        entry = self.store.find(day)
        return format_weight(entry.weight) if entry is not None else ""

    def _set_status(self, kind: StatusKind, message: str = "") -> None:
        self._serial += 1
        self.status = Status(kind=kind, message=message, serial=self._serial)
