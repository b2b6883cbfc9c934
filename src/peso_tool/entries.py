"""Coleccion ordenada de registros dia -> peso, respaldada por un repositorio."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import date, datetime
from typing import Any, Protocol

import pandas as pd
from dateutil import tz
from loguru import logger

from peso_tool.dates import parse_iso, shift
from peso_tool.model import Entry, RepositoryError

_LOCAL_TZ = tz.tzlocal()

_DEMO_SEED: tuple[tuple[int, float], ...] = (
    (-14, 184.6),
    (-10, 183.9),
    (-7, 183.2),
    (-3, 182.8),
)


class EntryRepository(Protocol):
    """Load/save collaborator holding the flat entry snapshot."""

    def load(self) -> list[Any]: ...

    def save(self, records: list[dict[str, Any]]) -> None: ...


def _local_now() -> datetime:
    return datetime.now(tz=_LOCAL_TZ)


class EntryStore:
    """In-memory entries, one per day, always sorted by day."""

    def __init__(
        self,
        repository: EntryRepository,
        *,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._entries: list[Entry] = []

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> int:
        """Rebuild the collection from the repository snapshot.

        Malformed records are dropped. A failing repository leaves the
        store empty instead of raising.

        Returns:
            Number of entries loaded.
        """
        try:
            raw = self._repository.load()
        except RepositoryError as exc:
            logger.warning(f"Could not read entries, starting empty: {exc}")
            raw = []

        load_instant = self._clock()
        by_day: dict[date, Entry] = {}
        dropped = 0
        for item in raw if isinstance(raw, list) else []:
            entry = _entry_from_record(item, load_instant)
            if entry is None:
                dropped += 1
                continue
            by_day[entry.day] = entry

        self._entries = sorted(by_day.values(), key=lambda e: e.day)
        if dropped:
            logger.warning("Dropped malformed entry records", dropped=dropped)
        logger.debug("Entries loaded", count=len(self._entries))
        return len(self._entries)

    def upsert(self, day: date, weight: float) -> Entry:
        """Insert or replace the entry for ``day`` and persist."""
        entry = Entry(day=day, weight=weight, recorded_at=self._clock())
        remaining = [e for e in self._entries if e.day != day]
        remaining.append(entry)
        self._entries = sorted(remaining, key=lambda e: e.day)
        self.persist()
        return entry

    def find(self, day: date) -> Entry | None:
        for entry in self._entries:
            if entry.day == day:
                return entry
        return None

    def recent_window(self, n: int = 7) -> list[Entry]:
        """Last ``n`` entries by day, most recent first."""
        if n <= 0:
            return []
        return list(reversed(self._entries[-n:]))

    def persist(self) -> None:
        """Write the full ordered collection back to the repository."""
        self._repository.save([e.to_record() for e in self._entries])
        logger.debug("Entries persisted", count=len(self._entries))

    def seed_demo(self, today: date) -> bool:
        """Fill an empty store with a few demo entries.

        Returns:
            True when demo data was written.
        """
        if self._entries:
            return False
        now = self._clock()
        self._entries = [
            Entry(day=shift(today, offset), weight=weight, recorded_at=now)
            for offset, weight in _DEMO_SEED
        ]
        self.persist()
        logger.info("Seeded demo entries", count=len(self._entries))
        return True

    def to_frame(self) -> pd.DataFrame:
        """Entries as DataFrame with columns day, weight, recorded_at."""
        if not self._entries:
            return pd.DataFrame(columns=["day", "weight", "recorded_at"])
        return pd.DataFrame(
            {
                "day": [e.day for e in self._entries],
                "weight": [e.weight for e in self._entries],
                "recorded_at": [e.recorded_at for e in self._entries],
            }
        )


def _entry_from_record(item: object, load_instant: datetime) -> Entry | None:
    if not isinstance(item, dict):
        return None
    raw_day = item.get("day", item.get("entryDate"))
    day = parse_iso(raw_day) if isinstance(raw_day, str) else None
    if day is None:
        return None
    weight = item.get("weight")
    if not _is_number(weight):
        return None
    recorded_at = _timestamp_from_ms(item.get("recordedAt", item.get("createdAt")))
    return Entry(
        day=day,
        weight=float(weight),
        recorded_at=recorded_at if recorded_at is not None else load_instant,
    )


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _timestamp_from_ms(value: object) -> datetime | None:
    if not _is_number(value):
        return None
    try:
        return datetime.fromtimestamp(float(value) / 1000, tz=_LOCAL_TZ)
    except (OverflowError, OSError, ValueError):
        return None
