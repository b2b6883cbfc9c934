"""Modelos tipados para el diario de peso."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


class RepositoryError(Exception):
    """Raised by the storage layer when the backing medium fails."""


@dataclass(frozen=True)
class Entry:
    """One weight measurement for a calendar day."""

    day: date
    weight: float
    recorded_at: datetime

    def to_record(self) -> dict[str, Any]:
        """Flat record as persisted by the repository."""
        return {
            "day": self.day.isoformat(),
            "weight": self.weight,
            "recordedAt": int(self.recorded_at.timestamp() * 1000),
        }
