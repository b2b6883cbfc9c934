"""Shared fixtures for peso_tool tests."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pytest

from peso_tool.entries import EntryStore
from peso_tool.model import RepositoryError

TODAY = date(2026, 10, 16)
NOW = datetime(2026, 10, 16, 7, 30)


class MemoryRepository:
    """In-memory repository recording every saved snapshot."""

    def __init__(self, records: list[Any] | None = None) -> None:
        self.records: list[Any] = list(records or [])
        self.saves: list[list[dict[str, Any]]] = []
        self.fail_load = False
        self.fail_save = False

    def load(self) -> list[Any]:
        if self.fail_load:
            raise RepositoryError("boom")
        return list(self.records)

    def save(self, records: list[dict[str, Any]]) -> None:
        if self.fail_save:
            raise RepositoryError("disk full")
        self.saves.append(records)
        self.records = list(records)


@pytest.fixture
def repo() -> MemoryRepository:
    return MemoryRepository()


@pytest.fixture
def store(repo: MemoryRepository) -> EntryStore:
    entries = EntryStore(repo, clock=lambda: NOW)
    entries.load()
    return entries
