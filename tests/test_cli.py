"""Tests for CLI entrypoint."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from peso_tool import cli, dates, navigation
from peso_tool.entries import EntryStore
from peso_tool.storage import AppConfig, EntryBlobRepository, SQLiteStore

_TODAY = date(2026, 10, 16)


@pytest.fixture(autouse=True)
def _fixed_today(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(dates, "today", lambda: _TODAY)


def test_parse_args_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv", ["prog", "--db", "/tmp/x.sqlite3", "--date", "2026-10-01", "--weight", "180"]
    )
    ns = cli.parse_args()
    assert ns.db == "/tmp/x.sqlite3"
    assert ns.date == "2026-10-01"
    assert ns.weight == "180"
    assert ns.log_level is None


def test_main_saves_weight(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = tmp_path / "peso.sqlite3"
    monkeypatch.setattr(
        "sys.argv", ["prog", "--db", str(db), "--date", "2026-10-14", "--weight", "181,2"]
    )
    assert cli.main() == 0
    out = capsys.readouterr().out
    assert "OK: Saved 181.2 for 10.14.26." in out
    assert "10.14.26" in out

    store = EntryStore(EntryBlobRepository(SQLiteStore(db)))
    store.load()
    entry = store.find(date(2026, 10, 14))
    assert entry is not None and entry.weight == 181.2


def test_main_rejects_future_date(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        "sys.argv", ["prog", "--db", str(tmp_path / "p.sqlite3"), "--date", "2026-10-17"]
    )
    assert cli.main() == 1
    assert "Future dates blocked." in capsys.readouterr().out


def test_main_rejects_invalid_weight(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        "sys.argv", ["prog", "--db", str(tmp_path / "p.sqlite3"), "--weight", "0"]
    )
    assert cli.main() == 1
    assert "Invalid weight." in capsys.readouterr().out


def test_main_seeds_demo_data(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = tmp_path / "p.sqlite3"
    SQLiteStore(db).save_config(AppConfig(seed_demo=True))
    monkeypatch.setattr("sys.argv", ["prog", "--db", str(db)])
    assert cli.main() == 0
    out = capsys.readouterr().out
    assert "10.13.26  182.8" in out


def test_window_frame_blank_for_absent_days(tmp_path: Path) -> None:
    store = EntryStore(EntryBlobRepository(SQLiteStore(tmp_path / "p.sqlite3")))
    store.upsert(date(2026, 10, 15), 180.0)
    session = navigation.JournalSession(store)
    frame = cli.window_frame(session)
    assert list(frame["peso"]) == ["", "", "", "", "", "180", "180"]
    assert list(frame["dia"])[-1] == "10.16.26"
