"""CLI para registrar el peso del dia y ver la ventana de 7 dias."""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from peso_tool.dates import format_label
from peso_tool.entries import EntryStore
from peso_tool.logger import setup_logger
from peso_tool.navigation import JournalSession, StatusKind
from peso_tool.storage import DEFAULT_DB_PATH, EntryBlobRepository, SQLiteStore
from peso_tool.weight import format_weight


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Diario de peso: una medicion por dia."
    )
    parser.add_argument(
        "--db",
        default=str(DEFAULT_DB_PATH),
        help="Base SQLite (default: ~/.peso_tool/peso_tool.sqlite3).",
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Dia a mostrar/editar en formato YYYY-MM-DD (default: hoy).",
    )
    parser.add_argument(
        "--weight",
        default=None,
        help="Peso a guardar para el dia seleccionado.",
    )
    parser.add_argument("--log-level", default=None, help="Nivel de log.")
    return parser.parse_args()


def main() -> int:
    """Run the journal CLI.

    Returns:
        Exit code (0 on success, 1 when the date or weight is rejected).
    """
    ns = parse_args()
    store = SQLiteStore(Path(ns.db).expanduser().resolve())
    config = store.load_config()
    setup_logger(level=ns.log_level or config.log_level)

    entries = EntryStore(EntryBlobRepository(store))
    entries.load()
    session = JournalSession(entries)
    if config.seed_demo:
        entries.seed_demo(session.selected_day)

    if ns.date is not None and not session.jump_to(ns.date).accepted:
        print(f"ERROR: {session.status.message}")
        return 1

    if ns.weight is not None:
        session.edit(ns.weight)
        if session.save() is None:
            print(f"ERROR: {session.status.message}")
            return 1

    if session.status.kind is StatusKind.SAVED:
        print(f"OK: {session.status.message}")
    print(f"Dia: {format_label(session.selected_day)}")
    print(window_frame(session).to_string(index=False))
    axis = session.chart_window().axis
    print(f"Eje: {axis.y_min:.1f} .. {axis.y_max:.1f} (paso {axis.tick_step})")
    print("Recientes:")
    for entry in session.recent_entries():
        print(f"  {format_label(entry.day)}  {format_weight(entry.weight)}")
    return 0


def window_frame(session: JournalSession) -> pd.DataFrame:
    """Chart window as a printable DataFrame."""
    window = session.chart_window()
    return pd.DataFrame(
        {
            "dia": list(window.labels),
            "peso": [
                "" if value is None else format_weight(value) for value in window.values
            ],
        }
    )
