"""Ventana de 7 dias para el grafico y escalado del eje Y.

The y axis is deliberately oversized: it spans three times the data range
with a small headroom above the peak, so the plotted line sits in the top
third of the chart and small day-to-day changes stay visible.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

import pandas as pd

from peso_tool.dates import format_label, shift
from peso_tool.model import Entry

WINDOW_DAYS = 7
HEADROOM = 0.2
AXIS_SPAN = 3.0
MIN_RANGE = 1.0


@dataclass(frozen=True)
class AxisBounds:
    y_min: float
    y_max: float
    tick_step: int
    data_range: float


@dataclass(frozen=True)
class ChartWindow:
    """Seven points, oldest first; None marks a day with nothing to plot."""

    days: tuple[date, ...]
    labels: tuple[str, ...]
    values: tuple[float | None, ...]
    axis: AxisBounds


class ChartRenderer(Protocol):
    def render(
        self,
        labels: Sequence[str],
        values: Sequence[float | None],
        y_min: float,
        y_max: float,
        tick_step: int,
    ) -> None: ...


def build_chart_window(entries: Iterable[Entry], selected_day: date) -> ChartWindow:
    """Trailing window ``[selected_day-6 .. selected_day]`` with forward fill.

    Gaps reuse the last value seen earlier in the window. Leading gaps stay
    empty; values from before the window are not carried in.
    """
    start = shift(selected_day, -(WINDOW_DAYS - 1))
    calendar = pd.date_range(start=start, end=selected_day, freq="D").date
    weights = pd.Series(
        {e.day: e.weight for e in entries if start <= e.day <= selected_day},
        dtype="float64",
    )
    filled = weights.reindex(calendar).ffill()
    values = tuple(None if pd.isna(v) else float(v) for v in filled)
    days = tuple(calendar)
    return ChartWindow(
        days=days,
        labels=tuple(format_label(d) for d in days),
        values=values,
        axis=axis_bounds(values),
    )


def axis_bounds(values: Sequence[float | None]) -> AxisBounds:
    """Upper-third axis placement for the present values."""
    present = [v for v in values if v is not None]
    data_min = min(present) if present else 0.0
    data_max = max(present) if present else 1.0
    data_range = max(data_max - data_min, MIN_RANGE)
    y_max = data_max + HEADROOM * data_range
    y_min = y_max - AXIS_SPAN * data_range
    return AxisBounds(
        y_min=y_min,
        y_max=y_max,
        tick_step=max(1, _round_half_up(data_range / 2)),
        data_range=data_range,
    )


def render_chart(window: ChartWindow, renderer: ChartRenderer) -> None:
    renderer.render(
        list(window.labels),
        list(window.values),
        window.axis.y_min,
        window.axis.y_max,
        window.axis.tick_step,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
