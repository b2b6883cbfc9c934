from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

import pytest

from peso_tool.chart import axis_bounds, build_chart_window, render_chart
from peso_tool.model import Entry

_AT = datetime(2026, 1, 1, 8, 0)


def _entry(day: date, weight: float) -> Entry:
    return Entry(day=day, weight=weight, recorded_at=_AT)


def test_window_without_history() -> None:
    window = build_chart_window([], date(2026, 3, 10))
    assert window.values == (None,) * 7
    assert window.days[0] == date(2026, 3, 4)
    assert window.days[-1] == date(2026, 3, 10)
    assert window.labels[-1] == "03.10.26"
    assert window.axis.data_range == 1.0
    assert window.axis.y_max == pytest.approx(1.2)
    assert window.axis.y_min == pytest.approx(-1.8)
    assert window.axis.tick_step == 1


def test_single_entry_on_third_day_forward_fills() -> None:
    selected = date(2026, 3, 10)
    window = build_chart_window([_entry(date(2026, 3, 6), 182.4)], selected)
    assert window.values == (None, None, 182.4, 182.4, 182.4, 182.4, 182.4)


def test_forward_fill_uses_latest_seen_value() -> None:
    entries = [
        _entry(date(2026, 3, 4), 180.0),
        _entry(date(2026, 3, 7), 181.5),
        _entry(date(2026, 3, 9), 179.0),
    ]
    window = build_chart_window(entries, date(2026, 3, 10))
    assert window.values == (180.0, 180.0, 180.0, 181.5, 181.5, 179.0, 179.0)


def test_values_before_window_are_not_carried_in() -> None:
    entries = [_entry(date(2026, 2, 20), 190.0), _entry(date(2026, 3, 12), 185.0)]
    window = build_chart_window(entries, date(2026, 3, 10))
    assert window.values == (None,) * 7


def test_window_crosses_year_boundary() -> None:
    window = build_chart_window([_entry(date(2025, 12, 31), 170.0)], date(2026, 1, 2))
    assert window.days[0] == date(2025, 12, 27)
    assert window.values[-3:] == (170.0, 170.0, 170.0)


def test_axis_bounds_upper_third() -> None:
    axis = axis_bounds([180.0, None, 184.0])
    assert axis.data_range == pytest.approx(4.0)
    assert axis.y_max == pytest.approx(184.8)
    assert axis.y_min == pytest.approx(172.8)
    assert axis.tick_step == 2


def test_axis_bounds_flat_series_uses_unit_range() -> None:
    axis = axis_bounds([180.0, 180.0])
    assert axis.data_range == 1.0
    assert axis.y_max == pytest.approx(180.2)
    assert axis.y_min == pytest.approx(177.2)


def test_tick_step_rounds_half_up() -> None:
    assert axis_bounds([100.0, 105.0]).tick_step == 3
    assert axis_bounds([100.0, 103.0]).tick_step == 2


def test_render_chart_passes_absent_values_through() -> None:
    captured: dict[str, object] = {}

    class _Renderer:
        def render(
            self,
            labels: Sequence[str],
            values: Sequence[float | None],
            y_min: float,
            y_max: float,
            tick_step: int,
        ) -> None:
            captured.update(labels=labels, values=values, y_min=y_min, y_max=y_max)

    window = build_chart_window([_entry(date(2026, 3, 9), 181.0)], date(2026, 3, 10))
    render_chart(window, _Renderer())
    assert captured["values"] == [None, None, None, None, None, 181.0, 181.0]
    assert len(captured["labels"]) == 7  # type: ignore[arg-type]
    assert captured["y_max"] == pytest.approx(181.2)
