from __future__ import annotations

from peso_tool.gesture import (
    Axis,
    Commit,
    DragUpdate,
    GestureRecognizer,
    SnapBack,
    SwipeConfig,
)
from peso_tool.navigation import NavigateNext, NavigatePrev


def _swipe(dx: float, dy: float, elapsed_ms: float) -> object:
    rec = GestureRecognizer()
    rec.start([(200.0, 300.0)], 1000.0)
    rec.move([(200.0 + dx, 300.0 + dy)])
    return rec.end((200.0 + dx, 300.0 + dy), 1000.0 + elapsed_ms)


def test_fast_left_swipe_commits_next() -> None:
    assert _swipe(-80, 5, 200) == Commit(NavigateNext())


def test_fast_right_swipe_commits_prev() -> None:
    assert _swipe(80, -5, 200) == Commit(NavigatePrev())


def test_slow_swipe_snaps_back() -> None:
    assert _swipe(-80, 5, 600) == SnapBack()


def test_short_or_too_vertical_swipe_snaps_back() -> None:
    assert _swipe(-60, 0, 200) == SnapBack()
    assert _swipe(-150, 100, 200) == SnapBack()


def test_dead_zone_then_horizontal_lock() -> None:
    rec = GestureRecognizer()
    rec.start([(0.0, 0.0)], 0.0)
    assert rec.move([(5.0, 3.0)]) is None
    assert rec.session is not None
    assert rec.session.locked_axis is Axis.NONE
    assert rec.move([(-20.0, 4.0)]) == DragUpdate(offset_x=-20.0)
    assert rec.session.locked_axis is Axis.HORIZONTAL
    # The lock is permanent even if the finger drifts vertically.
    assert rec.move([(-25.0, 60.0)]) == DragUpdate(offset_x=-25.0)
    assert rec.session.locked_axis is Axis.HORIZONTAL


def test_vertical_lock_never_drags_or_commits() -> None:
    rec = GestureRecognizer()
    rec.start([(0.0, 0.0)], 0.0)
    assert rec.move([(2.0, 30.0)]) is None
    assert rec.session is not None
    assert rec.session.locked_axis is Axis.VERTICAL
    assert rec.move([(-90.0, 40.0)]) is None
    assert rec.end((-90.0, 40.0), 100.0) == SnapBack()


def test_multi_touch_is_ignored() -> None:
    rec = GestureRecognizer()
    assert rec.start([(0.0, 0.0), (50.0, 0.0)], 0.0) is None
    assert rec.session is None
    assert rec.move([(-90.0, 0.0)]) is None
    assert rec.end((-90.0, 0.0), 100.0) is None


def test_second_finger_cancels_gesture() -> None:
    rec = GestureRecognizer()
    rec.start([(0.0, 0.0)], 0.0)
    rec.move([(-30.0, 0.0)])
    assert rec.move([(-40.0, 0.0), (100.0, 0.0)]) == SnapBack()
    assert rec.session is None


def test_cancel_resets_session() -> None:
    rec = GestureRecognizer()
    rec.start([(0.0, 0.0)], 0.0)
    rec.move([(-40.0, 0.0)])
    assert rec.cancel() == SnapBack()
    assert rec.session is None
    assert rec.end((-100.0, 0.0), 50.0) is None
    assert rec.cancel() is None


def test_custom_thresholds() -> None:
    rec = GestureRecognizer(SwipeConfig(min_distance=40, max_duration_ms=1000))
    rec.start([(0.0, 0.0)], 0.0)
    assert rec.end((45.0, 0.0), 800.0) == Commit(NavigatePrev())
