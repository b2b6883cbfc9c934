"""App Kivy: peso del dia con swipe entre dias y grafico de 7 dias."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from peso_tool.chart import render_chart
from peso_tool.dates import format_iso, format_label
from peso_tool.entries import EntryStore
from peso_tool.gesture import Commit, DragUpdate, GestureEvent, GestureRecognizer
from peso_tool.logger import setup_logger
from peso_tool.navigation import JournalSession, NavigateNext, StatusKind
from peso_tool.storage import DEFAULT_DB_PATH, EntryBlobRepository, SQLiteStore
from peso_tool.weight import format_weight

_WEIGHT_CHARS = frozenset("0123456789.,")

SLIDE_SECONDS = 0.14
SLIDE_FRACTION = 0.3
TODAY_COLOR = (0.2, 0.55, 1, 1)
DEFAULT_COLOR = (1, 1, 1, 1)
STATUS_COLORS = {
    StatusKind.IDLE: (0.8, 0.8, 0.8, 1),
    StatusKind.SAVED: (0.3, 0.8, 0.4, 1),
    StatusKind.ERROR: (0.95, 0.35, 0.3, 1),
}


def weight_input_filter(substring: str, from_undo: bool) -> str:
    """Keep digits and either decimal separator in the weight box."""
    return "".join(ch for ch in substring if ch in _WEIGHT_CHARS)


def run_app(db_path: Path = DEFAULT_DB_PATH) -> int:
    """Lanza la app Kivy."""
    from kivy.animation import Animation
    from kivy.app import App
    from kivy.clock import Clock
    from kivy.graphics import Color, Line, Mesh
    from kivy.uix.boxlayout import BoxLayout
    from kivy.uix.button import Button
    from kivy.uix.floatlayout import FloatLayout
    from kivy.uix.label import Label
    from kivy.uix.popup import Popup
    from kivy.uix.textinput import TextInput
    from kivy.uix.widget import Widget

    class LineChart(BoxLayout):
        """ChartRenderer drawing a filled line on the canvas."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(orientation="vertical", **kwargs)
            self.plot = Widget()
            self.axis_label = Label(size_hint_y=None, height=20, font_size=12)
            self.labels_row = BoxLayout(size_hint_y=None, height=20)
            self.add_widget(self.axis_label)
            self.add_widget(self.plot)
            self.add_widget(self.labels_row)
            self._values: list[float | None] = []
            self._y_min = 0.0
            self._y_max = 1.0
            self.plot.bind(pos=self._redraw, size=self._redraw)

        def render(
            self,
            labels: Sequence[str],
            values: Sequence[float | None],
            y_min: float,
            y_max: float,
            tick_step: int,
        ) -> None:
            self._values = list(values)
            self._y_min = y_min
            self._y_max = y_max
            self.axis_label.text = f"{y_min:.1f} - {y_max:.1f}  (paso {tick_step})"
            self.labels_row.clear_widgets()
            for text in labels:
                self.labels_row.add_widget(Label(text=text, font_size=11))
            self._redraw()

        def _point(self, index: int, value: float) -> tuple[float, float]:
            plot = self.plot
            steps = max(len(self._values) - 1, 1)
            span = (self._y_max - self._y_min) or 1.0
            x = plot.x + plot.width * index / steps
            y = plot.y + plot.height * (value - self._y_min) / span
            return x, y

        def _redraw(self, *_args: object) -> None:
            self.plot.canvas.clear()
            segments: list[list[tuple[float, float]]] = [[]]
            for index, value in enumerate(self._values):
                if value is None:
                    if segments[-1]:
                        segments.append([])
                    continue
                segments[-1].append(self._point(index, value))
            with self.plot.canvas:
                for segment in segments:
                    if not segment:
                        continue
                    Color(0.2, 0.55, 1, 0.25)
                    vertices: list[float] = []
                    for x, y in segment:
                        vertices.extend([x, self.plot.y, 0, 0, x, y, 0, 0])
                    Mesh(
                        vertices=vertices,
                        indices=list(range(len(vertices) // 4)),
                        mode="triangle_strip",
                    )
                    Color(0.2, 0.55, 1, 1)
                    Line(points=[c for p in segment for c in p], width=2)

    class SwipeStage(FloatLayout):
        """Feeds touches to the gesture recognizer and moves the track."""

        def __init__(self, app: PesoApp, track: Widget, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.app = app
            self.track = track
            self.recognizer = GestureRecognizer(app.app_config.swipe_config())
            self._touches: list[object] = []
            self.add_widget(track)
            self.bind(pos=self._layout_track, size=self._layout_track)

        def _layout_track(self, *_args: object) -> None:
            self.track.size = self.size
            self.track.pos = self.pos

        def _points(self) -> list[tuple[float, float]]:
            return [tuple(t.pos) for t in self._touches]  # type: ignore[attr-defined]

        def on_touch_down(self, touch: object) -> bool:
            if not self.collide_point(*touch.pos):  # type: ignore[attr-defined]
                return super().on_touch_down(touch)
            touch.grab(self)  # type: ignore[attr-defined]
            self._touches.append(touch)
            event = self.recognizer.start(
                self._points(), touch.time_start * 1000  # type: ignore[attr-defined]
            )
            self._apply(event)
            return super().on_touch_down(touch)

        def on_touch_move(self, touch: object) -> bool:
            if touch.grab_current is not self:  # type: ignore[attr-defined]
                return super().on_touch_move(touch)
            event = self.recognizer.move(self._points())
            self._apply(event)
            return isinstance(event, DragUpdate)

        def on_touch_up(self, touch: object) -> bool:
            if touch.grab_current is not self:  # type: ignore[attr-defined]
                return super().on_touch_up(touch)
            touch.ungrab(self)  # type: ignore[attr-defined]
            if touch in self._touches:
                self._touches.remove(touch)
            event = self.recognizer.end(
                tuple(touch.pos), touch.time_end * 1000  # type: ignore[attr-defined]
            )
            self._apply(event)
            return event is not None

        def _apply(self, event: GestureEvent | None) -> None:
            if event is None:
                return
            if isinstance(event, DragUpdate):
                Animation.cancel_all(self.track)
                self.track.x = self.x + event.offset_x
                return
            if isinstance(event, Commit):
                result = self.app.session.dispatch(event.command)
                self.app.refresh()
                if result.accepted:
                    direction = 1 if isinstance(event.command, NavigateNext) else -1
                    self.track.x = self.x + direction * self.width * SLIDE_FRACTION
            Animation.cancel_all(self.track)
            Animation(x=self.x, duration=SLIDE_SECONDS, t="out_quad").start(self.track)

    class PesoApp(App):
        """Main Kivy app."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.store = SQLiteStore(db_path)
            self.app_config = self.store.load_config()
            setup_logger(level=self.app_config.log_level)
            entries = EntryStore(EntryBlobRepository(self.store))
            entries.load()
            self.session = JournalSession(entries)
            if self.app_config.seed_demo:
                entries.seed_demo(self.session.selected_day)
            self._syncing = False
            self.weight_input: TextInput | None = None
            self.date_button: Button | None = None
            self.status: Label | None = None
            self.recent: Label | None = None
            self.chart: LineChart | None = None

        def build(self) -> BoxLayout:
            root = BoxLayout(orientation="vertical", spacing=8, padding=10)

            track = BoxLayout(orientation="vertical", spacing=6)
            self.weight_input = TextInput(
                multiline=False,
                input_filter=weight_input_filter,
                halign="center",
                font_size=48,
                size_hint_y=None,
                height=80,
            )
            self.weight_input.bind(text=self._on_text)
            self.weight_input.bind(on_text_validate=self._on_save)
            track.add_widget(self.weight_input)
            self.date_button = Button(size_hint_y=None, height=40)
            self.date_button.bind(on_press=self._open_date_popup)
            track.add_widget(self.date_button)
            self.chart = LineChart()
            track.add_widget(self.chart)
            root.add_widget(SwipeStage(self, track))

            save_btn = Button(text="Guardar", size_hint_y=None, height=44)
            save_btn.bind(on_press=self._on_save)
            root.add_widget(save_btn)

            self.status = Label(text="", size_hint_y=None, height=30)
            root.add_widget(self.status)
            self.recent = Label(text="", size_hint_y=None, height=150, valign="top")
            root.add_widget(self.recent)

            self.refresh()
            return root

        def refresh(self) -> None:
            """Render every view from the session state."""
            session = self.session
            if self.weight_input is not None:
                self._syncing = True
                self.weight_input.text = session.staged_text
                self._syncing = False
                self.weight_input.foreground_color = (
                    TODAY_COLOR if session.is_today else DEFAULT_COLOR
                )
            if self.date_button is not None:
                self.date_button.text = format_label(session.selected_day)
            if self.chart is not None:
                render_chart(session.chart_window(), self.chart)
            if self.recent is not None:
                self.recent.text = "\n".join(
                    f"{format_label(e.day)}    {format_weight(e.weight)}"
                    for e in session.recent_entries()
                )
            self._render_status()

        def _render_status(self) -> None:
            status = self.session.status
            if self.status is not None:
                self.status.text = status.message
                self.status.color = STATUS_COLORS[status.kind]
            if status.kind is not StatusKind.IDLE:
                serial = status.serial
                Clock.schedule_once(
                    lambda _dt: self._expire_status(serial),
                    self.app_config.feedback_ms / 1000,
                )

        def _expire_status(self, serial: int) -> None:
            if self.session.clear_status(serial) and self.status is not None:
                self.status.text = ""
                self.status.color = STATUS_COLORS[StatusKind.IDLE]

        def _on_text(self, _instance: object, text: str) -> None:
            if self._syncing:
                return
            self.session.edit(text)
            self._render_status()

        def _on_save(self, *_args: object) -> None:
            entry = self.session.save()
            if entry is not None:
                logger.info("Saved weight", day=format_iso(entry.day), weight=entry.weight)
            self.refresh()

        def _open_date_popup(self, _: object) -> None:
            content = BoxLayout(orientation="vertical", spacing=8, padding=8)
            day_input = TextInput(
                text=format_iso(self.session.selected_day),
                multiline=False,
                size_hint_y=None,
                height=40,
            )
            content.add_widget(Label(text="Fecha (YYYY-MM-DD)"))
            content.add_widget(day_input)
            buttons = BoxLayout(orientation="horizontal", size_hint_y=None, height=40)
            cancel_btn = Button(text="Cancelar")
            go_btn = Button(text="Ir")
            buttons.add_widget(cancel_btn)
            buttons.add_widget(go_btn)
            content.add_widget(buttons)
            popup = Popup(title="Elegir dia", content=content, size_hint=(0.8, 0.4))

            def apply_selection(*_: object) -> None:
                self.session.jump_to(day_input.text)
                popup.dismiss()
                self.refresh()

            cancel_btn.bind(on_press=lambda *_args: popup.dismiss())
            go_btn.bind(on_press=apply_selection)
            day_input.bind(on_text_validate=apply_selection)
            popup.open()

    PesoApp().run()
    return 0
