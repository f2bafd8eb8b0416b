"""beo mobile app -- Kivy-based Android interface.

Reuses the core beo modules (models, db, session, assessments) with a
touch-friendly dashboard.  Kivy's ``Clock`` drives the usage timer and the
app's pause/resume callbacks feed the lifecycle bridge.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable

# Ensure the parent package is importable when running standalone on desktop
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from kivy.app import App
from kivy.clock import Clock
from kivy.lang import Builder
from kivy.metrics import dp, sp
from kivy.properties import NumericProperty, StringProperty
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.label import Label
from kivy.uix.popup import Popup
from kivy.uix.screenmanager import Screen, ScreenManager, SlideTransition

from beo import db
from beo.assessments import describe_risk
from beo.constants import HOURLY_LIMIT_MAX, HOURLY_LIMIT_MIN, HOURLY_LIMIT_STEP
from beo.display import format_minutes, format_time
from beo.lifecycle import SyntheticLifecycleSource
from beo.models import Intervention
from beo.scheduler import Cancellable
from beo.session import TrackingSession

log = logging.getLogger(__name__)

_TEXT = (0.878, 0.878, 0.878, 1)          # #e0e0e0


class KivyScheduler:
    """Adapts ``kivy.clock.Clock`` to the beo scheduler protocol.

    Kivy passes the elapsed time to every callback; beo callbacks take no
    arguments, so it is dropped here.  The returned ``ClockEvent`` already
    has the ``cancel()`` the protocol needs.
    """

    def schedule_interval(self, callback: Callable[[], None], interval: float) -> Cancellable:
        """Run *callback* every *interval* seconds on the Kivy main loop."""
        return Clock.schedule_interval(lambda dt: callback(), interval)

    def schedule_once(self, callback: Callable[[], None], delay: float = 0.0) -> Cancellable:
        """Run *callback* once after *delay* seconds (next frame for 0)."""
        return Clock.schedule_once(lambda dt: callback(), delay)


# ---------------------------------------------------------------------------
# Kivy UI definition (KV language)
# ---------------------------------------------------------------------------

KV = """
#:import get_color_from_hex kivy.utils.get_color_from_hex
#:import dp kivy.metrics.dp
#:import sp kivy.metrics.sp

<AccentLabel@Label>:
    color: get_color_from_hex('#6a9fb5')
    font_size: sp(16)
    bold: True
    size_hint_y: None
    height: dp(32)

<DarkButton@Button>:
    background_color: get_color_from_hex('#6a9fb5')
    font_size: sp(14)
    size_hint_y: None
    height: dp(44)
    bold: True

<DashboardScreen>:
    BoxLayout:
        orientation: 'vertical'
        padding: dp(16)
        spacing: dp(10)
        canvas.before:
            Color:
                rgba: get_color_from_hex('#2b2b2b')
            Rectangle:
                pos: self.pos
                size: self.size

        AccentLabel:
            text: 'beo'
            font_size: sp(22)
        Label:
            text: root.risk_text
            font_size: sp(13)
            color: get_color_from_hex('#b5b5b5')
            text_size: self.width, None
            size_hint_y: None
            height: dp(48)
        Label:
            text: 'Session  ' + root.session_text
            font_size: sp(18)
            size_hint_y: None
            height: dp(36)
        Label:
            text: root.hourly_text
            font_size: sp(24)
            bold: True
            size_hint_y: None
            height: dp(48)
        ProgressBar:
            max: 100
            value: root.progress
            size_hint_y: None
            height: dp(20)
        Label:
            text: root.remaining_text
            color: get_color_from_hex('#b5b5b5')
            size_hint_y: None
            height: dp(28)
        Label:
            text: root.stats_text
            font_size: sp(13)
            color: get_color_from_hex('#b5b5b5')
            size_hint_y: None
            height: dp(28)
        Widget:
        DarkButton:
            text: 'Settings'
            on_release: root.go_settings()

<SettingsScreen>:
    BoxLayout:
        orientation: 'vertical'
        padding: dp(16)
        spacing: dp(10)
        canvas.before:
            Color:
                rgba: get_color_from_hex('#2b2b2b')
            Rectangle:
                pos: self.pos
                size: self.size

        AccentLabel:
            text: 'Hourly limit'
        BoxLayout:
            size_hint_y: None
            height: dp(56)
            spacing: dp(8)
            DarkButton:
                text: '-'
                on_release: root.change_limit(-1)
            Label:
                text: root.limit_text
                font_size: sp(22)
            DarkButton:
                text: '+'
                on_release: root.change_limit(1)
        Widget:
        Button:
            text: 'Reset all data'
            size_hint_y: None
            height: dp(44)
            background_color: (0.55, 0.35, 0.35, 1)
            on_release: root.confirm_reset()
        DarkButton:
            text: 'Back'
            on_release: root.go_back()
"""


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------


class DashboardScreen(Screen):
    """Session time, hourly usage against the limit, today's breaks."""

    risk_text = StringProperty("")
    session_text = StringProperty("00:00")
    hourly_text = StringProperty("00:00")
    remaining_text = StringProperty("")
    stats_text = StringProperty("")
    progress = NumericProperty(0)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._refresh_event = None
        self._popup = None

    @property
    def session(self) -> TrackingSession:
        return App.get_running_app().session

    def on_enter(self):
        profile = self.session.profile
        if profile is not None:
            self.risk_text = (
                f"{profile.risk_level.value} risk -- {describe_risk(profile.risk_level)}"
            )
        self.session.open()
        self.refresh()
        self._refresh_event = Clock.schedule_interval(lambda dt: self.refresh(), 1)

    def on_leave(self):
        if self._refresh_event:
            self._refresh_event.cancel()
            self._refresh_event = None
        self.session.close()

    def refresh(self):
        snap = self.session.snapshot()
        self.session_text = format_time(snap.session_seconds)
        self.hourly_text = (
            f"{format_time(snap.hourly_used_seconds)} / {snap.limit_minutes}m"
        )
        self.progress = snap.progress_pct
        self.remaining_text = (
            "Hourly limit reached" if snap.is_over_limit
            else f"{format_time(snap.remaining_seconds)} left this hour"
        )
        stats = db.get_today_stats(self.session.conn)
        self.stats_text = f"Breaks today: {stats.completed} done, {stats.skipped} skipped"

    def show_break(self, intervention: Intervention):
        content = BoxLayout(orientation="vertical", spacing=10, padding=10)
        content.add_widget(Label(
            text=f"{intervention.name} ({format_minutes(intervention.duration_minutes)})",
            font_size=sp(18), bold=True, color=_TEXT,
        ))
        desc = Label(text=intervention.description, font_size=sp(14), color=_TEXT)
        desc.bind(width=lambda i, w: setattr(i, "text_size", (w - dp(8), None)))
        content.add_widget(desc)
        btn_row = BoxLayout(size_hint_y=None, height=dp(44), spacing=8)
        popup = Popup(title="Time for a break", content=content,
                      size_hint=(0.9, 0.5), auto_dismiss=False)

        def respond(completed):
            popup.dismiss()
            self._popup = None
            self.session.coordinator.respond(completed)
            self.refresh()

        done_btn = Button(text="Done")
        done_btn.bind(on_release=lambda _: respond(True))
        skip_btn = Button(text="Skip")
        skip_btn.bind(on_release=lambda _: respond(False))
        btn_row.add_widget(done_btn)
        btn_row.add_widget(skip_btn)
        content.add_widget(btn_row)
        self._popup = popup
        popup.open()

    def go_settings(self):
        self.manager.transition = SlideTransition(direction="left")
        self.manager.current = "settings"


class SettingsScreen(Screen):
    """Hourly limit and full reset."""

    limit_text = StringProperty("")

    @property
    def session(self) -> TrackingSession:
        return App.get_running_app().session

    def on_enter(self):
        self.limit_text = f"{self.session.timer.limit_minutes} min"

    def change_limit(self, direction):
        current = self.session.timer.limit_minutes
        minutes = current + direction * HOURLY_LIMIT_STEP
        if not HOURLY_LIMIT_MIN <= minutes <= HOURLY_LIMIT_MAX:
            return
        self.session.set_hourly_limit(minutes)
        self.limit_text = f"{self.session.timer.limit_minutes} min"

    def confirm_reset(self):
        content = BoxLayout(orientation="vertical", padding=10, spacing=10)
        content.add_widget(Label(
            text="Delete your profile, usage, history and check-ins?",
            font_size=sp(13), color=_TEXT,
        ))
        btn_row = BoxLayout(size_hint_y=None, height=dp(44), spacing=8)
        popup = Popup(title="Reset", content=content, size_hint=(0.85, 0.3))

        def do_reset(_):
            popup.dismiss()
            self.session.full_reset()
            self.limit_text = f"{self.session.timer.limit_minutes} min"

        yes_btn = Button(text="Reset")
        yes_btn.bind(on_release=do_reset)
        no_btn = Button(text="Cancel")
        no_btn.bind(on_release=lambda _: popup.dismiss())
        btn_row.add_widget(yes_btn)
        btn_row.add_widget(no_btn)
        content.add_widget(btn_row)
        popup.open()

    def go_back(self):
        self.manager.transition = SlideTransition(direction="right")
        self.manager.current = "dashboard"


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


class BeoApp(App):
    """Kivy application entry point."""

    title = "beo"

    def build(self):
        Builder.load_string(KV)
        self.lifecycle = SyntheticLifecycleSource()
        self.conn = db.get_connection()
        sm = ScreenManager()
        dashboard = DashboardScreen(name="dashboard")
        self.session = TrackingSession(
            self.conn,
            KivyScheduler(),
            presenter=dashboard.show_break,
            lifecycle=self.lifecycle,
        )
        sm.add_widget(dashboard)
        sm.add_widget(SettingsScreen(name="settings"))
        return sm

    def on_pause(self):
        self.lifecycle.suspended()
        return True

    def on_resume(self):
        self.lifecycle.resumed()

    def on_stop(self):
        self.session.close()
        self.conn.close()


if __name__ == "__main__":
    BeoApp().run()
