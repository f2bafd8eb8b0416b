"""Foreground/background handling for the usage timer."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from beo.models import AppState
from beo.timer import UsageTimer

log = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class LifecycleSignalSource(Protocol):
    """Anything that reports host application state changes."""

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


class SyntheticLifecycleSource:
    """A signal source driven by hand (CLI host, tests, Kivy adapter)."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, state: AppState) -> None:
        for listener in list(self._listeners):
            listener(state)

    def suspended(self) -> None:
        self.emit(AppState.BACKGROUND)

    def resumed(self) -> None:
        self.emit(AppState.ACTIVE)


class LifecycleBridge:
    """Saves on suspend and reloads on resume.

    Ticking stops while the app is suspended.  On resume the timer is
    re-initialized from the store, since any amount of wall-clock time may
    have passed, and restarted only if it was running before the suspend
    and *should_run* still agrees.
    """

    def __init__(
        self,
        timer: UsageTimer,
        should_run: Optional[Callable[[], bool]] = None,
        initial_state: AppState = AppState.ACTIVE,
    ) -> None:
        self.timer = timer
        self.state = initial_state
        self._should_run = should_run or (lambda: True)
        self._resume_ticking = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    def attach(self, source: LifecycleSignalSource) -> None:
        self.detach()
        self._unsubscribe = source.subscribe(self.handle_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_change(self, next_state: AppState) -> None:
        previous = self.state
        self.state = next_state

        if previous is AppState.ACTIVE and next_state.is_suspended:
            self._resume_ticking = self.timer.is_running
            log.debug("App suspended (%s); saving timer state", next_state.value)
            # stop() writes synchronously; nothing else is scheduled after this.
            self.timer.stop()
        elif previous.is_suspended and next_state is AppState.ACTIVE:
            log.debug("App resumed; reloading timer state")
            self.timer.initialize()
            if self._resume_ticking and self._should_run():
                self.timer.start()
            self._resume_ticking = False
