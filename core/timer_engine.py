"""
Interval timer state machine driving the tray indicator and session records.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, QThread, QTimer, Qt, Signal

from core.indicator import IndicatorPublisher
from core.session import Destination, Phase, Session, TimerSnapshot
from core.session_recorder import SessionRecorder
from open_capture_core.open_capture_core import logger as app_logger

TICK_INTERVAL_MS = 1000


@dataclass(frozen=True)
class _SessionWindow:
    destination: Destination
    start: datetime
    end: datetime


class _Invocation:
    """A call handed from a foreign thread to the engine's thread."""

    def __init__(self, method: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        self._method = method
        self._args = args
        self._kwargs = kwargs
        self._result: Any = None
        self._error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self._result = self._method(*self._args, **self._kwargs)
        except Exception as exc:
            self._error = exc

    def outcome(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._result


def _on_engine_thread(method: Callable[..., Any]) -> Callable[..., Any]:
    """
    Run ``method`` on the thread that owns the engine. Callers on other threads
    block until the engine's event loop has executed the call.
    """

    @functools.wraps(method)
    def wrapper(self: "TimerEngine", *args: Any, **kwargs: Any) -> Any:
        if QThread.currentThread() == self.thread():
            return method(self, *args, **kwargs)
        invocation = _Invocation(functools.partial(method, self), args, kwargs)
        self._invoke.emit(invocation)
        return invocation.outcome()

    return wrapper


class TimerEngine(QObject):
    """
    Owns the single timer session and every transition on it.

    Every public operation executes on the engine's own thread, queued through
    the Qt event loop when called from elsewhere, so transitions never overlap
    and the tick timer is only touched by its owner. The one-second tick only
    republishes the elapsed time; it never mutates the session. Recording a
    finished session happens after the session has been reset and can never
    undo the reset.
    """

    _invoke = Signal(object)

    def __init__(
        self,
        publisher: IndicatorPublisher,
        recorder: SessionRecorder,
        *,
        default_destination: Destination = Destination.DAILY_NOTE,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        clock: Optional[Callable[[], datetime]] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._publisher = publisher
        self._recorder = recorder
        self._session = Session()
        self._last_destination = default_destination
        self._clock = clock or _local_now
        self._invoke.connect(self._run_invocation, Qt.ConnectionType.BlockingQueuedConnection)

        self._timer = QTimer(self)
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self._on_tick)  # type: ignore[arg-type]

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def session(self) -> Session:
        """A copy of the current session for inspection."""
        return replace(self._session)

    @property
    def tick_active(self) -> bool:
        return self._timer.isActive()

    @_on_engine_thread
    def set_default_destination(self, destination: Destination) -> None:
        """Destination used by a fresh start that names none."""
        self._last_destination = destination

    @_on_engine_thread
    def start(self, description: str = "", destination: Destination | str | None = None) -> Dict[str, bool]:
        """Begin a new session, or resume a paused one. No-op while running."""
        phase = self._session.phase
        if phase is Phase.RUNNING:
            self._logger.debug("Start ignored; timer already running.")
            return {"running": True}

        target = self._adopt_destination(destination)
        now = self._clock()
        if phase is Phase.PAUSED:
            self._resume(now, description, target)
        else:
            self._session.accumulated_ms = 0
            self._session.running_since = now
            self._session.description = description or ""
            self._session.destination = target or self._last_destination
            self._session.phase = Phase.RUNNING
            self._logger.info(
                "Timer started for '{}' (destination={})",
                self._session.description,
                self._session.destination.value,
            )
        self._timer.start()
        self._publish(now)
        return {"running": True}

    @_on_engine_thread
    def stop(self) -> Dict[str, bool]:
        """End the session from any phase, recording it if it was ever started."""
        self._record(self._end_session())
        return {"running": False}

    @_on_engine_thread
    def toggle_pause(
        self,
        description: Optional[str] = None,
        destination: Destination | str | None = None,
    ) -> Dict[str, bool]:
        """Pause a running session or resume a paused one. No-op while idle."""
        phase = self._session.phase
        if phase is Phase.IDLE:
            self._logger.debug("Pause toggle ignored; no active timer.")
            return {"paused": False}

        target = self._adopt_destination(destination)
        if description:
            self._session.description = description
        if target is not None:
            self._session.destination = target

        now = self._clock()
        if phase is Phase.RUNNING:
            self._timer.stop()
            self._session.accumulated_ms = self._session.elapsed_ms(now)
            self._session.running_since = None
            self._session.phase = Phase.PAUSED
            self._logger.info("Timer paused at {} ms", self._session.accumulated_ms)
            self._publish(now)
            return {"paused": True}

        self._resume(now, None, None)
        self._timer.start()
        self._publish(now)
        return {"paused": False}

    @_on_engine_thread
    def toggle(self, description: str = "", destination: Destination | str | None = None) -> Dict[str, bool]:
        """Stop a running session, otherwise start (or resume) one."""
        if self._session.phase is not Phase.RUNNING:
            return self.start(description, destination)
        return self.stop()

    @_on_engine_thread
    def query(self) -> TimerSnapshot:
        return self._snapshot(self._clock())

    def _run_invocation(self, invocation: _Invocation) -> None:
        invocation.run()

    def _adopt_destination(self, destination: Destination | str | None) -> Optional[Destination]:
        target = Destination.parse(destination)
        if target is not None:
            self._last_destination = target
        return target

    def _resume(self, now: datetime, description: Optional[str], destination: Optional[Destination]) -> None:
        if description:
            self._session.description = description
        if destination is not None:
            self._session.destination = destination
        self._session.running_since = now
        self._session.phase = Phase.RUNNING
        self._logger.info("Timer resumed with {} ms already accrued", self._session.accumulated_ms)

    def _end_session(self) -> Optional[_SessionWindow]:
        self._timer.stop()
        now = self._clock()
        had_start = self._session.phase is not Phase.IDLE
        destination = self._session.destination
        elapsed_ms = self._session.elapsed_ms(now)

        self._session.reset()
        self._publish(now)

        if not had_start or destination is None:
            self._logger.debug("Stop requested with no active timer.")
            return None
        self._logger.info("Timer stopped after {} ms", elapsed_ms)
        return _SessionWindow(
            destination=destination,
            start=now - timedelta(milliseconds=elapsed_ms),
            end=now,
        )

    def _record(self, window: Optional[_SessionWindow]) -> None:
        if window is None:
            return
        try:
            self._recorder.record(window.destination, window.start, window.end)
        except Exception:  # pragma: no cover - recorder already swallows its own errors
            self._logger.exception("Session recorder raised; session was still ended.")

    def _snapshot(self, now: datetime) -> TimerSnapshot:
        phase = self._session.phase
        active = phase is not Phase.IDLE
        return TimerSnapshot(
            running=phase is Phase.RUNNING,
            paused=phase is Phase.PAUSED,
            description=self._session.description,
            elapsed_ms=self._session.elapsed_ms(now) if active else None,
        )

    def _publish(self, now: datetime) -> None:
        self._publisher.publish(self._snapshot(now))

    def _on_tick(self) -> None:
        if self._session.phase is not Phase.RUNNING:
            self._timer.stop()
            return
        snapshot = self._snapshot(self._clock())
        self._logger.debug("Timer tick: {} ms", snapshot.elapsed_ms)
        self._publisher.publish(snapshot)


def _local_now() -> datetime:
    return datetime.now().astimezone()
