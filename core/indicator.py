"""
Render timer state for the tray indicator and push it to open windows.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from core.session import TimerSnapshot
from shared.errors import CaptureError
from open_capture_core.open_capture_core import logger as app_logger

PAUSED_SUFFIX = " (paused)"


class PresentationSurface(Protocol):
    def set_indicator_text(self, text: str) -> None: ...

    def broadcast(self, snapshot: Dict[str, Any]) -> None: ...


def format_elapsed(elapsed_ms: int) -> str:
    """Format milliseconds as ``HH:MM:SS``, dropping the hours when zero."""
    total_seconds = max(0, int(elapsed_ms)) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_indicator_text(snapshot: TimerSnapshot) -> str:
    if not snapshot.active:
        return ""
    text = format_elapsed(snapshot.elapsed_ms or 0)
    description = snapshot.description.strip()
    if description:
        text = f"{text} - {description}"
    if snapshot.paused:
        text += PAUSED_SUFFIX
    return text


class IndicatorPublisher:
    """
    Pushes formatted text to the presentation surface and the raw snapshot to
    window subscribers. Surface failures are logged, never raised; a failure
    that repeats on every tick is only reported at warning level once.
    """

    def __init__(self, surface: PresentationSurface) -> None:
        self._surface = surface
        self._logger = app_logger.get_logger()
        self._last_failure: Optional[str] = None

    def publish(self, snapshot: TimerSnapshot) -> None:
        text = format_indicator_text(snapshot)
        try:
            self._surface.set_indicator_text(text)
        except (CaptureError, RuntimeError) as exc:
            self._report_failure("Indicator update skipped: {}", exc)
        else:
            self._last_failure = None
        try:
            self._surface.broadcast(snapshot.to_dict())
        except (CaptureError, RuntimeError) as exc:
            self._report_failure("Timer state broadcast skipped: {}", exc)

    def _report_failure(self, message: str, exc: Exception) -> None:
        if str(exc) == self._last_failure:
            self._logger.debug(message, exc)
            return
        self._last_failure = str(exc)
        self._logger.warning(message, exc)
