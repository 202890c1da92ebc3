"""
Timer session data model.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class Phase(Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    PAUSED = "Paused"


class Destination(Enum):
    INBOX = "Inbox"
    DAILY_NOTE = "DailyNote"

    @classmethod
    def parse(cls, value: "Destination | str | None") -> Optional["Destination"]:
        """
        Accept an enum member, its value, or the human label used by the
        capture bar ("Daily Note"). ``None`` and blank strings yield ``None``.
        """
        if value is None or isinstance(value, Destination):
            return value
        normalised = str(value).replace(" ", "").strip().lower()
        if not normalised:
            return None
        for member in cls:
            if member.value.lower() == normalised:
                return member
        raise ValueError(f"Unknown destination '{value}'.")


@dataclass
class Session:
    """
    The single, process-wide timer session.

    ``accumulated_ms`` holds the time folded in from finished run segments;
    ``running_since`` marks the start of the live segment and is only set
    while running.
    """

    phase: Phase = Phase.IDLE
    description: str = ""
    destination: Optional[Destination] = None
    running_since: Optional[datetime] = None
    accumulated_ms: int = 0

    def elapsed_ms(self, now: datetime) -> int:
        if self.phase is Phase.RUNNING and self.running_since is not None:
            live_ms = int((now - self.running_since).total_seconds() * 1000)
            return self.accumulated_ms + max(0, live_ms)
        return self.accumulated_ms

    def reset(self) -> None:
        self.phase = Phase.IDLE
        self.description = ""
        self.destination = None
        self.running_since = None
        self.accumulated_ms = 0


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view of the session handed to presenters and callers."""

    running: bool
    paused: bool
    description: str
    elapsed_ms: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.running or self.paused

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "running": self.running,
            "paused": self.paused,
            "description": self.description,
        }
        if self.elapsed_ms is not None:
            payload["elapsed"] = self.elapsed_ms
        return payload
