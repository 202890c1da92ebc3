"""
Core runtime for Open Capture: the timer engine and the note writers it feeds.
"""

from .session import Destination, Phase, Session, TimerSnapshot  # noqa: F401
from .timer_engine import TimerEngine  # noqa: F401
