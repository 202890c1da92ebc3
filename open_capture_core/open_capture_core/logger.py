"""
Logging setup for the Open Capture tray runtime.

Everything logs through one loguru logger. INFO and above goes to stderr for
whoever launched the tray; the full DEBUG stream, including the once-a-second
timer tick and command dispatch lines, only lands in ``core.log`` under
``~/.open-capture/logs``, or under ``$OPEN_CAPTURE_LOG_DIR`` when that is set.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
LOG_DIR = Path(os.environ.get("OPEN_CAPTURE_LOG_DIR", str(Path.home() / ".open-capture" / "logs")))
DEFAULT_LOG_PATH = LOG_DIR / "core.log"


def configure(log_path: Optional[Path] = None) -> None:
    """
    Route loguru to stderr (INFO) and to the rotating ``core.log`` (DEBUG).

    The file rotates at 10 MB and keeps five old files. Sinks are enqueued so
    the command channel and the engine thread never interleave lines. Runs
    once per process; later calls, including a different ``log_path``, are
    ignored.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or DEFAULT_LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level="INFO", enqueue=True)
    _logger.add(
        target,
        level="DEBUG",
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
