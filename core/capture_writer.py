"""
Append captured text to the vault's notes.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from core.output_resolver import OutputResolver
from core.session import Destination
from shared.errors import CaptureError, FilesystemError
from open_capture_core.open_capture_core import logger as app_logger

_LOGGER = app_logger.get_logger()


def append_to_note(path: Path, content: str) -> None:
    """Append ``content`` to ``path``, creating parent folders as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Unable to create folder {path.parent}: {exc}", path.parent) from exc
    try:
        with path.open("a", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        raise FilesystemError(f"Unable to append to {path}: {exc}", path) from exc


class CaptureWriter:
    """
    The capture bar's submit path. Unlike timer recording, failures here are
    reported back to the caller so the bar can keep the unsaved text.
    """

    def __init__(self, resolver: OutputResolver, *, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._resolver = resolver
        self._clock = clock or _local_now

    def append(self, text: str, destination: Destination | str) -> Path:
        if not text or not text.strip():
            raise CaptureError("Nothing to capture.")
        path = self._resolver.resolve(destination, self._clock())
        append_to_note(path, f"\n{text}")
        _LOGGER.info("Captured {} characters to {}", len(text), path)
        return path


def _local_now() -> datetime:
    return datetime.now().astimezone()
