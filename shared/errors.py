"""
Error taxonomy shared by the timer runtime and the capture append path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CaptureError(Exception):
    """Base class for failures writing captured text or timer records."""


class NoVaultConfigured(CaptureError):
    """Raised when no vault folder has been selected in the settings."""

    def __init__(self, message: str = "No vault selected. Please go to settings.") -> None:
        super().__init__(message)


class PathOutsideVault(CaptureError):
    """Raised when an expanded output template escapes the vault root."""

    def __init__(self, path: Path, vault_root: Path) -> None:
        super().__init__(f"Output path {path} is outside the vault {vault_root}.")
        self.path = path
        self.vault_root = vault_root


class UnknownDestination(CaptureError):
    """Raised when a logical output id has no configured template."""


class FilesystemError(CaptureError):
    """Raised when a directory cannot be created or a note cannot be appended."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class PresentationUnavailable(CaptureError):
    """Raised by a presentation surface that cannot currently show state."""
