"""
open_capture_core package.

Holds process-wide helpers for the capture runtime that do not belong to a
single feature module.
"""

__all__ = [
    "logger",
]
