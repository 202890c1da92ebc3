"""
Date placeholder expansion for note path templates.

Templates use the ``{{date}}`` / ``{{date:FORMAT}}`` notation familiar from
Markdown vault tools. FORMAT understands moment-style tokens; everything else
is copied literally.
"""

from __future__ import annotations

import re
from datetime import datetime

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"

_PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*date(?::([^}]*))?\s*\}\}")
# Longest tokens first so that "MMMM" wins over "MM".
_TOKEN_PATTERN = re.compile(r"YYYY|YY|MMMM|MMM|MM|DD|dddd|ddd|HH|mm|ss")

_TOKEN_FORMATTERS = {
    "YYYY": lambda value: f"{value.year:04d}",
    "YY": lambda value: f"{value.year % 100:02d}",
    "MMMM": lambda value: value.strftime("%B"),
    "MMM": lambda value: value.strftime("%b"),
    "MM": lambda value: f"{value.month:02d}",
    "DD": lambda value: f"{value.day:02d}",
    "dddd": lambda value: value.strftime("%A"),
    "ddd": lambda value: value.strftime("%a"),
    "HH": lambda value: f"{value.hour:02d}",
    "mm": lambda value: f"{value.minute:02d}",
    "ss": lambda value: f"{value.second:02d}",
}


def format_date(value: datetime, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Render ``value`` using moment-style tokens."""
    return _TOKEN_PATTERN.sub(lambda match: _TOKEN_FORMATTERS[match.group(0)](value), date_format)


def expand_template(template: str, now: datetime) -> str:
    """Replace every date placeholder in ``template`` with ``now`` formatted."""

    def _replace(match: re.Match) -> str:
        date_format = (match.group(1) or "").strip() or DEFAULT_DATE_FORMAT
        return format_date(now, date_format)

    return _PLACEHOLDER_PATTERN.sub(_replace, template)
