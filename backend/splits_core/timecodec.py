"""Clock-time parsing and compact time formatting."""

from __future__ import annotations

import logging
import math
from typing import Any

from .errors import MalformedFieldError

logger = logging.getLogger(__name__)

ZERO_TIME = "00:00:00"
DIFF_PLACEHOLDER = " "


def to_number(value: Any) -> float:
    """Strict numeric conversion used for provider fields."""
    if isinstance(value, bool):
        raise MalformedFieldError(f"unexpected boolean {value!r}")
    if not isinstance(value, (int, float)):
        value = str(value if value is not None else "").strip()
    try:
        number = float(value)
    except (ValueError, OverflowError) as exc:
        raise MalformedFieldError(f"not a number: {value!r}") from exc
    if math.isnan(number) or math.isinf(number):
        raise MalformedFieldError(f"not a finite number: {value!r}")
    return number


def lenient_number(value: Any) -> float:
    """Like :func:`to_number` but malformed input degrades to 0."""
    try:
        return to_number(value)
    except MalformedFieldError as exc:
        logger.debug("Treating malformed field as 0 (%s)", exc)
        return 0.0


def parse_time(time_string: str | None, decile_string: str | None) -> float:
    """Convert ``HH:MM:SS`` plus a tenths digit into seconds.

    Empty strings and the ``00:00:00`` sentinel mean "no time recorded" and
    return 0. Hours may run past 23 on multi-lap events.
    """
    text = "" if time_string is None else str(time_string).strip()
    if not text or text == ZERO_TIME:
        return 0.0

    parts = [lenient_number(part) for part in text.split(":")][-3:]
    while len(parts) < 3:
        parts.insert(0, 0.0)
    hours, minutes, seconds = parts

    decile_text = "" if decile_string is None else str(decile_string).strip()
    decile = lenient_number(decile_text) if decile_text else 0.0
    total = hours * 3600 + minutes * 60 + seconds + decile / 10
    return total if math.isfinite(total) else 0.0


def format_time(seconds: float | None) -> str:
    """Render seconds as ``H:MM:SS.d``, ``M:SS.d`` or ``S.d``."""
    if seconds is None or not math.isfinite(seconds) or seconds == 0:
        return "0.0"

    sign = "-" if seconds < 0 else ""
    scaled = abs(seconds) * 10
    if not math.isfinite(scaled):
        return "0.0"
    tenths = int(round(scaled))
    if tenths == 0:
        return "0.0"

    hours, tenths = divmod(tenths, 36000)
    minutes, tenths = divmod(tenths, 600)
    secs = tenths / 10

    if hours:
        return f"{sign}{hours}:{minutes:02d}:{secs:04.1f}"
    if minutes:
        return f"{sign}{minutes}:{secs:04.1f}"
    return f"{sign}{secs:.1f}"


def format_diff(delta: float) -> str:
    """Signed gap to the leader, or the blank placeholder for no gap."""
    if delta == 0:
        return DIFF_PLACEHOLDER
    prefix = "+" if delta > 0 else "-"
    return prefix + format_time(abs(delta))
