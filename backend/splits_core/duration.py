from __future__ import annotations

SECONDS_PER_DAY = 86400

# Differences between -ROLLOVER_THRESHOLD and 0 are kept as real negative
# durations (clock jitter between timing points), not treated as a wrap.
ROLLOVER_THRESHOLD = 1000


def duration(start_seconds: float, end_seconds: float) -> float:
    """Elapsed seconds between two times of day.

    A 0 on either side means that checkpoint has no recorded time, so the
    duration is 0 as well. A large negative difference is taken to mean the
    end time wrapped past midnight.
    """
    if not start_seconds or not end_seconds:
        return 0.0

    elapsed = end_seconds - start_seconds
    if elapsed < -ROLLOVER_THRESHOLD:
        elapsed += SECONDS_PER_DAY
    return elapsed
