"""Time arithmetic for fleet arrival and record retention.

All time values are integer seconds. Floats are rejected so a resolve
attempt is never off by a rounding error at the window boundary.
"""

import time

from .constants import SECONDS_PER_DAY


def calculate_estimated_arrival_time(distance: int, time_per_distance: int, genesis: int) -> int:
    """Estimate fleet arrival time.

    Args:
        distance: Integer distance between the two planets
        time_per_distance: Seconds of travel per distance unit (contract config)
        genesis: Game epoch origin (contract config)

    Returns:
        ``genesis + distance * time_per_distance``

    Examples:
        >>> calculate_estimated_arrival_time(10, 60, 1000)
        1600
    """
    for name, value in (
        ("distance", distance),
        ("time_per_distance", time_per_distance),
        ("genesis", genesis),
    ):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if distance < 0:
        raise ValueError(f"Invalid distance: {distance} (must be >= 0)")
    return genesis + distance * time_per_distance


def get_current_timestamp() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


def retention_cutoff(older_than_days: float, now: int) -> int:
    """Timestamp before which terminal records are eligible for cleanup."""
    if older_than_days < 0:
        raise ValueError(f"Invalid older_than_days: {older_than_days} (must be >= 0)")
    return now - int(older_than_days * SECONDS_PER_DAY)
