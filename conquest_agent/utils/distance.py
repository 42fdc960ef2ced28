"""Distance calculations for the galaxy map."""

import math


def euclidean_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """Calculate the Euclidean distance between two points, truncated.

    Uses an exact integer square root so large coordinates never go through
    floating point.

    Args:
        x1: X coordinate of first point
        y1: Y coordinate of first point
        x2: X coordinate of second point
        y2: Y coordinate of second point

    Returns:
        ``floor(sqrt(dx^2 + dy^2))``

    Examples:
        >>> euclidean_distance(0, 0, 6, 8)
        10
        >>> euclidean_distance(0, 0, 1, 1)
        1
    """
    dx = x2 - x1
    dy = y2 - y1
    return math.isqrt(dx * dx + dy * dy)


def within_radius(x: int, y: int, center_x: int, center_y: int, radius: int) -> bool:
    """Check whether a point lies inside the circle (boundary included)."""
    dx = x - center_x
    dy = y - center_y
    return dx * dx + dy * dy <= radius * radius
