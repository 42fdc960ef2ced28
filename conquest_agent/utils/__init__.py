"""Utility functions and constants for the Conquest agent."""

from .addresses import addresses_equal, is_zero_address, normalize_address
from .constants import (
    DEFAULT_RETENTION_DAYS,
    DEFAULT_SEARCH_RADIUS,
    SECONDS_PER_DAY,
    UINT32_MAX,
    UINT256_MAX,
    ZERO_ADDRESS,
)
from .distance import euclidean_distance, within_radius
from .hashing import compute_fleet_id, compute_to_hash, fleet_id_to_int, generate_secret
from .timing import calculate_estimated_arrival_time, get_current_timestamp, retention_cutoff

__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "DEFAULT_SEARCH_RADIUS",
    "SECONDS_PER_DAY",
    "UINT32_MAX",
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "addresses_equal",
    "calculate_estimated_arrival_time",
    "compute_fleet_id",
    "compute_to_hash",
    "euclidean_distance",
    "fleet_id_to_int",
    "generate_secret",
    "get_current_timestamp",
    "is_zero_address",
    "normalize_address",
    "retention_cutoff",
    "within_radius",
]
