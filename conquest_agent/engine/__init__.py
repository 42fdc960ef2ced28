"""Protocol engine: fleet commit/reveal, exit tracking, and queries."""

from .exits import ExitTracker
from .fleets import FleetManager, require_account
from .queries import PlanetQueries
from .staking import AcquireResult, acquire_planets

__all__ = [
    "AcquireResult",
    "ExitTracker",
    "FleetManager",
    "PlanetQueries",
    "acquire_planets",
    "require_account",
]
