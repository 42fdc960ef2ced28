"""Data models for the Conquest agent."""

from .contract import ContractConfig
from .exit import ExitResult, ExitStatus, ExitVerification, PendingExit
from .fleet import (
    BatchResolveResult,
    FleetFailure,
    PendingFleet,
    ResolveResult,
    ResolveStatus,
    SendOptions,
)
from .planet import Location, PlanetInfo, PlanetState, PlanetView

__all__ = [
    "BatchResolveResult",
    "ContractConfig",
    "ExitResult",
    "ExitStatus",
    "ExitVerification",
    "FleetFailure",
    "Location",
    "PendingExit",
    "PendingFleet",
    "PlanetInfo",
    "PlanetState",
    "PlanetView",
    "ResolveResult",
    "ResolveStatus",
    "SendOptions",
]
