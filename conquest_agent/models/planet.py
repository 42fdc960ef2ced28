"""Planet data models: static spatial info and ledger-observed state."""

from dataclasses import dataclass
from typing import Any

from ..utils.addresses import is_zero_address


@dataclass(frozen=True)
class Location:
    """Planet position on the galaxy grid."""

    id: int  # Location id (uint256)
    x: int
    y: int


@dataclass(frozen=True)
class PlanetInfo:
    """Static planet information from the spatial info service."""

    location: Location
    level: int = 0
    last_update: int = 0
    is_home_planet: bool = False

    @property
    def planet_id(self) -> int:
        return self.location.id


def _field(raw: Any, name: str, default: Any = None) -> Any:
    """Read a struct member from a dict or an attribute-style tuple."""
    if isinstance(raw, dict):
        return raw.get(name, default)
    return getattr(raw, name, default)


@dataclass(frozen=True)
class PlanetState:
    """Planet state as reported by ``getPlanetStates``."""

    owner: str | None
    num_spaceships: int
    active: bool
    exit_start_time: int = 0
    ownership_start_time: int = 0
    last_updated: int = 0

    @property
    def has_owner(self) -> bool:
        return not is_zero_address(self.owner)

    @classmethod
    def from_ledger(cls, raw: Any) -> "PlanetState":
        """Build from a decoded ``ExternalPlanet`` struct."""
        return cls(
            owner=_field(raw, "owner"),
            num_spaceships=int(_field(raw, "numSpaceships", 0)),
            active=bool(_field(raw, "active", False)),
            exit_start_time=int(_field(raw, "exitStartTime", 0)),
            ownership_start_time=int(_field(raw, "ownershipStartTime", 0)),
            last_updated=int(_field(raw, "lastUpdated", 0)),
        )


@dataclass(frozen=True)
class PlanetView:
    """Planet info joined with its ledger state, for query results."""

    info: PlanetInfo
    state: PlanetState | None = None
    distance: int | None = None  # From the query's reference planet
