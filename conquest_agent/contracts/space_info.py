"""Spatial info service: planet lookup, distance, and rectangle scans.

The agent consumes spatial info through the :class:`SpaceInfo` shape. Planet
generation itself is not modelled here; :class:`StaticSpaceInfo` serves a
fixed catalog of planets, loaded from JSON or built in code.
"""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

from ..models.planet import Location, PlanetInfo
from ..utils.distance import euclidean_distance

# Location ids pack two signed 128-bit coordinates: y in the high half, x in the low half.
COORDINATE_BITS = 128
COORDINATE_MASK = (1 << COORDINATE_BITS) - 1


def location_id(x: int, y: int) -> int:
    """Encode grid coordinates into a uint256 location id."""
    return ((y & COORDINATE_MASK) << COORDINATE_BITS) | (x & COORDINATE_MASK)


def location_coordinates(planet_id: int) -> tuple[int, int]:
    """Decode a location id back into ``(x, y)``."""

    def _signed(value: int) -> int:
        return value - (1 << COORDINATE_BITS) if value >> (COORDINATE_BITS - 1) else value

    return _signed(planet_id & COORDINATE_MASK), _signed(planet_id >> COORDINATE_BITS)


class SpaceInfo(Protocol):
    """Shape of the spatial info collaborator."""

    def get_planet_info_via_id(self, planet_id: int) -> PlanetInfo | None: ...

    def distance(self, a: PlanetInfo, b: PlanetInfo) -> int: ...

    def yield_planets_from_rect(
        self, x0: int, y0: int, x1: int, y1: int
    ) -> Iterator[PlanetInfo]: ...


class StaticSpaceInfo:
    """:class:`SpaceInfo` over a fixed planet catalog."""

    def __init__(self, planets: Iterable[PlanetInfo] = ()):
        self._planets: dict[int, PlanetInfo] = {p.location.id: p for p in planets}

    def __len__(self) -> int:
        return len(self._planets)

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticSpaceInfo":
        """Load a catalog file.

        The file holds a list of planets, each ``{"x": int, "y": int}`` with
        optional ``id``, ``level``, ``lastUpdate`` and ``isHomePlanet`` keys.
        A missing ``id`` is derived from the coordinates.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the JSON is malformed
        """
        with open(path) as f:
            entries = json.load(f)
        if not isinstance(entries, list):
            raise ValueError(f"Planet catalog {path} must contain a list")
        return cls(_planet_from_dict(entry) for entry in entries)

    def add(self, planet: PlanetInfo) -> None:
        self._planets[planet.location.id] = planet

    def get_planet_info_via_id(self, planet_id: int) -> PlanetInfo | None:
        return self._planets.get(planet_id)

    def distance(self, a: PlanetInfo, b: PlanetInfo) -> int:
        return euclidean_distance(a.location.x, a.location.y, b.location.x, b.location.y)

    def yield_planets_from_rect(self, x0: int, y0: int, x1: int, y1: int) -> Iterator[PlanetInfo]:
        """Yield planets inside the rectangle (bounds inclusive), ordered by position."""
        min_x, max_x = sorted((x0, x1))
        min_y, max_y = sorted((y0, y1))
        for planet in sorted(self._planets.values(), key=lambda p: (p.location.y, p.location.x)):
            if min_x <= planet.location.x <= max_x and min_y <= planet.location.y <= max_y:
                yield planet


def _planet_from_dict(data: dict) -> PlanetInfo:
    try:
        x = int(data["x"])
        y = int(data["y"])
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid planet entry: {data!r}") from e
    raw_id = data.get("id")
    if raw_id is None:
        planet_id = location_id(x, y)
    else:
        planet_id = int(raw_id, 0) if isinstance(raw_id, str) else int(raw_id)
    return PlanetInfo(
        location=Location(id=planet_id, x=x, y=y),
        level=int(data.get("level", 0)),
        last_update=int(data.get("lastUpdate", 0)),
        is_home_planet=bool(data.get("isHomePlanet", False)),
    )
