"""Read-only planet and fleet lookups composed from the other components."""

from ..contracts.clients import read_planet_states
from ..contracts.ledger import LedgerClient
from ..contracts.space_info import SpaceInfo
from ..errors import PlanetNotFoundError
from ..models.contract import ContractConfig
from ..models.exit import PendingExit
from ..models.fleet import PendingFleet
from ..models.planet import PlanetInfo, PlanetView
from ..utils.addresses import addresses_equal
from ..utils.constants import DEFAULT_SEARCH_RADIUS
from ..utils.distance import within_radius
from ..utils.timing import calculate_estimated_arrival_time
from .exits import ExitTracker
from .fleets import FleetManager, require_account


class PlanetQueries:
    """Query facade over spatial info, ledger state, and tracked records."""

    def __init__(
        self,
        ledger: LedgerClient,
        space_info: SpaceInfo,
        contract_config: ContractConfig,
        game_contract: str,
        fleets: FleetManager,
        exits: ExitTracker,
    ):
        self.ledger = ledger
        self.space_info = space_info
        self.contract_config = contract_config
        self.game_contract = game_contract
        self.fleets = fleets
        self.exits = exits

    def get_planet_info(self, planet_id: int) -> PlanetInfo | None:
        return self.space_info.get_planet_info_via_id(planet_id)

    def get_planet_infos(self, planet_ids: list[int]) -> list[PlanetInfo | None]:
        return [self.get_planet_info(planet_id) for planet_id in planet_ids]

    def calculate_distance(self, from_planet_id: int, to_planet_id: int) -> int | None:
        """Distance between two planets, or None if either is unknown."""
        from_planet = self.get_planet_info(from_planet_id)
        to_planet = self.get_planet_info(to_planet_id)
        if from_planet is None or to_planet is None:
            return None
        return self.space_info.distance(from_planet, to_planet)

    def calculate_estimated_arrival_time(self, from_planet_id: int, to_planet_id: int) -> int | None:
        """Arrival estimate for a fleet between two planets, or None if either is unknown."""
        distance = self.calculate_distance(from_planet_id, to_planet_id)
        if distance is None:
            return None
        return calculate_estimated_arrival_time(
            distance, self.contract_config.time_per_distance, self.contract_config.genesis
        )

    async def get_planets_around(self, center_planet_id: int, radius: int) -> list[PlanetView]:
        """Planets within ``radius`` of a center planet, with ledger state and distance.

        Raises:
            PlanetNotFoundError: If the center planet is unknown
        """
        center = self.get_planet_info(center_planet_id)
        if center is None:
            raise PlanetNotFoundError(center_planet_id)

        cx, cy = center.location.x, center.location.y
        planets = [
            planet
            for planet in self.space_info.yield_planets_from_rect(
                cx - radius, cy - radius, cx + radius, cy + radius
            )
            if within_radius(planet.location.x, planet.location.y, cx, cy, radius)
        ]
        states = await read_planet_states(
            self.ledger, self.game_contract, [p.location.id for p in planets]
        )
        return [
            PlanetView(info=planet, state=state, distance=self.space_info.distance(center, planet))
            for planet, state in zip(planets, states)
        ]

    async def get_my_planets(self, radius: int = DEFAULT_SEARCH_RADIUS) -> list[PlanetView]:
        """Planets owned by the signing account within ``radius`` of the origin."""
        account = require_account(self.ledger)
        planets = list(self.space_info.yield_planets_from_rect(-radius, -radius, radius, radius))
        states = await read_planet_states(
            self.ledger, self.game_contract, [p.location.id for p in planets]
        )
        return [
            PlanetView(info=planet, state=state)
            for planet, state in zip(planets, states)
            if addresses_equal(state.owner, account)
        ]

    async def get_pending_fleets(self) -> list[PendingFleet]:
        return await self.fleets.get_my_pending_fleets()

    async def get_pending_exits(self) -> list[PendingExit]:
        return await self.exits.get_my_pending_exits()
