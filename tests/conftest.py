"""Shared fixtures: fake ledger, fixed planet catalog, controllable clock."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from conquest_agent.contracts.ledger import ContractCall, PreparedRequest
from conquest_agent.contracts.space_info import StaticSpaceInfo
from conquest_agent.engine.exits import ExitTracker
from conquest_agent.engine.fleets import FleetManager
from conquest_agent.engine.queries import PlanetQueries
from conquest_agent.errors import LedgerError
from conquest_agent.models.contract import ContractConfig
from conquest_agent.models.planet import Location, PlanetInfo
from conquest_agent.storage.memory import MemoryFleetStorage
from conquest_agent.utils.addresses import normalize_address
from conquest_agent.utils.constants import ZERO_ADDRESS

GAME_CONTRACT = normalize_address("0x" + "ab" * 20)
ALICE = normalize_address("0x" + "11" * 20)
BOB = normalize_address("0x" + "22" * 20)
CAROL = normalize_address("0x" + "33" * 20)

GENESIS = 1000
TIME_PER_DISTANCE = 60
RESOLVE_WINDOW = 300
EXIT_DURATION = 3600


class FakeClock:
    """Callable clock whose time tests set directly."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@dataclass
class FakeLedger:
    """In-memory stand-in for the ledger client.

    ``planet_states`` maps planet id -> ExternalPlanet-like dict. Calls are
    recorded so tests can assert what was simulated and broadcast.
    """

    account: str | None = ALICE
    planet_states: dict[int, dict] = field(default_factory=dict)
    config: dict[str, int] = field(
        default_factory=lambda: {
            "genesis": GENESIS,
            "resolveWindow": RESOLVE_WINDOW,
            "timePerDistance": TIME_PER_DISTANCE,
            "exitDuration": EXIT_DURATION,
            "acquireNumSpaceships": 100000,
            "giftTaxPer10000": 2000,
        }
    )
    fail_simulate: set[str] = field(default_factory=set)  # function names
    fail_write: set[str] = field(default_factory=set)  # function names
    fail_resolve_ids: set[int] = field(default_factory=set)  # fleet ids as uint256
    receipt_errors: list[LedgerError] = field(default_factory=list)  # raised in order
    reads: list[tuple[str, tuple]] = field(default_factory=list)
    simulated: list[ContractCall] = field(default_factory=list)
    written: list[ContractCall] = field(default_factory=list)
    receipts: list[str] = field(default_factory=list)

    def set_planet(
        self, planet_id: int, owner: str = ZERO_ADDRESS, num_spaceships: int = 0, active: bool = True
    ) -> None:
        self.planet_states[planet_id] = {
            "owner": owner,
            "numSpaceships": num_spaceships,
            "active": active,
            "exitStartTime": 0,
            "ownershipStartTime": 0,
            "lastUpdated": 0,
        }

    async def read(self, address: str, abi: list[dict], function_name: str, args: tuple = ()) -> Any:
        self.reads.append((function_name, args))
        if function_name == "getConfig":
            return dict(self.config)
        if function_name == "getPlanetStates":
            (planet_ids,) = args
            return [
                self.planet_states.get(
                    pid, {"owner": ZERO_ADDRESS, "numSpaceships": 0, "active": False}
                )
                for pid in planet_ids
            ]
        raise LedgerError("read", f"unexpected read {function_name}")

    async def simulate(self, call: ContractCall) -> PreparedRequest:
        self.simulated.append(call)
        if call.function_name in self.fail_simulate:
            raise LedgerError("simulate", f"{call.function_name}: execution reverted")
        return PreparedRequest(call=call, transaction={"nonce": len(self.simulated)})

    async def write(self, request: PreparedRequest) -> str:
        call = request.call
        if call.function_name in self.fail_write:
            raise LedgerError("write", f"{call.function_name}: insufficient funds")
        if call.function_name == "resolveFleet" and call.args[0] in self.fail_resolve_ids:
            raise LedgerError("write", "resolveFleet: execution reverted")
        self.written.append(call)
        return "0x" + f"{len(self.written):064x}"

    async def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        self.receipts.append(tx_hash)
        if self.receipt_errors:
            raise self.receipt_errors.pop(0)
        return {"transactionHash": tx_hash, "status": 1}

    def written_calls(self, function_name: str) -> list[ContractCall]:
        return [c for c in self.written if c.function_name == function_name]


def make_planet(planet_id: int, x: int, y: int, **kwargs) -> PlanetInfo:
    return PlanetInfo(location=Location(id=planet_id, x=x, y=y), **kwargs)


@pytest.fixture
def clock():
    return FakeClock(now=GENESIS)


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def space_info():
    """Planet 100 at the origin; 200 is 10 units away, 300 is 5, 400 is far."""
    return StaticSpaceInfo(
        [
            make_planet(100, 0, 0, is_home_planet=True),
            make_planet(200, 6, 8),
            make_planet(300, 3, 4),
            make_planet(400, 40, 30),
        ]
    )


@pytest.fixture
def contract_config():
    return ContractConfig(
        genesis=GENESIS,
        resolve_window=RESOLVE_WINDOW,
        time_per_distance=TIME_PER_DISTANCE,
        exit_duration=EXIT_DURATION,
    )


@pytest.fixture
def storage():
    return MemoryFleetStorage()


@pytest.fixture
def fleet_manager(ledger, space_info, contract_config, storage, clock):
    return FleetManager(ledger, space_info, contract_config, storage, GAME_CONTRACT, clock=clock)


@pytest.fixture
def exit_tracker(ledger, contract_config, storage, clock):
    return ExitTracker(ledger, contract_config, storage, GAME_CONTRACT, clock=clock)


@pytest.fixture
def queries(ledger, space_info, contract_config, fleet_manager, exit_tracker):
    return PlanetQueries(
        ledger, space_info, contract_config, GAME_CONTRACT, fleet_manager, exit_tracker
    )
