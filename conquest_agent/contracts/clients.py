"""Construction of ledger collaborators and shared contract reads."""

import logging

from ..errors import LedgerError
from ..models.contract import ContractConfig
from ..models.planet import PlanetState
from .abis import INFORMATION_ABI
from .ledger import LedgerClient, Web3LedgerClient

logger = logging.getLogger(__name__)


def create_ledger_client(config) -> Web3LedgerClient:
    """Build the web3-backed ledger client from an :class:`AgentConfig`."""
    return Web3LedgerClient(
        rpc_url=config.rpc_url,
        private_key=config.private_key,
        simulate_timeout=config.simulate_timeout,
        receipt_timeout=config.receipt_timeout,
    )


async def load_contract_config(ledger: LedgerClient, game_contract: str) -> ContractConfig:
    """Fetch the game configuration once at startup."""
    raw = await ledger.read(game_contract, INFORMATION_ABI, "getConfig")
    config = ContractConfig.from_ledger(raw)
    logger.info(
        f"Loaded contract config: resolveWindow={config.resolve_window}s, "
        f"timePerDistance={config.time_per_distance}s, exitDuration={config.exit_duration}s"
    )
    return config


async def read_planet_states(
    ledger: LedgerClient, game_contract: str, planet_ids: list[int]
) -> list[PlanetState]:
    """Read ledger state for a batch of planets, in request order.

    Raises:
        LedgerError: If the read fails or returns the wrong number of states
    """
    if not planet_ids:
        return []
    raw_states = await ledger.read(
        game_contract, INFORMATION_ABI, "getPlanetStates", (list(planet_ids),)
    )
    if len(raw_states) != len(planet_ids):
        raise LedgerError(
            "read",
            f"getPlanetStates returned {len(raw_states)} states for {len(planet_ids)} planets",
        )
    return [PlanetState.from_ledger(raw) for raw in raw_states]
