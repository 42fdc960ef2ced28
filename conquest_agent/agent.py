"""Agent assembly and periodic sweep.

Every component is built eagerly by :func:`create_agent` and handed its
collaborators explicitly; nothing is constructed lazily on first use.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .config import AgentConfig
from .contracts.clients import create_ledger_client, load_contract_config
from .contracts.ledger import LedgerClient
from .contracts.space_info import SpaceInfo, StaticSpaceInfo
from .engine.exits import ExitTracker
from .engine.fleets import FleetManager
from .engine.queries import PlanetQueries
from .engine.staking import AcquireResult, acquire_planets
from .errors import ConquestAgentError
from .models.contract import ContractConfig
from .models.exit import ExitVerification
from .models.fleet import BatchResolveResult
from .storage.interface import FleetStorage
from .storage.json_storage import JsonFleetStorage
from .utils.timing import get_current_timestamp

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome of one periodic sweep."""

    resolved: BatchResolveResult = field(default_factory=BatchResolveResult)
    exits: list[ExitVerification] = field(default_factory=list)
    exit_failures: dict[int, str] = field(default_factory=dict)
    fleets_removed: int = 0
    exits_removed: int = 0


@dataclass
class ConquestAgent:
    """The wired-up agent: collaborators plus the protocol components."""

    config: AgentConfig
    ledger: LedgerClient
    space_info: SpaceInfo
    contract_config: ContractConfig
    storage: FleetStorage
    fleets: FleetManager
    exits: ExitTracker
    queries: PlanetQueries

    @property
    def can_sign(self) -> bool:
        return bool(self.ledger.account)

    async def acquire(
        self, planet_ids: list[int], amount_to_mint: int, token_amount: int
    ) -> AcquireResult:
        return await acquire_planets(
            self.ledger, self.config.game_contract, planet_ids, amount_to_mint, token_amount
        )

    async def cleanup(self, older_than_days: float | None = None) -> tuple[int, int]:
        """Apply the retention policy to fleets and exits.

        Returns:
            Tuple of (fleets removed, exits removed)
        """
        days = self.config.retention_days if older_than_days is None else older_than_days
        fleets_removed = await self.fleets.cleanup_old_resolved_fleets(days)
        exits_removed = await self.exits.cleanup_old_completed_exits(days)
        return fleets_removed, exits_removed

    async def sweep_once(self) -> SweepReport:
        """Resolve ready fleets, re-verify pending exits, apply retention."""
        report = SweepReport()
        if not self.can_sign:
            logger.info("Sweep skipped: no signing key configured")
            return report

        report.resolved = await self.fleets.resolve_all_ready()
        report.exits, report.exit_failures = await self.exits.verify_pending_exits()
        report.fleets_removed, report.exits_removed = await self.cleanup()
        return report

    async def run_sweeper(self, stop: asyncio.Event) -> None:
        """Run :meth:`sweep_once` every ``sweep_interval`` seconds until ``stop`` is set."""
        logger.info(f"Sweeper started (interval {self.config.sweep_interval}s)")
        while not stop.is_set():
            try:
                await self.sweep_once()
            except ConquestAgentError as e:
                logger.error(f"Sweep failed: {e}", exc_info=True)
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.config.sweep_interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Sweeper stopped")


async def create_agent(
    config: AgentConfig,
    ledger: LedgerClient | None = None,
    space_info: SpaceInfo | None = None,
    storage: FleetStorage | None = None,
    clock: Callable[[], int] = get_current_timestamp,
) -> ConquestAgent:
    """Build every component and wire them together.

    Collaborators not passed in are created from ``config``. The contract
    configuration is read from the ledger once, here.
    """
    ledger = ledger or create_ledger_client(config)
    if space_info is None:
        space_info = (
            StaticSpaceInfo.from_json(config.planet_catalog_path)
            if config.planet_catalog_path
            else StaticSpaceInfo()
        )
    storage = storage or JsonFleetStorage(config.storage_path)
    contract_config = await load_contract_config(ledger, config.game_contract)

    fleets = FleetManager(
        ledger, space_info, contract_config, storage, config.game_contract, clock=clock
    )
    exits = ExitTracker(ledger, contract_config, storage, config.game_contract, clock=clock)
    queries = PlanetQueries(
        ledger, space_info, contract_config, config.game_contract, fleets, exits
    )

    logger.info(
        f"Agent ready for {config.game_contract} "
        f"({'signing as ' + ledger.account if ledger.account else 'read-only'})"
    )
    return ConquestAgent(
        config=config,
        ledger=ledger,
        space_info=space_info,
        contract_config=contract_config,
        storage=storage,
        fleets=fleets,
        exits=exits,
        queries=queries,
    )
