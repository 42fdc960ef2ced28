"""Exit (unstake) lifecycle tracking.

The ledger does not expose a list of pending exits, so the agent records
every exit it initiates and reconciles it later against ledger-observed
ownership:

- owner changed to another account -> interrupted (captured mid-exit)
- planet inactive and exit time reached -> completed

Interruption takes precedence over completion. Both are terminal.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from ..contracts.abis import STAKING_ABI
from ..contracts.clients import read_planet_states
from ..contracts.ledger import ContractCall, LedgerClient
from ..errors import ExitNotFoundError, LedgerError
from ..models.contract import ContractConfig
from ..models.exit import ExitResult, ExitVerification, PendingExit
from ..models.planet import PlanetState
from ..storage.interface import FleetStorage
from ..utils.addresses import addresses_equal, normalize_address
from ..utils.constants import DEFAULT_RETENTION_DAYS
from ..utils.timing import get_current_timestamp, retention_cutoff
from .fleets import require_account

logger = logging.getLogger(__name__)


def is_captured(exit: PendingExit, state: PlanetState) -> bool:
    """True when someone other than the exiting player now owns the planet.

    An unowned planet (zero address) is not a capture.
    """
    return state.has_owner and not addresses_equal(state.owner, exit.player)


class ExitTracker:
    """Initiates planet exits and tracks them to completion or interruption."""

    def __init__(
        self,
        ledger: LedgerClient,
        contract_config: ContractConfig,
        storage: FleetStorage,
        game_contract: str,
        clock: Callable[[], int] = get_current_timestamp,
    ):
        self.ledger = ledger
        self.contract_config = contract_config
        self.storage = storage
        self.game_contract = game_contract
        self.clock = clock

    async def exit(self, planet_ids: list[int], owner: str | None = None) -> ExitResult:
        """Exit (unstake) a batch of planets.

        A record is created for each planet currently owned by ``owner``;
        other planets are skipped. The transaction still covers every
        requested id since the ledger applies its own eligibility check.

        Args:
            planet_ids: Planet location ids to exit
            owner: Staking owner, defaults to the signing account

        Returns:
            Transaction hash and the planets that got an exit record

        Raises:
            ConfigurationError: If no signing key is configured
            LedgerError: If the state read, dry-run or broadcast fails
        """
        operator = require_account(self.ledger)
        owner = normalize_address(owner) if owner else operator
        planet_ids = list(planet_ids)
        if not planet_ids:
            raise ValueError("planet_ids cannot be empty")

        states = await read_planet_states(self.ledger, self.game_contract, planet_ids)
        request = await self.ledger.simulate(
            ContractCall(self.game_contract, STAKING_ABI, "exitMultipleFor", (owner, planet_ids))
        )

        now = self.clock()
        duration = self.contract_config.exit_duration
        saved: list[tuple[int, PendingExit | None]] = []
        seen: set[int] = set()
        for planet_id, state in zip(planet_ids, states):
            if planet_id in seen:
                continue
            seen.add(planet_id)
            if not addresses_equal(state.owner, owner):
                logger.info(f"Skipping exit record for planet {planet_id}: not owned by {owner}")
                continue
            previous = await self.storage.get_pending_exit(planet_id)
            await self.storage.save_pending_exit(
                PendingExit(
                    planet_id=planet_id,
                    player=owner,
                    exit_start_time=now,
                    exit_duration=duration,
                    exit_complete_time=now + duration,
                    num_spaceships=state.num_spaceships,
                    owner=normalize_address(state.owner),
                    last_checked_at=now,
                )
            )
            saved.append((planet_id, previous))

        try:
            tx_hash = await self.ledger.write(request)
        except LedgerError:
            for planet_id, previous in saved:
                if previous is None:
                    await self.storage.delete_pending_exit(planet_id)
                else:
                    await self.storage.save_pending_exit(previous)
            raise

        exits_initiated = [planet_id for planet_id, _ in saved]
        logger.info(
            f"Exit submitted for {len(planet_ids)} planets ({len(exits_initiated)} tracked), "
            f"tx {tx_hash}"
        )
        return ExitResult(tx_hash=tx_hash, exits_initiated=exits_initiated)

    async def verify_exit_status(self, planet_id: int) -> ExitVerification:
        """Reconcile an exit record against the ledger.

        Raises:
            ExitNotFoundError: If no exit record exists for the planet
            LedgerError: If the planet state cannot be read
        """
        exit = await self.storage.get_pending_exit(planet_id)
        if exit is None:
            raise ExitNotFoundError(planet_id)

        (state,) = await read_planet_states(self.ledger, self.game_contract, [planet_id])
        observed_owner = normalize_address(state.owner) if state.has_owner else None
        now = self.clock()

        if exit.is_terminal:
            pass
        elif is_captured(exit, state):
            logger.warning(
                f"Exit for planet {planet_id} interrupted: now owned by {observed_owner}"
            )
            await self.storage.mark_exit_interrupted(planet_id, now, observed_owner)
        elif not state.active and now >= exit.exit_complete_time:
            logger.info(f"Exit for planet {planet_id} completed")
            await self.storage.mark_exit_completed(planet_id, now)
        else:
            await self.storage.save_pending_exit(replace(exit, last_checked_at=now))

        updated = await self.storage.get_pending_exit(planet_id)
        if updated is None:
            raise ExitNotFoundError(planet_id, "Exit was cleaned up during verification")

        return ExitVerification(
            exit=updated, interrupted=updated.interrupted, new_owner=observed_owner
        )

    async def verify_pending_exits(self) -> tuple[list[ExitVerification], dict[int, str]]:
        """Verify every non-terminal exit of the signing account.

        Returns:
            Tuple of (verifications, planet id -> failure reason)
        """
        verifications = []
        failures: dict[int, str] = {}
        for exit in await self.get_my_pending_exits():
            if exit.is_terminal:
                continue
            try:
                verifications.append(await self.verify_exit_status(exit.planet_id))
            except (LedgerError, ExitNotFoundError) as e:
                logger.warning(f"Failed to verify exit for planet {exit.planet_id}: {e}")
                failures[exit.planet_id] = str(e)
        return verifications, failures

    async def get_my_pending_exits(self) -> list[PendingExit]:
        """Get every exit record initiated by the signing account."""
        return await self.storage.get_pending_exits_by_player(require_account(self.ledger))

    async def cleanup_old_completed_exits(
        self, older_than_days: float = DEFAULT_RETENTION_DAYS
    ) -> int:
        """Remove completed exits older than the threshold.

        Interrupted exits are retained for audit.

        Returns:
            Number of records removed
        """
        removed = await self.storage.cleanup_old_completed_exits(
            retention_cutoff(older_than_days, self.clock())
        )
        if removed:
            logger.info(f"Removed {removed} completed exits older than {older_than_days} days")
        return removed
