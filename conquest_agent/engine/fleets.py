"""Fleet commit/reveal orchestration.

A fleet goes through two states, committed and resolved:

1. ``send`` commits ``to_hash`` (destination hidden behind a secret) and
   persists a :class:`PendingFleet` holding the secret.
2. ``resolve`` reveals destination and secret once
   ``estimated_arrival_time + resolve_window`` has passed.

There is no cancellation. Operations on the same fleet id must be
serialized by the caller; different fleets are independent.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from ..contracts.abis import FLEETS_COMMIT_ABI, FLEETS_REVEAL_ABI
from ..contracts.ledger import ContractCall, LedgerClient
from ..contracts.space_info import SpaceInfo
from ..errors import (
    ConfigurationError,
    FleetNotFoundError,
    LedgerError,
    PlanetNotFoundError,
)
from ..models.contract import ContractConfig
from ..models.fleet import (
    BatchResolveResult,
    FleetFailure,
    PendingFleet,
    ResolveResult,
    ResolveStatus,
    SendOptions,
)
from ..models.planet import PlanetInfo
from ..storage.interface import FleetStorage
from ..utils.addresses import normalize_address
from ..utils.constants import DEFAULT_RETENTION_DAYS, UINT32_MAX, UINT256_MAX
from ..utils.hashing import (
    bytes32_from_hex,
    check_uint,
    compute_fleet_id,
    compute_to_hash,
    fleet_id_to_int,
    generate_secret,
)
from ..utils.timing import (
    calculate_estimated_arrival_time,
    get_current_timestamp,
    retention_cutoff,
)

logger = logging.getLogger(__name__)


def require_account(ledger: LedgerClient) -> str:
    """Return the signing account or fail with a configuration error."""
    if not ledger.account:
        raise ConfigurationError(
            "A signing key is required for this operation. Set CONQUEST_PRIVATE_KEY."
        )
    return ledger.account


class FleetManager:
    """Sends fleets and resolves them once they can be revealed."""

    def __init__(
        self,
        ledger: LedgerClient,
        space_info: SpaceInfo,
        contract_config: ContractConfig,
        storage: FleetStorage,
        game_contract: str,
        clock: Callable[[], int] = get_current_timestamp,
    ):
        """Initialize fleet manager.

        Args:
            ledger: Ledger client used for commit and reveal transactions
            space_info: Spatial info service for planet lookup and distance
            contract_config: Game timing configuration
            storage: Store owning the fleet records
            game_contract: Game contract address
            clock: Returns the current unix time in seconds
        """
        self.ledger = ledger
        self.space_info = space_info
        self.contract_config = contract_config
        self.storage = storage
        self.game_contract = game_contract
        self.clock = clock

    # =========================================================================
    # COMMIT
    # =========================================================================

    async def send(
        self,
        from_planet_id: int,
        to_planet_id: int,
        quantity: int,
        options: SendOptions | None = None,
    ) -> PendingFleet:
        """Send a fleet from one of the signer's planets.

        Args:
            from_planet_id: Origin planet location id
            to_planet_id: Destination planet location id
            quantity: Number of spaceships to send
            options: Gift/specific/arrival/secret overrides

        Returns:
            The stored fleet record, including its secret

        Raises:
            ConfigurationError: If no signing key is configured
            PlanetNotFoundError: If either planet is unknown
            LedgerError: If the dry-run or broadcast fails
        """
        sender = require_account(self.ledger)
        return await self._commit(
            from_planet_id,
            to_planet_id,
            quantity,
            fleet_sender=sender,
            operator=sender,
            fleet_owner=None,
            options=options or SendOptions(),
        )

    async def send_for(
        self,
        fleet_sender: str,
        fleet_owner: str,
        from_planet_id: int,
        to_planet_id: int,
        quantity: int,
        options: SendOptions | None = None,
    ) -> PendingFleet:
        """Send a fleet on behalf of another account.

        The signer acts as operator. Both ``fleet_sender`` and the operator
        are folded into the fleet id, so a delegated send never collides with
        a self-sent one.

        Args:
            fleet_sender: Account the fleet belongs to
            fleet_owner: Account owning the origin planet
            from_planet_id: Origin planet location id
            to_planet_id: Destination planet location id
            quantity: Number of spaceships to send
            options: Gift/specific/arrival/secret overrides
        """
        operator = require_account(self.ledger)
        return await self._commit(
            from_planet_id,
            to_planet_id,
            quantity,
            fleet_sender=normalize_address(fleet_sender),
            operator=operator,
            fleet_owner=normalize_address(fleet_owner),
            options=options or SendOptions(),
        )

    async def _commit(
        self,
        from_planet_id: int,
        to_planet_id: int,
        quantity: int,
        fleet_sender: str,
        operator: str,
        fleet_owner: str | None,
        options: SendOptions,
    ) -> PendingFleet:
        check_uint(quantity, UINT32_MAX, "quantity")
        if quantity == 0:
            raise ValueError("Invalid quantity: 0 (must be > 0)")
        check_uint(from_planet_id, UINT256_MAX, "from_planet_id")
        check_uint(to_planet_id, UINT256_MAX, "to_planet_id")

        from_planet = self._planet(from_planet_id)
        to_planet = self._planet(to_planet_id)
        distance = self.space_info.distance(from_planet, to_planet)

        secret = options.secret or generate_secret()
        estimated_arrival_time = calculate_estimated_arrival_time(
            distance, self.contract_config.time_per_distance, self.contract_config.genesis
        )
        to_hash = compute_to_hash(to_planet_id, secret)
        fleet_id = compute_fleet_id(to_hash, from_planet_id, fleet_sender, operator)

        if fleet_owner is None:
            call = ContractCall(
                self.game_contract,
                FLEETS_COMMIT_ABI,
                "send",
                (from_planet_id, quantity, bytes32_from_hex(to_hash)),
            )
        else:
            call = ContractCall(
                self.game_contract,
                FLEETS_COMMIT_ABI,
                "sendFor",
                (
                    {
                        "fleetSender": fleet_sender,
                        "fleetOwner": fleet_owner,
                        "from": from_planet_id,
                        "quantity": quantity,
                        "toHash": bytes32_from_hex(to_hash),
                    },
                ),
            )
        request = await self.ledger.simulate(call)

        # The record (and its secret) is durable before the commit is broadcast.
        fleet = PendingFleet(
            fleet_id=fleet_id,
            from_planet_id=from_planet_id,
            to_planet_id=to_planet_id,
            quantity=quantity,
            secret=secret,
            gift=options.gift,
            specific=normalize_address(options.specific),
            arrival_time_wanted=(
                options.arrival_time_wanted
                if options.arrival_time_wanted is not None
                else estimated_arrival_time
            ),
            fleet_sender=fleet_sender,
            operator=operator,
            committed_at=self.clock(),
            estimated_arrival_time=estimated_arrival_time,
        )
        previous = await self.storage.get_fleet(fleet_id)
        await self.storage.save_fleet(fleet)

        try:
            tx_hash = await self.ledger.write(request)
        except LedgerError:
            if previous is None:
                await self.storage.delete_fleet(fleet_id)
            else:
                await self.storage.save_fleet(previous)
            raise

        fleet = replace(fleet, commit_tx_hash=tx_hash)
        await self.storage.save_fleet(fleet)
        logger.info(
            f"Committed fleet {fleet_id}: {quantity} ships from {from_planet_id}, "
            f"ETA {estimated_arrival_time}, tx {tx_hash}"
        )
        return fleet

    def _planet(self, planet_id: int) -> PlanetInfo:
        planet = self.space_info.get_planet_info_via_id(planet_id)
        if planet is None:
            raise PlanetNotFoundError(planet_id)
        return planet

    # =========================================================================
    # REVEAL
    # =========================================================================

    async def resolve(self, fleet_id: str) -> ResolveResult:
        """Reveal a fleet's destination and secret.

        Returns a structured result instead of raising when the fleet is not
        yet resolvable (``TOO_EARLY``) or was already resolved
        (``ALREADY_RESOLVED``, nothing is submitted). A reveal that was
        broadcast but never confirmed is not submitted again; its receipt is
        awaited instead.

        Raises:
            FleetNotFoundError: If no record exists for ``fleet_id``
            ConfigurationError: If no signing key is configured
            LedgerError: If the reveal is rejected
        """
        fleet = await self.storage.get_fleet(fleet_id)
        if fleet is None:
            raise FleetNotFoundError(fleet_id)

        if fleet.resolved:
            return ResolveResult(ResolveStatus.ALREADY_RESOLVED, fleet, "already resolved")

        if fleet.resolve_tx_hash:
            # A reveal was broadcast earlier; only its receipt is awaited.
            return await self._confirm_reveal(fleet, fleet.resolve_tx_hash)

        now = self.clock()
        resolvable_at = fleet.resolvable_at(self.contract_config.resolve_window)
        if now < resolvable_at:
            return ResolveResult(
                ResolveStatus.TOO_EARLY,
                fleet,
                f"too early: resolvable at {resolvable_at} ({resolvable_at - now}s remaining)",
            )

        require_account(self.ledger)
        distance = self.space_info.distance(
            self._planet(fleet.from_planet_id), self._planet(fleet.to_planet_id)
        )
        call = ContractCall(
            self.game_contract,
            FLEETS_REVEAL_ABI,
            "resolveFleet",
            (
                fleet_id_to_int(fleet.fleet_id),
                {
                    "from": fleet.from_planet_id,
                    "to": fleet.to_planet_id,
                    "distance": distance,
                    "arrivalTimeWanted": fleet.arrival_time_wanted,
                    "gift": fleet.gift,
                    "specific": fleet.specific,
                    "secret": bytes32_from_hex(fleet.secret),
                    "fleetSender": fleet.fleet_sender,
                    "operator": fleet.operator,
                },
            ),
        )
        request = await self.ledger.simulate(call)
        tx_hash = await self.ledger.write(request)

        fleet = replace(fleet, resolve_tx_hash=tx_hash)
        await self.storage.save_fleet(fleet)
        return await self._confirm_reveal(fleet, tx_hash)

    async def _confirm_reveal(self, fleet: PendingFleet, tx_hash: str) -> ResolveResult:
        """Wait for a broadcast reveal and mark the fleet resolved.

        A receipt timeout keeps ``resolve_tx_hash`` so the next attempt polls
        the same transaction. A reverted reveal clears it so the fleet can be
        submitted again.
        """
        try:
            await self.ledger.wait_for_receipt(tx_hash)
        except LedgerError as e:
            if e.stage == "reverted":
                logger.warning(f"Reveal {tx_hash} for fleet {fleet.fleet_id} reverted")
                await self.storage.save_fleet(replace(fleet, resolve_tx_hash=None))
            raise

        resolved = replace(fleet, resolved=True, resolved_at=self.clock(), resolve_tx_hash=tx_hash)
        await self.storage.save_fleet(resolved)
        logger.info(f"Resolved fleet {fleet.fleet_id} to planet {fleet.to_planet_id}, tx {tx_hash}")
        return ResolveResult(ResolveStatus.RESOLVED, resolved)

    async def get_resolvable_fleets(self) -> list[PendingFleet]:
        """Get unresolved fleets whose resolve window has elapsed."""
        now = self.clock()
        window = self.contract_config.resolve_window
        return [
            fleet
            for fleet in await self.storage.get_all_fleets()
            if not fleet.resolved and now >= fleet.resolvable_at(window)
        ]

    async def resolve_all_ready(self) -> BatchResolveResult:
        """Resolve every ready fleet independently.

        Ledger rejections and lookup failures become per-fleet entries in
        ``failed``; storage and configuration errors abort the batch.
        """
        require_account(self.ledger)
        result = BatchResolveResult()
        for fleet in await self.get_resolvable_fleets():
            try:
                outcome = await self.resolve(fleet.fleet_id)
            except (LedgerError, PlanetNotFoundError, FleetNotFoundError) as e:
                logger.warning(f"Failed to resolve fleet {fleet.fleet_id}: {e}")
                result.failed.append(FleetFailure(fleet.fleet_id, str(e)))
                continue

            if outcome.status is ResolveStatus.RESOLVED:
                result.successful.append(outcome.fleet)
            else:
                result.failed.append(FleetFailure(fleet.fleet_id, outcome.reason or ""))

        logger.info(
            f"Batch resolve: {len(result.successful)} resolved, {len(result.failed)} failed"
        )
        return result

    # =========================================================================
    # QUERIES AND HOUSEKEEPING
    # =========================================================================

    async def get_my_pending_fleets(self) -> list[PendingFleet]:
        """Get unresolved fleets sent by the signing account."""
        return await self.storage.get_pending_fleets_by_sender(require_account(self.ledger))

    async def get_fleet(self, fleet_id: str) -> PendingFleet | None:
        return await self.storage.get_fleet(fleet_id)

    async def get_all_fleets(self) -> list[PendingFleet]:
        return await self.storage.get_all_fleets()

    async def cleanup_old_resolved_fleets(
        self, older_than_days: float = DEFAULT_RETENTION_DAYS
    ) -> int:
        """Remove resolved fleets older than the threshold.

        Unresolved fleets are kept regardless of age: without the record the
        secret is lost and the fleet can never be revealed.

        Returns:
            Number of records removed
        """
        removed = await self.storage.cleanup_old_resolved_fleets(
            retention_cutoff(older_than_days, self.clock())
        )
        if removed:
            logger.info(f"Removed {removed} resolved fleets older than {older_than_days} days")
        return removed
