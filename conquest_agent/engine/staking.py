"""Planet acquisition (staking)."""

import logging
from dataclasses import dataclass, field

from ..contracts.abis import STAKING_ABI
from ..contracts.ledger import ContractCall, LedgerClient
from ..utils.constants import UINT256_MAX
from ..utils.hashing import check_uint
from .fleets import require_account

logger = logging.getLogger(__name__)


@dataclass
class AcquireResult:
    """Result of an acquisition transaction."""

    tx_hash: str
    planets_acquired: list[int] = field(default_factory=list)


async def acquire_planets(
    ledger: LedgerClient,
    game_contract: str,
    planet_ids: list[int],
    amount_to_mint: int,
    token_amount: int,
) -> AcquireResult:
    """Acquire (stake) multiple planets.

    Pays ``amount_to_mint`` in native token (attached as value) plus
    ``token_amount`` of the staking token.

    Args:
        ledger: Ledger client with a signing account
        game_contract: Game contract address
        planet_ids: Planet location ids to acquire
        amount_to_mint: Native token to spend
        token_amount: Staking token to spend

    Returns:
        Transaction hash and the planets requested

    Raises:
        ConfigurationError: If no signing key is configured
        LedgerError: If the dry-run or broadcast fails
    """
    require_account(ledger)
    planet_ids = [check_uint(pid, UINT256_MAX, "planet_id") for pid in planet_ids]
    if not planet_ids:
        raise ValueError("planet_ids cannot be empty")
    check_uint(amount_to_mint, UINT256_MAX, "amount_to_mint")
    check_uint(token_amount, UINT256_MAX, "token_amount")

    request = await ledger.simulate(
        ContractCall(
            game_contract,
            STAKING_ABI,
            "acquireMultipleViaNativeTokenAndStakingToken",
            (planet_ids, amount_to_mint, token_amount),
            value=amount_to_mint,
        )
    )
    tx_hash = await ledger.write(request)
    logger.info(f"Acquire submitted for planets {planet_ids}, tx {tx_hash}")
    return AcquireResult(tx_hash=tx_hash, planets_acquired=planet_ids)
