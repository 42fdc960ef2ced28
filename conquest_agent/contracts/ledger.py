"""Ledger client: reads, simulate-then-send writes, and receipts.

The agent depends only on the :class:`LedgerClient` shape. The concrete
:class:`Web3LedgerClient` talks JSON-RPC through ``web3.AsyncWeb3`` and signs
locally with an ``eth_account`` key.

Reads are retried on transport errors. Writes are never retried: a blind
retry of a broadcast risks a duplicate submission.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from eth_account import Account
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TimeExhausted, Web3Exception

from ..errors import ConfigurationError, LedgerError

logger = logging.getLogger(__name__)

READ_RETRY_ATTEMPTS = 3


@dataclass(frozen=True)
class ContractCall:
    """A contract function invocation, before it is simulated."""

    address: str
    abi: list[dict]
    function_name: str
    args: tuple = ()
    value: int = 0  # Native token attached (payable calls)


@dataclass(frozen=True)
class PreparedRequest:
    """A call that passed its dry-run and is ready to broadcast."""

    call: ContractCall
    transaction: dict[str, Any] = field(default_factory=dict)


class LedgerClient(Protocol):
    """Shape of the ledger collaborator."""

    @property
    def account(self) -> str | None:
        """Signing account address, or None for a read-only client."""
        ...

    async def read(
        self, address: str, abi: list[dict], function_name: str, args: tuple = ()
    ) -> Any: ...

    async def simulate(self, call: ContractCall) -> PreparedRequest: ...

    async def write(self, request: PreparedRequest) -> str: ...

    async def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]: ...


def is_retryable_error(exception: BaseException) -> bool:
    """Check if a read failure is a transport problem worth retrying.

    Args:
        exception: Exception to check

    Returns:
        True for timeouts and connection errors
    """
    return isinstance(exception, (asyncio.TimeoutError, ConnectionError, OSError))


class Web3LedgerClient:
    """:class:`LedgerClient` backed by ``web3.AsyncWeb3``."""

    def __init__(
        self,
        rpc_url: str,
        private_key: str | None = None,
        simulate_timeout: float = 30.0,
        receipt_timeout: float = 120.0,
    ):
        """Initialize ledger client.

        Args:
            rpc_url: JSON-RPC endpoint
            private_key: Hex private key; None gives a read-only client
            simulate_timeout: Seconds allowed for a dry-run before aborting
            receipt_timeout: Seconds to wait for a transaction receipt
        """
        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._signer = Account.from_key(private_key) if private_key else None
        self.simulate_timeout = simulate_timeout
        self.receipt_timeout = receipt_timeout

    @property
    def account(self) -> str | None:
        return self._signer.address if self._signer else None

    def _function(self, address: str, abi: list[dict], function_name: str, args: tuple):
        contract = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(address), abi=abi, decode_tuples=True
        )
        return getattr(contract.functions, function_name)(*args)

    @retry(
        stop=stop_after_attempt(READ_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _call(self, function, tx_params: dict | None = None) -> Any:
        return await function.call(tx_params)

    async def read(
        self, address: str, abi: list[dict], function_name: str, args: tuple = ()
    ) -> Any:
        """Call a view function and return the decoded result."""
        try:
            return await self._call(self._function(address, abi, function_name, args))
        except (Web3Exception, ValueError, asyncio.TimeoutError, OSError) as e:
            raise LedgerError("read", f"{function_name}: {e}") from e

    async def simulate(self, call: ContractCall) -> PreparedRequest:
        """Dry-run a call and build the transaction to broadcast.

        Raises:
            LedgerError: If the call would revert or the dry-run times out
        """
        signer = self._require_signer()
        function = self._function(call.address, call.abi, call.function_name, call.args)
        params = {"from": signer.address, "value": call.value}
        try:
            transaction = await asyncio.wait_for(
                self._dry_run(function, params, signer.address), timeout=self.simulate_timeout
            )
        except (Web3Exception, ValueError, asyncio.TimeoutError, OSError) as e:
            raise LedgerError("simulate", f"{call.function_name}: {e}") from e
        return PreparedRequest(call=call, transaction=transaction)

    async def _dry_run(self, function, params: dict, sender: str) -> dict[str, Any]:
        await function.call(params)
        nonce = await self.w3.eth.get_transaction_count(sender, "pending")
        return await function.build_transaction({**params, "nonce": nonce})

    async def write(self, request: PreparedRequest) -> str:
        """Sign and broadcast a prepared request.

        Returns:
            0x-prefixed transaction hash
        """
        signer = self._require_signer()
        try:
            signed = signer.sign_transaction(request.transaction)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError, OSError) as e:
            raise LedgerError("write", f"{request.call.function_name}: {e}") from e
        return AsyncWeb3.to_hex(tx_hash)

    async def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        """Wait for confirmation; a reverted receipt is a ledger error."""
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except (TimeExhausted, Web3Exception, OSError) as e:
            raise LedgerError("receipt", f"{tx_hash}: {e}") from e
        if receipt["status"] != 1:
            raise LedgerError("reverted", f"{tx_hash}: transaction reverted")
        return dict(receipt)

    def _require_signer(self):
        if self._signer is None:
            raise ConfigurationError(
                "A signing key is required for this operation. Set CONQUEST_PRIVATE_KEY."
            )
        return self._signer
