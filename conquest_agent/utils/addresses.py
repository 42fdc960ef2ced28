"""Account address helpers."""

from eth_utils import is_address, to_checksum_address

from .constants import ZERO_ADDRESS


def normalize_address(address: str) -> str:
    """Return the EIP-55 checksum form of an account address.

    Raises:
        ValueError: If the value is not a 20-byte hex address
    """
    if not isinstance(address, str) or not is_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return to_checksum_address(address)


def addresses_equal(a: str | None, b: str | None) -> bool:
    """Case-insensitive address comparison (None never matches)."""
    if not a or not b:
        return False
    return a.lower() == b.lower()


def is_zero_address(address: str | None) -> bool:
    return not address or address.lower() == ZERO_ADDRESS
