"""Commitment and identifier derivation for the commit-reveal fleet protocol.

A fleet is committed on-chain with only ``to_hash``, a keccak-256 commitment
binding the destination planet to a random secret. The fleet id folds that
commitment together with the origin planet and both accounts involved in the
send. Every field is ABI-encoded with its fixed on-chain width, so two
different intents can never serialize to the same bytes.
"""

import secrets

from eth_abi import encode
from eth_utils import keccak

from .addresses import normalize_address
from .constants import UINT256_MAX

SECRET_NUM_BYTES = 32


def generate_secret() -> str:
    """Generate a fresh 256-bit commitment secret.

    Uses the operating system CSPRNG. The secret must stay private until the
    fleet is resolved: whoever knows it can compute the destination early.

    Returns:
        0x-prefixed 32-byte hex string
    """
    return "0x" + secrets.token_bytes(SECRET_NUM_BYTES).hex()


def compute_to_hash(to_planet_id: int, secret: str) -> str:
    """Compute the destination commitment ``keccak256(abi.encode(secret, to))``.

    Args:
        to_planet_id: Destination planet location id (uint256)
        secret: 0x-prefixed 32-byte secret

    Returns:
        0x-prefixed 32-byte hex commitment

    Raises:
        ValueError: If the planet id or secret is outside its declared width
    """
    to_planet_id = check_uint(to_planet_id, UINT256_MAX, "to_planet_id")
    payload = encode(["bytes32", "uint256"], [bytes32_from_hex(secret), to_planet_id])
    return "0x" + keccak(payload).hex()


def compute_fleet_id(to_hash: str, from_planet_id: int, fleet_sender: str, operator: str) -> str:
    """Compute the fleet id ``keccak256(abi.encode(toHash, from, fleetSender, operator))``.

    The same value is used as the on-chain fleet reference (read as uint256)
    and as the local storage key.

    Args:
        to_hash: Commitment returned by :func:`compute_to_hash`
        from_planet_id: Origin planet location id (uint256)
        fleet_sender: Account owning the fleet
        operator: Account signing the transaction

    Returns:
        0x-prefixed 32-byte hex fleet id (lowercase)

    Raises:
        ValueError: On malformed hash, out-of-range planet id or invalid address
    """
    from_planet_id = check_uint(from_planet_id, UINT256_MAX, "from_planet_id")
    payload = encode(
        ["bytes32", "uint256", "address", "address"],
        [
            bytes32_from_hex(to_hash),
            from_planet_id,
            normalize_address(fleet_sender),
            normalize_address(operator),
        ],
    )
    return "0x" + keccak(payload).hex()


def fleet_id_to_int(fleet_id: str) -> int:
    """Convert a hex fleet id to the uint256 the contracts expect."""
    return int.from_bytes(bytes32_from_hex(fleet_id), "big")


def bytes32_from_hex(value: str) -> bytes:
    """Decode a 0x-prefixed hex string that must be exactly 32 bytes long."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"Expected 0x-prefixed hex string, got {value!r}")
    try:
        raw = bytes.fromhex(value[2:])
    except ValueError as e:
        raise ValueError(f"Invalid hex string: {value!r}") from e
    if len(raw) != SECRET_NUM_BYTES:
        raise ValueError(f"Expected 32-byte value, got {len(raw)} bytes")
    return raw


def check_uint(value: int, maximum: int, name: str) -> int:
    """Reject values outside ``[0, maximum]`` (bools are not integers here)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid {name}: {value!r} (must be an integer)")
    if not (0 <= value <= maximum):
        raise ValueError(f"Invalid {name}: {value} (out of range)")
    return value
