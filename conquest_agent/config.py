"""Agent configuration.

All settings live in one typed structure, read from environment variables
at startup by :meth:`AgentConfig.from_env`.
"""

import os
import re

from pydantic import BaseModel, Field, field_validator

from .utils.addresses import normalize_address
from .utils.constants import DEFAULT_RETENTION_DAYS

PRIVATE_KEY_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

ENV_VARS = {
    "rpc_url": "CONQUEST_RPC_URL",
    "game_contract": "CONQUEST_GAME_CONTRACT",
    "private_key": "CONQUEST_PRIVATE_KEY",
    "storage_path": "CONQUEST_STORAGE_PATH",
    "retention_days": "CONQUEST_RETENTION_DAYS",
    "simulate_timeout": "CONQUEST_SIMULATE_TIMEOUT",
    "receipt_timeout": "CONQUEST_RECEIPT_TIMEOUT",
    "sweep_interval": "CONQUEST_SWEEP_INTERVAL",
    "planet_catalog_path": "CONQUEST_PLANET_CATALOG",
}


class AgentConfig(BaseModel):
    """Runtime configuration for the Conquest agent."""

    rpc_url: str = Field(default="http://localhost:8545", description="JSON-RPC endpoint")
    game_contract: str = Field(description="Game contract address")
    private_key: str | None = Field(
        default=None,
        repr=False,
        description="Signing key; without it the agent is read-only",
    )
    storage_path: str = Field(
        default="state/conquest_agent.json", description="JSON store for fleet and exit records"
    )
    retention_days: float = Field(
        default=DEFAULT_RETENTION_DAYS, ge=0, description="Age before terminal records are removed"
    )
    simulate_timeout: float = Field(
        default=30.0, gt=0, description="Seconds allowed for a dry-run before aborting"
    )
    receipt_timeout: float = Field(
        default=120.0, gt=0, description="Seconds to wait for transaction confirmation"
    )
    sweep_interval: float = Field(
        default=60.0, gt=0, description="Seconds between periodic resolve/verify sweeps"
    )
    planet_catalog_path: str | None = Field(
        default=None, description="JSON planet catalog for the spatial info service"
    )

    @field_validator("game_contract")
    @classmethod
    def checksum_contract(cls, v: str) -> str:
        """Normalize the contract address to checksum form."""
        return normalize_address(v)

    @field_validator("private_key")
    @classmethod
    def check_private_key(cls, v: str | None) -> str | None:
        """Accept an empty value as "not configured"; reject malformed keys."""
        if not v:
            return None
        if not v.startswith("0x"):
            v = "0x" + v
        if not PRIVATE_KEY_PATTERN.match(v):
            raise ValueError("private_key must be 32 bytes of hex")
        return v

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "AgentConfig":
        """Build config from environment variables.

        ``PRIVATE_KEY`` is accepted as a fallback for ``CONQUEST_PRIVATE_KEY``.

        Raises:
            pydantic.ValidationError: If a value is missing or malformed
        """
        environ = os.environ if environ is None else environ
        values = {
            field_name: environ[var] for field_name, var in ENV_VARS.items() if environ.get(var)
        }
        if "private_key" not in values and environ.get("PRIVATE_KEY"):
            values["private_key"] = environ["PRIVATE_KEY"]
        return cls(**values)
