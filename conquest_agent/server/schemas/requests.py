"""Pydantic request schemas for API endpoints."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from ...utils.addresses import normalize_address
from ...utils.constants import UINT256_MAX, ZERO_ADDRESS


def parse_planet_id(value: str | int) -> int:
    """Accept a planet id as an integer, decimal string, or 0x hex string.

    Raises:
        ValueError: If the value is not a uint256
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid planet id: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError as e:
            raise ValueError(f"Invalid planet id: {value!r}") from e
    if not isinstance(value, int) or not (0 <= value <= UINT256_MAX):
        raise ValueError(f"Invalid planet id: {value!r}")
    return value


PlanetId = Annotated[int, BeforeValidator(parse_planet_id)]


class SendFleetRequest(BaseModel):
    """Request to send a fleet."""

    fromPlanetId: PlanetId = Field(description="Source planet location ID")  # noqa: N815
    toPlanetId: PlanetId = Field(description="Destination planet location ID")  # noqa: N815
    quantity: int = Field(gt=0, description="Number of spaceships to send")
    arrivalTimeWanted: int | None = Field(  # noqa: N815
        default=None,
        ge=0,
        description="Desired arrival time in seconds; estimated from distance if omitted",
    )
    gift: bool = Field(default=False, description="Deliver ships even if the destination is hostile")
    specific: str = Field(default=ZERO_ADDRESS, description="Only this account may receive a gift")
    fleetSender: str | None = Field(  # noqa: N815
        default=None, description="Send on behalf of this account (operator = signer)"
    )
    fleetOwner: str | None = Field(  # noqa: N815
        default=None, description="Owner of the origin planet when sending on behalf"
    )

    @field_validator("specific", "fleetSender", "fleetOwner")
    @classmethod
    def checksum(cls, v: str | None) -> str | None:
        """Normalize account addresses."""
        return normalize_address(v) if v else v


class ExitPlanetsRequest(BaseModel):
    """Request to exit (unstake) planets."""

    planetIds: list[PlanetId] = Field(min_length=1, description="Planet location IDs to exit")  # noqa: N815
    owner: str | None = Field(default=None, description="Staking owner, defaults to the signer")

    @field_validator("owner")
    @classmethod
    def checksum(cls, v: str | None) -> str | None:
        return normalize_address(v) if v else v


class AcquirePlanetsRequest(BaseModel):
    """Request to acquire (stake) planets."""

    planetIds: list[PlanetId] = Field(min_length=1, description="Planet location IDs to acquire")  # noqa: N815
    amountToMint: int = Field(ge=0, description="Native token to spend")  # noqa: N815
    tokenAmount: int = Field(ge=0, description="Staking token to spend")  # noqa: N815


class CleanupRequest(BaseModel):
    """Request to apply the retention policy."""

    olderThanDays: float | None = Field(  # noqa: N815
        default=None, ge=0, description="Override the configured retention age"
    )
