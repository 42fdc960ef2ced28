"""Pydantic response schemas for API endpoints.

Planet ids are uint256 values and are returned as decimal strings.
"""

from pydantic import BaseModel, Field

from ...models.exit import ExitVerification, PendingExit
from ...models.fleet import PendingFleet
from ...models.planet import PlanetView


class FleetResponse(BaseModel):
    """A tracked fleet. ``secret`` is only filled in on the send response."""

    fleetId: str  # noqa: N815
    fromPlanetId: str  # noqa: N815
    toPlanetId: str  # noqa: N815
    quantity: int
    gift: bool
    specific: str
    arrivalTimeWanted: int  # noqa: N815
    fleetSender: str  # noqa: N815
    operator: str
    committedAt: int  # noqa: N815
    estimatedArrivalTime: int  # noqa: N815
    resolved: bool
    resolvedAt: int | None = None  # noqa: N815
    commitTxHash: str | None = None  # noqa: N815
    resolveTxHash: str | None = None  # noqa: N815
    secret: str | None = None

    @classmethod
    def from_fleet(cls, fleet: PendingFleet, include_secret: bool = False) -> "FleetResponse":
        return cls(
            fleetId=fleet.fleet_id,
            fromPlanetId=str(fleet.from_planet_id),
            toPlanetId=str(fleet.to_planet_id),
            quantity=fleet.quantity,
            gift=fleet.gift,
            specific=fleet.specific,
            arrivalTimeWanted=fleet.arrival_time_wanted,
            fleetSender=fleet.fleet_sender,
            operator=fleet.operator,
            committedAt=fleet.committed_at,
            estimatedArrivalTime=fleet.estimated_arrival_time,
            resolved=fleet.resolved,
            resolvedAt=fleet.resolved_at,
            commitTxHash=fleet.commit_tx_hash,
            resolveTxHash=fleet.resolve_tx_hash,
            secret=fleet.secret if include_secret else None,
        )


class ResolveFleetResponse(BaseModel):
    """Outcome of a resolve request."""

    success: bool
    status: str
    reason: str | None = None
    fleet: FleetResponse


class FleetFailureResponse(BaseModel):
    fleetId: str  # noqa: N815
    reason: str


class ResolveAllResponse(BaseModel):
    """Outcome of a batch resolve."""

    successful: list[FleetResponse] = Field(default_factory=list)
    failed: list[FleetFailureResponse] = Field(default_factory=list)


class ExitResponse(BaseModel):
    """A tracked planet exit."""

    planetId: str  # noqa: N815
    player: str
    exitStartTime: int  # noqa: N815
    exitDuration: int  # noqa: N815
    exitCompleteTime: int  # noqa: N815
    numSpaceships: int  # noqa: N815
    owner: str
    status: str
    completed: bool
    interrupted: bool
    lastCheckedAt: int  # noqa: N815
    newOwner: str | None = None  # noqa: N815

    @classmethod
    def from_exit(cls, exit: PendingExit) -> "ExitResponse":
        return cls(
            planetId=str(exit.planet_id),
            player=exit.player,
            exitStartTime=exit.exit_start_time,
            exitDuration=exit.exit_duration,
            exitCompleteTime=exit.exit_complete_time,
            numSpaceships=exit.num_spaceships,
            owner=exit.owner,
            status=exit.status.value,
            completed=exit.completed,
            interrupted=exit.interrupted,
            lastCheckedAt=exit.last_checked_at,
            newOwner=exit.new_owner,
        )


class ExitPlanetsResponse(BaseModel):
    txHash: str  # noqa: N815
    exitsInitiated: list[str]  # noqa: N815


class VerifyExitResponse(BaseModel):
    """Outcome of an exit verification."""

    exit: ExitResponse
    interrupted: bool
    newOwner: str | None = None  # noqa: N815

    @classmethod
    def from_verification(cls, verification: ExitVerification) -> "VerifyExitResponse":
        return cls(
            exit=ExitResponse.from_exit(verification.exit),
            interrupted=verification.interrupted,
            newOwner=verification.new_owner,
        )


class AcquirePlanetsResponse(BaseModel):
    txHash: str  # noqa: N815
    planetsAcquired: list[str]  # noqa: N815


class PlanetResponse(BaseModel):
    """A planet with its ledger state."""

    planetId: str  # noqa: N815
    x: int
    y: int
    level: int
    isHomePlanet: bool  # noqa: N815
    owner: str | None = None
    numSpaceships: int = 0  # noqa: N815
    active: bool = False
    distance: int | None = None

    @classmethod
    def from_view(cls, view: PlanetView) -> "PlanetResponse":
        state = view.state
        return cls(
            planetId=str(view.info.location.id),
            x=view.info.location.x,
            y=view.info.location.y,
            level=view.info.level,
            isHomePlanet=view.info.is_home_planet,
            owner=state.owner if state and state.has_owner else None,
            numSpaceships=state.num_spaceships if state else 0,
            active=state.active if state else False,
            distance=view.distance,
        )


class CleanupResponse(BaseModel):
    fleetsRemoved: int  # noqa: N815
    exitsRemoved: int  # noqa: N815


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    errorType: str | None = None  # noqa: N815
    details: dict | None = None
