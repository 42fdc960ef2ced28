"""Fleet data models for commit-reveal movements."""

from dataclasses import dataclass, field
from enum import Enum

from ..utils.constants import ZERO_ADDRESS


@dataclass
class PendingFleet:
    """A committed fleet movement tracked until it is resolved.

    The destination is hidden on-chain behind ``to_hash``; only this record
    holds the secret needed to reveal it. ``secret`` is excluded from repr so
    it cannot leak through log lines.
    """

    fleet_id: str  # keccak of (to_hash, from, fleet_sender, operator), 0x hex
    from_planet_id: int  # Origin planet location id
    to_planet_id: int  # Destination planet location id
    quantity: int  # Spaceships sent
    secret: str = field(repr=False)  # Commitment nonce, private until resolution
    gift: bool  # Arrival is unconditional
    specific: str  # Recipient filter (zero address = none)
    arrival_time_wanted: int  # Seconds; caller-supplied or estimated
    fleet_sender: str  # Fleet / planet owner
    operator: str  # Transaction signer
    committed_at: int  # Local commit timestamp
    estimated_arrival_time: int
    resolved: bool = False
    resolved_at: int | None = None
    commit_tx_hash: str | None = None  # None until the commit is broadcast
    resolve_tx_hash: str | None = None

    def __post_init__(self):
        """Validate fleet data after initialization."""
        if self.quantity <= 0:
            raise ValueError(f"Invalid quantity: {self.quantity} (must be > 0)")
        if self.resolved and self.resolved_at is None:
            raise ValueError("resolved fleet requires resolved_at")

    def resolvable_at(self, resolve_window: int) -> int:
        """Earliest timestamp at which the reveal may be submitted."""
        return self.estimated_arrival_time + resolve_window


@dataclass
class SendOptions:
    """Optional parameters for sending a fleet.

    Attributes:
        gift: Deliver ships even if the destination is hostile
        specific: Only this account may receive a gift (zero address = anyone)
        arrival_time_wanted: Desired arrival timestamp, defaults to the estimate
        secret: Commitment secret, defaults to a freshly generated one
    """

    gift: bool = False
    specific: str = ZERO_ADDRESS
    arrival_time_wanted: int | None = None
    secret: str | None = None

    def __post_init__(self):
        if self.arrival_time_wanted is not None and self.arrival_time_wanted < 0:
            raise ValueError(
                f"Invalid arrival_time_wanted: {self.arrival_time_wanted} (must be >= 0)"
            )


class ResolveStatus(Enum):
    """Outcome of a resolve attempt."""

    RESOLVED = "resolved"
    ALREADY_RESOLVED = "already_resolved"
    TOO_EARLY = "too_early"


@dataclass
class ResolveResult:
    """Structured result of :meth:`FleetManager.resolve`.

    ``TOO_EARLY`` is an expected outcome for polling callers, not an error.
    """

    status: ResolveStatus
    fleet: PendingFleet
    reason: str | None = None

    @property
    def resolved(self) -> bool:
        """True when the fleet is resolved after this call."""
        return self.status in (ResolveStatus.RESOLVED, ResolveStatus.ALREADY_RESOLVED)


@dataclass
class FleetFailure:
    """A fleet that could not be resolved during a batch."""

    fleet_id: str
    reason: str


@dataclass
class BatchResolveResult:
    """Per-fleet outcomes of :meth:`FleetManager.resolve_all_ready`."""

    successful: list[PendingFleet] = field(default_factory=list)
    failed: list[FleetFailure] = field(default_factory=list)
