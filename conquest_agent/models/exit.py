"""Exit (unstake) data models."""

from dataclasses import dataclass, field
from enum import Enum


class ExitStatus(Enum):
    """Lifecycle state of a planet exit."""

    PENDING = "pending"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


@dataclass
class PendingExit:
    """An in-flight unstake operation for one planet.

    Interruption means someone else captured the planet before the exit
    completed. It supersedes completion.
    """

    planet_id: int
    player: str  # Staking owner who initiated the exit
    exit_start_time: int
    exit_duration: int
    exit_complete_time: int  # exit_start_time + exit_duration
    num_spaceships: int  # Snapshot at exit start
    owner: str  # Ledger-observed owner at exit start
    completed: bool = False
    interrupted: bool = False
    last_checked_at: int = 0
    completed_at: int | None = None
    interrupted_at: int | None = None
    new_owner: str | None = None  # Captor, when interrupted

    def __post_init__(self):
        """Validate exit data after initialization."""
        if self.exit_duration < 0:
            raise ValueError(f"Invalid exit_duration: {self.exit_duration} (must be >= 0)")
        if self.exit_complete_time != self.exit_start_time + self.exit_duration:
            raise ValueError(
                f"Invalid exit_complete_time: {self.exit_complete_time} "
                f"(must be {self.exit_start_time + self.exit_duration})"
            )
        if self.num_spaceships < 0:
            raise ValueError(f"Invalid num_spaceships: {self.num_spaceships} (must be >= 0)")

    @property
    def status(self) -> ExitStatus:
        if self.interrupted:
            return ExitStatus.INTERRUPTED
        if self.completed:
            return ExitStatus.COMPLETED
        return ExitStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.completed or self.interrupted


@dataclass
class ExitVerification:
    """Result of :meth:`ExitTracker.verify_exit_status`."""

    exit: PendingExit
    interrupted: bool
    new_owner: str | None  # Owner observed on the ledger during this check

    @property
    def status(self) -> ExitStatus:
        return self.exit.status


@dataclass
class ExitResult:
    """Result of submitting a batched exit transaction."""

    tx_hash: str
    exits_initiated: list[int] = field(default_factory=list)
