"""Error taxonomy for agent operations.

Every failure surfaced by the agent carries an :class:`ErrorType` so callers
(and the HTTP layer) can tell configuration problems from lookups, ledger
rejections and storage failures. Resolving a fleet too early is not an error
and never raises; see :class:`~conquest_agent.models.fleet.ResolveResult`.
"""

from enum import Enum


class ErrorType(Enum):
    """Classification of agent failures."""

    CONFIGURATION = "configuration"
    LOOKUP = "lookup"
    LEDGER = "ledger"
    STORAGE = "storage"


class ConquestAgentError(Exception):
    """Base class for classified agent errors."""

    def __init__(self, error_type: ErrorType, message: str):
        """Initialize agent error.

        Args:
            error_type: Classification of the error
            message: Human-readable error message
        """
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class ConfigurationError(ConquestAgentError):
    """Raised when the agent is missing configuration a call requires."""

    def __init__(self, message: str):
        super().__init__(ErrorType.CONFIGURATION, message)


class PlanetNotFoundError(ConquestAgentError):
    """Raised when the spatial info service cannot resolve a planet id."""

    def __init__(self, planet_id: int):
        self.planet_id = planet_id
        super().__init__(ErrorType.LOOKUP, f"Planet {planet_id} not found")


class FleetNotFoundError(ConquestAgentError):
    """Raised when no fleet record exists for an id."""

    def __init__(self, fleet_id: str):
        self.fleet_id = fleet_id
        super().__init__(ErrorType.LOOKUP, f"Fleet {fleet_id} not found")


class ExitNotFoundError(ConquestAgentError):
    """Raised when no exit record exists for a planet."""

    def __init__(self, planet_id: int, message: str | None = None):
        self.planet_id = planet_id
        super().__init__(
            ErrorType.LOOKUP, message or f"No pending exit found for planet {planet_id}"
        )


class LedgerError(ConquestAgentError):
    """Raised when the ledger rejects a read, dry-run, or transaction.

    The underlying client message is kept verbatim in ``detail``.
    """

    def __init__(self, stage: str, detail: str):
        """Initialize ledger error.

        Args:
            stage: Which step failed ("read", "simulate", "write", "receipt",
                "reverted")
            detail: Message reported by the ledger client
        """
        self.stage = stage
        self.detail = detail
        super().__init__(ErrorType.LEDGER, f"Ledger {stage} failed: {detail}")


class StorageError(ConquestAgentError):
    """Raised when the persistent store cannot read or durably write."""

    def __init__(self, message: str):
        super().__init__(ErrorType.STORAGE, message)
