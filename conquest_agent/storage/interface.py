"""Persistent store contract for fleet and exit records.

Any key-addressable durable backend can implement :class:`FleetStorage`.
Implementations must guarantee:

- a write is durable before the coroutine returns;
- a read following a write by the same caller observes that write;
- each record is replaced as a whole, never patched field by field.

Records returned by the store are copies. Callers hold them for one
operation only and re-read before acting on updated state.
"""

from abc import ABC, abstractmethod

from ..models.exit import PendingExit
from ..models.fleet import PendingFleet


class FleetStorage(ABC):
    """Durable storage for :class:`PendingFleet` and :class:`PendingExit` records."""

    # Fleets (keyed by fleet id)

    @abstractmethod
    async def save_fleet(self, fleet: PendingFleet) -> None:
        """Insert or replace a fleet record."""

    @abstractmethod
    async def get_fleet(self, fleet_id: str) -> PendingFleet | None:
        """Get a fleet by id, or None."""

    @abstractmethod
    async def get_all_fleets(self) -> list[PendingFleet]:
        """Get every stored fleet."""

    @abstractmethod
    async def get_pending_fleets_by_sender(self, sender: str) -> list[PendingFleet]:
        """Get unresolved fleets whose ``fleet_sender`` matches (case-insensitive)."""

    @abstractmethod
    async def delete_fleet(self, fleet_id: str) -> bool:
        """Remove a fleet record. Returns True if it existed."""

    @abstractmethod
    async def cleanup_old_resolved_fleets(self, older_than: int) -> int:
        """Remove resolved fleets resolved before ``older_than``.

        Unresolved fleets are never removed. Returns the number removed.
        """

    # Exits (keyed by planet id)

    @abstractmethod
    async def save_pending_exit(self, exit: PendingExit) -> None:
        """Insert or replace the exit record for a planet."""

    @abstractmethod
    async def get_pending_exit(self, planet_id: int) -> PendingExit | None:
        """Get the exit record for a planet, or None."""

    @abstractmethod
    async def get_pending_exits_by_player(self, player: str) -> list[PendingExit]:
        """Get all exit records initiated by ``player`` (case-insensitive)."""

    @abstractmethod
    async def mark_exit_interrupted(self, planet_id: int, time: int, new_owner: str) -> None:
        """Mark an exit interrupted by a capture observed at ``time``."""

    @abstractmethod
    async def mark_exit_completed(self, planet_id: int, time: int) -> None:
        """Mark an exit completed as observed at ``time``."""

    @abstractmethod
    async def delete_pending_exit(self, planet_id: int) -> bool:
        """Remove an exit record. Returns True if it existed."""

    @abstractmethod
    async def cleanup_old_completed_exits(self, older_than: int) -> int:
        """Remove completed exits completed before ``older_than``.

        Pending and interrupted exits are kept. Returns the number removed.
        """
