"""In-process store and the shared record-keeping logic for document stores."""

import asyncio
import copy
from dataclasses import replace

from ..errors import ExitNotFoundError
from ..models.exit import PendingExit
from ..models.fleet import PendingFleet
from ..utils.addresses import addresses_equal
from .interface import FleetStorage


class MemoryFleetStorage(FleetStorage):
    """Keeps records in dictionaries.

    Every mutation builds new dictionaries, hands them to :meth:`_persist`,
    and only swaps them in once that returns, so a failed write leaves the
    previous state intact. Subclasses override :meth:`_persist` (and
    :meth:`_load`) to add a durable medium.
    """

    def __init__(self):
        self._fleets: dict[str, PendingFleet] = {}
        self._exits: dict[int, PendingExit] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    async def _load(self) -> tuple[dict[str, PendingFleet], dict[int, PendingExit]]:
        return {}, {}

    async def _persist(
        self, fleets: dict[str, PendingFleet], exits: dict[int, PendingExit]
    ) -> None:
        """Durably store a full snapshot. No-op in memory."""

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._fleets, self._exits = await self._load()
            self._loaded = True

    async def _commit(
        self, fleets: dict[str, PendingFleet], exits: dict[int, PendingExit]
    ) -> None:
        await self._persist(fleets, exits)
        self._fleets, self._exits = fleets, exits

    # Fleets

    async def save_fleet(self, fleet: PendingFleet) -> None:
        async with self._lock:
            await self._ensure_loaded()
            fleets = dict(self._fleets)
            fleets[fleet.fleet_id.lower()] = copy.deepcopy(fleet)
            await self._commit(fleets, self._exits)

    async def get_fleet(self, fleet_id: str) -> PendingFleet | None:
        async with self._lock:
            await self._ensure_loaded()
            fleet = self._fleets.get(fleet_id.lower())
            return copy.deepcopy(fleet)

    async def get_all_fleets(self) -> list[PendingFleet]:
        async with self._lock:
            await self._ensure_loaded()
            return [copy.deepcopy(f) for f in self._fleets.values()]

    async def get_pending_fleets_by_sender(self, sender: str) -> list[PendingFleet]:
        async with self._lock:
            await self._ensure_loaded()
            return [
                copy.deepcopy(f)
                for f in self._fleets.values()
                if not f.resolved and addresses_equal(f.fleet_sender, sender)
            ]

    async def delete_fleet(self, fleet_id: str) -> bool:
        async with self._lock:
            await self._ensure_loaded()
            key = fleet_id.lower()
            if key not in self._fleets:
                return False
            fleets = dict(self._fleets)
            del fleets[key]
            await self._commit(fleets, self._exits)
            return True

    async def cleanup_old_resolved_fleets(self, older_than: int) -> int:
        async with self._lock:
            await self._ensure_loaded()
            fleets = {
                key: fleet
                for key, fleet in self._fleets.items()
                if not (fleet.resolved and (fleet.resolved_at or fleet.committed_at) < older_than)
            }
            removed = len(self._fleets) - len(fleets)
            if removed:
                await self._commit(fleets, self._exits)
            return removed

    # Exits

    async def save_pending_exit(self, exit: PendingExit) -> None:
        async with self._lock:
            await self._ensure_loaded()
            exits = dict(self._exits)
            exits[exit.planet_id] = copy.deepcopy(exit)
            await self._commit(self._fleets, exits)

    async def get_pending_exit(self, planet_id: int) -> PendingExit | None:
        async with self._lock:
            await self._ensure_loaded()
            return copy.deepcopy(self._exits.get(planet_id))

    async def get_pending_exits_by_player(self, player: str) -> list[PendingExit]:
        async with self._lock:
            await self._ensure_loaded()
            return [
                copy.deepcopy(e)
                for e in self._exits.values()
                if addresses_equal(e.player, player)
            ]

    async def mark_exit_interrupted(self, planet_id: int, time: int, new_owner: str) -> None:
        await self._replace_exit(
            planet_id,
            interrupted=True,
            interrupted_at=time,
            new_owner=new_owner,
            last_checked_at=time,
        )

    async def mark_exit_completed(self, planet_id: int, time: int) -> None:
        await self._replace_exit(planet_id, completed=True, completed_at=time, last_checked_at=time)

    async def _replace_exit(self, planet_id: int, **changes) -> None:
        async with self._lock:
            await self._ensure_loaded()
            current = self._exits.get(planet_id)
            if current is None:
                raise ExitNotFoundError(planet_id)
            exits = dict(self._exits)
            exits[planet_id] = replace(current, **changes)
            await self._commit(self._fleets, exits)

    async def delete_pending_exit(self, planet_id: int) -> bool:
        async with self._lock:
            await self._ensure_loaded()
            if planet_id not in self._exits:
                return False
            exits = dict(self._exits)
            del exits[planet_id]
            await self._commit(self._fleets, exits)
            return True

    async def cleanup_old_completed_exits(self, older_than: int) -> int:
        async with self._lock:
            await self._ensure_loaded()
            exits = {
                planet_id: exit
                for planet_id, exit in self._exits.items()
                if not (
                    exit.completed
                    and not exit.interrupted
                    and (exit.completed_at or exit.exit_complete_time) < older_than
                )
            }
            removed = len(self._exits) - len(exits)
            if removed:
                await self._commit(self._fleets, exits)
            return removed
