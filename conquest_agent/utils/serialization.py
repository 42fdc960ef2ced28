"""Record serialization to/from JSON-compatible dictionaries.

Used by the JSON store. Planet ids are uint256 values; Python's json module
keeps arbitrary-precision integers exact, so they are stored as numbers.
"""

from typing import Any

from ..models.exit import PendingExit
from ..models.fleet import PendingFleet
from .constants import ZERO_ADDRESS


def serialize_fleet(fleet: PendingFleet) -> dict[str, Any]:
    """Convert PendingFleet to dictionary."""
    return {
        "fleet_id": fleet.fleet_id,
        "from_planet_id": fleet.from_planet_id,
        "to_planet_id": fleet.to_planet_id,
        "quantity": fleet.quantity,
        "secret": fleet.secret,
        "gift": fleet.gift,
        "specific": fleet.specific,
        "arrival_time_wanted": fleet.arrival_time_wanted,
        "fleet_sender": fleet.fleet_sender,
        "operator": fleet.operator,
        "committed_at": fleet.committed_at,
        "estimated_arrival_time": fleet.estimated_arrival_time,
        "resolved": fleet.resolved,
        "resolved_at": fleet.resolved_at,
        "commit_tx_hash": fleet.commit_tx_hash,
        "resolve_tx_hash": fleet.resolve_tx_hash,
    }


def deserialize_fleet(data: dict[str, Any]) -> PendingFleet:
    """Reconstruct PendingFleet from dictionary."""
    return PendingFleet(
        fleet_id=data["fleet_id"],
        from_planet_id=int(data["from_planet_id"]),
        to_planet_id=int(data["to_planet_id"]),
        quantity=data["quantity"],
        secret=data["secret"],
        gift=data.get("gift", False),
        specific=data.get("specific", ZERO_ADDRESS),
        arrival_time_wanted=data["arrival_time_wanted"],
        fleet_sender=data["fleet_sender"],
        operator=data["operator"],
        committed_at=data["committed_at"],
        estimated_arrival_time=data["estimated_arrival_time"],
        resolved=data.get("resolved", False),
        resolved_at=data.get("resolved_at"),
        commit_tx_hash=data.get("commit_tx_hash"),
        resolve_tx_hash=data.get("resolve_tx_hash"),
    )


def serialize_exit(exit: PendingExit) -> dict[str, Any]:
    """Convert PendingExit to dictionary."""
    return {
        "planet_id": exit.planet_id,
        "player": exit.player,
        "exit_start_time": exit.exit_start_time,
        "exit_duration": exit.exit_duration,
        "exit_complete_time": exit.exit_complete_time,
        "num_spaceships": exit.num_spaceships,
        "owner": exit.owner,
        "completed": exit.completed,
        "interrupted": exit.interrupted,
        "last_checked_at": exit.last_checked_at,
        "completed_at": exit.completed_at,
        "interrupted_at": exit.interrupted_at,
        "new_owner": exit.new_owner,
    }


def deserialize_exit(data: dict[str, Any]) -> PendingExit:
    """Reconstruct PendingExit from dictionary."""
    return PendingExit(
        planet_id=int(data["planet_id"]),
        player=data["player"],
        exit_start_time=data["exit_start_time"],
        exit_duration=data["exit_duration"],
        exit_complete_time=data["exit_complete_time"],
        num_spaceships=data["num_spaceships"],
        owner=data["owner"],
        completed=data.get("completed", False),
        interrupted=data.get("interrupted", False),
        last_checked_at=data.get("last_checked_at", 0),
        completed_at=data.get("completed_at"),
        interrupted_at=data.get("interrupted_at"),
        new_owner=data.get("new_owner"),
    )
