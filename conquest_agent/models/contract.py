"""Game contract configuration."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ContractConfig:
    """Configuration read once from the game contract at startup.

    Only the timing and acquisition fields are used by the agent; the
    economic parameters are kept in ``extras`` for display.
    """

    genesis: int  # Epoch time origin
    resolve_window: int  # Seconds after arrival before a fleet may be revealed
    time_per_distance: int  # Seconds of travel per distance unit
    exit_duration: int  # Seconds an unstake takes
    acquire_num_spaceships: int = 0
    extras: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Validate config after initialization."""
        for name in ("resolve_window", "time_per_distance", "exit_duration"):
            if getattr(self, name) < 0:
                raise ValueError(f"Invalid {name}: {getattr(self, name)} (must be >= 0)")

    @classmethod
    def from_ledger(cls, raw: Any) -> "ContractConfig":
        """Build from the decoded ``getConfig()`` struct."""
        values = raw if isinstance(raw, dict) else raw._asdict()
        known = {
            "genesis": "genesis",
            "resolveWindow": "resolve_window",
            "timePerDistance": "time_per_distance",
            "exitDuration": "exit_duration",
            "acquireNumSpaceships": "acquire_num_spaceships",
        }
        kwargs = {attr: int(values[key]) for key, attr in known.items() if key in values}
        extras = {
            key: int(value)
            for key, value in values.items()
            if key not in known and isinstance(value, int)
        }
        return cls(**kwargs, extras=extras)
