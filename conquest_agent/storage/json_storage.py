"""JSON-file-backed store.

The whole document ``{"fleets": [...], "exits": [...]}`` is rewritten on
every mutation: serialized to a temporary file in the same directory,
fsynced, then moved over the target with ``os.replace``. Readers therefore
see either the old or the new document, never a torn one.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from ..errors import StorageError
from ..models.exit import PendingExit
from ..models.fleet import PendingFleet
from ..utils.serialization import (
    deserialize_exit,
    deserialize_fleet,
    serialize_exit,
    serialize_fleet,
)
from .memory import MemoryFleetStorage

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class JsonFleetStorage(MemoryFleetStorage):
    """Store records in a single JSON document on disk."""

    def __init__(self, path: str | Path):
        """Initialize JSON store.

        Args:
            path: Document path; parent directories are created on first write
        """
        super().__init__()
        self.path = Path(path)

    async def _load(self) -> tuple[dict[str, PendingFleet], dict[int, PendingExit]]:
        return await asyncio.to_thread(self._read_document)

    async def _persist(
        self, fleets: dict[str, PendingFleet], exits: dict[int, PendingExit]
    ) -> None:
        document = {
            "version": FORMAT_VERSION,
            "fleets": [serialize_fleet(f) for f in fleets.values()],
            "exits": [serialize_exit(e) for e in exits.values()],
        }
        await asyncio.to_thread(self._write_document, document)

    def _read_document(self) -> tuple[dict[str, PendingFleet], dict[int, PendingExit]]:
        if not self.path.exists():
            return {}, {}
        try:
            with open(self.path) as f:
                document = json.load(f)
            fleets = [deserialize_fleet(d) for d in document.get("fleets", [])]
            exits = [deserialize_exit(d) for d in document.get("exits", [])]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        logger.info(f"Loaded {len(fleets)} fleets and {len(exits)} exits from {self.path}")
        return {f.fleet_id.lower(): f for f in fleets}, {e.planet_id: e for e in exits}

    def _write_document(self, document: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(document, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
