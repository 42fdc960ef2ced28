"""Persistent storage for fleet and exit records."""

from .interface import FleetStorage
from .json_storage import JsonFleetStorage
from .memory import MemoryFleetStorage

__all__ = ["FleetStorage", "JsonFleetStorage", "MemoryFleetStorage"]
