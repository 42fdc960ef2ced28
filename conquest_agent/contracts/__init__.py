"""Ledger and spatial-info collaborators."""

from .clients import create_ledger_client, load_contract_config, read_planet_states
from .ledger import ContractCall, LedgerClient, PreparedRequest, Web3LedgerClient
from .space_info import SpaceInfo, StaticSpaceInfo, location_coordinates, location_id

__all__ = [
    "ContractCall",
    "LedgerClient",
    "PreparedRequest",
    "SpaceInfo",
    "StaticSpaceInfo",
    "Web3LedgerClient",
    "create_ledger_client",
    "load_contract_config",
    "location_coordinates",
    "location_id",
    "read_planet_states",
]
