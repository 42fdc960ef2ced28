"""Off-chain agent for the Conquest commit-reveal fleet game."""

__version__ = "0.1.0"
