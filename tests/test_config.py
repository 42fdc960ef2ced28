"""Tests for agent configuration."""

import pytest
from pydantic import ValidationError

from conquest_agent.config import AgentConfig

from .conftest import GAME_CONTRACT

KEY = "0x" + "4c" * 32


class TestAgentConfig:
    """Test configuration parsing and validation."""

    def test_defaults(self):
        config = AgentConfig(game_contract=GAME_CONTRACT)
        assert config.rpc_url == "http://localhost:8545"
        assert config.private_key is None
        assert config.retention_days == 7
        assert config.storage_path == "state/conquest_agent.json"
        assert config.planet_catalog_path is None

    def test_contract_is_checksummed(self):
        config = AgentConfig(game_contract=GAME_CONTRACT.lower())
        assert config.game_contract == GAME_CONTRACT

    def test_invalid_contract(self):
        with pytest.raises(ValidationError):
            AgentConfig(game_contract="0x1234")

    def test_key_prefix_added(self):
        config = AgentConfig(game_contract=GAME_CONTRACT, private_key="4c" * 32)
        assert config.private_key == KEY

    def test_empty_key_is_read_only(self):
        assert AgentConfig(game_contract=GAME_CONTRACT, private_key="").private_key is None

    def test_malformed_key(self):
        with pytest.raises(ValidationError, match="32 bytes"):
            AgentConfig(game_contract=GAME_CONTRACT, private_key="0x1234")

    def test_key_not_in_repr(self):
        config = AgentConfig(game_contract=GAME_CONTRACT, private_key=KEY)
        assert "4c4c" not in repr(config)

    def test_rejects_negative_retention(self):
        with pytest.raises(ValidationError):
            AgentConfig(game_contract=GAME_CONTRACT, retention_days=-1)


class TestFromEnv:
    def test_reads_variables(self):
        config = AgentConfig.from_env(
            {
                "CONQUEST_RPC_URL": "http://node:8545",
                "CONQUEST_GAME_CONTRACT": GAME_CONTRACT,
                "CONQUEST_PRIVATE_KEY": KEY,
                "CONQUEST_RETENTION_DAYS": "3.5",
                "CONQUEST_SWEEP_INTERVAL": "15",
                "CONQUEST_PLANET_CATALOG": "planets.json",
            }
        )
        assert config.rpc_url == "http://node:8545"
        assert config.private_key == KEY
        assert config.retention_days == 3.5
        assert config.sweep_interval == 15
        assert config.planet_catalog_path == "planets.json"

    def test_private_key_fallback(self):
        config = AgentConfig.from_env({"CONQUEST_GAME_CONTRACT": GAME_CONTRACT, "PRIVATE_KEY": KEY})
        assert config.private_key == KEY

    def test_specific_key_wins(self):
        other = "0x" + "5d" * 32
        config = AgentConfig.from_env(
            {"CONQUEST_GAME_CONTRACT": GAME_CONTRACT, "CONQUEST_PRIVATE_KEY": KEY, "PRIVATE_KEY": other}
        )
        assert config.private_key == KEY

    def test_empty_values_use_defaults(self):
        config = AgentConfig.from_env({"CONQUEST_GAME_CONTRACT": GAME_CONTRACT, "CONQUEST_RPC_URL": ""})
        assert config.rpc_url == "http://localhost:8545"

    def test_missing_contract(self):
        with pytest.raises(ValidationError):
            AgentConfig.from_env({})
