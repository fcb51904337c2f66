"""Unit tests for configuration loading and validation."""

import logging

import pytest

from eureka_relayer.config import EthereumConfig, RelayerConfig, TendermintConfig

ROUTER = "0x5fbdb2315678afecb367f032d93f642f64180aa3"


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the config reads."""
    for name in (
        "SOURCE_CHAIN_TYPE",
        "TARGET_CLIENT_ID",
        "SIGNER_ADDRESS",
        "TENDERMINT_RPC_URL",
        "TENDERMINT_REVISION_NUMBER",
        "EXECUTION_RPC_URL",
        "BEACON_API_URL",
        "ICS26_ROUTER_ADDRESS",
        "ICS26_BASE_SLOT",
        "REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestChainConfigs:

    def test_tendermint_rejects_bad_scheme(self):
        with pytest.raises(ValueError, match="scheme"):
            TendermintConfig(rpc_url="tcp://localhost:26657")

    def test_tendermint_rejects_negative_revision(self):
        with pytest.raises(ValueError, match="Revision number"):
            TendermintConfig(rpc_url="http://localhost:26657", revision_number=-1)

    def test_ethereum_checksums_router_address(self):
        config = EthereumConfig("http://localhost:8545", "http://localhost:5052", ROUTER, 0)

        assert config.ics26_router_address == "0x5FbDB2315678afecb367f032d93F642f64180aa3"

    def test_ethereum_rejects_invalid_address(self):
        with pytest.raises(ValueError, match="Invalid ICS26 router address"):
            EthereumConfig("http://localhost:8545", "http://localhost:5052", "0x1234", 0)

    def test_ethereum_rejects_out_of_range_slot(self):
        with pytest.raises(ValueError, match="out of range"):
            EthereumConfig("http://localhost:8545", "http://localhost:5052", ROUTER, 2**256)


class TestRelayerConfig:

    def test_unsupported_chain_type(self):
        with pytest.raises(ValueError, match="Unsupported source chain type"):
            RelayerConfig(source_chain_type="solana", target_client_id="client-0", signer_address="signer")

    def test_chain_settings_required_for_type(self):
        with pytest.raises(ValueError, match="TENDERMINT_RPC_URL"):
            RelayerConfig(source_chain_type="tendermint", target_client_id="client-0", signer_address="signer")

    def test_request_timeout_bounds(self):
        with pytest.raises(ValueError, match="Request timeout"):
            RelayerConfig(source_chain_type="mock", target_client_id="client-0", signer_address="s", request_timeout=0)

    def test_from_env_tendermint(self, clean_env):
        clean_env.setenv("SOURCE_CHAIN_TYPE", "Tendermint")
        clean_env.setenv("TARGET_CLIENT_ID", "client-0")
        clean_env.setenv("SIGNER_ADDRESS", "0xsigner")
        clean_env.setenv("TENDERMINT_RPC_URL", "http://localhost:26657")
        clean_env.setenv("TENDERMINT_REVISION_NUMBER", "1")

        config = RelayerConfig.from_env()

        assert config.source_chain_type == "tendermint"
        assert config.tendermint == TendermintConfig("http://localhost:26657", 1)
        assert config.ethereum is None
        assert config.request_timeout == 30

    def test_from_env_ethereum_hex_base_slot(self, clean_env):
        clean_env.setenv("SOURCE_CHAIN_TYPE", "ethereum")
        clean_env.setenv("TARGET_CLIENT_ID", "07-tendermint-0")
        clean_env.setenv("SIGNER_ADDRESS", "cosmos1signer")
        clean_env.setenv("EXECUTION_RPC_URL", "http://localhost:8545")
        clean_env.setenv("BEACON_API_URL", "http://localhost:5052")
        clean_env.setenv("ICS26_ROUTER_ADDRESS", ROUTER)
        clean_env.setenv("ICS26_BASE_SLOT", "0x1f")
        clean_env.setenv("REQUEST_TIMEOUT", "10")

        config = RelayerConfig.from_env()

        assert config.ethereum.ics26_base_slot == 31
        assert config.request_timeout == 10

    def test_from_env_requires_chain_type(self, clean_env):
        with pytest.raises(ValueError, match="SOURCE_CHAIN_TYPE"):
            RelayerConfig.from_env()

    def test_from_env_ethereum_requires_base_slot(self, clean_env):
        clean_env.setenv("SOURCE_CHAIN_TYPE", "ethereum")

        with pytest.raises(ValueError, match="ICS26_BASE_SLOT"):
            RelayerConfig.from_env()

    def test_log_config(self, caplog):
        config = RelayerConfig(
            source_chain_type="tendermint",
            target_client_id="client-0",
            signer_address="signer",
            tendermint=TendermintConfig("http://localhost:26657"),
        )

        with caplog.at_level(logging.INFO, logger="eureka_relayer.config"):
            config.log_config()

        assert "Tendermint RPC: http://localhost:26657" in caplog.text
