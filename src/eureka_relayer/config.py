"""
Configuration module for the Eureka relayer proof core.

This module provides dataclasses for the endpoints and identifiers the proof
pipeline needs, loaded from environment variables and validated on creation.
"""

import logging
import os
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urlparse

from web3 import Web3

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging the way the relay service does."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _validate_url(url: str, name: str, schemes: tuple[str, ...] = ("http", "https")) -> None:
    if not url:
        raise ValueError(f"{name} is required")
    parsed = urlparse(url)
    if parsed.scheme not in schemes:
        raise ValueError(
            f"Invalid {name} scheme: {parsed.scheme}. Expected {', '.join(schemes)}"
        )


@dataclass(frozen=True, slots=True)
class TendermintConfig:
    """Configuration for a Tendermint source chain.

    Attributes:
        rpc_url: Tendermint RPC endpoint
        revision_number: Revision of the chain id (e.g. 1 for "chain-1"), used in proof heights
    """
    rpc_url: str
    revision_number: int = 0

    def __post_init__(self) -> None:
        _validate_url(self.rpc_url, "Tendermint RPC URL (TENDERMINT_RPC_URL)")
        if self.revision_number < 0:
            raise ValueError(f"Revision number must be non-negative, got {self.revision_number}")


@dataclass(frozen=True, slots=True)
class EthereumConfig:
    """Configuration for an Ethereum source chain.

    Attributes:
        execution_rpc_url: Execution layer JSON-RPC endpoint
        beacon_api_url: Beacon node REST endpoint
        ics26_router_address: Checksummed address of the ICS26 router contract
        ics26_base_slot: Storage slot of the router's commitment mapping
    """
    execution_rpc_url: str
    beacon_api_url: str
    ics26_router_address: str
    ics26_base_slot: int

    def __post_init__(self) -> None:
        _validate_url(self.execution_rpc_url, "Execution RPC URL (EXECUTION_RPC_URL)")
        _validate_url(self.beacon_api_url, "Beacon API URL (BEACON_API_URL)")

        if not Web3.is_address(self.ics26_router_address):
            raise ValueError(f"Invalid ICS26 router address: {self.ics26_router_address}")

        checksummed = Web3.to_checksum_address(self.ics26_router_address)
        if checksummed != self.ics26_router_address:
            # Use object.__setattr__ since dataclass is frozen
            object.__setattr__(self, "ics26_router_address", checksummed)

        if not 0 <= self.ics26_base_slot < 2**256:
            raise ValueError(f"ICS26 base slot out of range: {self.ics26_base_slot}")


@dataclass(frozen=True, slots=True)
class RelayerConfig:
    """Main configuration for the proof pipeline.

    Attributes:
        source_chain_type: Which chain proofs are fetched from (tendermint, ethereum or mock)
        target_client_id: Client identifier, on the target chain, of the light client tracking the source chain
        signer_address: Address placed as signer on every outbound message
        tendermint: Tendermint endpoints, required when proving against Tendermint
        ethereum: Ethereum endpoints, required when proving against Ethereum
        request_timeout: HTTP request timeout in seconds for the RPC clients
    """
    source_chain_type: str
    target_client_id: str
    signer_address: str
    tendermint: TendermintConfig | None = None
    ethereum: EthereumConfig | None = None
    request_timeout: int = 30

    SUPPORTED_CHAIN_TYPES: ClassVar[set[str]] = {"tendermint", "ethereum", "mock"}

    def __post_init__(self) -> None:
        if self.source_chain_type not in self.SUPPORTED_CHAIN_TYPES:
            raise ValueError(
                f"Unsupported source chain type: {self.source_chain_type}. "
                f"Supported types: {', '.join(sorted(self.SUPPORTED_CHAIN_TYPES))}"
            )
        if not self.target_client_id:
            raise ValueError("TARGET_CLIENT_ID is required")
        if not self.signer_address:
            raise ValueError("SIGNER_ADDRESS is required")
        if self.source_chain_type == "tendermint" and self.tendermint is None:
            raise ValueError("Tendermint source chain requires TENDERMINT_RPC_URL")
        if self.source_chain_type == "ethereum" and self.ethereum is None:
            raise ValueError("Ethereum source chain requires the Ethereum endpoint settings")
        if not 0 < self.request_timeout <= 120:
            raise ValueError(f"Request timeout must be within 1..120s, got {self.request_timeout}")

    @classmethod
    def from_env(cls) -> "RelayerConfig":
        """
        Load configuration from environment variables.

        Returns:
            RelayerConfig: Validated configuration

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        source_chain_type = os.environ.get("SOURCE_CHAIN_TYPE", "").lower()
        if not source_chain_type:
            raise ValueError(
                "SOURCE_CHAIN_TYPE environment variable is required. "
                "Use 'tendermint' or 'ethereum' for the chain proofs are fetched from, or 'mock'"
            )

        tendermint = None
        if source_chain_type == "tendermint":
            tendermint = TendermintConfig(
                rpc_url=os.environ.get("TENDERMINT_RPC_URL", ""),
                revision_number=int(os.environ.get("TENDERMINT_REVISION_NUMBER", "0")),
            )

        ethereum = None
        if source_chain_type == "ethereum":
            base_slot = os.environ.get("ICS26_BASE_SLOT", "")
            if not base_slot:
                raise ValueError(
                    "ICS26_BASE_SLOT environment variable is required. "
                    "This is the storage slot of the ICS26 router's commitment mapping"
                )
            ethereum = EthereumConfig(
                execution_rpc_url=os.environ.get("EXECUTION_RPC_URL", ""),
                beacon_api_url=os.environ.get("BEACON_API_URL", ""),
                ics26_router_address=os.environ.get("ICS26_ROUTER_ADDRESS", ""),
                ics26_base_slot=int(base_slot, 0),
            )

        return cls(
            source_chain_type=source_chain_type,
            target_client_id=os.environ.get("TARGET_CLIENT_ID", ""),
            signer_address=os.environ.get("SIGNER_ADDRESS", ""),
            tendermint=tendermint,
            ethereum=ethereum,
            request_timeout=int(os.environ.get("REQUEST_TIMEOUT", "30")),
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Eureka Relayer Proof Configuration")
        logger.info("=" * 60)
        logger.info(f"  Source chain type: {self.source_chain_type}")
        logger.info(f"  Target client: {self.target_client_id}")
        logger.info(f"  Signer: {self.signer_address}")
        if self.tendermint:
            logger.info(f"  Tendermint RPC: {self.tendermint.rpc_url}")
        if self.ethereum:
            logger.info(f"  Execution RPC: {self.ethereum.execution_rpc_url}")
            logger.info(f"  Beacon API: {self.ethereum.beacon_api_url}")
            logger.info(f"  ICS26 router: {self.ethereum.ics26_router_address}")
            logger.info(f"  ICS26 base slot: {hex(self.ethereum.ics26_base_slot)}")
        logger.info(f"  Request timeout: {self.request_timeout}s")
        logger.info("=" * 60)
