"""
Relay batch pipeline.

Turns the events a relay loop collected from both chains into complete,
proven messages ready for the submission layer, using exactly one proof
injector selected by the chain proofs are fetched from.
"""

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .config import RelayerConfig
from .errors import EurekaRelayerError
from .ethereum import BeaconApiClient, BeaconClient, EthApiClient, ExecutionClient, inject_ethereum_proofs
from .event_processor import build_recv_and_ack_messages, build_timeout_messages
from .mock import inject_mock_proofs
from .models import EurekaEventWithHeight, Height, MsgAcknowledgement, MsgRecvPacket, MsgTimeout
from .tendermint import TendermintClient, TendermintRpcClient, inject_tendermint_proofs

logger = logging.getLogger(__name__)


class ProofInjector(Protocol):
    def proof_height(self, height: int) -> Height:
        """Height recorded on messages proven at the given source chain height."""
        ...

    async def inject(
        self,
        recv_msgs: Sequence[MsgRecvPacket],
        ack_msgs: Sequence[MsgAcknowledgement],
        timeout_msgs: Sequence[MsgTimeout],
        height: int,
    ) -> None:
        ...


class TendermintProofInjector:
    """Proves messages against a Tendermint source chain at a block height."""

    def __init__(self, client: TendermintClient, revision_number: int = 0):
        self.client = client
        self.revision_number = revision_number

    def proof_height(self, height: int) -> Height:
        return Height(revision_number=self.revision_number, revision_height=height)

    async def inject(
        self,
        recv_msgs: Sequence[MsgRecvPacket],
        ack_msgs: Sequence[MsgAcknowledgement],
        timeout_msgs: Sequence[MsgTimeout],
        height: int,
    ) -> None:
        await inject_tendermint_proofs(
            recv_msgs, ack_msgs, timeout_msgs, self.client, self.proof_height(height)
        )


class EthereumProofInjector:
    """Proves messages against an Ethereum source chain at a beacon slot."""

    def __init__(
        self,
        execution_client: ExecutionClient,
        beacon_client: BeaconClient,
        contract_address: str,
        contract_base_slot: int,
    ):
        self.execution_client = execution_client
        self.beacon_client = beacon_client
        self.contract_address = contract_address
        self.contract_base_slot = contract_base_slot

    def proof_height(self, height: int) -> Height:
        return Height(revision_number=0, revision_height=height)

    async def inject(
        self,
        recv_msgs: Sequence[MsgRecvPacket],
        ack_msgs: Sequence[MsgAcknowledgement],
        timeout_msgs: Sequence[MsgTimeout],
        height: int,
    ) -> None:
        await inject_ethereum_proofs(
            recv_msgs,
            ack_msgs,
            timeout_msgs,
            self.execution_client,
            self.beacon_client,
            self.contract_address,
            self.contract_base_slot,
            height,
        )


class MockProofInjector:
    """Fills sentinel proofs without touching any chain."""

    def proof_height(self, height: int) -> Height:
        return Height()

    async def inject(
        self,
        recv_msgs: Sequence[MsgRecvPacket],
        ack_msgs: Sequence[MsgAcknowledgement],
        timeout_msgs: Sequence[MsgTimeout],
        height: int,
    ) -> None:
        inject_mock_proofs(recv_msgs, ack_msgs, timeout_msgs)


def injector_from_config(config: RelayerConfig) -> ProofInjector:
    """Create the proof injector and its RPC clients for the configured source chain."""
    match config.source_chain_type:
        case "tendermint" if config.tendermint:
            return TendermintProofInjector(
                TendermintRpcClient(config.tendermint.rpc_url, timeout=config.request_timeout),
                revision_number=config.tendermint.revision_number,
            )
        case "ethereum" if config.ethereum:
            return EthereumProofInjector(
                EthApiClient(config.ethereum.execution_rpc_url, timeout=config.request_timeout),
                BeaconApiClient(config.ethereum.beacon_api_url, timeout=config.request_timeout),
                config.ethereum.ics26_router_address,
                config.ethereum.ics26_base_slot,
            )
        case "mock":
            return MockProofInjector()
        case other:
            raise ValueError(f"No proof injector available for source chain type {other}")


@dataclass(slots=True)
class RelayBatch:
    """Proven messages of one relay iteration, ready for submission."""
    recv_msgs: list[MsgRecvPacket] = field(default_factory=list)
    ack_msgs: list[MsgAcknowledgement] = field(default_factory=list)
    timeout_msgs: list[MsgTimeout] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.recv_msgs) + len(self.ack_msgs) + len(self.timeout_msgs)


class ProofPipeline:
    """
    Builds and proves the messages of one relay iteration.

    This class focuses on coordination, delegating classification to the
    message builder and proof fetching to the injector.
    """

    def __init__(self, injector: ProofInjector, target_client_id: str, signer_address: str):
        """
        Initialize the pipeline.

        Args:
            injector: Proof injector for the chain proofs are fetched from
            target_client_id: Client identifier, on the target chain, of the light client tracking the source chain
            signer_address: Signer placed on every message
        """
        self.injector = injector
        self.target_client_id = target_client_id
        self.signer_address = signer_address

    @classmethod
    def from_config(cls, config: RelayerConfig) -> "ProofPipeline":
        return cls(injector_from_config(config), config.target_client_id, config.signer_address)

    async def build_relay_batch(
        self,
        src_events: Iterable[EurekaEventWithHeight],
        target_events: Iterable[EurekaEventWithHeight],
        height: int,
        now: int | None = None,
    ) -> RelayBatch:
        """
        Build recv, ack and timeout messages and attach their proofs.

        Args:
            src_events: Events observed on the source chain
            target_events: Events observed on the target chain
            height: Source chain height (or beacon slot) the target's light client tracks
            now: Current unix timestamp in seconds, defaults to the wall clock

        Returns:
            RelayBatch with every proof and proof height set

        Raises:
            EurekaRelayerError: If proof injection fails; no message of the batch is usable
        """
        if now is None:
            now = int(time.time())

        target_height = self.injector.proof_height(height)
        recv_msgs, ack_msgs = build_recv_and_ack_messages(
            src_events, self.target_client_id, target_height, self.signer_address, now
        )
        timeout_msgs = build_timeout_messages(
            target_events, self.target_client_id, target_height, self.signer_address, now
        )
        batch = RelayBatch(recv_msgs, ack_msgs, timeout_msgs)
        if not batch:
            logger.debug("No actionable events, nothing to prove")
            return batch

        logger.info(
            f"Proving {len(recv_msgs)} recv, {len(ack_msgs)} ack and "
            f"{len(timeout_msgs)} timeout messages at {target_height}"
        )
        try:
            await self.injector.inject(recv_msgs, ack_msgs, timeout_msgs, height)
        except EurekaRelayerError as e:
            logger.error(f"Proof injection failed at {target_height}: {e}", exc_info=True)
            raise

        return batch
