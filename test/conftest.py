"""Shared fixtures for the Eureka relayer tests."""

import pytest

from eureka_relayer.models import EurekaEventWithHeight, Height, Packet, Payload, SendPacket, WriteAcknowledgement
from eureka_relayer.utils.merkle_proof import MerkleProof

SIGNER = "cosmos1signer"
TARGET_CLIENT = "client-1"
COUNTERPARTY_CLIENT = "08-wasm-0"


def make_packet(
    sequence: int = 1,
    source_client: str = COUNTERPARTY_CLIENT,
    dest_client: str = TARGET_CLIENT,
    timeout_timestamp: int = 100,
) -> Packet:
    return Packet(
        source_client=source_client,
        dest_client=dest_client,
        sequence=sequence,
        timeout_timestamp=timeout_timestamp,
        payloads=(
            Payload(
                source_port="transfer",
                dest_port="transfer",
                version="ics20-1",
                encoding="application/json",
                value=b'{"amount":"1"}',
            ),
        ),
    )


def decode_merkle_proof(data: bytes) -> list[bytes]:
    """Split an encoded MerkleProof back into its commitment proofs."""
    proof = MerkleProof()
    proof.ParseFromString(data)
    return list(proof.proofs)


def send_event(packet: Packet, height: int = 10) -> EurekaEventWithHeight:
    return EurekaEventWithHeight(event=SendPacket(packet), height=height)


def ack_event(packet: Packet, acks: tuple[bytes, ...] = (b"ack",), height: int = 10) -> EurekaEventWithHeight:
    return EurekaEventWithHeight(event=WriteAcknowledgement(packet, acks), height=height)


@pytest.fixture
def target_height():
    """Provisional proof height used when building messages."""
    return Height(revision_number=1, revision_height=42)


@pytest.fixture
def packet():
    """A packet sent by the counterparty to the target client, timing out at 100."""
    return make_packet()
