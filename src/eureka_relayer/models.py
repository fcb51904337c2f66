"""
Shared data models for the Eureka relayer.

This module contains the packet, event and outbound message types passed
between the message builder and the proof injectors.
"""

import json
from dataclasses import dataclass, field

from web3 import Web3


@dataclass(frozen=True, slots=True)
class Payload:
    """Application payload carried by a packet."""
    source_port: str
    dest_port: str
    version: str
    encoding: str
    value: bytes


@dataclass(frozen=True, slots=True)
class Packet:
    """Represents one cross-chain packet transfer.

    Attributes:
        source_client: Client identifier on the sending chain
        dest_client: Client identifier on the receiving chain
        sequence: Packet sequence number, unique per source client
        timeout_timestamp: Unix timestamp (seconds) after which the packet times out
        payloads: Ordered application payloads
    """
    source_client: str
    dest_client: str
    sequence: int
    timeout_timestamp: int
    payloads: tuple[Payload, ...] = ()


@dataclass(frozen=True, slots=True)
class SendPacket:
    """A packet was committed on the observed chain."""
    packet: Packet


@dataclass(frozen=True, slots=True)
class WriteAcknowledgement:
    """A packet was received and acknowledged on the observed chain."""
    packet: Packet
    acknowledgements: tuple[bytes, ...]


EurekaEvent = SendPacket | WriteAcknowledgement


@dataclass(frozen=True, slots=True)
class EurekaEventWithHeight:
    """An event together with the block height it was observed at."""
    event: EurekaEvent
    height: int


@dataclass(frozen=True, slots=True)
class Height:
    """Chain state snapshot identifier a proof is valid against."""
    revision_number: int = 0
    revision_height: int = 0

    def __str__(self) -> str:
        return f"{self.revision_number}-{self.revision_height}"


@dataclass(frozen=True, slots=True)
class Acknowledgement:
    """Per-application acknowledgements written for a received packet."""
    app_acknowledgements: tuple[bytes, ...] = ()


@dataclass(slots=True)
class MsgRecvPacket:
    packet: Packet
    proof_height: Height
    signer: str
    proof_commitment: bytes = b""


@dataclass(slots=True)
class MsgAcknowledgement:
    packet: Packet
    acknowledgement: Acknowledgement
    proof_height: Height
    signer: str
    proof_acked: bytes = b""


@dataclass(slots=True)
class MsgTimeout:
    packet: Packet
    proof_height: Height
    signer: str
    proof_unreceived: bytes = b""


@dataclass(frozen=True, slots=True)
class StorageProof:
    """Storage slot proof returned by eth_getProof.

    A non-zero value asserts membership of the slot, a zero value asserts
    non-membership.

    Attributes:
        key: 32-byte storage slot key
        value: Slot value
        proof: Ordered RLP-encoded Merkle-Patricia proof nodes
    """
    key: bytes
    value: int
    proof: tuple[bytes, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        """Convert to the JSON shape the Ethereum light client decodes."""
        return {
            "key": Web3.to_hex(self.key.rjust(32, b"\0")),
            "value": hex(self.value),
            "proof": [Web3.to_hex(node) for node in self.proof],
        }

    def encode(self) -> bytes:
        """Serialize as compact JSON bytes."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode()
