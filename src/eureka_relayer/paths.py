"""
Packet storage path derivation.

Both proof injectors prove state under the same IBC v2 key layout,
``client_id || discriminator || uint64_be(sequence)``. The light clients on
the counterparty recompute these keys independently, so they must never
diverge from the chain modules that write them.
"""

from enum import Enum

from web3 import Web3

from .models import Packet

IBC_STORE_KEY = b"ibc"


class PathRole(Enum):
    """Lifecycle role of the state being proven, valued by its key discriminator."""
    COMMITMENT = 1
    RECEIPT = 2
    ACKNOWLEDGEMENT = 3


def _packet_key(client_id: str, role: PathRole, sequence: int) -> bytes:
    return client_id.encode() + bytes([role.value]) + sequence.to_bytes(8, "big")


def commitment_path(packet: Packet) -> bytes:
    """Path of the packet commitment, stored on the sending chain."""
    return _packet_key(packet.source_client, PathRole.COMMITMENT, packet.sequence)


def receipt_commitment_path(packet: Packet) -> bytes:
    """Path of the packet receipt, stored on the receiving chain."""
    return _packet_key(packet.dest_client, PathRole.RECEIPT, packet.sequence)


def ack_commitment_path(packet: Packet) -> bytes:
    """Path of the acknowledgement commitment, stored on the receiving chain."""
    return _packet_key(packet.dest_client, PathRole.ACKNOWLEDGEMENT, packet.sequence)


def packet_path(packet: Packet, role: PathRole) -> bytes:
    match role:
        case PathRole.COMMITMENT:
            return commitment_path(packet)
        case PathRole.RECEIPT:
            return receipt_commitment_path(packet)
        case PathRole.ACKNOWLEDGEMENT:
            return ack_commitment_path(packet)


def ics26_commitment_slot(path: bytes, base_slot: int) -> bytes:
    """
    Map an IBC path to the storage slot of the ICS26 router's commitment mapping.

    The router stores commitments in ``mapping(bytes32 => bytes32)`` at
    ``base_slot`` keyed by ``keccak256(path)``, so the slot follows the
    Solidity mapping layout ``keccak256(keccak256(path) || uint256(base_slot))``.

    Args:
        path: IBC path bytes
        base_slot: Storage slot of the commitment mapping

    Returns:
        32-byte storage slot key
    """
    path_hash = Web3.keccak(path)
    return bytes(Web3.keccak(path_hash + base_slot.to_bytes(32, "big")))
