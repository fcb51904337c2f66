"""
Event classification and message building.

Converts observed Eureka events into outbound message skeletons. Proof fields
are left empty and the given target height is set as a provisional proof
height; the proof injectors fill both. Nothing here performs I/O.
"""

import logging
from collections.abc import Iterable
from typing import NoReturn

from .errors import InvariantViolationError
from .models import (
    Acknowledgement,
    EurekaEventWithHeight,
    Height,
    MsgAcknowledgement,
    MsgRecvPacket,
    MsgTimeout,
    SendPacket,
    WriteAcknowledgement,
)

logger = logging.getLogger(__name__)


def _unexpected_event(event: object, stage: str) -> NoReturn:
    raise InvariantViolationError(f"Unexpected event {type(event).__name__} at {stage}")


def build_timeout_messages(
    events: Iterable[EurekaEventWithHeight],
    target_client_id: str,
    target_height: Height,
    signer: str,
    now: int,
) -> list[MsgTimeout]:
    """
    Build timeout messages for packets sent from the target chain that have expired.

    Args:
        events: Events observed on the chain the messages are relayed to
        target_client_id: Client identifier of the chain being relayed to
        target_height: Provisional proof height
        signer: Signer address placed on every message
        now: Current unix timestamp in seconds

    Returns:
        One MsgTimeout per expired SendPacket, in input order
    """
    timeout_msgs = []
    for e in events:
        match e.event:
            case SendPacket(packet=packet):
                if now >= packet.timeout_timestamp and packet.source_client == target_client_id:
                    timeout_msgs.append(
                        MsgTimeout(packet=packet, proof_height=target_height, signer=signer)
                    )
            case WriteAcknowledgement():
                pass
            case other:
                _unexpected_event(other, "timeout classification")

    logger.debug(f"Built {len(timeout_msgs)} timeout messages for {target_client_id}")
    return timeout_msgs


def _is_actionable(e: EurekaEventWithHeight, target_client_id: str, now: int) -> bool:
    match e.event:
        case SendPacket(packet=packet):
            return packet.timeout_timestamp > now and packet.dest_client == target_client_id
        case WriteAcknowledgement(packet=packet):
            return packet.source_client == target_client_id
        case other:
            _unexpected_event(other, "recv/ack filtering")


def build_recv_and_ack_messages(
    events: Iterable[EurekaEventWithHeight],
    target_client_id: str,
    target_height: Height,
    signer: str,
    now: int,
) -> tuple[list[MsgRecvPacket], list[MsgAcknowledgement]]:
    """
    Build receive and acknowledgement messages from source chain events.

    SendPacket events that have not timed out and are destined for the target
    client become MsgRecvPacket. WriteAcknowledgement events for packets the
    target client sent become MsgAcknowledgement, routed back to the sender.

    Args:
        events: Events observed on the source chain
        target_client_id: Client identifier of the chain being relayed to
        target_height: Provisional proof height
        signer: Signer address placed on every message
        now: Current unix timestamp in seconds

    Returns:
        Tuple of (recv messages, ack messages), each in input order

    Raises:
        InvariantViolationError: If a kept event does not match its partition
    """
    kept = [e for e in events if _is_actionable(e, target_client_id, now)]
    send_events = [e for e in kept if isinstance(e.event, SendPacket)]
    ack_events = [e for e in kept if not isinstance(e.event, SendPacket)]

    recv_msgs = []
    for e in send_events:
        match e.event:
            case SendPacket(packet=packet):
                recv_msgs.append(
                    MsgRecvPacket(packet=packet, proof_height=target_height, signer=signer)
                )
            case other:
                _unexpected_event(other, "recv mapping")

    ack_msgs = []
    for e in ack_events:
        match e.event:
            case WriteAcknowledgement(packet=packet, acknowledgements=acks):
                ack_msgs.append(
                    MsgAcknowledgement(
                        packet=packet,
                        acknowledgement=Acknowledgement(app_acknowledgements=tuple(acks)),
                        proof_height=target_height,
                        signer=signer,
                    )
                )
            case other:
                _unexpected_event(other, "ack mapping")

    logger.debug(
        f"Built {len(recv_msgs)} recv and {len(ack_msgs)} ack messages for {target_client_id}"
    )
    return recv_msgs, ack_msgs
