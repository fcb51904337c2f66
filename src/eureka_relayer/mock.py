"""
Mock proof injection for dry runs and tests without chain connectivity.
"""

from collections.abc import Sequence

from .models import Height, MsgAcknowledgement, MsgRecvPacket, MsgTimeout

MOCK_PROOF = b"mock"


def inject_mock_proofs(
    recv_msgs: Sequence[MsgRecvPacket],
    ack_msgs: Sequence[MsgAcknowledgement],
    timeout_msgs: Sequence[MsgTimeout],
) -> None:
    """Fill every proof with ``MOCK_PROOF`` and every proof height with the zero height."""
    for msg in recv_msgs:
        msg.proof_commitment = MOCK_PROOF
        msg.proof_height = Height()

    for msg in ack_msgs:
        msg.proof_acked = MOCK_PROOF
        msg.proof_height = Height()

    for msg in timeout_msgs:
        msg.proof_unreceived = MOCK_PROOF
        msg.proof_height = Height()
