"""
Shared proof injection plumbing.

Holds the membership policy both proof backends apply, the fail-fast join
combinator and the routine that writes proofs into message skeletons once
every fetch of a call has succeeded.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TypeVar

from .errors import ProofEmptyError, ProofNonEmptyError
from .models import Height, MsgAcknowledgement, MsgRecvPacket, MsgTimeout, Packet
from .paths import PathRole

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fetches the encoded proof of a packet's state for one role. The bool is
# whether membership (True) or non-membership (False) must be proven.
ProveFn = Callable[[Packet, PathRole, bool], Awaitable[bytes]]


async def try_join_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """
    Await all awaitables concurrently, failing fast on the first error.

    Results are returned in input order. When any awaitable raises, the
    remaining ones are cancelled and the first failure (in input order among
    those finished) is raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        failures = [
            task.exception()
            for task in tasks
            if task.done() and not task.cancelled() and task.exception() is not None
        ]
        if failures:
            raise failures[0]
        return [task.result() for task in tasks]
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


def check_membership(path: bytes, value_present: bool, expect_membership: bool) -> None:
    """
    Enforce the membership expectation of a queried path.

    Raises:
        ProofEmptyError: If membership was expected and the value is absent
        ProofNonEmptyError: If non-membership was expected and the value is present
    """
    if expect_membership and not value_present:
        raise ProofEmptyError(f"Membership value is empty for path 0x{path.hex()}", path)
    if not expect_membership and value_present:
        raise ProofNonEmptyError(f"Non-membership value is present for path 0x{path.hex()}", path)


async def inject_proofs(
    recv_msgs: Sequence[MsgRecvPacket],
    ack_msgs: Sequence[MsgAcknowledgement],
    timeout_msgs: Sequence[MsgTimeout],
    prove: ProveFn,
    proof_height: Height,
) -> None:
    """
    Fetch proofs for all three batches concurrently and fill the messages.

    Recv messages prove the packet commitment, ack messages the ack
    commitment (both membership); timeout messages prove the absence of a
    receipt. Messages are written only after every fetch succeeded, so a
    failed call leaves all of them untouched.
    """
    recv_proofs, ack_proofs, timeout_proofs = await try_join_all([
        try_join_all(prove(msg.packet, PathRole.COMMITMENT, True) for msg in recv_msgs),
        try_join_all(prove(msg.packet, PathRole.ACKNOWLEDGEMENT, True) for msg in ack_msgs),
        try_join_all(prove(msg.packet, PathRole.RECEIPT, False) for msg in timeout_msgs),
    ])

    for msg, proof in zip(recv_msgs, recv_proofs):
        msg.proof_commitment = proof
        msg.proof_height = proof_height
    for msg, proof in zip(ack_msgs, ack_proofs):
        msg.proof_acked = proof
        msg.proof_height = proof_height
    for msg, proof in zip(timeout_msgs, timeout_proofs):
        msg.proof_unreceived = proof
        msg.proof_height = proof_height

    logger.info(
        f"Injected proofs at height {proof_height}: {len(recv_msgs)} recv, "
        f"{len(ack_msgs)} ack, {len(timeout_msgs)} timeout"
    )
