"""
Tendermint proof injection.

Fetches ICS-23 Merkle (non-)membership proofs from a Tendermint RPC endpoint
via ``abci_query`` and fills them into recv, ack and timeout messages.
"""

import itertools
import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from .errors import MalformedResponseError, UpstreamUnavailableError
from .models import Height, MsgAcknowledgement, MsgRecvPacket, MsgTimeout, Packet
from .paths import IBC_STORE_KEY, PathRole, packet_path
from .proof_manager import check_membership, inject_proofs
from .utils.encoding import b64decode_field
from .utils.merkle_proof import encode_merkle_proof

logger = logging.getLogger(__name__)


class TendermintClient(Protocol):
    async def prove_path(self, path: Sequence[bytes], height: int) -> tuple[bytes, bytes]:
        """Return the value stored under ``path`` and its encoded MerkleProof."""
        ...


class TendermintRpcClient:
    """Async JSON-RPC client for the subset of the Tendermint RPC used for proofs."""

    def __init__(self, url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        """
        Initialize the client.

        Args:
            url: Tendermint RPC endpoint (e.g. http://localhost:26657)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used to stub the endpoint in tests
        """
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._ids = itertools.count(1)

    async def _rpc_call(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Tendermint RPC {method} failed: {exc}") from exc
        except ValueError as exc:
            raise MalformedResponseError(f"Tendermint RPC {method} returned invalid JSON") from exc

        if not isinstance(body, dict):
            raise MalformedResponseError(f"Tendermint RPC {method} response is not a JSON object")
        if "error" in body:
            raise UpstreamUnavailableError(f"Tendermint RPC {method} error: {body['error']}")
        if not isinstance(body.get("result"), dict):
            raise MalformedResponseError(f"Tendermint RPC {method} response has no result")
        return body["result"]

    async def abci_query(self, path: str, data: bytes, height: int, prove: bool = True) -> dict[str, Any]:
        result = await self._rpc_call(
            "abci_query",
            {"path": path, "data": data.hex(), "height": str(height), "prove": prove},
        )
        response = result.get("response")
        if not isinstance(response, dict):
            raise MalformedResponseError("abci_query result has no response")
        return response

    async def prove_path(self, path: Sequence[bytes], height: int) -> tuple[bytes, bytes]:
        """
        Query the value at a store path with a proof against the app hash at the given height.

        The app hash committed in header ``height`` is the state after block
        ``height - 1``, so the query runs at ``height - 1``.

        Args:
            path: Store key followed by the key segments within the store
            height: Height of the header whose app hash the proof verifies against

        Returns:
            Tuple of (value, encoded MerkleProof); an empty value denotes non-membership

        Raises:
            UpstreamUnavailableError: If the endpoint cannot be reached
            MalformedResponseError: If the response carries no usable proof
        """
        store, *key_segments = path
        query_height = height - 1
        response = await self.abci_query(
            f"store/{store.decode()}/key", b"".join(key_segments), query_height
        )

        try:
            code = int(response.get("code", 0))
            response_height = int(response.get("height", 0))
            ops = (response.get("proofOps") or {}).get("ops") or []
            op_data = [op.get("data") for op in ops]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedResponseError(f"Invalid abci_query response at height {query_height}") from exc

        if code != 0:
            raise MalformedResponseError(
                f"abci_query failed with code {code}: {response.get('log', '')}"
            )
        if response_height + 1 != height:
            raise MalformedResponseError(
                f"Height mismatch: queried {query_height} for proof height {height}, got {response_height}"
            )

        commitment_proofs = [b64decode_field(data, "proofOps.data") for data in op_data]
        if not commitment_proofs:
            raise MalformedResponseError(f"Empty proof for path at height {height}")

        value = b64decode_field(response.get("value"), "value")
        return value, encode_merkle_proof(commitment_proofs)


async def inject_tendermint_proofs(
    recv_msgs: Sequence[MsgRecvPacket],
    ack_msgs: Sequence[MsgAcknowledgement],
    timeout_msgs: Sequence[MsgTimeout],
    source_client: TendermintClient,
    target_height: Height,
) -> None:
    """
    Generate and inject Tendermint proofs for recv, ack and timeout messages.

    Every message is proven at ``target_height`` and gets it as proof height.

    Raises:
        ProofEmptyError: If a commitment or ack commitment is missing
        ProofNonEmptyError: If a timed out packet has a receipt
        UpstreamUnavailableError: If the RPC endpoint fails
        MalformedResponseError: If the RPC returns an unusable proof
    """
    async def prove(packet: Packet, role: PathRole, expect_membership: bool) -> bytes:
        path = packet_path(packet, role)
        value, proof = await source_client.prove_path(
            [IBC_STORE_KEY, path], target_height.revision_height
        )
        check_membership(path, bool(value), expect_membership)
        logger.debug(f"Proved {role.name.lower()} of {packet.source_client}/{packet.sequence}")
        return proof

    await inject_proofs(recv_msgs, ack_msgs, timeout_msgs, prove, target_height)
