"""
Ethereum proof injection.

Resolves a beacon chain slot to its execution block, fetches storage proofs
of the ICS26 router's commitment mapping via ``eth_getProof`` and fills them
into recv, ack and timeout messages. Proof heights record the beacon slot,
since the counterparty light client tracks beacon state.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import aiohttp
import httpx
import rlp
from web3 import AsyncWeb3, Web3
from web3._utils.rpc_abi import RPC
from web3.exceptions import Web3Exception

from .errors import MalformedResponseError, UpstreamUnavailableError
from .models import Height, MsgAcknowledgement, MsgRecvPacket, MsgTimeout, Packet, StorageProof
from .paths import PathRole, ics26_commitment_slot, packet_path
from .proof_manager import check_membership, inject_proofs
from .utils.encoding import to_bytes_safe, to_int_safe

logger = logging.getLogger(__name__)


class BeaconClient(Protocol):
    async def beacon_block(self, block_id: str) -> dict[str, Any]:
        ...


class ExecutionClient(Protocol):
    async def get_proof(self, address: str, storage_keys: list[str], block_tag: str) -> dict[str, Any]:
        ...


class BeaconApiClient:
    """Async client for the beacon node REST API."""

    def __init__(self, url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def beacon_block(self, block_id: str) -> dict[str, Any]:
        """
        Fetch a signed beacon block by slot, root or named identifier.

        Returns:
            The ``data`` object of the response (``message`` and ``signature``)

        Raises:
            MalformedResponseError: If no block exists for the identifier or the body is invalid
            UpstreamUnavailableError: If the beacon node cannot be reached
        """
        path = f"/eth/v2/beacon/blocks/{block_id}"
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.get(self.url + path)
                if response.status_code == httpx.codes.NOT_FOUND:
                    raise MalformedResponseError(f"No beacon block for {block_id}")
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Beacon API request {path} failed: {exc}") from exc
        except ValueError as exc:
            raise MalformedResponseError(f"Beacon API {path} returned invalid JSON") from exc

        data = body.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Beacon API {path} response has no data")
        return data


class EthApiClient:
    """Execution layer JSON-RPC client backed by web3's AsyncWeb3."""

    def __init__(self, rpc_url: str, timeout: float = 30.0, w3: AsyncWeb3 | None = None):
        self.w3 = w3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)})
        )

    async def get_proof(self, address: str, storage_keys: list[str], block_tag: str) -> dict[str, Any]:
        """
        Call eth_getProof for an account and storage keys at a block.

        Issued through the async request manager, so the result keeps its
        raw hex encoding.

        Raises:
            UpstreamUnavailableError: If the request fails
            MalformedResponseError: If the result is not a proof object
        """
        try:
            proof = await self.w3.manager.coro_request(
                RPC.eth_getProof,
                [Web3.to_checksum_address(address), list(storage_keys), block_tag],
            )
        except (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise UpstreamUnavailableError(f"eth_getProof failed: {exc}") from exc

        if not isinstance(proof, Mapping):
            raise MalformedResponseError(f"eth_getProof returned {type(proof).__name__}, expected an object")
        return dict(proof)


async def resolve_execution_block(beacon_client: BeaconClient, proof_slot: int) -> int:
    """
    Resolve a beacon slot to the execution block number it carries.

    Raises:
        MalformedResponseError: If the block is for another slot or lacks an execution payload
    """
    block = await beacon_client.beacon_block(str(proof_slot))
    try:
        message = block["message"]
        block_slot = int(message["slot"])
        block_number = int(message["body"]["execution_payload"]["block_number"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Beacon block at slot {proof_slot} has no execution payload") from exc

    if block_slot != proof_slot:
        raise MalformedResponseError(
            f"Beacon block slot mismatch: requested {proof_slot}, got {block_slot}"
        )
    return block_number


async def get_commitment_proof(
    execution_client: ExecutionClient,
    contract_address: str,
    block_number: int,
    path: bytes,
    base_slot: int,
) -> StorageProof:
    """
    Fetch the storage proof of an IBC path in the ICS26 router's commitment mapping.

    Raises:
        MalformedResponseError: If no storage proof entry is returned or it is invalid
    """
    storage_key = ics26_commitment_slot(path, base_slot)
    account_proof = await execution_client.get_proof(
        contract_address, [Web3.to_hex(storage_key)], hex(block_number)
    )

    storage_proofs = account_proof.get("storageProof") or []
    if not storage_proofs:
        raise MalformedResponseError(
            f"No storage proof returned for slot {Web3.to_hex(storage_key)} at block {block_number}"
        )

    entry = storage_proofs[0]
    try:
        storage_proof = StorageProof(
            key=to_bytes_safe(entry["key"]).rjust(32, b"\0"),
            value=to_int_safe(entry["value"]),
            proof=tuple(to_bytes_safe(node) for node in entry["proof"]),
        )
        for node in storage_proof.proof:
            rlp.decode(node)
    except (KeyError, TypeError, ValueError, rlp.DecodingError) as exc:
        raise MalformedResponseError(f"Invalid storage proof entry: {exc}") from exc

    return storage_proof


async def inject_ethereum_proofs(
    recv_msgs: Sequence[MsgRecvPacket],
    ack_msgs: Sequence[MsgAcknowledgement],
    timeout_msgs: Sequence[MsgTimeout],
    execution_client: ExecutionClient,
    beacon_client: BeaconClient,
    contract_address: str,
    contract_base_slot: int,
    proof_slot: int,
) -> None:
    """
    Generate and inject Ethereum storage proofs for recv, ack and timeout messages.

    All proofs of one call are fetched against the single execution block
    the beacon block at ``proof_slot`` carries.

    Raises:
        ProofEmptyError: If a commitment or ack commitment slot is zero
        ProofNonEmptyError: If a timed out packet's receipt slot is set
        UpstreamUnavailableError: If the beacon or execution endpoint fails
        MalformedResponseError: If a response is missing a block or proof entry
    """
    block_number = await resolve_execution_block(beacon_client, proof_slot)
    logger.info(f"Resolved beacon slot {proof_slot} to execution block {block_number}")

    async def prove(packet: Packet, role: PathRole, expect_membership: bool) -> bytes:
        path = packet_path(packet, role)
        storage_proof = await get_commitment_proof(
            execution_client, contract_address, block_number, path, contract_base_slot
        )
        check_membership(path, storage_proof.value != 0, expect_membership)
        return storage_proof.encode()

    await inject_proofs(
        recv_msgs,
        ack_msgs,
        timeout_msgs,
        prove,
        Height(revision_number=0, revision_height=proof_slot),
    )
