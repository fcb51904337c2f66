"""
Byte and hex conversion utilities for upstream RPC responses.
"""

import base64
from typing import Union

from hexbytes import HexBytes
from web3 import Web3

from ..errors import MalformedResponseError


def to_bytes_safe(value: Union[HexBytes, bytes, str]) -> bytes:
    """
    Safely convert value to bytes, handling HexBytes, bytes, and hex strings.

    Args:
        value: Value to convert (HexBytes, bytes, or hex string)

    Returns:
        Bytes representation
    """
    if isinstance(value, HexBytes):
        return bytes(value)
    elif isinstance(value, bytes):
        return value
    else:
        return Web3.to_bytes(hexstr=value)


def to_int_safe(value: Union[int, HexBytes, bytes, str]) -> int:
    """Convert an RPC quantity given as int, bytes or hex string to int."""
    if isinstance(value, int):
        return value
    elif isinstance(value, (HexBytes, bytes)):
        return int.from_bytes(value, "big")
    else:
        return Web3.to_int(hexstr=value)


def b64decode_field(value: str | None, name: str) -> bytes:
    """Decode an optional base64 field of a Tendermint RPC response."""
    if not value:
        return b""
    try:
        return base64.b64decode(value, validate=True)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Field {name} is not valid base64") from exc
