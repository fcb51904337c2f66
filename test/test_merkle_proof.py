"""Unit tests for MerkleProof protobuf encoding."""

from eureka_relayer.utils.merkle_proof import encode_merkle_proof

from conftest import decode_merkle_proof


def test_wire_format_is_repeated_field_one():
    encoded = encode_merkle_proof([b"\x0a\x01a", b"bc"])

    # field 1, wire type 2, followed by the length of each proof
    assert encoded == b"\x0a\x03\x0a\x01a" + b"\x0a\x02bc"


def test_decode_returns_proofs_in_order():
    proofs = [b"iavl-proof", b"simple-proof"]

    assert decode_merkle_proof(encode_merkle_proof(proofs)) == proofs


def test_empty_proof_list():
    assert encode_merkle_proof([]) == b""
