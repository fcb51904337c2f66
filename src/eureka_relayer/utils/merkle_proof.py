"""
Protobuf encoding of IBC Merkle proofs.

The Tendermint light client expects ``ibc.core.commitment.v1.MerkleProof``,
a repeated list of ICS-23 ``CommitmentProof`` messages. The relayer never
inspects the ICS-23 proofs themselves, it forwards the encoded bytes it gets
from ABCI proof ops, so the message is declared here with the proofs as
opaque length-delimited bytes, which is wire-identical.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_FILE_NAME = "eureka_relayer/ibc/core/commitment/v1/commitment.proto"
_PACKAGE = "ibc.core.commitment.v1"


def _build_merkle_proof_class() -> type:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=_FILE_NAME,
        package=_PACKAGE,
        syntax="proto3",
    )
    message_proto = file_proto.message_type.add(name="MerkleProof")
    message_proto.field.add(
        name="proofs",
        number=1,
        type=descriptor_pb2.FieldDescriptorProto.TYPE_BYTES,
        label=descriptor_pb2.FieldDescriptorProto.LABEL_REPEATED,
    )

    pool = descriptor_pool.DescriptorPool()
    pool.Add(file_proto)
    return message_factory.GetMessageClass(
        pool.FindMessageTypeByName(f"{_PACKAGE}.MerkleProof")
    )


MerkleProof = _build_merkle_proof_class()


def encode_merkle_proof(commitment_proofs: list[bytes]) -> bytes:
    """Encode already-serialized ICS-23 commitment proofs as a MerkleProof."""
    return MerkleProof(proofs=commitment_proofs).SerializeToString()
