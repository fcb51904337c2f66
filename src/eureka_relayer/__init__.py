"""
Eureka Relayer proof core.

Builds IBC Eureka packet messages from chain events and attaches the
Tendermint or Ethereum proofs the counterparty light client verifies.
"""

from .config import RelayerConfig
from .errors import (
    EurekaRelayerError,
    InvariantViolationError,
    MalformedResponseError,
    ProofEmptyError,
    ProofNonEmptyError,
    UpstreamUnavailableError,
)
from .ethereum import inject_ethereum_proofs
from .event_processor import build_recv_and_ack_messages, build_timeout_messages
from .mock import inject_mock_proofs
from .models import (
    EurekaEventWithHeight,
    Height,
    MsgAcknowledgement,
    MsgRecvPacket,
    MsgTimeout,
    Packet,
    SendPacket,
    WriteAcknowledgement,
)
from .relayer import ProofPipeline, RelayBatch
from .tendermint import inject_tendermint_proofs

__all__ = [
    "RelayerConfig",
    "ProofPipeline",
    "RelayBatch",
    "build_timeout_messages",
    "build_recv_and_ack_messages",
    "inject_tendermint_proofs",
    "inject_ethereum_proofs",
    "inject_mock_proofs",
    "Packet",
    "SendPacket",
    "WriteAcknowledgement",
    "EurekaEventWithHeight",
    "Height",
    "MsgRecvPacket",
    "MsgAcknowledgement",
    "MsgTimeout",
    "EurekaRelayerError",
    "ProofEmptyError",
    "ProofNonEmptyError",
    "UpstreamUnavailableError",
    "MalformedResponseError",
    "InvariantViolationError",
]
__version__ = "0.1.0"
