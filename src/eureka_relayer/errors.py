"""
Error kinds raised by the proof construction core.

Injectors surface the first error and abort; callers retry whole batches
according to ``retryable``.
"""


class EurekaRelayerError(Exception):
    """Base class for all relayer proof errors."""

    retryable: bool = False


class ProofError(EurekaRelayerError):
    """A proof query returned a value that contradicts the expected state."""

    def __init__(self, message: str, path: bytes = b"") -> None:
        super().__init__(message)
        self.path = path


class ProofEmptyError(ProofError):
    """Membership was expected but the queried value is empty.

    Not retryable at the same height. The state may not have propagated
    yet, so a later call at a newer height can succeed.
    """


class ProofNonEmptyError(ProofError):
    """Non-membership was expected but the queried value is present.

    The corresponding message is obsolete (e.g. the packet was already
    received) and should be dropped.
    """


class UpstreamUnavailableError(EurekaRelayerError):
    """Transport failure talking to an RPC, beacon or execution endpoint."""

    retryable = True


class MalformedResponseError(EurekaRelayerError):
    """An upstream response was structurally invalid or missing a proof entry."""


class InvariantViolationError(EurekaRelayerError):
    """An event reached a stage it should have been filtered out of."""
