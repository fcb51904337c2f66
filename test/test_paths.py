"""Unit tests for packet path derivation."""

from web3 import Web3

from eureka_relayer.paths import (
    PathRole,
    ack_commitment_path,
    commitment_path,
    ics26_commitment_slot,
    packet_path,
    receipt_commitment_path,
)

from conftest import make_packet


class TestPacketPaths:
    """Test suite for the IBC v2 key layout."""

    def test_commitment_path_uses_source_client(self):
        packet = make_packet(sequence=1, source_client="client-0", dest_client="client-9")

        assert commitment_path(packet) == b"client-0" + b"\x01" + b"\x00" * 7 + b"\x01"

    def test_receipt_path_uses_dest_client(self):
        packet = make_packet(sequence=258, source_client="client-0", dest_client="client-9")

        assert receipt_commitment_path(packet) == b"client-9" + b"\x02" + b"\x00" * 6 + b"\x01\x02"

    def test_ack_path_uses_dest_client(self):
        packet = make_packet(sequence=7, source_client="client-0", dest_client="client-9")

        assert ack_commitment_path(packet) == b"client-9" + b"\x03" + b"\x00" * 7 + b"\x07"

    def test_packet_path_dispatches_by_role(self):
        packet = make_packet(sequence=3)

        assert packet_path(packet, PathRole.COMMITMENT) == commitment_path(packet)
        assert packet_path(packet, PathRole.RECEIPT) == receipt_commitment_path(packet)
        assert packet_path(packet, PathRole.ACKNOWLEDGEMENT) == ack_commitment_path(packet)

    def test_paths_differ_per_role_and_sequence(self):
        first = make_packet(sequence=1, source_client="client-1", dest_client="client-1")
        second = make_packet(sequence=2, source_client="client-1", dest_client="client-1")

        paths = {packet_path(p, role) for p in (first, second) for role in PathRole}
        assert len(paths) == 6

    def test_payload_does_not_affect_path(self):
        packet = make_packet(sequence=5)
        bare = packet.__class__(
            source_client=packet.source_client,
            dest_client=packet.dest_client,
            sequence=packet.sequence,
            timeout_timestamp=packet.timeout_timestamp,
        )

        assert commitment_path(packet) == commitment_path(bare)


class TestStorageSlot:
    """Test suite for the ICS26 commitment mapping slot."""

    def test_slot_follows_solidity_mapping_layout(self):
        path = b"client-0\x01" + (1).to_bytes(8, "big")
        base_slot = 0x1260944489272988D9DF285149B5AA1B0F48F2136D6F416159F840A3E0747600

        expected = Web3.keccak(Web3.keccak(path) + base_slot.to_bytes(32, "big"))
        assert ics26_commitment_slot(path, base_slot) == bytes(expected)

    def test_slot_is_32_bytes_and_depends_on_base_slot(self):
        path = b"client-0\x02" + (1).to_bytes(8, "big")

        slot_a = ics26_commitment_slot(path, 0)
        slot_b = ics26_commitment_slot(path, 1)

        assert len(slot_a) == 32
        assert slot_a != slot_b
        assert ics26_commitment_slot(path, 0) == slot_a
