"""
CharmVault Contract Payload Tests
"""

import pytest

from charmvault.core.contract import Beneficiary, InheritanceContract, Status
from charmvault.core.serialization import ByteReader, ByteWriter, serialize_varint, deserialize_varint
from charmvault.errors import PayloadDecodeError


class TestStatus:
    """Tests for the status graph."""

    def test_active_transitions(self):
        """Test Active may stay Active or move forward."""
        assert Status.ACTIVE.can_transition_to(Status.ACTIVE)
        assert Status.ACTIVE.can_transition_to(Status.TRIGGERED)
        assert Status.ACTIVE.can_transition_to(Status.DISTRIBUTED)

    def test_triggered_transitions(self):
        """Test Triggered can only be distributed."""
        assert Status.TRIGGERED.can_transition_to(Status.DISTRIBUTED)
        assert not Status.TRIGGERED.can_transition_to(Status.ACTIVE)
        assert not Status.TRIGGERED.can_transition_to(Status.TRIGGERED)

    def test_distributed_is_terminal(self):
        """Test Distributed has no successors."""
        assert Status.DISTRIBUTED.is_terminal
        assert not Status.ACTIVE.is_terminal
        for status in Status:
            assert not Status.DISTRIBUTED.can_transition_to(status)

    def test_byte_encoding(self):
        """Test status byte values."""
        assert Status.ACTIVE.to_byte() == 0
        assert Status.TRIGGERED.to_byte() == 1
        assert Status.DISTRIBUTED.to_byte() == 2
        for status in Status:
            assert Status.from_byte(status.to_byte()) is status

    def test_unknown_byte(self):
        """Test unknown status byte is a decode error."""
        with pytest.raises(PayloadDecodeError):
            Status.from_byte(3)

    def test_parse(self):
        """Test parsing status names."""
        assert Status.parse("Triggered") is Status.TRIGGERED
        with pytest.raises(PayloadDecodeError):
            Status.parse("active")


class TestBeneficiary:
    """Tests for Beneficiary values."""

    def test_valid(self):
        b = Beneficiary("addrA", 60)
        assert b.to_dict() == {"address": "addrA", "percentage": 60}
        assert Beneficiary.from_dict(b.to_dict()) == b

    def test_empty_address_representable(self):
        """Test empty address is allowed at the type level."""
        assert Beneficiary("", 100).address == ""

    @pytest.mark.parametrize("percentage", [-1, 101, 256, True, 50.0])
    def test_invalid_percentage(self, percentage):
        """Test out-of-range or non-integer percentages are refused."""
        with pytest.raises(ValueError):
            Beneficiary("addrA", percentage)


class TestInheritanceContract:
    """Tests for the inheritance payload."""

    def test_beneficiaries_stored_as_tuple(self):
        """Test list input becomes a tuple."""
        contract = InheritanceContract("owner", 1, 2, [Beneficiary("a", 100)])
        assert contract.beneficiaries == (Beneficiary("a", 100),)
        assert hash(contract) == hash(InheritanceContract("owner", 1, 2, [Beneficiary("a", 100)]))

    def test_defaults(self):
        """Test default status is Active."""
        contract = InheritanceContract("owner", 1, 2)
        assert contract.status is Status.ACTIVE
        assert contract.beneficiaries == ()

    def test_deadline(self, active_contract):
        assert active_contract.deadline_height == 4420

    @pytest.mark.parametrize("kwargs", [
        {"last_checkin_height": -1},
        {"trigger_delay": -5},
        {"last_checkin_height": 2 ** 64},
        {"trigger_delay": "10"},
    ])
    def test_invalid_fields(self, kwargs):
        """Test negative or non-integer heights are refused."""
        fields = {"owner_identity": "owner", "last_checkin_height": 1, "trigger_delay": 1}
        fields.update(kwargs)
        with pytest.raises(ValueError):
            InheritanceContract(**fields)

    def test_payload_layout(self):
        """Test exact byte layout of the payload."""
        contract = InheritanceContract("ab", 1, 2, (Beneficiary("x", 100),), Status.ACTIVE)
        expected = (
            b"\x02ab"
            + (1).to_bytes(8, "big")
            + (2).to_bytes(8, "big")
            + b"\x01"
            + b"\x01x" + bytes([100])
            + b"\x00"
        )
        assert contract.serialize() == expected

    @pytest.mark.parametrize("status", list(Status))
    def test_bytes_roundtrip(self, active_contract, status):
        """Test serialize/deserialize for each status."""
        contract = InheritanceContract(
            active_contract.owner_identity,
            active_contract.last_checkin_height,
            active_contract.trigger_delay,
            active_contract.beneficiaries,
            status,
        )
        data = contract.serialize()
        restored, consumed = InheritanceContract.deserialize(data)
        assert restored == contract
        assert consumed == len(data)

    def test_trailing_bytes_rejected(self, active_contract):
        """Test from_bytes refuses extra data."""
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_bytes(active_contract.serialize() + b"\x00")

    def test_truncated_payload(self, active_contract):
        """Test truncated payloads are decode errors."""
        data = active_contract.serialize()
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_bytes(data[:-1])
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_bytes(data[:10])

    def test_bad_percentage_byte(self):
        """Test a percentage byte above 100 is a decode error."""
        data = bytearray(InheritanceContract("ab", 1, 2, (Beneficiary("x", 100),)).serialize())
        data[-2] = 200
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_bytes(bytes(data))

    def test_bad_utf8(self):
        """Test invalid UTF-8 in the owner field is a decode error."""
        data = b"\x01\xff" + bytes(16) + b"\x00\x00"
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_bytes(data)

    def test_dict_roundtrip(self, active_contract):
        """Test spell JSON form."""
        data = active_contract.to_dict()
        assert data["owner_pubkey"] == active_contract.owner_identity
        assert data["last_checkin_block"] == 100
        assert data["trigger_delay_blocks"] == 4320
        assert data["status"] == "Active"
        assert InheritanceContract.from_dict(data) == active_contract

    def test_dict_missing_field(self, active_contract):
        data = active_contract.to_dict()
        del data["trigger_delay_blocks"]
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_dict(data)

    @pytest.mark.parametrize("key,value", [
        ("status", "Dormant"),
        ("beneficiaries", "addrA"),
        ("last_checkin_block", -1),
        ("owner_pubkey", 7),
    ])
    def test_dict_invalid_values(self, active_contract, key, value):
        """Test invalid JSON values are decode errors."""
        data = active_contract.to_dict()
        data[key] = value
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_dict(data)

    def test_dict_not_object(self):
        with pytest.raises(PayloadDecodeError):
            InheritanceContract.from_dict(["not", "a", "dict"])


class TestSerialization:
    """Tests for the byte codec helpers."""

    @pytest.mark.parametrize("value,size", [
        (0, 1), (0xFC, 1), (0xFD, 3), (0xFFFF, 3), (0x10000, 5), (0x100000000, 9),
    ])
    def test_varint_sizes(self, value, size):
        encoded = serialize_varint(value)
        assert len(encoded) == size
        assert deserialize_varint(encoded) == (value, size)

    def test_writer_reader(self):
        """Test sequential write and read."""
        data = ByteWriter().write_u8(7).write_u64(2 ** 40).write_str("héllo").to_bytes()
        reader = ByteReader(data)
        assert reader.read_u8() == 7
        assert reader.read_u64() == 2 ** 40
        assert reader.read_str() == "héllo"
        assert reader.is_empty()
        assert reader.remaining() == 0

    def test_truncated_read(self):
        """Test reading past the end raises."""
        with pytest.raises(ValueError):
            ByteReader(b"\x00\x01").read_u64()
        with pytest.raises(ValueError):
            ByteReader(b"\x05ab").read_bytes()

    def test_u8_range(self):
        with pytest.raises(ValueError):
            ByteWriter().write_u8(256)
