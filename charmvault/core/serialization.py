"""
CharmVault Serialization Utilities

Binary codec for token payloads.

All multi-byte integers are BIG-ENDIAN unless noted.
"""

from __future__ import annotations
from typing import Tuple

from charmvault.constants import BIG_ENDIAN, LITTLE_ENDIAN, MAX_U64


# ==============================================================================
# Integer Serialization (Big-Endian)
# ==============================================================================

def serialize_u8(value: int) -> bytes:
    """Serialize unsigned 8-bit integer."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"u8 value out of range: {value}")
    return bytes([value])


def serialize_u64(value: int) -> bytes:
    """Serialize unsigned 64-bit integer (big-endian)."""
    if not 0 <= value <= MAX_U64:
        raise ValueError(f"u64 value out of range: {value}")
    return value.to_bytes(8, BIG_ENDIAN)


def _require(data: bytes, offset: int, size: int) -> None:
    if offset + size > len(data):
        raise ValueError(
            f"Truncated data: need {size} bytes at offset {offset}, have {len(data) - offset}"
        )


def deserialize_u8(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Deserialize unsigned 8-bit integer.
    Returns (value, bytes_consumed).
    """
    _require(data, offset, 1)
    return data[offset], 1


def deserialize_u64(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Deserialize unsigned 64-bit integer (big-endian).
    Returns (value, bytes_consumed).
    """
    _require(data, offset, 8)
    return int.from_bytes(data[offset:offset + 8], BIG_ENDIAN), 8


# ==============================================================================
# Varint Encoding (Bitcoin-style)
# ==============================================================================

def serialize_varint(value: int) -> bytes:
    """
    Serialize integer as variable-length integer (Bitcoin-style).

    - 0x00-0xFC: 1 byte
    - 0xFD-0xFFFF: 0xFD + 2 bytes (little-endian)
    - 0x10000-0xFFFFFFFF: 0xFE + 4 bytes (little-endian)
    - 0x100000000+: 0xFF + 8 bytes (little-endian)
    """
    if value < 0:
        raise ValueError(f"Varint cannot be negative: {value}")

    if value <= 0xFC:
        return bytes([value])
    elif value <= 0xFFFF:
        return bytes([0xFD]) + value.to_bytes(2, LITTLE_ENDIAN)
    elif value <= 0xFFFFFFFF:
        return bytes([0xFE]) + value.to_bytes(4, LITTLE_ENDIAN)
    else:
        return bytes([0xFF]) + value.to_bytes(8, LITTLE_ENDIAN)


def deserialize_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Deserialize variable-length integer.
    Returns (value, bytes_consumed).
    """
    _require(data, offset, 1)
    first_byte = data[offset]

    if first_byte <= 0xFC:
        return first_byte, 1
    elif first_byte == 0xFD:
        _require(data, offset + 1, 2)
        return int.from_bytes(data[offset + 1:offset + 3], LITTLE_ENDIAN), 3
    elif first_byte == 0xFE:
        _require(data, offset + 1, 4)
        return int.from_bytes(data[offset + 1:offset + 5], LITTLE_ENDIAN), 5
    else:  # 0xFF
        _require(data, offset + 1, 8)
        return int.from_bytes(data[offset + 1:offset + 9], LITTLE_ENDIAN), 9


# ==============================================================================
# Byte Array / String Serialization
# ==============================================================================

def serialize_bytes(data: bytes) -> bytes:
    """
    Serialize variable-length byte array with length prefix (varint).
    Format: varint(length) || data
    """
    return serialize_varint(len(data)) + data


def deserialize_bytes(data: bytes, offset: int = 0) -> Tuple[bytes, int]:
    """
    Deserialize variable-length byte array.
    Returns (bytes_data, total_bytes_consumed).
    """
    length, length_size = deserialize_varint(data, offset)
    start = offset + length_size
    _require(data, start, length)
    return data[start:start + length], length_size + length


class ByteReader:
    """
    Helper class for sequential deserialization.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def read_u8(self) -> int:
        value, size = deserialize_u8(self.data, self.offset)
        self.offset += size
        return value

    def read_u64(self) -> int:
        value, size = deserialize_u64(self.data, self.offset)
        self.offset += size
        return value

    def read_varint(self) -> int:
        value, size = deserialize_varint(self.data, self.offset)
        self.offset += size
        return value

    def read_bytes(self) -> bytes:
        """Read variable-length byte array (varint-prefixed)."""
        value, size = deserialize_bytes(self.data, self.offset)
        self.offset += size
        return value

    def read_str(self) -> str:
        """Read varint-prefixed UTF-8 string."""
        return self.read_bytes().decode("utf-8")

    def remaining(self) -> int:
        """Return number of bytes remaining."""
        return len(self.data) - self.offset

    def is_empty(self) -> bool:
        """Check if all bytes have been read."""
        return self.offset >= len(self.data)


class ByteWriter:
    """
    Helper class for sequential serialization.
    """

    def __init__(self):
        self.buffer = bytearray()

    def write_u8(self, value: int) -> "ByteWriter":
        self.buffer.extend(serialize_u8(value))
        return self

    def write_u64(self, value: int) -> "ByteWriter":
        self.buffer.extend(serialize_u64(value))
        return self

    def write_varint(self, value: int) -> "ByteWriter":
        self.buffer.extend(serialize_varint(value))
        return self

    def write_bytes(self, data: bytes) -> "ByteWriter":
        """Write variable-length byte array (varint-prefixed)."""
        self.buffer.extend(serialize_bytes(data))
        return self

    def write_str(self, text: str) -> "ByteWriter":
        """Write varint-prefixed UTF-8 string."""
        return self.write_bytes(text.encode("utf-8"))

    def to_bytes(self) -> bytes:
        """Return the serialized bytes."""
        return bytes(self.buffer)

    def __len__(self) -> int:
        return len(self.buffer)
