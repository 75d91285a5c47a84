"""
Binary Wire Helpers
File: wire.py

Purpose: Little-endian readers and writers for the dataset files and the
proof encoding. Integers use fixed widths; variable lengths use the bitcoin
compact-size varint.
"""

from __future__ import annotations

import struct

from .errors import FormatError


class BufferReader:
    """Sequential reader over a bytes object. Every short read is a FormatError."""

    def __init__(self, data: bytes) -> None:
        self.data = memoryview(data)
        self.offset = 0

    def left(self) -> int:
        return len(self.data) - self.offset

    def _take(self, size: int) -> memoryview:
        if size < 0 or self.offset + size > len(self.data):
            raise FormatError(
                f"Unexpected end of data: need {size} bytes at offset "
                f"{self.offset}, have {self.left()}"
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return struct.unpack("<H", self._take(2))[0]

    def read_u32(self) -> int:
        return struct.unpack("<I", self._take(4))[0]

    def read_u64(self) -> int:
        return struct.unpack("<Q", self._take(8))[0]

    def read_varint(self) -> int:
        prefix = self.read_u8()
        if prefix < 0xfd:
            return prefix
        if prefix == 0xfd:
            value = self.read_u16()
            minimum = 0xfd
        elif prefix == 0xfe:
            value = self.read_u32()
            minimum = 0x10000
        else:
            value = self.read_u64()
            minimum = 0x100000000
        if value < minimum:
            raise FormatError("Non-canonical varint")
        return value

    def read_bytes(self, size: int) -> bytes:
        return bytes(self._take(size))

    def read_var_bytes(self) -> bytes:
        return self.read_bytes(self.read_varint())

    def verify_end(self) -> None:
        if self.left() != 0:
            raise FormatError(f"Trailing data: {self.left()} bytes")


class BufferWriter:
    """Accumulates encoded fields; ``render()`` returns the bytes."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    def write_u8(self, value: int) -> "BufferWriter":
        self.chunks.append(struct.pack("<B", value))
        return self

    def write_u16(self, value: int) -> "BufferWriter":
        self.chunks.append(struct.pack("<H", value))
        return self

    def write_u32(self, value: int) -> "BufferWriter":
        self.chunks.append(struct.pack("<I", value))
        return self

    def write_u64(self, value: int) -> "BufferWriter":
        self.chunks.append(struct.pack("<Q", value))
        return self

    def write_varint(self, value: int) -> "BufferWriter":
        if value < 0:
            raise ValueError("varint must be non-negative")
        if value < 0xfd:
            return self.write_u8(value)
        if value <= 0xffff:
            return self.write_u8(0xfd).write_u16(value)
        if value <= 0xffffffff:
            return self.write_u8(0xfe).write_u32(value)
        return self.write_u8(0xff).write_u64(value)

    def write_bytes(self, data: bytes) -> "BufferWriter":
        self.chunks.append(bytes(data))
        return self

    def write_var_bytes(self, data: bytes) -> "BufferWriter":
        return self.write_varint(len(data)).write_bytes(data)

    def render(self) -> bytes:
        return b"".join(self.chunks)


__all__ = ["BufferReader", "BufferWriter"]
