"""
Binary Writer - canonical envelope encoding primitives

Big-endian, 4-byte aligned encoding in the style of XDR. Every variable
length item is length-prefixed and zero-padded to a 4-byte boundary, so
the same values always produce the same bytes.
"""

import struct
from typing import List


def _padding(length: int) -> int:
    return (4 - length % 4) % 4


class BinaryWriter:
    """
    Append-only binary writer.

    Each method encodes one primitive; to_bytes() returns the result.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def u32(self, v: int) -> None:
        """
        Write unsigned 32-bit integer in big-endian format.

        Args:
            v: Integer value to write (0 to 2**32 - 1)
        """
        if not 0 <= v <= 0xFFFFFFFF:
            raise ValueError(f"u32 out of range: {v}")
        self._bb.extend(struct.pack(">I", v))

    def i32(self, v: int) -> None:
        """Write signed 32-bit integer in big-endian format."""
        if not -(1 << 31) <= v < (1 << 31):
            raise ValueError(f"i32 out of range: {v}")
        self._bb.extend(struct.pack(">i", v))

    def u64(self, v: int) -> None:
        """
        Write unsigned 64-bit integer in big-endian format.

        Args:
            v: Integer value to write (0 to 2**64 - 1)
        """
        if not 0 <= v <= 0xFFFFFFFFFFFFFFFF:
            raise ValueError(f"u64 out of range: {v}")
        self._bb.extend(struct.pack(">Q", v))

    def i64(self, v: int) -> None:
        """Write signed 64-bit integer in big-endian format."""
        if not -(1 << 63) <= v < (1 << 63):
            raise ValueError(f"i64 out of range: {v}")
        self._bb.extend(struct.pack(">q", v))

    def boolean(self, v: bool) -> None:
        """Write a boolean as a u32 0/1."""
        self.u32(1 if v else 0)

    def fixed_opaque(self, v: bytes, length: int) -> None:
        """
        Write exactly `length` bytes, padded to a 4-byte boundary.

        Args:
            v: Bytes to write
            length: Required length of v
        """
        if len(v) != length:
            raise ValueError(f"Expected {length} bytes, got {len(v)}")
        self._bb.extend(v)
        self._bb.extend(b"\x00" * _padding(length))

    def var_opaque(self, v: bytes) -> None:
        """
        Write bytes with u32 length prefix and zero padding.

        Args:
            v: Bytes to write
        """
        self.u32(len(v))
        self._bb.extend(v)
        self._bb.extend(b"\x00" * _padding(len(v)))

    def raw(self, v: bytes) -> None:
        """Write already-encoded bytes as-is."""
        self._bb.extend(v)

    def string(self, s: str) -> None:
        """
        Write UTF-8 string with length prefix.

        Args:
            s: String to write
        """
        self.var_opaque(s.encode("utf-8"))

    def optional_flag(self, present: bool) -> None:
        """Write the presence discriminator of an optional value."""
        self.boolean(present)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)
