"""
Binary Reader - canonical envelope decoding primitives

Mirror of BinaryWriter. Any structural problem (truncation, bad padding,
out-of-range discriminators) raises EnvelopeDecodeError.
"""

import builtins
import struct

from ..runtime.errors import EnvelopeDecodeError


class BinaryReader:
    """
    Sequential reader over an encoded buffer.
    """

    def __init__(self, buf: builtins.bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = bytes(buf)
        self._off = 0

    @property
    def eof(self) -> bool:
        """True once every byte has been consumed."""
        return self._off >= len(self._buf)

    @property
    def offset(self) -> int:
        return self._off

    def _take(self, n: int) -> builtins.bytes:
        if n < 0 or self._off + n > len(self._buf):
            raise EnvelopeDecodeError(
                f"Buffer overflow: attempting to read {n} bytes at offset {self._off}",
                details={"length": len(self._buf)},
            )
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def _skip_padding(self, length: int) -> None:
        pad = (4 - length % 4) % 4
        if pad and self._take(pad) != b"\x00" * pad:
            raise EnvelopeDecodeError(f"Non-zero padding at offset {self._off - pad}")

    def u32(self) -> int:
        """Read unsigned 32-bit big-endian integer."""
        return struct.unpack(">I", self._take(4))[0]

    def i32(self) -> int:
        """Read signed 32-bit big-endian integer."""
        return struct.unpack(">i", self._take(4))[0]

    def u64(self) -> int:
        """Read unsigned 64-bit big-endian integer."""
        return struct.unpack(">Q", self._take(8))[0]

    def i64(self) -> int:
        """Read signed 64-bit big-endian integer."""
        return struct.unpack(">q", self._take(8))[0]

    def boolean(self) -> bool:
        """
        Read a u32-encoded boolean.

        Returns:
            Decoded value

        Raises:
            EnvelopeDecodeError: If the value is neither 0 nor 1
        """
        v = self.u32()
        if v not in (0, 1):
            raise EnvelopeDecodeError(f"Invalid boolean value {v}")
        return v == 1

    def fixed_opaque(self, length: int) -> builtins.bytes:
        """Read exactly `length` bytes plus padding."""
        out = self._take(length)
        self._skip_padding(length)
        return out

    def var_opaque(self, max_length: int = 1 << 20) -> builtins.bytes:
        """
        Read length-prefixed bytes plus padding.

        Args:
            max_length: Upper bound on the declared length

        Returns:
            Decoded bytes
        """
        n = self.u32()
        if n > max_length:
            raise EnvelopeDecodeError(f"Declared length {n} exceeds limit {max_length}")
        out = self._take(n)
        self._skip_padding(n)
        return out

    def string(self, max_length: int = 1 << 16) -> str:
        """Read a length-prefixed UTF-8 string."""
        raw = self.var_opaque(max_length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EnvelopeDecodeError("String is not valid UTF-8", cause=e) from e

    def optional_flag(self) -> bool:
        """Read the presence discriminator of an optional value."""
        return self.boolean()

    def expect_eof(self) -> None:
        """Raise if unread bytes remain."""
        if not self.eof:
            raise EnvelopeDecodeError(
                f"{len(self._buf) - self._off} trailing bytes after envelope"
            )
