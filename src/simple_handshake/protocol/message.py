"""Fixed-length byte buffer with typed field accessors."""

import struct

from simple_handshake.exceptions import OutOfRangeError


class Message:
    """
    Fixed-length, owned byte buffer.

    The body is a bytearray whose length never changes after construction.
    Fields are read and written through bounds-checked accessors; multi-byte
    integers are big-endian.

    Bounds rules (``length`` is the buffer length):
        u8:      offset < length
        u16:     offset + 1 < length
        string:  offset + size < length

    The u16 rule is exact. The string rule rejects a string that would end on
    the last byte of the buffer, so one byte of capacity is always unusable
    for strings. Handshake peers built against the same rule depend on it, so
    it is kept as is.

    Attributes:
        length: Buffer length in bytes
        body: The owned bytearray (a reference, not a copy)
    """

    __slots__ = ("_body",)

    def __init__(self, length: int):
        """
        Allocate a zero-filled message.

        Args:
            length: Buffer length in bytes (>= 0)
        """
        if length < 0:
            raise ValueError(f"Message length must be non-negative, got {length}")
        self._body = bytearray(length)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> "Message":
        """
        Wrap an existing byte sequence.

        A bytearray is adopted as-is and the caller hands over ownership of
        it; any other bytes-like value is copied.
        """
        message = cls.__new__(cls)
        message._body = data if isinstance(data, bytearray) else bytearray(data)
        return message

    @property
    def length(self) -> int:
        return len(self._body)

    @property
    def body(self) -> bytearray:
        return self._body

    def __len__(self) -> int:
        return len(self._body)

    def __bytes__(self) -> bytes:
        return bytes(self._body)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self._body == other._body

    def __repr__(self) -> str:
        return f"Message(length={self.length}, body={self._body.hex()})"

    def _check(self, offset: int, width: int, end: int) -> None:
        # end is the last index the rule requires to be strictly inside the buffer
        if offset < 0 or end >= len(self._body):
            raise OutOfRangeError(offset, width, len(self._body))

    # ------------------------------------------------------------------------
    # 8-bit
    # ------------------------------------------------------------------------

    def set_u8(self, offset: int, value: int) -> None:
        """Write one byte at ``offset``."""
        self._check(offset, 1, offset)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"u8 value out of range: {value}")
        self._body[offset] = value

    def get_u8(self, offset: int) -> int:
        """Read one byte at ``offset``."""
        self._check(offset, 1, offset)
        return self._body[offset]

    # ------------------------------------------------------------------------
    # 16-bit big-endian
    # ------------------------------------------------------------------------

    def set_u16(self, offset: int, value: int) -> None:
        """Write a big-endian u16 to bytes ``offset`` and ``offset + 1``."""
        self._check(offset, 2, offset + 1)
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"u16 value out of range: {value}")
        struct.pack_into(">H", self._body, offset, value)

    def get_u16(self, offset: int) -> int:
        """Read a big-endian u16 from bytes ``offset`` and ``offset + 1``."""
        self._check(offset, 2, offset + 1)
        return struct.unpack_from(">H", self._body, offset)[0]

    # ------------------------------------------------------------------------
    # UTF-8 strings
    # ------------------------------------------------------------------------

    def set_string_utf8(self, offset: int, value: str) -> None:
        """
        Write ``value`` as raw UTF-8 bytes starting at ``offset``.

        No length prefix or terminator is written; the reader must know the
        encoded size.

        Raises:
            OutOfRangeError: If ``offset + encoded size >= length``
        """
        encoded = value.encode("utf-8")
        self._check(offset, len(encoded), offset + len(encoded))
        self._body[offset : offset + len(encoded)] = encoded

    def get_string_utf8(self, offset: int, length: int) -> str:
        """
        Read ``length`` bytes at ``offset`` as UTF-8.

        Invalid sequences are replaced rather than raising.

        Raises:
            OutOfRangeError: If ``offset + length >= buffer length``
        """
        if length < 0:
            raise ValueError(f"String length must be non-negative, got {length}")
        self._check(offset, length, offset + length)
        return self._body[offset : offset + length].decode("utf-8", errors="replace")
