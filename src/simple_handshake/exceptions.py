"""
Exception hierarchy for simple_handshake.

Every error the package raises on purpose derives from HandshakeError, so a
caller can catch everything with a single except clause and still tell buffer
access problems, frame problems, key configuration problems and transport
problems apart.
"""

from __future__ import annotations


class HandshakeError(Exception):
    """Base exception for all simple_handshake errors."""


class OutOfRangeError(HandshakeError, IndexError):
    """
    Message field access outside the buffer.

    Raised by the Message accessors when the field addressed at ``offset``
    does not fit the buffer under that accessor's bounds rule.
    """

    def __init__(self, offset: int, width: int, length: int) -> None:
        super().__init__(f"offset {offset} is out of range")
        self.offset = offset
        self.width = width
        self.length = length

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (field width {self.width}, buffer length {self.length})"


class FrameError(HandshakeError):
    """A handshake frame could not be parsed."""


class MalformedFrameError(FrameError):
    """Frame is shorter than the fixed header and trailer."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(f"Frame too short: {length} bytes, need at least {minimum}")
        self.length = length
        self.minimum = minimum


class TruncatedFrameError(FrameError):
    """
    Declared body length exceeds the bytes actually present.

    Raised before any part of the body or trailer is read, so a hostile
    length field can never cause an out-of-bounds access.
    """

    def __init__(self, declared: int, available: int) -> None:
        super().__init__(f"Frame declares {declared} body bytes but only {available} are available")
        self.declared = declared
        self.available = available


class ChecksumError(FrameError):
    """Recovered body does not match the CRC-16 carried in the frame."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__("Checksum validation failed")
        self.expected = expected
        self.received = received

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (expected 0x{self.expected:04X}, got 0x{self.received:04X})"


class KeyConfigError(HandshakeError):
    """XOR key file is missing, unreadable or invalid."""


class TransportError(HandshakeError):
    """Serial transport failure."""


class HandshakeTimeoutError(TransportError, TimeoutError):
    """A complete frame did not arrive in time."""

    def __init__(self, message: str = "Timed out waiting for frame", *, received: int = 0) -> None:
        super().__init__(message)
        self.received = received
