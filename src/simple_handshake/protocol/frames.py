"""Frame construction and parsing for handshake messages."""

import logging
import struct

from simple_handshake.exceptions import ChecksumError, MalformedFrameError, TruncatedFrameError
from simple_handshake.protocol.cipher import check_key, xor_in_place
from simple_handshake.protocol.constants import (
    BODY_OFFSET,
    FRAME_MIN_LEN,
    FRAME_OVERHEAD,
    HEADER_LEN,
    MAX_BODY_LEN,
)
from simple_handshake.protocol.crc import calculate_crc16, verify_crc16
from simple_handshake.protocol.message import Message

logger = logging.getLogger(__name__)


def encode(body: bytes, xor1: int, xor2: int) -> bytes:
    """
    Build a handshake frame around ``body``.

    Frame structure:
    [XOR1][LEN_H][LEN_L][BODY...][CRC_H][CRC_L][XOR2][XOR2^LEN_L][PAD]

    The steps run in a fixed order because each depends on the one before:
    the body is XORed with XOR2, the CRC is taken over that first-pass body,
    the high CRC byte is folded into XOR1 to key the second pass, and the
    result is copied into the frame.

    ``body`` itself is never modified.

    Args:
        body: Payload (0-65535 bytes)
        xor1: First key byte, sent in clear in the header
        xor2: Second key byte, recoverable from the trailer

    Returns:
        Complete frame of ``8 + len(body)`` bytes

    Raises:
        ValueError: If body is too long or a key is not a byte
    """
    if len(body) > MAX_BODY_LEN:
        raise ValueError(f"Body too long: {len(body)} bytes (max {MAX_BODY_LEN})")
    check_key(xor1, "xor1")
    check_key(xor2, "xor2")

    length = len(body)
    output = bytearray(FRAME_OVERHEAD + length)

    # Header
    output[0] = xor1
    struct.pack_into(">H", output, 1, length)

    # First pass, then CRC over the first-pass body
    ciphered = xor_in_place(bytearray(body), xor2)
    crc = calculate_crc16(ciphered)
    trailer = BODY_OFFSET + length
    struct.pack_into(">H", output, trailer, crc)

    # XOR2 travels masked with the low length byte
    xor_value = (xor2 << 8) | (xor2 ^ (length & 0xFF))
    struct.pack_into(">H", output, trailer + 2, xor_value)

    # Second pass keyed by XOR1 and the CRC high byte
    xor_in_place(ciphered, xor1 ^ (crc >> 8))
    output[BODY_OFFSET:trailer] = ciphered

    return bytes(output)


def frame_length(header: bytes) -> int:
    """
    Total wire length of a frame given at least its 3-byte header.

    Raises:
        MalformedFrameError: If fewer than 3 bytes are supplied
    """
    if len(header) < HEADER_LEN:
        raise MalformedFrameError(len(header), HEADER_LEN)
    return FRAME_OVERHEAD + struct.unpack_from(">H", header, 1)[0]


def decode(frame: bytes, verify: bool = False) -> tuple[bytes, int, int]:
    """
    Recover body and keys from a handshake frame.

    The CRC in the trailer is a key-derivation input. Pass ``verify=True`` to
    also check it against the recovered body.

    Args:
        frame: Raw frame bytes; left unmodified
        verify: Recompute the CRC and raise on mismatch

    Returns:
        Tuple of (body, xor1, xor2)

    Raises:
        MalformedFrameError: If the frame is shorter than 8 bytes
        TruncatedFrameError: If the length field exceeds the bytes present
        ChecksumError: If ``verify`` is set and the CRC does not match

    Example:
        >>> decode(encode(b"hello", 0x12, 0x34))
        (b'hello', 18, 52)
    """
    if len(frame) < FRAME_MIN_LEN:
        raise MalformedFrameError(len(frame), FRAME_MIN_LEN)

    xor1 = frame[0]
    length = struct.unpack_from(">H", frame, 1)[0]

    available = len(frame) - FRAME_OVERHEAD
    if length > available:
        raise TruncatedFrameError(length, available)
    if length < available:
        logger.debug("Ignoring %d bytes after frame trailer", available - length)

    trailer = BODY_OFFSET + length
    crc, xor_value = struct.unpack_from(">HH", frame, trailer)
    xor2 = (xor_value & 0xFF) ^ (length & 0xFF)

    # Undo the second pass to get back the body the CRC was taken over
    first_pass = xor_in_place(bytearray(frame[BODY_OFFSET:trailer]), xor1 ^ (crc >> 8))

    if verify and not verify_crc16(first_pass, crc):
        raise ChecksumError(expected=crc, received=calculate_crc16(first_pass))

    body = xor_in_place(first_pass, xor2)
    return bytes(body), xor1, xor2


def message_template(length: int) -> Message:
    """Allocate a zero-filled Message to be filled in and encoded."""
    return Message(length)


def encode_message(message: Message, xor1: int, xor2: int) -> bytes:
    """Encode the body of ``message`` into a frame."""
    return encode(message.body, xor1, xor2)


def decode_message(frame: bytes, verify: bool = False) -> tuple[Message, int, int]:
    """Decode a frame into a Message plus its keys. See decode()."""
    body, xor1, xor2 = decode(frame, verify=verify)
    return Message.from_bytes(bytearray(body)), xor1, xor2


class Frame:
    """
    A decoded handshake frame.

    Holds the plain body and both keys; the obfuscated form only exists as
    the bytes returned by to_bytes().

    Attributes:
        body: Plain payload
        xor1: First key byte
        xor2: Second key byte
    """

    def __init__(self, body: bytes = b"", xor1: int = 0, xor2: int = 0):
        """
        Initialize a frame.

        Args:
            body: Payload (0-65535 bytes)
            xor1: First key byte (0-255)
            xor2: Second key byte (0-255)
        """
        self.body = bytes(body)
        self.xor1 = xor1
        self.xor2 = xor2

    def to_bytes(self) -> bytes:
        """Convert frame to bytes for transmission."""
        return encode(self.body, self.xor1, self.xor2)

    @classmethod
    def from_bytes(cls, data: bytes, verify: bool = False) -> "Frame":
        """
        Parse a frame from received bytes.

        Raises:
            FrameError: If the frame cannot be parsed (see decode())
        """
        body, xor1, xor2 = decode(data, verify=verify)
        return cls(body=body, xor1=xor1, xor2=xor2)

    def to_message(self) -> Message:
        """Copy the body into a new Message for field access."""
        return Message.from_bytes(self.body)

    def __len__(self) -> int:
        """Length of the frame on the wire."""
        return FRAME_OVERHEAD + len(self.body)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return (self.body, self.xor1, self.xor2) == (other.body, other.xor1, other.xor2)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"Frame(xor1=0x{self.xor1:02X}, xor2=0x{self.xor2:02X}, body_len={len(self.body)})"
