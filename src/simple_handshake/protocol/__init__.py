"""Handshake frame protocol implementation."""

from simple_handshake.protocol.cipher import check_key, xor_bytes, xor_in_place
from simple_handshake.protocol.constants import FRAME_MIN_LEN, FRAME_OVERHEAD, MAX_BODY_LEN
from simple_handshake.protocol.crc import calculate_crc16, verify_crc16
from simple_handshake.protocol.frames import (
    Frame,
    decode,
    decode_message,
    encode,
    encode_message,
    frame_length,
    message_template,
)
from simple_handshake.protocol.message import Message

__all__ = [
    "Frame",
    "Message",
    "calculate_crc16",
    "verify_crc16",
    "check_key",
    "xor_bytes",
    "xor_in_place",
    "encode",
    "decode",
    "encode_message",
    "decode_message",
    "message_template",
    "frame_length",
    "FRAME_MIN_LEN",
    "FRAME_OVERHEAD",
    "MAX_BODY_LEN",
]
