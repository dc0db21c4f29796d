"""Serial communication layer."""

from simple_handshake.serial.channel import HandshakeChannel
from simple_handshake.serial.connection import SerialConnection

__all__ = ["HandshakeChannel", "SerialConnection"]
