"""Obfuscated, CRC-tagged handshake framing."""

__version__ = "0.1.0"
