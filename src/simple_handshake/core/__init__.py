"""Core application functionality."""

from simple_handshake.core.config import Settings, XorKeys, load_xor_keys, setup_logging

__all__ = [
    "Settings",
    "XorKeys",
    "load_xor_keys",
    "setup_logging",
]
