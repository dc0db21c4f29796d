"""Single-byte XOR cipher used by the frame codec.

Applying key k1 and then k2 is the same as applying ``k1 ^ k2`` once, and
applying the same key twice is a no-op. The codec depends on both.
"""


def check_key(key: int, name: str = "XOR key") -> None:
    """Raise ValueError unless ``key`` fits in a byte."""
    if not 0 <= key <= 0xFF:
        raise ValueError(f"{name} must be 0-255, got {key}")


def xor_in_place(buffer: bytearray, key: int) -> bytearray:
    """
    XOR every byte of ``buffer`` with ``key``, mutating it.

    Anything else holding a reference to ``buffer`` sees the change. Use
    xor_bytes() when the input must stay untouched.

    Args:
        buffer: Mutable buffer to transform
        key: Key byte (0-255)

    Returns:
        The same buffer object
    """
    check_key(key)
    for i in range(len(buffer)):
        buffer[i] ^= key
    return buffer


def xor_bytes(data: bytes, key: int) -> bytes:
    """Return a new ``bytes`` with every byte of ``data`` XORed with ``key``."""
    return bytes(xor_in_place(bytearray(data), key))
