"""CRC-16 calculation for handshake frames."""

from simple_handshake.protocol.constants import CRC16_INIT, CRC16_POLY


def calculate_crc16(data: bytes) -> int:
    """
    Calculate CRC-16 (Modbus variant).

    Reflected polynomial 0xA001 with initial value 0xFFFF, computed bit by
    bit:
    - Each byte is XORed into the low byte of the CRC
    - Eight shifts follow, XORing in the polynomial whenever the bit shifted
      out was set

    Args:
        data: Bytes to calculate CRC over

    Returns:
        16-bit CRC value

    Example:
        >>> hex(calculate_crc16(b"123456789"))
        '0x4b37'
    """
    crc = CRC16_INIT

    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC16_POLY
            else:
                crc >>= 1

    return crc


def verify_crc16(data: bytes, expected_crc: int) -> bool:
    """
    Verify CRC-16 matches expected value.

    Args:
        data: Data bytes (excluding CRC)
        expected_crc: Expected CRC value

    Returns:
        True if CRC matches, False otherwise
    """
    return calculate_crc16(data) == expected_crc
