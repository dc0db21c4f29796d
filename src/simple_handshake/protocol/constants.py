"""Protocol constants for handshake frames."""

# ============================================================================
# Frame Structure
# ============================================================================

HEADER_LEN = 3  # XOR1(1) + LEN(2)
TRAILER_LEN = 4  # CRC_H(1) + CRC_L(1) + XOR2(1) + XOR2^LEN_L(1)
PAD_LEN = 1  # Trailing byte, always written as zero and never read
FRAME_OVERHEAD = HEADER_LEN + TRAILER_LEN + PAD_LEN
FRAME_MIN_LEN = FRAME_OVERHEAD
MAX_BODY_LEN = 0xFFFF

BODY_OFFSET = HEADER_LEN

# ============================================================================
# CRC-16 (Modbus)
# ============================================================================

CRC16_INIT = 0xFFFF
CRC16_POLY = 0xA001
