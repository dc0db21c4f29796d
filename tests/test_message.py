"""Unit tests for the Message byte buffer."""

import pytest

from simple_handshake.exceptions import HandshakeError, OutOfRangeError
from simple_handshake.protocol.message import Message


class TestMessageConstruction:
    """Tests for creating and wrapping messages."""

    def test_create_zero_filled(self):
        """A new message is zero-filled with the requested length."""
        message = Message(4)

        assert message.length == 4
        assert len(message) == 4
        assert message.body == bytearray(4)

    def test_create_empty(self):
        """Zero-length messages are allowed."""
        assert Message(0).length == 0

    def test_create_negative_length(self):
        """Negative length is rejected."""
        with pytest.raises(ValueError):
            Message(-1)

    def test_wrap_bytearray_is_adopted(self):
        """Wrapping a bytearray keeps the same object."""
        data = bytearray(b"\x01\x02\x03")
        message = Message.from_bytes(data)

        assert message.body is data
        assert message.length == 3

    def test_wrap_bytes_is_copied(self):
        """Wrapping immutable bytes yields a mutable copy."""
        message = Message.from_bytes(b"\x01\x02")
        message.set_u8(0, 0xFF)

        assert bytes(message) == b"\xff\x02"

    def test_body_is_reference(self):
        """body returns the owned buffer, not a copy."""
        message = Message(2)
        message.body[1] = 7
        assert message.get_u8(1) == 7

    def test_equality(self):
        """Messages compare by content."""
        assert Message.from_bytes(b"ab") == Message.from_bytes(bytearray(b"ab"))
        assert Message.from_bytes(b"ab") != Message.from_bytes(b"ac")

    def test_repr(self):
        """__repr__ shows length and hex body."""
        assert repr(Message.from_bytes(b"\xab")) == "Message(length=1, body=ab)"


class TestU8:
    """Tests for 8-bit accessors."""

    def test_set_get(self):
        """Round trip a byte."""
        message = Message(4)
        message.set_u8(3, 0xAB)

        assert message.get_u8(3) == 0xAB
        assert message.body == bytearray(b"\x00\x00\x00\xab")

    def test_set_out_of_range(self):
        """Writing at length fails."""
        message = Message(4)
        with pytest.raises(OutOfRangeError) as exc_info:
            message.set_u8(4, 1)

        assert exc_info.value.offset == 4
        assert exc_info.value.length == 4

    def test_get_out_of_range(self):
        """Reading at length fails."""
        with pytest.raises(OutOfRangeError):
            Message(4).get_u8(4)

    def test_negative_offset(self):
        """Negative offsets do not wrap around."""
        with pytest.raises(OutOfRangeError):
            Message(4).get_u8(-1)

    @pytest.mark.parametrize("value", [-1, 256])
    def test_value_out_of_range(self, value):
        """Values that do not fit a byte are rejected."""
        with pytest.raises(ValueError):
            Message(4).set_u8(0, value)

    def test_error_hierarchy(self):
        """OutOfRangeError is catchable as HandshakeError and IndexError."""
        with pytest.raises(HandshakeError):
            Message(0).get_u8(0)
        with pytest.raises(IndexError):
            Message(0).get_u8(0)


class TestU16:
    """Tests for big-endian 16-bit accessors."""

    def test_big_endian_layout(self):
        """High byte is written first."""
        message = Message(4)
        message.set_u16(1, 0x1234)

        assert message.body == bytearray(b"\x00\x12\x34\x00")
        assert message.get_u16(1) == 0x1234

    def test_last_two_bytes(self):
        """A u16 may occupy the final two bytes."""
        message = Message(4)
        message.set_u16(2, 0xBEEF)

        assert message.get_u16(2) == 0xBEEF

    def test_set_out_of_range(self):
        """A u16 starting on the last byte does not fit."""
        with pytest.raises(OutOfRangeError):
            Message(4).set_u16(3, 1)

    def test_get_out_of_range(self):
        """Reading a u16 from the last byte fails."""
        with pytest.raises(OutOfRangeError):
            Message(4).get_u16(3)

    def test_value_out_of_range(self):
        """Values over 0xFFFF are rejected."""
        with pytest.raises(ValueError):
            Message(4).set_u16(0, 0x10000)


class TestStringUTF8:
    """Tests for UTF-8 string accessors."""

    def test_set_get(self):
        """Round trip ASCII text."""
        message = Message(5)
        message.set_string_utf8(0, "abcd")

        assert message.get_string_utf8(0, 4) == "abcd"
        assert message.body == bytearray(b"abcd\x00")

    def test_string_filling_buffer_rejected(self):
        """A string ending on the last byte is rejected."""
        message = Message(5)
        with pytest.raises(OutOfRangeError):
            message.set_string_utf8(0, "abcde")

        assert message.body == bytearray(5)

    def test_get_string_filling_buffer_rejected(self):
        """Reading up to the last byte is rejected as well."""
        message = Message.from_bytes(b"abcde")
        with pytest.raises(OutOfRangeError):
            message.get_string_utf8(0, 5)

    def test_multibyte_uses_encoded_length(self):
        """Bounds use the UTF-8 byte length, not the character count."""
        message = Message(4)
        with pytest.raises(OutOfRangeError):
            message.set_string_utf8(0, "éé")  # 4 bytes

        message.set_string_utf8(1, "é")
        assert message.get_string_utf8(1, 2) == "é"

    def test_invalid_utf8_replaced(self):
        """Undecodable bytes are replaced instead of raising."""
        message = Message.from_bytes(b"\xff\x00")
        assert message.get_string_utf8(0, 1) == "�"

    def test_negative_length(self):
        """Negative read length is rejected."""
        with pytest.raises(ValueError):
            Message(4).get_string_utf8(0, -1)
