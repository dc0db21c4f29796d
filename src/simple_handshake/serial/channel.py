"""Send and receive whole handshake frames over a serial connection."""

import asyncio
import logging

from simple_handshake.core.config import XorKeys
from simple_handshake.exceptions import FrameError, HandshakeTimeoutError
from simple_handshake.protocol.constants import HEADER_LEN
from simple_handshake.protocol.frames import Frame, frame_length
from simple_handshake.serial.connection import SerialConnection

logger = logging.getLogger(__name__)


class HandshakeChannel:
    """
    Frame-level handshake exchange over a SerialConnection.

    Frames carry no start marker, so a frame is read as its 3-byte header
    followed by the rest of the length that header announces.
    """

    def __init__(
        self,
        connection: SerialConnection,
        keys: XorKeys,
        response_timeout: float = 5.0,
        verify: bool = False,
    ):
        """
        Initialize handshake channel.

        Args:
            connection: Serial connection to exchange frames over
            keys: Key pair used for outgoing frames
            response_timeout: Seconds to wait for a complete incoming frame
            verify: Check the CRC of incoming frames
        """
        self.connection = connection
        self.keys = keys
        self.response_timeout = response_timeout
        self.verify = verify
        self._lock = asyncio.Lock()
        self._stats = {
            "frames_written": 0,
            "frames_read": 0,
            "frames_invalid": 0,
            "frames_timeout": 0,
            "bytes_written": 0,
            "bytes_read": 0,
        }

    @property
    def stats(self) -> dict:
        """Get channel statistics."""
        return self._stats.copy()

    async def send(self, body: bytes) -> Frame:
        """
        Encode ``body`` with the channel keys and write it.

        Returns:
            The frame that was sent
        """
        frame = Frame(body=body, xor1=self.keys.xor1, xor2=self.keys.xor2)
        frame_bytes = frame.to_bytes()

        await self.connection.write(frame_bytes)

        self._stats["frames_written"] += 1
        self._stats["bytes_written"] += len(frame_bytes)
        logger.debug("Frame written: %s", frame)
        return frame

    async def receive(self, timeout: float | None = None) -> Frame:
        """
        Read and decode one complete frame.

        The timeout covers the whole frame, header and rest together. On a
        timeout or a decode failure the input buffer is discarded, since any
        late bytes would otherwise be read as the next header.

        Args:
            timeout: Seconds to wait (defaults to response_timeout)

        Raises:
            HandshakeTimeoutError: If the frame does not arrive in time
            FrameError: If the frame cannot be decoded
        """
        if timeout is None:
            timeout = self.response_timeout

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        try:
            header = await self.connection.read_exactly(HEADER_LEN, timeout=timeout)
            total = frame_length(header)
            remaining = None if deadline is None else max(0.0, deadline - loop.time())
            rest = await self.connection.read_exactly(total - HEADER_LEN, timeout=remaining)
        except HandshakeTimeoutError as e:
            logger.warning("Frame read timed out after %ss (%d bytes of current read)", timeout, e.received)
            self._stats["frames_timeout"] += 1
            self.connection.reset_input_buffer()
            raise

        frame_bytes = header + rest
        self._stats["bytes_read"] += len(frame_bytes)

        try:
            frame = Frame.from_bytes(frame_bytes, verify=self.verify)
        except FrameError:
            logger.warning("Frame decode failed: %s", frame_bytes.hex())
            self._stats["frames_invalid"] += 1
            self.connection.reset_input_buffer()
            raise

        self._stats["frames_read"] += 1
        logger.debug("Frame read: %s", frame)
        return frame

    async def exchange(self, body: bytes, timeout: float | None = None) -> Frame:
        """
        Send ``body`` and wait for the peer's reply frame.

        Only one exchange runs at a time on a channel.
        """
        async with self._lock:
            await self.send(body)
            return await self.receive(timeout=timeout)

    def reset_stats(self) -> None:
        """Reset channel statistics."""
        self._stats = {key: 0 for key in self._stats}
