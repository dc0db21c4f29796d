"""Serial port connection management using direct pyserial.

Blocking pyserial calls run on a single worker thread through
run_in_executor(), so reads never stall the event loop.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

import serial
from serial import SerialException

from simple_handshake.exceptions import HandshakeTimeoutError, TransportError

logger = logging.getLogger(__name__)


class SerialConnection:
    """Manages a serial port connection for handshake traffic."""

    def __init__(
        self,
        port: str,
        baudrate: int = 115200,
        timeout: float = 1.0,
    ):
        """
        Initialize serial connection manager.

        Args:
            port: Serial port path (e.g., '/dev/ttyUSB0')
            baudrate: Communication speed (default: 115200)
            timeout: Per-read timeout in seconds
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout

        self._serial: serial.Serial | None = None
        self._connected = False
        self._lock = asyncio.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="serial")

    @property
    def connected(self) -> bool:
        """Check if currently connected."""
        return self._connected and self._serial is not None and self._serial.is_open

    async def connect(self) -> bool:
        """
        Open serial port connection.

        Returns:
            True if connection successful, False otherwise
        """
        async with self._lock:
            if self.connected:
                logger.debug("Already connected to %s", self.port)
                return True

            try:
                logger.info("Connecting to serial port %s at %d baud", self.port, self.baudrate)

                self._serial = serial.Serial()
                self._serial.port = self.port
                self._serial.baudrate = self.baudrate
                self._serial.timeout = self.timeout
                self._serial.open()

                self._connected = True
                logger.info("Successfully connected to %s", self.port)
                return True

            except (OSError, SerialException) as e:
                logger.error("Failed to connect to %s: %s", self.port, e)
                self._connected = False
                return False

    async def disconnect(self) -> None:
        """Close serial port connection."""
        async with self._lock:
            if not self._connected:
                return

            logger.info("Disconnecting from %s", self.port)

            if self._serial and self._serial.is_open:
                try:
                    self._serial.close()
                except (OSError, SerialException) as e:
                    logger.error("Error closing serial port: %s", e)

            self._serial = None
            self._connected = False
            logger.info("Disconnected from %s", self.port)

    def _blocking_read(self, n: int, timeout: float) -> bytes:
        """Blocking read for use with run_in_executor.

        Returns up to ``n`` bytes; fewer (possibly none) when ``timeout``
        expires first.
        """
        if not self._serial or not self._serial.is_open:
            raise ConnectionError("Not connected to serial port")
        self._serial.timeout = timeout
        return self._serial.read(n)

    async def read_exactly(self, n: int, timeout: float | None = None) -> bytes:
        """
        Read exactly ``n`` bytes from the serial port.

        No single port read blocks past the deadline: each one waits at most
        the smaller of the port timeout and the time left.

        Args:
            n: Number of bytes to read
            timeout: Overall deadline in seconds (None waits indefinitely)

        Returns:
            Exactly ``n`` bytes

        Raises:
            TransportError: If not connected or the port fails
            HandshakeTimeoutError: If the deadline passes first
        """
        if not self.connected or not self._serial:
            raise TransportError("Not connected to serial port")

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        buffer = bytearray()

        while len(buffer) < n:
            read_timeout = self.timeout
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    logger.debug("Read timeout after %ss: got %d of %d bytes", timeout, len(buffer), n)
                    raise HandshakeTimeoutError(
                        f"Timed out after {timeout}s waiting for {n} bytes", received=len(buffer)
                    )
                read_timeout = min(self.timeout, remaining)

            try:
                chunk = await loop.run_in_executor(
                    self._executor, self._blocking_read, n - len(buffer), read_timeout
                )
            except (OSError, SerialException) as e:
                logger.error("Read error: %s", e)
                self._connected = False
                raise TransportError(str(e)) from e

            buffer.extend(chunk)

        return bytes(buffer)

    async def write(self, data: bytes) -> None:
        """
        Write to serial port and wait for transmission to finish.

        Args:
            data: Bytes to write

        Raises:
            TransportError: If not connected or the write fails
        """
        if not self.connected or not self._serial:
            raise TransportError("Not connected to serial port")

        try:
            self._serial.write(data)
            self._serial.flush()
        except (OSError, SerialException) as e:
            logger.error("Write error: %s", e)
            self._connected = False
            raise TransportError(str(e)) from e

    def reset_input_buffer(self) -> None:
        """Discard anything already received but not yet read."""
        if self._serial and self._serial.is_open:
            self._serial.reset_input_buffer()

    async def __aenter__(self):
        """Async context manager entry."""
        if not await self.connect():
            raise TransportError(f"Failed to connect to {self.port}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()
