"""TCP transport to a gpsd daemon on asyncio streams."""

from __future__ import annotations

import asyncio
import logging

from ..errors import GpsdConnectionError, GpsdTimeout
from .base import DEFAULT_READ_SIZE

_LOGGER = logging.getLogger(__name__)

GPSD_DEFAULT_HOST = "127.0.0.1"
GPSD_DEFAULT_PORT = 2947


class TcpTransport:
    """ByteTransport over an asyncio StreamReader/StreamWriter pair."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        read_size: int = DEFAULT_READ_SIZE,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._read_size = read_size
        self._closed = False

    @property
    def is_closed(self) -> bool:
        """True once close() was called."""
        return self._closed

    async def read(self) -> bytes:
        """Read up to read_size bytes; b"" at end of stream."""
        if self._closed:
            return b""
        try:
            return await self._reader.read(self._read_size)
        except OSError as err:
            raise GpsdConnectionError("Failed to read from gpsd") from err

    async def write(self, data: bytes) -> None:
        """Write data and wait for the send buffer to drain."""
        if self._closed:
            raise GpsdConnectionError("Transport is closed")
        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as err:
            raise GpsdConnectionError("Failed to write to gpsd") from err

    async def close(self) -> None:
        """Close the connection; an in-flight read() then returns b""."""
        if self._closed:
            return
        self._closed = True
        # Wakes up a reader blocked in read() with EOF.
        self._reader.feed_eof()
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError as err:
            _LOGGER.debug("Error while closing gpsd connection: %s", err)


async def open_tcp(
    host: str = GPSD_DEFAULT_HOST,
    port: int = GPSD_DEFAULT_PORT,
    *,
    timeout: float = 15.0,
    read_size: int = DEFAULT_READ_SIZE,
) -> TcpTransport:
    """Open a TCP connection to gpsd.

    Args:
        host: Daemon host
        port: Daemon port (default: 2947)
        timeout: Connection timeout in seconds
        read_size: Maximum bytes returned by a single read()

    Raises:
        GpsdTimeout: The connection attempt timed out.
        GpsdConnectionError: The connection was refused or failed.
    """
    _LOGGER.debug("Connecting to gpsd at %s:%s", host, port)
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise GpsdTimeout("gpsd connection timed out") from err
    except OSError as err:
        raise GpsdConnectionError("gpsd connection failed") from err
    _LOGGER.info("Connected to gpsd at %s:%s", host, port)
    return TcpTransport(reader, writer, read_size=read_size)
