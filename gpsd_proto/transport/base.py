"""Byte-stream transport interface consumed by the codec session."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

DEFAULT_READ_SIZE = 4096


@runtime_checkable
class ByteTransport(Protocol):
    """An already-open, bidirectional byte stream to gpsd.

    read() returns whatever bytes are available (at least one) and b"" once
    the peer has closed the stream or close() was called. Failures are raised
    as GpsdTransportError subclasses and are never retried by the codec.
    """

    async def read(self) -> bytes:
        """Read the next chunk of bytes."""
        ...

    async def write(self, data: bytes) -> None:
        """Write bytes and flush them to the peer."""
        ...

    async def close(self) -> None:
        """Close the stream. Pending reads return b""."""
        ...
