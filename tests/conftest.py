"""Pytest configuration and fixtures for gpsd_proto tests."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import pytest

VERSION_LINE = (
    b'{"class":"VERSION","release":"3.25","rev":"3.25","proto_major":3,"proto_minor":15}\r\n'
)
DEVICES_LINE = (
    b'{"class":"DEVICES","devices":[{"path":"/dev/gps","activated":"true"}]}\r\n'
)
WATCH_LINE = b'{"class":"WATCH","enable":true,"json":true,"nmea":false}\r\n'
TPV_LINE = b'{"class":"TPV","mode":3,"lat":66.123}\r\n'


class FakeTransport:
    """In-memory ByteTransport.

    Chunks queued with push() are returned by read() in order. After
    finish() (or close()) read() returns b"" once the queue is empty.
    """

    def __init__(self, chunks: Iterable[bytes] = (), *, eof: bool = True) -> None:
        self._queue: asyncio.Queue[bytes] = asyncio.Queue()
        for chunk in chunks:
            self._queue.put_nowait(chunk)
        if eof:
            self._queue.put_nowait(b"")
        self.written: list[bytes] = []
        self.closed = False
        self.reads = 0

    def push(self, chunk: bytes) -> None:
        self._queue.put_nowait(chunk)

    def finish(self) -> None:
        self._queue.put_nowait(b"")

    async def read(self) -> bytes:
        self.reads += 1
        chunk = await self._queue.get()
        if not chunk:
            # Stay at EOF for every later read.
            self._queue.put_nowait(b"")
        return chunk

    async def write(self, data: bytes) -> None:
        self.written.append(data)

    async def close(self) -> None:
        self.closed = True
        self.finish()


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport
