"""Codec session: typed gpsd messages over a byte-stream transport.

The session owns a LineFramer and nothing else. receive() pulls bytes from
the transport until a frame completes and decodes it; send() encodes a
command and writes it with its line terminator. There is no locking,
retrying or reconnecting: a session has a single owner, and callers that
share one across tasks must serialise receive() and send() themselves.

Usage:
    transport = await open_tcp("127.0.0.1", 2947)
    async with CodecSession(transport) as session:
        version = await session.handshake()
        async for message in session:
            if isinstance(message, Tpv):
                print(message.lat, message.lon)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from enum import Enum
from types import TracebackType
from typing import TypeVar

from .commands import ENABLE_WATCH, CommandRequest, WatchCommand
from .decoder import decode
from .encoder import CommandStyle, format_command
from .errors import (
    GpsdConnectionClosed,
    UnexpectedReplyError,
    UnknownClassError,
    UnsupportedProtocolVersionError,
    WatchFailedError,
)
from .framing import DEFAULT_MAX_FRAME_SIZE, LineFramer
from .messages import Devices, ProtocolMessage, Version, Watch, class_name
from .transport.base import DEFAULT_READ_SIZE, ByteTransport
from .transport.tcp import GPSD_DEFAULT_HOST, GPSD_DEFAULT_PORT, open_tcp

_LOGGER = logging.getLogger(__name__)

# Minimum supported gpsd protocol major version.
PROTO_MAJOR_MIN = 3

LINE_TERMINATOR = b"\n"

_ReplyT = TypeVar("_ReplyT", Version, Devices, Watch)


class UnknownClassPolicy(Enum):
    """What receive() does with a frame whose class token is unknown."""

    SKIP = "skip"  # drop it and read the next frame
    SURFACE = "surface"  # return it as an Unknown message
    RAISE = "raise"  # raise UnknownClassError; the session stays usable


class CodecSession:
    """One codec instance bound to one open transport."""

    def __init__(
        self,
        transport: ByteTransport,
        *,
        max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE,
        unknown_class_policy: UnknownClassPolicy = UnknownClassPolicy.SKIP,
        command_style: CommandStyle = CommandStyle.JSON,
    ) -> None:
        """Initialize session.

        Args:
            transport: Already-open byte stream to the daemon
            max_frame_size: Largest accepted line in bytes (None: unbounded)
            unknown_class_policy: Handling of unknown message classes
            command_style: Wire syntax for outgoing commands
        """
        self._transport = transport
        self._framer = LineFramer(max_frame_size=max_frame_size)
        self._unknown_class_policy = unknown_class_policy
        self._command_style = command_style
        self._eof = False

    @property
    def transport(self) -> ByteTransport:
        """The underlying transport."""
        return self._transport

    @property
    def unknown_class_policy(self) -> UnknownClassPolicy:
        """Configured unknown-class handling."""
        return self._unknown_class_policy

    @property
    def command_style(self) -> CommandStyle:
        """Configured outgoing command syntax."""
        return self._command_style

    # -------------------------------------------------------------------------
    # Receiving
    # -------------------------------------------------------------------------

    async def receive(self) -> ProtocolMessage:
        """Return the next message in wire order.

        Raises:
            GpsdConnectionClosed: The stream ended on a frame boundary.
            TruncatedFrameError: The stream ended inside a frame.
            FrameTooLargeError: A line exceeded max_frame_size.
            GpsdDecodeError: A frame could not be decoded; err.raw holds it.
            GpsdTransportError: Propagated unchanged from the transport.
        """
        surface = self._unknown_class_policy is UnknownClassPolicy.SURFACE
        while True:
            frame = await self._next_frame()
            try:
                return decode(frame, allow_unknown=surface)
            except UnknownClassError as err:
                if self._unknown_class_policy is UnknownClassPolicy.SKIP:
                    _LOGGER.debug("Skipping unknown message class %s", err.class_name)
                    continue
                raise

    async def _next_frame(self) -> bytes:
        while True:
            frame = self._framer.next_frame()
            if frame is not None:
                _LOGGER.debug("Raw %r", frame)
                return frame
            if self._eof:
                raise GpsdConnectionClosed("gpsd connection is closed")

            chunk = await self._transport.read()
            if not chunk:
                self._eof = True
                _LOGGER.debug("gpsd stream ended")
                self._framer.close()
                raise GpsdConnectionClosed("gpsd closed the connection")
            self._framer.feed(chunk)

    def __aiter__(self) -> AsyncIterator[ProtocolMessage]:
        return self._iter_messages()

    async def _iter_messages(self) -> AsyncIterator[ProtocolMessage]:
        while True:
            try:
                message = await self.receive()
            except GpsdConnectionClosed:
                return
            yield message

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    async def send(self, cmd: CommandRequest) -> None:
        """Encode a command and write it with its line terminator.

        Transport errors propagate unchanged.
        """
        text = format_command(cmd, self._command_style)
        _LOGGER.debug("Sending %s", text)
        await self._transport.write(text.encode("utf-8") + LINE_TERMINATOR)

    # -------------------------------------------------------------------------
    # Handshake
    # -------------------------------------------------------------------------

    async def handshake(self, *, watch: WatchCommand = ENABLE_WATCH) -> Version:
        """Perform the connect handshake and enable watch mode.

        Expects VERSION, sends the WATCH command, then expects DEVICES and
        the WATCH policy echo.

        Returns:
            The daemon's VERSION report.

        Raises:
            UnsupportedProtocolVersionError: proto_major < PROTO_MAJOR_MIN.
            UnexpectedReplyError: A message arrived out of order.
            WatchFailedError: The daemon left JSON reporting disabled.
        """
        version = await self._expect(Version, "VERSION")
        if version.proto_major < PROTO_MAJOR_MIN:
            raise UnsupportedProtocolVersionError(version.proto_major, PROTO_MAJOR_MIN)
        _LOGGER.info(
            "gpsd %s connected (protocol %d.%d)",
            version.release,
            version.proto_major,
            version.proto_minor,
        )

        await self.send(watch)
        await self._expect(Devices, "DEVICES")
        policy = await self._expect(Watch, "WATCH")
        if not policy.enable and not policy.json and policy.nmea:
            raise WatchFailedError(f"gpsd did not enable JSON watch mode: {policy}")
        return version

    async def _expect(self, expected: type[_ReplyT], name: str) -> _ReplyT:
        message = await self.receive()
        if not isinstance(message, expected):
            raise UnexpectedReplyError(name, class_name(message))
        return message

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the transport. An in-flight receive() raises GpsdConnectionClosed."""
        await self._transport.close()

    async def __aenter__(self) -> CodecSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


async def open_session(
    host: str = GPSD_DEFAULT_HOST,
    port: int = GPSD_DEFAULT_PORT,
    *,
    timeout: float = 15.0,
    read_size: int = DEFAULT_READ_SIZE,
    max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE,
    unknown_class_policy: UnknownClassPolicy = UnknownClassPolicy.SKIP,
    command_style: CommandStyle = CommandStyle.GPSD,
) -> CodecSession:
    """Connect to gpsd over TCP and wrap the connection in a session.

    Defaults to the daemon's native command syntax, which is what a real
    gpsd accepts.
    """
    transport = await open_tcp(host, port, timeout=timeout, read_size=read_size)
    return CodecSession(
        transport,
        max_frame_size=max_frame_size,
        unknown_class_policy=unknown_class_policy,
        command_style=command_style,
    )
