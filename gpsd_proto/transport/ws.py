"""WebSocket transport for gpsd JSON relayed over a WebSocket endpoint.

Relays forward each gpsd report as one text message, usually without the
line terminator. Each message is handed to the session as one
newline-terminated chunk so the line framer sees the same byte stream a
direct TCP connection would produce.
"""

from __future__ import annotations

import asyncio
import logging

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import (
    ConnectionClosed,
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)

from ..errors import (
    GpsdConnectionClosed,
    GpsdConnectionError,
    GpsdHandshakeError,
    GpsdTimeout,
)
from ..framing import DEFAULT_MAX_FRAME_SIZE

_LOGGER = logging.getLogger(__name__)


def _message_limit(max_frame_size: int | None) -> int | None:
    # A relayed message may still carry its CR LF terminator.
    if max_frame_size is None:
        return None
    return max_frame_size + 2


class WebSocketTransport:
    """ByteTransport over a websockets client connection."""

    def __init__(self, ws: ClientConnection) -> None:
        self._ws = ws

    async def read(self) -> bytes:
        """Receive one message as a newline-terminated chunk; b"" once closed."""
        try:
            msg = await self._ws.recv()
        except ConnectionClosed as err:
            _LOGGER.debug("WebSocket closed: %s", err)
            return b""
        except WebSocketException as err:
            raise GpsdConnectionError("WebSocket receive failed") from err

        data = msg.encode("utf-8") if isinstance(msg, str) else bytes(msg)
        if not data.endswith(b"\n"):
            data += b"\n"
        return data

    async def write(self, data: bytes) -> None:
        """Send every line of data as its own text message."""
        try:
            # Split on LF only; U+2028 and friends may appear inside JSON strings.
            for line in data.split(b"\n"):
                line = line.rstrip(b"\r")
                if line:
                    await self._ws.send(line.decode("utf-8"))
        except ConnectionClosed as err:
            raise GpsdConnectionClosed("WebSocket is closed") from err
        except WebSocketException as err:
            raise GpsdConnectionError("WebSocket send failed") from err

    async def close(self) -> None:
        """Close the WebSocket; a pending read() then returns b""."""
        await self._ws.close()


async def connect_websocket(
    host: str,
    port: int,
    *,
    path: str = "/",
    ping_interval: int | None = 20,
    timeout: float = 15.0,
    max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE,
) -> WebSocketTransport:
    """Connect to a WebSocket relay of the gpsd JSON stream.

    Uses the websockets library which properly implements RFC 6455 frame masking.

    Args:
        host: Relay host
        port: Relay port
        path: WebSocket path (default: /)
        ping_interval: Interval for ping frames
        timeout: Connection timeout
        max_frame_size: Largest accepted report in bytes (None: unbounded)

    Raises:
        GpsdTimeout: The connection attempt timed out.
        GpsdHandshakeError: The WebSocket handshake failed.
        GpsdConnectionError: The connection failed.
    """
    ws_url = f"ws://{host}:{port}{path}"
    try:
        ws = await asyncio.wait_for(
            websockets.connect(
                ws_url,
                ping_interval=ping_interval,
                close_timeout=5,
                max_size=_message_limit(max_frame_size),
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise GpsdTimeout("WebSocket connection timed out") from err
    except (InvalidHandshake, InvalidURI) as err:
        raise GpsdHandshakeError("WebSocket handshake failed") from err
    except (OSError, WebSocketException) as err:
        raise GpsdConnectionError("WebSocket connection failed") from err
    _LOGGER.info("Connected to gpsd relay at %s", ws_url)
    return WebSocketTransport(ws)
