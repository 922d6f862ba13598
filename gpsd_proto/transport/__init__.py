"""Byte-stream transports for the gpsd codec session.

Components:
- base: ByteTransport protocol the session consumes
- tcp: asyncio stream connection to the daemon
- ws: WebSocket relay of the daemon's JSON stream
"""

from .base import DEFAULT_READ_SIZE, ByteTransport
from .tcp import GPSD_DEFAULT_HOST, GPSD_DEFAULT_PORT, TcpTransport, open_tcp
from .ws import WebSocketTransport, connect_websocket

__all__ = [
    "DEFAULT_READ_SIZE",
    "GPSD_DEFAULT_HOST",
    "GPSD_DEFAULT_PORT",
    "ByteTransport",
    "TcpTransport",
    "WebSocketTransport",
    "connect_websocket",
    "open_tcp",
]
