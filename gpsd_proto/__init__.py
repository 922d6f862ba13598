"""Codec for the gpsd JSON protocol.

Frames the daemon's newline-delimited JSON stream, decodes reports into
typed messages and encodes client commands.
"""

__version__ = "1.0.0"

from .commands import (
    DISABLE_WATCH,
    ENABLE_WATCH,
    CommandRequest,
    DeviceCommand,
    DevicesCommand,
    PollCommand,
    RawCommand,
    VersionCommand,
    WatchCommand,
)
from .decoder import KNOWN_CLASSES, decode, decode_object
from .encoder import CommandStyle, encode, encode_gpsd, encode_report, format_command
from .errors import (
    FieldError,
    FrameTooLargeError,
    GpsdClientError,
    GpsdConnectionClosed,
    GpsdConnectionError,
    GpsdDecodeError,
    GpsdFramingError,
    GpsdHandshakeError,
    GpsdProtocolError,
    GpsdTimeout,
    GpsdTransportError,
    MalformedJsonError,
    MissingDiscriminatorError,
    TruncatedFrameError,
    UnexpectedReplyError,
    UnknownClassError,
    UnsupportedProtocolVersionError,
    WatchFailedError,
)
from .framing import DEFAULT_MAX_FRAME_SIZE, LineFramer
from .messages import (
    Att,
    Device,
    Devices,
    Error,
    Gst,
    Mode,
    Poll,
    Pps,
    ProtocolMessage,
    Satellite,
    Sky,
    Toff,
    Tpv,
    Unknown,
    Version,
    Watch,
    class_name,
)
from .session import PROTO_MAJOR_MIN, CodecSession, UnknownClassPolicy, open_session
from .transport import (
    GPSD_DEFAULT_HOST,
    GPSD_DEFAULT_PORT,
    ByteTransport,
    TcpTransport,
    WebSocketTransport,
    connect_websocket,
    open_tcp,
)

__all__ = [
    "DEFAULT_MAX_FRAME_SIZE",
    "DISABLE_WATCH",
    "ENABLE_WATCH",
    "GPSD_DEFAULT_HOST",
    "GPSD_DEFAULT_PORT",
    "KNOWN_CLASSES",
    "PROTO_MAJOR_MIN",
    "Att",
    "ByteTransport",
    "CodecSession",
    "CommandRequest",
    "CommandStyle",
    "Device",
    "DeviceCommand",
    "Devices",
    "DevicesCommand",
    "Error",
    "FieldError",
    "FrameTooLargeError",
    "GpsdClientError",
    "GpsdConnectionClosed",
    "GpsdConnectionError",
    "GpsdDecodeError",
    "GpsdFramingError",
    "GpsdHandshakeError",
    "GpsdProtocolError",
    "GpsdTimeout",
    "GpsdTransportError",
    "Gst",
    "LineFramer",
    "MalformedJsonError",
    "MissingDiscriminatorError",
    "Mode",
    "Poll",
    "PollCommand",
    "Pps",
    "ProtocolMessage",
    "RawCommand",
    "Satellite",
    "Sky",
    "TcpTransport",
    "Toff",
    "Tpv",
    "TruncatedFrameError",
    "UnexpectedReplyError",
    "Unknown",
    "UnknownClassError",
    "UnknownClassPolicy",
    "UnsupportedProtocolVersionError",
    "Version",
    "VersionCommand",
    "Watch",
    "WatchCommand",
    "WatchFailedError",
    "WebSocketTransport",
    "__version__",
    "class_name",
    "connect_websocket",
    "decode",
    "decode_object",
    "encode",
    "encode_gpsd",
    "encode_report",
    "format_command",
    "open_session",
    "open_tcp",
]
