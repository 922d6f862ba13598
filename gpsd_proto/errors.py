"""Client error types for gpsd protocol interactions."""

from __future__ import annotations


class GpsdClientError(Exception):
    """Base error for gpsd client failures."""


# -----------------------------------------------------------------------------
# Framing
# -----------------------------------------------------------------------------


class GpsdFramingError(GpsdClientError):
    """The byte stream could not be split into frames."""


class FrameTooLargeError(GpsdFramingError):
    """A line exceeded the configured maximum frame size."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Frame of at least {size} bytes exceeds limit of {limit}")
        self.size = size
        self.limit = limit


class TruncatedFrameError(GpsdFramingError):
    """The stream ended in the middle of a line."""

    def __init__(self, partial: bytes) -> None:
        super().__init__(f"Stream ended with {len(partial)} unterminated bytes")
        self.partial = partial


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


class GpsdDecodeError(GpsdClientError):
    """A frame could not be decoded into a protocol message.

    Attributes:
        raw: The offending frame text.
        reason: Human-readable failure reason.
    """

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"{reason}: {raw!r}")
        self.raw = raw
        self.reason = reason


class MalformedJsonError(GpsdDecodeError):
    """Frame is not valid UTF-8 JSON."""


class MissingDiscriminatorError(GpsdDecodeError):
    """Frame is not an object with a string "class" member."""


class UnknownClassError(GpsdDecodeError):
    """Frame carries a class token this client does not know.

    Recoverable: sessions may skip such frames so that newer daemons do not
    break older clients.
    """

    def __init__(self, raw: str, class_name: str) -> None:
        super().__init__(raw, f"Unknown message class {class_name!r}")
        self.class_name = class_name


class FieldError(GpsdDecodeError):
    """Required field missing, or a field has the wrong JSON type."""

    def __init__(self, raw: str, class_name: str, field: str, reason: str) -> None:
        super().__init__(raw, f"{class_name}.{field}: {reason}")
        self.class_name = class_name
        self.field = field


# -----------------------------------------------------------------------------
# Transport
# -----------------------------------------------------------------------------


class GpsdTransportError(GpsdClientError):
    """Failure of the underlying byte stream."""


class GpsdTimeout(GpsdTransportError):
    """Timeout while communicating with the daemon."""


class GpsdConnectionError(GpsdTransportError):
    """Network connection to the daemon failed."""


class GpsdConnectionClosed(GpsdConnectionError):
    """The daemon closed the connection."""


class GpsdHandshakeError(GpsdConnectionError):
    """WebSocket handshake with a relay failed."""


# -----------------------------------------------------------------------------
# Protocol (session handshake)
# -----------------------------------------------------------------------------


class GpsdProtocolError(GpsdClientError):
    """The daemon replied out of protocol."""


class UnsupportedProtocolVersionError(GpsdProtocolError):
    """The daemon speaks a protocol older than the supported minimum."""

    def __init__(self, proto_major: int, minimum: int) -> None:
        super().__init__(
            f"gpsd protocol major version {proto_major} is older than {minimum}"
        )
        self.proto_major = proto_major
        self.minimum = minimum


class UnexpectedReplyError(GpsdProtocolError):
    """A message arrived that does not belong at this point of the handshake."""

    def __init__(self, expected: str, received: str) -> None:
        super().__init__(f"Expected {expected}, received {received}")
        self.expected = expected
        self.received = received


class WatchFailedError(GpsdProtocolError):
    """The daemon did not enable JSON watch mode."""
