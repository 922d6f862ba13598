"""Line framing for the gpsd byte stream.

gpsd terminates every JSON object with CR LF. Reads from the transport split
lines at arbitrary offsets, so bytes are buffered until a terminator arrives.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import FrameTooLargeError, TruncatedFrameError

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_FRAME_SIZE = 1024 * 1024

_LF = 0x0A
_CR = 0x0D


class LineFramer:
    """Reassemble newline-terminated frames from arbitrary byte chunks.

    Frames come out in the order their terminators arrived and never include
    the terminator (LF, or CR LF). An empty line yields an empty frame.

    A frame longer than max_frame_size raises FrameTooLargeError. The
    oversized line is dropped up to its terminator and framing resumes with
    the next line. Pass max_frame_size=None to disable the cap.
    """

    def __init__(self, *, max_frame_size: int | None = DEFAULT_MAX_FRAME_SIZE) -> None:
        if max_frame_size is not None and max_frame_size < 0:
            raise ValueError("max_frame_size must be >= 0")
        self._max_frame_size = max_frame_size
        self._buffer = bytearray()
        # Bytes before this index are known to contain no LF.
        self._scan_from = 0
        self._discarding = False

    @property
    def max_frame_size(self) -> int | None:
        """Configured frame size limit in bytes."""
        return self._max_frame_size

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet returned as a frame."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> None:
        """Append a chunk received from the transport."""
        if chunk:
            self._buffer.extend(chunk)

    def next_frame(self) -> bytes | None:
        """Remove and return the first complete frame, or None if there is none.

        Raises:
            FrameTooLargeError: The next line exceeds max_frame_size.
        """
        while True:
            idx = self._buffer.find(b"\n", self._scan_from)
            if idx < 0:
                self._scan_from = len(self._buffer)
                if self._discarding:
                    self._drop(len(self._buffer))
                elif self._unterminated_too_large():
                    size = len(self._buffer)
                    self._drop(size)
                    self._discarding = True
                    _LOGGER.warning(
                        "Discarding unterminated line of %d bytes (limit %d)",
                        size,
                        self._max_frame_size,
                    )
                    raise FrameTooLargeError(size, self._max_frame_size or 0)
                return None

            if self._discarding:
                # Tail of a line already reported as too large.
                self._drop(idx + 1)
                self._discarding = False
                continue

            end = idx
            if end > 0 and self._buffer[end - 1] == _CR:
                end -= 1
            frame = bytes(self._buffer[:end])
            self._drop(idx + 1)

            if self._max_frame_size is not None and len(frame) > self._max_frame_size:
                _LOGGER.warning(
                    "Discarding line of %d bytes (limit %d)",
                    len(frame),
                    self._max_frame_size,
                )
                raise FrameTooLargeError(len(frame), self._max_frame_size)
            return frame

    def frames(self) -> Iterator[bytes]:
        """Yield every complete frame currently buffered."""
        while (frame := self.next_frame()) is not None:
            yield frame

    def close(self) -> None:
        """Signal end of stream.

        Raises:
            TruncatedFrameError: Bytes without a terminator are still buffered.
        """
        if self._discarding:
            self._drop(len(self._buffer))
            self._discarding = False
            return
        if self._buffer:
            partial = bytes(self._buffer)
            self._drop(len(partial))
            raise TruncatedFrameError(partial)

    def _unterminated_too_large(self) -> bool:
        """Whether the buffered partial line can no longer fit the limit."""
        limit = self._max_frame_size
        if limit is None:
            return False
        size = len(self._buffer)
        if size > limit + 1:
            return True
        # A trailing CR may still turn out to be part of the terminator.
        return size == limit + 1 and self._buffer[-1] != _CR

    def _drop(self, count: int) -> None:
        del self._buffer[:count]
        self._scan_from = 0
