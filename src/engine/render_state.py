"""
RenderState — Device-facing pixel buffer for one strip.

Accumulates pixel writes into a wire buffer and commits them atomically:
one transport sequence (flush input, write payload) per frame, the payload
being the clamped RGB triplets followed by the control byte.

Two write paths with different costs:
- write_next(): O(1), appends at the write cursor
- write_at(): O(pixel_count), rewrites the whole wire buffer from pending

Pixels not rewritten since the previous commit keep their pending value.
A short sequential write therefore leaves the tail of the strip as it was,
it is never reset to black.

Warstwa: ENGINE / RENDER STATE
"""

from __future__ import annotations
from typing import Iterable, List

from hardware.transport.transport_interface import ITransport
from models.errors import ConfigurationError, RangeError, OutOfRangeError, EmptyBufferError
from models.frame import Pixel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RENDER)

# Byte sent to the strip to render the preceding pixel data
CONTROL_BYTE = 0xFF


class RenderState:
    """
    Committed/pending pixel arrays plus the wire buffer under construction.

    Attributes:
        pixel_count: Number of LEDs (fixed at construction, > 0)
        cursor: Next sequential write position (0..pixel_count)

    Not thread-safe; callers serialize access (see PlaybackController).
    """

    def __init__(self, transport: ITransport, pixel_count: int):
        if pixel_count <= 0:
            raise ConfigurationError(pixel_count=pixel_count)

        self._transport = transport
        self._pixel_count = pixel_count
        self._committed: List[Pixel] = [Pixel() for _ in range(pixel_count)]
        self._pending: List[Pixel] = list(self._committed)
        self._buffer = bytearray()
        self._cursor = 0

    # ==================== Read views ====================

    @property
    def pixel_count(self) -> int:
        return self._pixel_count

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def committed_state(self) -> List[Pixel]:
        """Copy of the last successfully rendered pixels."""
        return list(self._committed)

    @property
    def pending_state(self) -> List[Pixel]:
        """Copy of the pixels under construction."""
        return list(self._pending)

    @property
    def buffered_bytes(self) -> bytes:
        """Wire buffer without the control byte."""
        return bytes(self._buffer)

    # ==================== Writes ====================

    def clear(self) -> None:
        """Reset the cursor and empty the wire buffer. Pixel arrays untouched."""
        self._cursor = 0
        self._buffer.clear()

    def write_next(self, pixel: Pixel) -> None:
        """
        Write a pixel at the cursor and advance it.

        Raises:
            RangeError: cursor already past the last pixel (nothing changes)
        """
        if self._cursor >= self._pixel_count:
            raise RangeError(position=self._cursor, max_range=self._pixel_count - 1)

        self._buffer += pixel.clamped_triplet()
        self._pending[self._cursor] = pixel
        self._cursor += 1

    def write_frame(self, pixels: Iterable[Pixel]) -> int:
        """
        Write pixels sequentially from the cursor.

        Pixels beyond the strip length are ignored. The write is all or
        nothing: if the remaining pixels do not fit after the cursor,
        nothing is written.

        Returns:
            Number of pixels written

        Raises:
            RangeError: frame does not fit after the cursor
        """
        frame = list(pixels)[:self._pixel_count]
        if self._cursor + len(frame) > self._pixel_count:
            raise RangeError(position=self._pixel_count, max_range=self._pixel_count - 1)

        for pixel in frame:
            self.write_next(pixel)
        return len(frame)

    def write_at(self, pixel: Pixel, position: int) -> None:
        """
        Set one pixel and rebuild the whole wire buffer from pending.

        O(pixel_count): every pending pixel is re-encoded, regardless of the
        cursor. Use write_next() for sequential fills.

        Raises:
            OutOfRangeError: position outside the strip (nothing changes)
        """
        if position < 0 or position >= self._pixel_count:
            raise OutOfRangeError(position=position, pixel_count=self._pixel_count)

        self._pending[position] = pixel
        self._buffer = bytearray(b"".join(p.clamped_triplet() for p in self._pending))

    # ==================== Commit protocol ====================

    def commit(self) -> bytes:
        """
        Send the wire buffer plus control byte to the transport.

        Blocking. On success the buffer and cursor are cleared and the
        pending pixels become the committed state.

        Returns:
            The payload written

        Raises:
            EmptyBufferError: nothing to render (no I/O performed)
            TransportError: I/O failed; buffer, cursor and both pixel arrays
                are left as they were so the caller may retry
        """
        if not self._buffer:
            raise EmptyBufferError()

        payload = bytes(self._buffer) + bytes((CONTROL_BYTE,))
        self._transport.flush()
        self._transport.write(payload)

        self.clear()
        self._committed = list(self._pending)

        log.debug("Frame committed", bytes=len(payload))
        return payload

    def discard(self) -> None:
        """Drop uncommitted writes: pending reverts to the committed state."""
        self.clear()
        self._pending = list(self._committed)

    def __repr__(self) -> str:
        return (
            f"RenderState(pixels={self._pixel_count}, "
            f"cursor={self._cursor}, "
            f"buffered={len(self._buffer)})"
        )
