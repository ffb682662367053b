"""
StripController — the device object owned by the caller.

Wraps one serial LED strip: a RenderState for buffered pixel writes and a
PlaybackController for animations. Every call that touches the pixel
buffer fails with BusyError while an animation is running or paused.

Usage:
    async with StripController.open(StripConfig(port="/dev/ttyACM0", pixel_count=60)) as strip:
        await strip.set_color(Color.from_rgb(255, 0, 0))
        await strip.render()

        await strip.play(animation)
        await strip.pause()
        await strip.resume()
        await strip.stop()
"""

from __future__ import annotations
import asyncio
from typing import Iterable, List, Optional

from controllers.playback_controller import PlaybackController, ErrorCallback
from engine.render_state import RenderState, CONTROL_BYTE
from hardware.transport.serial_transport import SerialTransport, SerialConfig
from hardware.transport.transport_interface import ITransport
from models.animation import Animation, AnimationConfig
from models.color import Color
from models.config import StripConfig
from models.enums import AnimationStatus
from models.errors import ConfigurationError, StripError, TransportError
from models.frame import Pixel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class StripController:
    """
    Buffered strip with animation playback.

    Pixel writes accumulate until render(); reset() drops them.
    """

    def __init__(
        self,
        transport: ITransport,
        pixel_count: int,
        on_error: Optional[ErrorCallback] = None
    ) -> None:
        if pixel_count <= 0:
            raise ConfigurationError(pixel_count=pixel_count)

        self._transport = transport
        self._state = RenderState(transport, pixel_count)
        self._playback = PlaybackController(self._state, on_error=on_error)

        log.info("Strip ready", pixels=pixel_count, transport=type(transport).__name__)

    @classmethod
    def open(cls, config: StripConfig, on_error: Optional[ErrorCallback] = None) -> "StripController":
        """
        Open the serial port and stop whatever the device is playing.

        Raises:
            ConfigurationError: pixel_count is 0
            TransportError: port cannot be opened or written
        """
        if config.pixel_count <= 0:
            raise ConfigurationError(pixel_count=config.pixel_count)

        transport = SerialTransport(SerialConfig(
            port=config.port,
            baudrate=config.baudrate,
            read_timeout=config.read_timeout,
        ))

        try:
            strip = cls(transport, config.pixel_count, on_error=on_error)
            strip._send_control_byte()
        except StripError:
            transport.close()
            raise
        return strip

    def _send_control_byte(self) -> None:
        """Send a lone control byte; the device stops any pattern it is playing."""
        self._transport.flush()
        self._transport.write(bytes((CONTROL_BYTE,)))

    # ==================== Read views ====================

    @property
    def pixel_count(self) -> int:
        return self._state.pixel_count

    @property
    def committed_state(self) -> List[Pixel]:
        return self._state.committed_state

    @property
    def pending_state(self) -> List[Pixel]:
        return self._state.pending_state

    @property
    def playback(self) -> PlaybackController:
        return self._playback

    @property
    def status(self) -> AnimationStatus:
        return self._playback.status

    def is_running(self) -> bool:
        return self._playback.is_running()

    @property
    def last_error(self) -> Optional[StripError]:
        return self._playback.last_error

    # ==================== Pixel operations ====================

    async def set_color(self, color: Color) -> None:
        """Set every pixel to the same color (buffered)."""
        async with self._playback.ensure_stopped():
            self._fill(color)

    async def set_pixels(self, pixels: Iterable[Pixel]) -> None:
        """Write pixels sequentially from the cursor; extra pixels are ignored."""
        async with self._playback.ensure_stopped():
            self._state.write_frame(pixels)

    async def set_next_pixel(self, pixel: Pixel) -> None:
        async with self._playback.ensure_stopped():
            self._state.write_next(pixel)

    async def set_pixel_at(self, pixel: Pixel, position: int) -> None:
        """Set one pixel; rewrites the whole buffer (O(pixel_count))."""
        async with self._playback.ensure_stopped():
            self._state.write_at(pixel, position)

    async def render(self) -> bytes:
        """Commit the buffered pixels to the strip."""
        async with self._playback.ensure_stopped():
            return await self._commit()

    async def reset(self) -> None:
        """Discard any change made since the last render."""
        async with self._playback.ensure_stopped():
            self._state.discard()

    async def switch_off(self) -> None:
        """Set all pixels to black and render."""
        async with self._playback.ensure_stopped():
            self._fill(Color.black())
            await self._commit()

    def _fill(self, color: Color) -> None:
        self._state.clear()
        pixel = Pixel(color)
        for _ in range(self._state.pixel_count):
            self._state.write_next(pixel)

    async def _commit(self) -> bytes:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._state.commit)
        except TransportError as ex:
            log.error("Render failed", code=ex.code, error=ex.message)
            raise

    # ==================== Playback ====================

    async def play(self, animation: Animation, config: Optional[AnimationConfig] = None) -> bool:
        return await self._playback.play(animation, config)

    async def pause(self) -> bool:
        return await self._playback.pause()

    async def resume(self) -> bool:
        return await self._playback.resume()

    async def stop(self) -> None:
        await self._playback.stop()

    async def wait_until_stopped(self, timeout: Optional[float] = None) -> None:
        await self._playback.wait_until_stopped(timeout)

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Stop playback and release the transport."""
        await self._playback.stop()
        self._transport.close()
        log.info("Strip closed")

    async def __aenter__(self) -> "StripController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
