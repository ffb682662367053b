"""
Tests for StripController (foreground operations, busy guard, open/close).
"""

import asyncio
from unittest.mock import patch

import pytest
import serial

from conftest import RED, GREEN, BLUE, WHITE, BLACK, wire
from controllers.strip_controller import StripController
from models.animation import Animation, AnimationConfig
from models.color import Color
from models.config import StripConfig
from models.enums import AnimationStatus
from models.errors import BusyError, ConfigurationError, EmptyBufferError, RangeError, TransportError
from models.frame import Pixel


class TestForegroundOperations:

    def test_zero_pixels_rejected(self, transport):
        with pytest.raises(ConfigurationError):
            StripController(transport, 0)

    @pytest.mark.asyncio
    async def test_set_color_and_render(self, strip, transport):
        await strip.set_color(RED.color)
        payload = await strip.render()

        assert payload == wire(RED, RED, RED)
        assert transport.last_write == payload
        assert strip.committed_state == [RED, RED, RED]

    @pytest.mark.asyncio
    async def test_set_pixel_at_after_failed_playback(self, strip, transport):
        await strip.set_pixels([RED, GREEN, BLUE])
        await strip.render()
        transport.fail_always = OSError("unplugged")
        await strip.play(Animation(name="white", repeat=1, pattern=[[WHITE, WHITE, WHITE]]),
                         AnimationConfig(repeat=1, delay=0.01))
        await strip.wait_until_stopped(timeout=1.0)
        assert isinstance(strip.last_error, TransportError)
        transport.fail_always = None

        await strip.set_pixel_at(WHITE, 1)
        await strip.render()

        assert transport.last_write == wire(RED, WHITE, BLUE)
        assert strip.committed_state == [RED, WHITE, BLUE]

    @pytest.mark.asyncio
    async def test_set_pixels_after_failed_playback(self, strip, transport):
        transport.fail_next = OSError("glitch")
        await strip.play(Animation(name="white", repeat=1, pattern=[[WHITE, WHITE, WHITE]]),
                         AnimationConfig(repeat=1, delay=0.01))
        await strip.wait_until_stopped(timeout=1.0)

        await strip.set_pixels([RED, GREEN, BLUE])
        await strip.render()

        assert transport.last_write == wire(RED, GREEN, BLUE)

    @pytest.mark.asyncio
    async def test_set_color_restarts_from_first_pixel(self, strip, transport):
        await strip.set_next_pixel(GREEN)
        await strip.set_color(BLUE.color)
        await strip.render()

        assert transport.last_write == wire(BLUE, BLUE, BLUE)

    @pytest.mark.asyncio
    async def test_set_pixels_and_next_pixel(self, strip, transport):
        await strip.set_pixels([RED, GREEN])
        await strip.set_next_pixel(BLUE)
        await strip.render()

        assert strip.committed_state == [RED, GREEN, BLUE]

    @pytest.mark.asyncio
    async def test_set_next_pixel_past_end(self, strip):
        await strip.set_pixels([RED, GREEN, BLUE])

        with pytest.raises(RangeError):
            await strip.set_next_pixel(WHITE)
        assert strip.pending_state == [RED, GREEN, BLUE]

    @pytest.mark.asyncio
    async def test_set_pixel_at_then_render(self, strip, transport):
        await strip.set_pixels([RED, GREEN, BLUE])
        await strip.render()

        await strip.set_pixel_at(WHITE, 1)
        await strip.render()

        assert transport.last_write == wire(RED, WHITE, BLUE)
        assert strip.committed_state == [RED, WHITE, BLUE]

    @pytest.mark.asyncio
    async def test_render_empty_buffer(self, strip, transport):
        with pytest.raises(EmptyBufferError):
            await strip.render()
        assert transport.write_count == 0

    @pytest.mark.asyncio
    async def test_reset_discards_changes(self, strip):
        await strip.set_pixels([RED, GREEN, BLUE])
        await strip.render()
        await strip.set_pixel_at(WHITE, 0)

        await strip.reset()

        assert strip.pending_state == [RED, GREEN, BLUE]
        with pytest.raises(EmptyBufferError):
            await strip.render()

    @pytest.mark.asyncio
    async def test_switch_off(self, strip, transport):
        await strip.set_color(WHITE.color)
        await strip.render()

        await strip.switch_off()

        assert transport.last_write == wire(BLACK, BLACK, BLACK)
        assert strip.committed_state == [BLACK, BLACK, BLACK]

    @pytest.mark.asyncio
    async def test_render_transport_error_propagates(self, strip, transport):
        await strip.set_color(RED.color)
        transport.fail_next = OSError("unplugged")

        with pytest.raises(TransportError):
            await strip.render()

        assert strip.committed_state == [BLACK, BLACK, BLACK]
        await strip.render()
        assert strip.committed_state == [RED, RED, RED]


class TestBusyGuard:

    @pytest.fixture
    def endless(self):
        return Animation(name="endless", repeat=-1, pattern=[[RED, GREEN, BLUE]])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", [
        lambda s: s.set_color(WHITE.color),
        lambda s: s.set_pixels([WHITE]),
        lambda s: s.set_next_pixel(WHITE),
        lambda s: s.set_pixel_at(WHITE, 0),
        lambda s: s.render(),
        lambda s: s.reset(),
        lambda s: s.switch_off(),
    ], ids=["set_color", "set_pixels", "set_next_pixel", "set_pixel_at", "render", "reset", "switch_off"])
    async def test_mutations_rejected_while_running(self, strip, endless, operation):
        await strip.play(endless, AnimationConfig(repeat=-1, delay=0.05))
        await asyncio.sleep(0.01)
        pending = strip.pending_state
        committed = strip.committed_state

        with pytest.raises(BusyError) as exc:
            await operation(strip)

        assert exc.value.code == "BUSY_PLAYING"
        assert strip.pending_state == pending
        assert strip.committed_state == committed
        await strip.stop()

    @pytest.mark.asyncio
    async def test_mutations_rejected_while_paused(self, strip, endless):
        await strip.play(endless, AnimationConfig(repeat=-1, delay=0.05))
        await asyncio.sleep(0.01)
        await strip.pause()
        assert strip.status is AnimationStatus.PAUSED

        with pytest.raises(BusyError):
            await strip.set_color(WHITE.color)

        await strip.stop()

    @pytest.mark.asyncio
    async def test_mutations_allowed_after_stop(self, strip, endless, transport):
        await strip.play(endless, AnimationConfig(repeat=-1, delay=0.05))
        await asyncio.sleep(0.01)
        await strip.stop()

        await strip.set_color(WHITE.color)
        await strip.render()

        assert transport.last_write == wire(WHITE, WHITE, WHITE)
        assert not strip.is_running()


class TestOpenClose:

    @pytest.fixture
    def mock_serial(self):
        with patch("hardware.transport.serial_transport.serial.Serial") as serial_cls:
            port = serial_cls.return_value
            port.write.side_effect = lambda data: len(data)
            port.is_open = True
            yield serial_cls

    def test_open_sends_control_byte(self, mock_serial):
        strip = StripController.open(StripConfig(port="/dev/ttyACM0", pixel_count=60))

        mock_serial.assert_called_once_with(port="/dev/ttyACM0", baudrate=115200, timeout=0.5)
        port = mock_serial.return_value
        port.reset_input_buffer.assert_called_once()
        port.write.assert_called_once_with(b"\xff")
        assert strip.pixel_count == 60
        assert strip.status is AnimationStatus.STOPPED

    def test_open_zero_pixels_does_not_touch_port(self, mock_serial):
        with pytest.raises(ConfigurationError):
            StripController.open(StripConfig(port="/dev/ttyACM0", pixel_count=0))

        mock_serial.assert_not_called()

    def test_open_failure_is_transport_error(self, mock_serial):
        mock_serial.side_effect = serial.SerialException("no such port")

        with pytest.raises(TransportError) as exc:
            StripController.open(StripConfig(port="/dev/missing", pixel_count=3))

        assert exc.value.details["port"] == "/dev/missing"

    def test_open_closes_port_when_control_byte_fails(self, mock_serial):
        port = mock_serial.return_value
        port.write.side_effect = serial.SerialTimeoutException("write timeout")

        with pytest.raises(TransportError):
            StripController.open(StripConfig(port="/dev/ttyACM0", pixel_count=3))

        port.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_stops_playback(self, strip, transport):
        await strip.play(Animation(name="endless", repeat=-1, pattern=[[RED]]),
                         AnimationConfig(repeat=-1, delay=0.05))
        await asyncio.sleep(0.01)

        await strip.close()

        assert strip.status is AnimationStatus.STOPPED
        assert transport.closed

    @pytest.mark.asyncio
    async def test_async_context_manager(self, transport):
        async with StripController(transport, 2) as strip:
            await strip.set_color(Color.raw(10, 20, 30))
            await strip.render()

        assert transport.closed
        assert transport.last_write == wire(Pixel(Color.raw(10, 20, 30)), Pixel(Color.raw(10, 20, 30)))

    @pytest.mark.asyncio
    async def test_control_byte_only_sent_on_open(self, mock_serial):
        strip = StripController.open(StripConfig(port="/dev/ttyACM0", pixel_count=1))
        port = mock_serial.return_value

        assert not hasattr(strip, "send_control_byte")

        await strip.play(Animation(name="blink", repeat=2, pattern=[[RED], [BLUE]]),
                         AnimationConfig(repeat=2, delay=0.005))
        await strip.wait_until_stopped(timeout=1.0)

        payloads = [c.args[0] for c in port.write.call_args_list]
        assert payloads == [b"\xff"] + [wire(RED), wire(BLUE)] * 2
