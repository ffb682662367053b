"""
Tests for RenderState (buffered writes and the commit/discard protocol).

Tests that RenderState:
- Sends clamped triplets followed by one control byte per commit
- Keeps untouched tail pixels across commits
- Rejects out-of-range writes without changing state
- Leaves everything untouched when the transport fails
"""

import pytest

from conftest import RED, GREEN, BLUE, WHITE, BLACK, wire
from engine.render_state import RenderState, CONTROL_BYTE
from models.color import Color
from models.errors import (
    ConfigurationError, RangeError, OutOfRangeError, EmptyBufferError, TransportError
)
from models.frame import Pixel


def commit_frame(state, *pixels):
    state.clear()
    for p in pixels:
        state.write_next(p)
    return state.commit()


class TestRenderStateBasics:

    def test_zero_pixels_rejected(self, transport):
        with pytest.raises(ConfigurationError) as exc:
            RenderState(transport, 0)
        assert exc.value.code == "NO_PIXELS"

    def test_initial_state_is_black(self, render_state):
        assert render_state.pixel_count == 3
        assert render_state.cursor == 0
        assert render_state.committed_state == [BLACK, BLACK, BLACK]
        assert render_state.pending_state == [BLACK, BLACK, BLACK]
        assert render_state.buffered_bytes == b""

    def test_write_next_advances_cursor(self, render_state):
        render_state.write_next(RED)
        render_state.write_next(GREEN)

        assert render_state.cursor == 2
        assert render_state.pending_state[:2] == [RED, GREEN]
        assert render_state.buffered_bytes == bytes((254, 0, 0, 0, 254, 0))
        assert render_state.committed_state == [BLACK, BLACK, BLACK]

    def test_clear_keeps_pixel_arrays(self, render_state):
        render_state.write_next(RED)
        render_state.clear()

        assert render_state.cursor == 0
        assert render_state.buffered_bytes == b""
        assert render_state.pending_state[0] == RED


class TestClamping:

    def test_255_sent_as_254(self, render_state, transport):
        render_state.write_next(Pixel(Color.raw(255, 255, 255)))
        render_state.commit()

        assert transport.last_write == bytes((254, 254, 254, CONTROL_BYTE))

    def test_values_below_255_pass_through(self, render_state, transport):
        render_state.write_next(Pixel(Color.raw(0, 127, 254)))
        render_state.write_next(Pixel(Color.raw(1, 2, 3)))
        render_state.commit()

        assert transport.last_write == bytes((0, 127, 254, 1, 2, 3, CONTROL_BYTE))

    def test_control_byte_appears_once(self, render_state, transport):
        for _ in range(3):
            render_state.write_next(Pixel(Color.raw(255, 255, 255)))
        render_state.commit()

        assert transport.last_write.count(CONTROL_BYTE) == 1
        assert transport.last_write[-1] == CONTROL_BYTE


class TestSequentialWrites:

    def test_write_past_end_raises_and_keeps_state(self, render_state):
        for p in (RED, GREEN, BLUE):
            render_state.write_next(p)
        before = render_state.buffered_bytes

        with pytest.raises(RangeError) as exc:
            render_state.write_next(WHITE)

        assert exc.value.position == 3
        assert exc.value.max_range == 2
        assert render_state.cursor == 3
        assert render_state.buffered_bytes == before
        assert render_state.pending_state == [RED, GREEN, BLUE]

    def test_tail_retained_after_short_write(self, render_state, transport):
        commit_frame(render_state, RED, GREEN, BLUE)

        commit_frame(render_state, WHITE)

        assert render_state.committed_state == [WHITE, GREEN, BLUE]
        # Only the written pixel goes on the wire
        assert transport.last_write == wire(WHITE)

    def test_write_frame_truncates_long_frames(self, render_state):
        written = render_state.write_frame([RED, GREEN, BLUE, WHITE, WHITE])

        assert written == 3
        assert render_state.cursor == 3
        assert render_state.pending_state == [RED, GREEN, BLUE]

    def test_write_frame_that_does_not_fit_writes_nothing(self, render_state):
        render_state.write_next(RED)
        render_state.write_next(GREEN)

        with pytest.raises(RangeError):
            render_state.write_frame([BLUE, WHITE])

        assert render_state.cursor == 2
        assert render_state.pending_state == [RED, GREEN, BLACK]


class TestPositionalWrites:

    def test_set_pixel_at_rebuilds_whole_buffer(self, render_state, transport):
        commit_frame(render_state, RED, GREEN, BLUE)

        render_state.write_at(WHITE, 1)
        render_state.commit()

        assert transport.last_write == wire(RED, WHITE, BLUE)
        assert render_state.committed_state == [RED, WHITE, BLUE]

    def test_write_at_ignores_cursor(self, render_state):
        render_state.write_next(RED)
        render_state.write_at(BLUE, 2)

        assert render_state.buffered_bytes == wire(RED, BLACK, BLUE)[:-1]

    @pytest.mark.parametrize("position", [3, 10, -1])
    def test_out_of_range_position(self, render_state, position):
        with pytest.raises(OutOfRangeError):
            render_state.write_at(RED, position)

        assert render_state.pending_state == [BLACK, BLACK, BLACK]
        assert render_state.buffered_bytes == b""


class TestCommit:

    def test_empty_buffer_performs_no_io(self, render_state, transport):
        with pytest.raises(EmptyBufferError):
            render_state.commit()

        assert transport.write_count == 0
        assert transport.flush_count == 0

    def test_commit_flushes_then_writes(self, render_state, transport):
        payload = commit_frame(render_state, RED, GREEN, BLUE)

        assert transport.flush_count == 1
        assert transport.writes == [payload]
        assert payload == wire(RED, GREEN, BLUE)

    def test_commit_resets_buffer_and_cursor(self, render_state):
        commit_frame(render_state, RED, GREEN)

        assert render_state.cursor == 0
        assert render_state.buffered_bytes == b""
        assert render_state.committed_state == [RED, GREEN, BLACK]

    def test_transport_failure_leaves_state_untouched(self, render_state, transport):
        commit_frame(render_state, RED, GREEN, BLUE)

        render_state.clear()
        render_state.write_next(WHITE)
        transport.fail_next = OSError("unplugged")

        with pytest.raises(TransportError):
            render_state.commit()

        assert render_state.committed_state == [RED, GREEN, BLUE]
        assert render_state.pending_state == [WHITE, GREEN, BLUE]
        assert render_state.cursor == 1
        assert render_state.buffered_bytes == WHITE.clamped_triplet()

        # Caller may retry
        render_state.commit()
        assert render_state.committed_state == [WHITE, GREEN, BLUE]
        assert transport.last_write == wire(WHITE)


class TestDiscard:

    def test_discard_reverts_pending(self, render_state):
        commit_frame(render_state, RED, GREEN, BLUE)

        render_state.write_next(WHITE)
        render_state.write_at(WHITE, 2)
        render_state.discard()

        assert render_state.pending_state == [RED, GREEN, BLUE]
        assert render_state.cursor == 0
        assert render_state.buffered_bytes == b""

    def test_discard_then_commit_is_empty(self, render_state):
        render_state.write_next(RED)
        render_state.discard()

        with pytest.raises(EmptyBufferError):
            render_state.commit()
