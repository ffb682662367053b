"""
Animation playback state machine.

States: STOPPED (initial), RUNNING, PAUSED.

Architecture:
- One asyncio.Lock guards every status transition
- Foreground mutations of the render state go through ensure_stopped(),
  so the caller writes only while STOPPED and the playback task is the
  only writer while RUNNING or PAUSED
- stop/pause/resume are single-slot rendezvous signals (engine.signals),
  observed by the task at its frame boundary
- The frame delay is a pausable FrameTimer, so pausing and resuming
  within a frame keeps the total delay of that frame
- Commits run in the default executor: transport writes are blocking and
  uninterruptible, so a stop takes effect after the current commit

A transport failure during playback stops the animation, is stored in
last_error and handed to the on_error callback. The strip keeps showing the
last frame that was committed.
"""

from __future__ import annotations
import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Optional

from engine.frame_timer import FrameTimer
from engine.render_state import RenderState
from engine.signals import Signal, first_of
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.animation import Animation, AnimationConfig, resolve_playback
from models.enums import AnimationStatus, WaitOutcome
from models.errors import BusyError, StripError
from models.frame import Pattern
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PLAYBACK)

ErrorCallback = Callable[[StripError], None]


class PlaybackController:
    """
    Plays animations on a RenderState from a background task.

    Usage:
        controller = PlaybackController(render_state)
        await controller.play(animation)               # returns immediately
        await controller.pause()
        await controller.resume()
        await controller.stop()                         # waits for STOPPED
    """

    def __init__(self, render_state: RenderState, on_error: Optional[ErrorCallback] = None) -> None:
        self._state = render_state
        self.on_error = on_error

        self._status = AnimationStatus.STOPPED
        self._lock = asyncio.Lock()
        self._play_lock = asyncio.Lock()

        self._stop = Signal("stop")
        self._pause = Signal("pause")
        self._resume = Signal("resume")

        self._task: Optional[asyncio.Task] = None

        self.last_error: Optional[StripError] = None
        self.animation_name: Optional[str] = None
        self.frames_rendered = 0
        self.iterations = 0

    # ============================================================
    # Status
    # ============================================================

    @property
    def status(self) -> AnimationStatus:
        return self._status

    def is_running(self) -> bool:
        """True while an animation owns the strip (running or paused)."""
        return self._status is not AnimationStatus.STOPPED

    @asynccontextmanager
    async def ensure_stopped(self):
        """
        Hold the status lock for a foreground mutation.

        Raises:
            BusyError: an animation is running or paused
        """
        async with self._lock:
            if self._status is not AnimationStatus.STOPPED:
                raise BusyError(self._status.name)
            yield

    async def _set_status(self, status: AnimationStatus) -> None:
        async with self._lock:
            self._status = status

    # ============================================================
    # Playback Control
    # ============================================================

    async def play(self, animation: Animation, config: Optional[AnimationConfig] = None) -> bool:
        """
        Start playing an animation, replacing any animation in progress.

        Args:
            animation: Pattern and default repeat/speed
            config: Optional override of repeat and delay

        Returns:
            True if a playback task was started. False for zero repeat (a
            no-op) or an empty pattern (the previous animation is still stopped)
        """
        repeat, delay = resolve_playback(animation, config)

        if repeat == 0:
            log.debug("Nothing to play (repeat=0)", name=animation.name)
            return False

        async with self._play_lock:
            await self.stop()

            if not animation.pattern:
                log.warn("Nothing to play (empty pattern)", name=animation.name)
                return False

            async with self._lock:
                self._status = AnimationStatus.RUNNING
                self.last_error = None
                self.animation_name = animation.name
                self.frames_rendered = 0
                self.iterations = 0
                self._task = create_tracked_task(
                    self._run(list(animation.pattern), repeat, delay),
                    category=TaskCategory.PLAYBACK,
                    description=f"Playback: {animation.name or 'animation'}",
                )

        log.info(
            "Animation started",
            name=animation.name,
            frames=len(animation.pattern),
            repeat="forever" if repeat < 0 else repeat,
            delay=f"{delay:.3f}s",
        )
        return True

    async def stop(self) -> None:
        """
        Stop the animation and wait until the task has unwound to STOPPED.

        Takes effect at the next frame boundary, or immediately if paused.
        No-op when nothing is playing.
        """
        async with self._lock:
            if self._status is AnimationStatus.STOPPED:
                ack = None
            else:
                ack = self._stop.post()
            task = self._task

        if ack is not None:
            await ack
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def pause(self) -> bool:
        """
        Pause the running animation at its current frame.

        Returns:
            True once the task reports PAUSED, False if nothing was running
        """
        async with self._lock:
            if self._status is not AnimationStatus.RUNNING:
                return False
            ack = self._pause.post()
        return await ack

    async def resume(self) -> bool:
        """
        Resume a paused animation. The rest of the interrupted frame delay
        is honoured before the next frame.

        Returns:
            True once the task reports RUNNING, False if nothing was paused
        """
        async with self._lock:
            if self._status is not AnimationStatus.PAUSED:
                return False
            ack = self._resume.post()
        return await ack

    async def wait_until_stopped(self, timeout: Optional[float] = None) -> None:
        """Wait for the current animation to finish on its own."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task}, timeout=timeout)

    # ============================================================
    # Playback loop (background task)
    # ============================================================

    async def _run(self, pattern: Pattern, repeat: int, delay: float) -> None:
        error: Optional[StripError] = None
        try:
            await self._play_frames(pattern, repeat, delay)
        except StripError as ex:
            error = ex
            # Drop the frame that never reached the strip
            self._state.discard()
        finally:
            async with self._lock:
                self._status = AnimationStatus.STOPPED
                self.last_error = error
                self._stop.abandon()
                self._pause.abandon()
                self._resume.abandon()

        if error is not None:
            self._report_error(error)

    async def _play_frames(self, pattern: Pattern, repeat: int, delay: float) -> None:
        loop = asyncio.get_running_loop()
        while repeat < 0 or self.iterations < repeat:
            for frame in pattern:
                self._state.clear()
                self._state.write_frame(frame)
                await loop.run_in_executor(None, self._state.commit)
                self.frames_rendered += 1

                if await self._wait_for_frame_boundary(delay) is WaitOutcome.STOPPED:
                    log.info("Animation stopped", name=self.animation_name, frames=self.frames_rendered)
                    return
            self.iterations += 1

        log.info("Animation completed", name=self.animation_name, iterations=self.iterations)

    async def _wait_for_frame_boundary(self, delay: float) -> WaitOutcome:
        """
        Wait out the frame delay while honouring stop/pause/resume.

        A pause freezes the timer and parks until resume or stop; resume
        restarts the timer for what was left, so several pauses within one
        frame keep shortening the same remainder.
        """
        timer = FrameTimer(delay)
        timer.start()

        while True:
            await first_of(self._stop.wait(), self._pause.wait(), timer.expired())

            if self._stop.is_posted:
                self._stop.accept()
                return WaitOutcome.STOPPED

            if not self._pause.is_posted:
                return WaitOutcome.ADVANCE

            remaining = timer.pause()
            await self._set_status(AnimationStatus.PAUSED)
            self._pause.accept()
            log.info("Animation paused", name=self.animation_name, remaining=f"{remaining:.3f}s")

            await first_of(self._stop.wait(), self._resume.wait())

            if self._stop.is_posted:
                self._stop.accept()
                return WaitOutcome.STOPPED

            timer.resume()
            await self._set_status(AnimationStatus.RUNNING)
            self._resume.accept()
            log.info("Animation resumed", name=self.animation_name, remaining=f"{remaining:.3f}s")

    def _report_error(self, error: StripError) -> None:
        log.error(
            "Animation aborted",
            name=self.animation_name,
            code=error.code,
            error=error.message,
            frames=self.frames_rendered,
        )
        if self.on_error is not None:
            self.on_error(error)
