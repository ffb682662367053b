"""
Single-slot rendezvous signals between the foreground and the playback task.

A sender posts a signal and awaits its acknowledgement; the playback task
parks on wait() at its frame boundary and accept()s the signal once it has
acted on it. Posting twice before the task accepts returns the same
acknowledgement, so a signal is never duplicated, and a posted signal stays
visible until accepted, so it is never missed while the task is busy
committing a frame.
"""

from __future__ import annotations
import asyncio
from typing import Optional


class Signal:
    """
    One-slot handshake.

    post() must be called with the controller's status lock held, after
    checking that the task is in a state where it will look at this signal.
    """

    def __init__(self, name: str):
        self.name = name
        self._posted = asyncio.Event()
        self._ack: Optional[asyncio.Future] = None

    @property
    def is_posted(self) -> bool:
        return self._posted.is_set()

    def post(self) -> asyncio.Future:
        """
        Raise the signal.

        Returns:
            Future resolved with True once the task accepted the signal, or
            with False if the task exited without looking at it
        """
        if self._ack is None or self._ack.done():
            self._ack = asyncio.get_running_loop().create_future()
            self._posted.set()
        return self._ack

    async def wait(self) -> None:
        """Park until the signal is posted."""
        await self._posted.wait()

    def accept(self) -> None:
        """Consume the posted signal and release its sender."""
        self._resolve(True)

    def abandon(self) -> None:
        """Release a pending sender without acting on the signal."""
        self._resolve(False)

    def _resolve(self, accepted: bool) -> None:
        self._posted.clear()
        ack, self._ack = self._ack, None
        if ack is not None and not ack.done():
            ack.set_result(accepted)

    def __repr__(self) -> str:
        return f"Signal({self.name}, posted={self.is_posted})"


async def first_of(*aws) -> None:
    """
    Wait until the first of several awaitables completes.

    The others are cancelled before returning. Callers inspect the state
    they were waiting on (signals, timer) to decide what happened.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
