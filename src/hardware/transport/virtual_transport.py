from __future__ import annotations
import threading
import time
from typing import List, Optional

from models.errors import TransportError


class VirtualTransport:
    """
    In-memory ITransport.

    Records every committed payload so the wire traffic can be inspected
    without hardware. Failures can be injected to exercise error paths, and
    a write latency can simulate a slow serial link.
    """

    def __init__(self, write_latency: float = 0.0):
        self.write_latency = write_latency
        self.writes: List[bytes] = []
        self.flush_count = 0
        self.closed = False
        self.fail_next: Optional[Exception] = None
        self.fail_always: Optional[Exception] = None
        self._lock = threading.Lock()

    def flush(self) -> None:
        self._check_open()
        with self._lock:
            self.flush_count += 1

    def write(self, data: bytes) -> None:
        self._check_open()
        if self.write_latency:
            time.sleep(self.write_latency)

        with self._lock:
            failure = self.fail_always or self.fail_next
            self.fail_next = None
            if failure is not None:
                if isinstance(failure, TransportError):
                    raise failure
                raise TransportError("write failed", cause=failure)
            self.writes.append(bytes(data))

    def close(self) -> None:
        self.closed = True

    @property
    def last_write(self) -> Optional[bytes]:
        with self._lock:
            return self.writes[-1] if self.writes else None

    @property
    def write_count(self) -> int:
        with self._lock:
            return len(self.writes)

    def _check_open(self) -> None:
        if self.closed:
            raise TransportError("transport is closed")
