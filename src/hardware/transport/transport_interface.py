# hardware/transport/transport_interface.py
"""
ITransport Protocol
===================
Byte-oriented, blocking duplex channel to the strip controller.
Minimal contract the render state needs to commit a frame.
"""

from __future__ import annotations
from typing import Protocol


class ITransport(Protocol):
    """
    Protocol defining the transport used to commit frames.

    All implementations must provide:
    - flush: discard any unread input from the device
    - write: send a full payload (blocking until written)
    - close: release the underlying port

    Failures are raised as TransportError.
    """

    def flush(self) -> None:
        """Discard unread input."""
        ...

    def write(self, data: bytes) -> None:
        """Write the whole payload or raise TransportError."""
        ...

    def close(self) -> None:
        """Release the port. Further writes are errors."""
        ...
