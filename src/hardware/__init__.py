"""
Hardware Layer

Low-level access to the strip controller:

- ITransport protocol
- SerialTransport (pyserial)
- VirtualTransport (in-memory, no hardware)
"""
from .transport import ITransport, SerialTransport, SerialConfig, VirtualTransport

__all__ = [
    "ITransport",
    "SerialTransport",
    "SerialConfig",
    "VirtualTransport",
]
