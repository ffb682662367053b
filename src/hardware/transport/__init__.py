from .transport_interface import ITransport
from .serial_transport import SerialTransport, SerialConfig
from .virtual_transport import VirtualTransport

__all__ = [
    "ITransport",
    "SerialTransport",
    "SerialConfig",
    "VirtualTransport",
]
