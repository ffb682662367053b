# hardware/transport/serial_transport.py
"""
SerialTransport - pyserial driver
=================================
Concrete ITransport for strips driven over a USB serial port.

The port is opened once with a fixed baud rate and a bounded read timeout,
and is owned exclusively by one strip. Writes are blocking and have no
timeout: a stuck device blocks the caller.
"""

from __future__ import annotations
from dataclasses import dataclass

import serial

from models.errors import TransportError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TRANSPORT)

DEFAULT_BAUDRATE = 115200
DEFAULT_READ_TIMEOUT = 0.5


@dataclass(frozen=True)
class SerialConfig:
    """Configuration for the serial port."""
    port: str
    baudrate: int = DEFAULT_BAUDRATE
    read_timeout: float = DEFAULT_READ_TIMEOUT


class SerialTransport:
    """
    ITransport backed by pyserial.

    - flush() discards unread input (reset_input_buffer)
    - write() sends the full payload; short writes are errors
    - every pyserial failure is re-raised as TransportError
    """

    def __init__(self, config: SerialConfig) -> None:
        self.config = config

        try:
            self._serial = serial.Serial(
                port=config.port,
                baudrate=config.baudrate,
                timeout=config.read_timeout,
            )
        except (serial.SerialException, OSError, ValueError) as ex:
            raise TransportError(
                f"cannot open serial port {config.port}", cause=ex, port=config.port
            ) from ex

        log.info(
            "Serial port opened",
            port=config.port,
            baudrate=config.baudrate,
            timeout=f"{config.read_timeout}s",
        )

    # ==================== ITransport API ====================

    def flush(self) -> None:
        try:
            self._serial.reset_input_buffer()
        except (serial.SerialException, OSError) as ex:
            raise TransportError("flush failed", cause=ex, port=self.config.port) from ex

    def write(self, data: bytes) -> None:
        try:
            written = self._serial.write(data)
        except (serial.SerialException, OSError) as ex:
            raise TransportError("write failed", cause=ex, port=self.config.port) from ex

        if written is not None and written != len(data):
            raise TransportError(
                "short write",
                port=self.config.port,
                expected=len(data),
                written=written,
            )

    def close(self) -> None:
        if self._serial.is_open:
            self._serial.close()
            log.info("Serial port closed", port=self.config.port)

    @property
    def is_open(self) -> bool:
        return bool(self._serial.is_open)
