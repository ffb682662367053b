"""
Configuration models

Typed views over config.yaml, built by ConfigManager.
"""

from dataclasses import dataclass

from models.animation import DEFAULT_FRAME_DELAY
from models.enums import LogLevel
from hardware.transport.serial_transport import DEFAULT_BAUDRATE, DEFAULT_READ_TIMEOUT


@dataclass(frozen=True)
class StripConfig:
    """Serial strip settings (`strip:` section)"""
    port: str
    pixel_count: int
    baudrate: int = DEFAULT_BAUDRATE
    read_timeout: float = DEFAULT_READ_TIMEOUT


@dataclass(frozen=True)
class PlaybackConfig:
    """Playback defaults (`playback:` section)"""
    default_delay: float = DEFAULT_FRAME_DELAY


@dataclass(frozen=True)
class LoggingConfig:
    """Logger settings (`logging:` section)"""
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True
