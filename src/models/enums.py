"""
Enums for the LED strip driver and playback state machine
"""

from enum import Enum, auto


class AnimationStatus(Enum):
    """
    Playback status of a strip

    STOPPED: No animation; the foreground caller owns the pixel buffer
    RUNNING: An animation is being played by the background task
    PAUSED: A running animation is parked between two frames
    """
    STOPPED = auto()
    RUNNING = auto()
    PAUSED = auto()


class WaitOutcome(Enum):
    """Result of waiting for the next frame boundary"""
    ADVANCE = auto()   # Frame delay elapsed
    STOPPED = auto()   # Stop signal received


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    HARDWARE = auto()    # Strip open/close
    TRANSPORT = auto()   # Serial port I/O
    RENDER = auto()      # Buffer commits and discards
    PLAYBACK = auto()    # Animation play/pause/resume/stop
    PATTERN = auto()     # Pattern and animation file loading
    TASK = auto()        # Background task tracking
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
