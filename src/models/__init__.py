"""
Models package - Data models for the LED strip driver
"""

from .enums import AnimationStatus, LogLevel, LogCategory
from .color import Color
from .frame import Pixel, Frame, Pattern
from .animation import Animation, AnimationConfig, DEFAULT_FRAME_DELAY
from .errors import (
    StripError,
    ConfigurationError,
    BusyError,
    RangeError,
    OutOfRangeError,
    EmptyBufferError,
    TransportError,
    PatternError,
)

__all__ = [
    'AnimationStatus',
    'LogLevel',
    'LogCategory',
    'Color',
    'Pixel',
    'Frame',
    'Pattern',
    'Animation',
    'AnimationConfig',
    'DEFAULT_FRAME_DELAY',
    'StripError',
    'ConfigurationError',
    'BusyError',
    'RangeError',
    'OutOfRangeError',
    'EmptyBufferError',
    'TransportError',
    'PatternError',
]
