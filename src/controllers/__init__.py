from .playback_controller import PlaybackController
from .strip_controller import StripController

__all__ = [
    'PlaybackController',
    'StripController',
]
