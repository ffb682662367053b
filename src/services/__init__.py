"""Pattern and animation sources"""

from .pattern_loader import pattern_from_image, pattern_from_arduino_export
from .animation_store import load_animation, save_animation

__all__ = [
    "pattern_from_image",
    "pattern_from_arduino_export",
    "load_animation",
    "save_animation",
]
