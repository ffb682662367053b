"""
Color model - RGB triplet as sent to the strip

Colors authored in screen space go through a rough brightness correction
(`from_rgb`) because LEDs respond non-linearly. Colors that are already in
LED space (loaded from a saved animation, for example) use `raw`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

# Exponents used to convert a color from screen space to LED space
RED_EXPONENT = 1.8
GREEN_EXPONENT = 1.8
BLUE_EXPONENT = 2.1

# Highest value a color channel may take on the wire; 0xFF is the control byte
MAX_WIRE_VALUE = 0xFE


def brightness_correct(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """
    Rough brightness correction on an RGB triplet.

    Args:
        r, g, b: Screen-space values (0-255)

    Returns:
        LED-space (r, g, b), each 0-255
    """
    def f(v: int, exp: float) -> int:
        return int(255 * (v / 255.0) ** exp)

    return f(r, RED_EXPONENT), f(g, GREEN_EXPONENT), f(b, BLUE_EXPONENT)


def clamp(v: int) -> int:
    """Clamp a channel below the control byte."""
    return min(MAX_WIRE_VALUE, v)


@dataclass(frozen=True)
class Color:
    """
    Immutable LED-space color.

    Examples:
        red = Color.from_rgb(255, 0, 0)    # corrected
        red = Color.raw(255, 0, 0)         # verbatim
        r, g, b = red.to_rgb()
    """

    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self):
        for name, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"Color channel {name} must be an int in 0-255, got {value!r}")

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'Color':
        """Create from screen-space RGB, applying brightness correction."""
        return cls(*brightness_correct(r, g, b))

    @classmethod
    def raw(cls, r: int, g: int, b: int) -> 'Color':
        """Create from LED-space RGB without correction."""
        return cls(r, g, b)

    @classmethod
    def black(cls) -> 'Color':
        return cls(0, 0, 0)

    # === RENDERING ===

    def to_rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    def clamped_triplet(self) -> bytes:
        """Wire representation, every channel in 0-254."""
        return bytes((clamp(self.r), clamp(self.g), clamp(self.b)))

    def __repr__(self) -> str:
        return f"Color({self.r}, {self.g}, {self.b})"
