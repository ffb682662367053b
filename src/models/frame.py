"""
Pixel, Frame and Pattern models

A Frame is one full-strip lighting state, a Pattern is the ordered list of
frames played by an animation. Frames are meant to hold exactly one pixel
per LED, but shorter or longer frames are accepted: extra pixels are
ignored on write and missing ones keep their previous value.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from models.color import Color


@dataclass(frozen=True)
class Pixel:
    """A single LED of the strip."""
    color: Color = field(default_factory=Color.black)

    def clamped_triplet(self) -> bytes:
        return self.color.clamped_triplet()


Frame = List[Pixel]
Pattern = List[Frame]

