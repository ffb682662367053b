"""
Animation models

An Animation is a Pattern played at a given speed a number of times.
AnimationConfig overrides both repeat and delay at play time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

from models.frame import Pattern

# Delay between two frames when the animation has no speed
DEFAULT_FRAME_DELAY = 0.075


@dataclass
class Animation:
    """
    Pattern plus playback settings.

    Attributes:
        name: Display name
        repeat: Number of pattern iterations (negative = forever, 0 = nothing)
        speed: Frames per second (0 = use DEFAULT_FRAME_DELAY)
        pattern: Frames in playback order
    """
    name: str = ""
    repeat: int = 1
    speed: float = 0
    pattern: Pattern = field(default_factory=list)

    def __post_init__(self):
        if self.speed < 0:
            raise ValueError(f"Animation speed cannot be negative, got {self.speed}")

    @property
    def frame_delay(self) -> float:
        """Seconds between two frames derived from speed."""
        if self.speed:
            return 1.0 / self.speed
        return DEFAULT_FRAME_DELAY

    @property
    def frame_count(self) -> int:
        return len(self.pattern)


@dataclass(frozen=True)
class AnimationConfig:
    """Play-time override, replaces the animation's repeat and speed wholesale."""
    repeat: int = 1
    delay: float = DEFAULT_FRAME_DELAY


def resolve_playback(animation: Animation, config: AnimationConfig | None = None) -> Tuple[int, float]:
    """
    Effective (repeat, delay) for a play request.

    Config values are used verbatim when supplied; otherwise they come from
    the animation itself.
    """
    if config is not None:
        return config.repeat, config.delay
    return animation.repeat, animation.frame_delay
