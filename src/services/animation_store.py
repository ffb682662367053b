"""
Animation persistence - JSON records

Format:
    {
      "name": "rainbow",
      "repeat": -1,
      "speed": 20,
      "pattern": [[{"color": {"r": 254, "g": 0, "b": 0}}, ...], ...]
    }

Colors are stored in LED space and loaded back verbatim.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Union

from models.animation import Animation
from models.color import Color
from models.errors import PatternError
from models.frame import Frame, Pattern, Pixel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PATTERN)

PathLike = Union[str, Path]


# ========================================================================
# DICT CONVERSION
# ========================================================================

def pixel_to_dict(pixel: Pixel) -> Dict[str, Any]:
    r, g, b = pixel.color.to_rgb()
    return {"color": {"r": r, "g": g, "b": b}}


def pixel_from_dict(data: Dict[str, Any]) -> Pixel:
    color = data.get("color", {})
    return Pixel(Color.raw(int(color.get("r", 0)), int(color.get("g", 0)), int(color.get("b", 0))))


def animation_to_dict(animation: Animation) -> Dict[str, Any]:
    return {
        "name": animation.name,
        "repeat": animation.repeat,
        "speed": animation.speed,
        "pattern": [[pixel_to_dict(p) for p in frame] for frame in animation.pattern],
    }


def animation_from_dict(data: Dict[str, Any]) -> Animation:
    """
    Raises:
        PatternError: record is not an animation
    """
    if not isinstance(data, dict):
        raise PatternError("animation record must be an object", type=type(data).__name__)

    try:
        pattern: Pattern = []
        for frame_data in data.get("pattern") or []:
            frame: Frame = [pixel_from_dict(p) for p in frame_data]
            pattern.append(frame)

        return Animation(
            name=str(data.get("name", "")),
            repeat=int(data.get("repeat", 0)),
            speed=data.get("speed", 0) or 0,
            pattern=pattern,
        )
    except (TypeError, ValueError, AttributeError) as ex:
        raise PatternError("malformed animation record", error=str(ex)) from ex


# ========================================================================
# FILES
# ========================================================================

def load_animation(path: PathLike) -> Animation:
    """
    Read an animation from a JSON file.

    Raises:
        PatternError: file missing, not JSON, or malformed record
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise PatternError(f"cannot read animation {path}", error=str(ex)) from ex

    animation = animation_from_dict(data)
    log.info("Animation loaded", path=str(path), name=animation.name, frames=animation.frame_count)
    return animation


def save_animation(animation: Animation, path: PathLike) -> None:
    """Write an animation to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(animation_to_dict(animation), f)
    log.info("Animation saved", path=str(path), name=animation.name)
