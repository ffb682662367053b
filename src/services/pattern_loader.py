"""
Pattern loaders

Build a Pattern from files produced by other tools:
- raster images (PNG, JPEG, GIF, BMP): one frame per image column
- PatternPaint Arduino exports: one frame per `//` comment block
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Union

from PIL import Image, UnidentifiedImageError

from models.color import Color
from models.errors import ConfigurationError, PatternError
from models.frame import Frame, Pattern, Pixel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PATTERN)

PathLike = Union[str, Path]

# PatternPaint exports open with a declaration line and close with three
# lines of array/footer boilerplate
EXPORT_HEADER_LINES = 1
EXPORT_FOOTER_LINES = 3


def pattern_from_image(path: PathLike, pixel_count: int) -> Pattern:
    """
    Create a pattern from an image.

    Images taller than the strip are scaled down to pixel_count rows,
    keeping the aspect ratio. Each column becomes a frame of exactly
    pixel_count pixels; rows below the image stay black.

    Args:
        path: Image file
        pixel_count: Number of LEDs on the strip

    Raises:
        ConfigurationError: pixel_count is 0
        PatternError: file missing or not a supported image
    """
    if pixel_count <= 0:
        raise ConfigurationError(pixel_count=pixel_count)

    try:
        with Image.open(path) as source:
            img = source.convert("RGB")
    except (FileNotFoundError, UnidentifiedImageError, OSError) as ex:
        raise PatternError(f"cannot read image {path}", error=str(ex)) from ex

    width, height = img.size
    if height > pixel_count:
        new_width = max(1, round(width * pixel_count / height))
        img = img.resize((new_width, pixel_count), Image.Resampling.BILINEAR)
        width, height = img.size

    pixels = img.load()
    pattern: Pattern = []
    for x in range(width):
        frame: Frame = [Pixel() for _ in range(pixel_count)]
        for y in range(height):
            r, g, b = pixels[x, y]
            frame[y] = Pixel(Color.from_rgb(r, g, b))
        pattern.append(frame)

    log.info("Pattern loaded from image", path=str(path), frames=len(pattern), rows=height)
    return pattern


def pattern_from_arduino_export(path: PathLike) -> Pattern:
    """
    Create a pattern from a PatternPaint Arduino C header export.

    Lines starting with `//` open a new frame, `r,g,b,` lines append a
    pixel to the current frame.

    Raises:
        PatternError: file missing, malformed triplet, or pixel before any frame
    """
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except OSError as ex:
        raise PatternError(f"cannot read export {path}", error=str(ex)) from ex

    pattern: Pattern = []
    body = lines[EXPORT_HEADER_LINES:len(lines) - EXPORT_FOOTER_LINES]

    for number, line in enumerate(body, start=EXPORT_HEADER_LINES + 1):
        text = line.strip()
        if not text:
            continue
        if text.startswith("//"):
            pattern.append([])
            continue
        if not pattern:
            raise PatternError("pixel data before first frame", path=str(path), line=number)
        pattern[-1].append(Pixel(Color.from_rgb(*_parse_triplet(text, path, number))))

    log.info("Pattern loaded from export", path=str(path), frames=len(pattern))
    return pattern


def _parse_triplet(text: str, path: PathLike, number: int) -> List[int]:
    parts = [p.strip() for p in text.rstrip(",").split(",")]
    try:
        values = [int(p, 16) if p.lower().startswith("0x") else int(p) for p in parts]
    except ValueError:
        values = []

    if len(values) != 3 or not all(0 <= v <= 255 for v in values):
        raise PatternError("invalid RGB triplet", path=str(path), line=number, text=text)
    return values
