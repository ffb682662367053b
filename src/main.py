#!/usr/bin/env python3
"""
main.py — Command-line entry point
----------------------------------

Examples:
    python src/main.py color 255 0 0
    python src/main.py --port /dev/ttyUSB0 --pixels 60 off
    python src/main.py play animations/rainbow.json
    python src/main.py play sunset.png --repeat -1 --delay 0.05
    python src/main.py play export.h --repeat 3

`play` runs until the animation completes or Ctrl+C, then closes the strip.
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import List, Optional

from controllers.strip_controller import StripController
from lifecycle.task_registry import TaskRegistry, TaskCategory, create_tracked_task
from managers.config_manager import ConfigManager
from models.animation import Animation, AnimationConfig
from models.color import Color
from models.enums import LogCategory
from models.errors import StripError
from services.animation_store import load_animation
from services.pattern_loader import pattern_from_image, pattern_from_arduino_export
from utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)

EXPORT_SUFFIXES = {".h", ".txt"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drive a serial LED strip")
    parser.add_argument("--config", default="config/config.yaml", help="YAML config file")
    parser.add_argument("--port", help="Serial port (overrides config)")
    parser.add_argument("--pixels", type=int, help="Number of LEDs (overrides config)")

    sub = parser.add_subparsers(dest="command", required=True)

    color = sub.add_parser("color", help="Set the whole strip to one color")
    color.add_argument("rgb", nargs=3, type=int, metavar=("R", "G", "B"))

    sub.add_parser("off", help="Switch the strip off")

    play = sub.add_parser("play", help="Play an animation, image or PatternPaint export")
    play.add_argument("file", type=Path)
    play.add_argument("--repeat", type=int, help="Iterations (negative = forever)")
    play.add_argument("--delay", type=float, help="Seconds between frames")

    return parser


def load_playable(path: Path, pixel_count: int) -> Animation:
    """Animation from a JSON record, an image, or an Arduino export."""
    suffix = path.suffix.lower()
    if suffix == ".json":
        return load_animation(path)
    if suffix in EXPORT_SUFFIXES:
        pattern = pattern_from_arduino_export(path)
    else:
        pattern = pattern_from_image(path, pixel_count)
    return Animation(name=path.stem, repeat=1, speed=0, pattern=pattern)


def playback_override(args, animation: Animation, default_delay: float) -> Optional[AnimationConfig]:
    """AnimationConfig when an override or the configured default delay applies, else None."""
    if args.repeat is None and args.delay is None and animation.speed:
        return None
    repeat = args.repeat if args.repeat is not None else animation.repeat
    if args.delay is not None:
        delay = args.delay
    elif animation.speed:
        delay = animation.frame_delay
    else:
        delay = default_delay
    return AnimationConfig(repeat=repeat, delay=delay)


async def run_play(strip: StripController, animation: Animation, config: Optional[AnimationConfig]) -> int:
    loop = asyncio.get_running_loop()
    interrupted = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, interrupted.set)

    try:
        if not await strip.play(animation, config):
            log.warn("Nothing to play", name=animation.name)
            return 0

        waiter = create_tracked_task(
            strip.wait_until_stopped(), category=TaskCategory.SYSTEM, description="Wait for animation end"
        )
        interrupt = create_tracked_task(
            interrupted.wait(), category=TaskCategory.SYSTEM, description="Wait for SIGINT/SIGTERM"
        )
        await asyncio.wait({waiter, interrupt}, return_when=asyncio.FIRST_COMPLETED)
        interrupt.cancel()
        await asyncio.wait({interrupt})

        if interrupted.is_set():
            log.info("Interrupted, stopping animation")
            await strip.stop()
        await waiter
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

    return 1 if strip.last_error else 0


async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ConfigManager(config_path=args.config)
    config.load()
    logging_cfg = config.logging
    configure_logger(logging_cfg.level, logging_cfg.use_colors)

    strip_cfg = config.strip_config(port=args.port, pixel_count=args.pixels)
    strip = StripController.open(strip_cfg)

    try:
        async with strip:
            if args.command == "color":
                await strip.set_color(Color.from_rgb(*args.rgb))
                await strip.render()
                return 0

            if args.command == "off":
                await strip.switch_off()
                return 0

            animation = load_playable(args.file, strip.pixel_count)
            override = playback_override(args, animation, config.playback.default_delay)
            return await run_play(strip, animation, override)
    finally:
        for info in TaskRegistry.instance().active():
            log.warn("Task still running at exit", task=info.id, description=info.description)


def run() -> None:
    # UTF-8 output for the log symbols
    if hasattr(sys.stdout, "reconfigure") and sys.stdout.encoding.lower() != "utf-8":
        sys.stdout.reconfigure(encoding="utf-8")  # type: ignore

    try:
        sys.exit(asyncio.run(main()))
    except StripError as ex:
        log.error(ex.message, code=ex.code, **ex.details)
        sys.exit(2)


if __name__ == "__main__":
    run()
