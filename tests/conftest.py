import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.color import Color
from models.frame import Pixel
from engine.render_state import RenderState
from hardware.transport.virtual_transport import VirtualTransport
from controllers.strip_controller import StripController
from utils.logger import configure_logger
from models.enums import LogLevel

configure_logger(LogLevel.WARN, use_colors=False)

RED = Pixel(Color.raw(254, 0, 0))
GREEN = Pixel(Color.raw(0, 254, 0))
BLUE = Pixel(Color.raw(0, 0, 254))
WHITE = Pixel(Color.raw(200, 200, 200))
BLACK = Pixel(Color.black())


@pytest.fixture
def transport():
    return VirtualTransport()


@pytest.fixture
def render_state(transport):
    """3-pixel render state on a virtual transport."""
    return RenderState(transport, 3)


@pytest.fixture
def strip(transport):
    """3-pixel strip on a virtual transport."""
    return StripController(transport, 3)


def wire(*pixels: Pixel) -> bytes:
    """Expected payload for a commit of the given pixels."""
    return b"".join(p.clamped_triplet() for p in pixels) + b"\xff"
