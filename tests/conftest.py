import os
import sys
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

# Widget capture tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import dashboard_export
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Distinct, easily sampled band colours
BAND_COLOURS = [
    (220, 40, 40),
    (40, 160, 60),
    (40, 80, 220),
    (230, 180, 20),
    (140, 40, 180),
    (20, 170, 170),
]


@pytest.fixture
def striped_raster():
    """
    Factory for rasters whose bands are solid, distinct colours.

    striped_raster(width, band_heights) stacks one colour per band, so
    each page of an export can be matched to the band it should hold.
    """
    def _create(width: int, band_heights):
        total = sum(band_heights)
        img = Image.new("RGB", (width, total), "white")
        draw = ImageDraw.Draw(img)
        top = 0
        for i, height in enumerate(band_heights):
            colour = BAND_COLOURS[i % len(BAND_COLOURS)]
            draw.rectangle((0, top, width - 1, top + height - 1), fill=colour)
            top += height
        return img
    return _create


@pytest.fixture
def gradient_raster():
    """A raster where every row has a different value (detects row shifts)."""
    img = Image.new("L", (64, 300))
    img.putdata([y % 256 for y in range(300) for _ in range(64)])
    return img.convert("RGB")


@pytest.fixture
def band_colours():
    """Colours used by striped_raster, in band order."""
    return list(BAND_COLOURS)
