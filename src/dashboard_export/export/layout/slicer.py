"""
Module: export.layout.slicer

Purpose:
    Partition a raster's height into page-sized bands.
    Bands are ordered top to bottom, gap-free and non-overlapping.

Key Functions:
    - slice_raster(): Main slicing function

Algorithm:
    Starting at y=0, emit min(page_content_height_px, height - y) rows,
    advance y by that amount, and stop when y reaches height. Only the
    last band can be shorter than a page.

Dependencies:
    - export.layout.models: Slice

Used By:
    - export.controller: Runs once per export
"""

from __future__ import annotations

import logging
from typing import List

from ..errors import InvalidInput
from .models import Slice

logger = logging.getLogger(__name__)


def slice_raster(height: int, page_content_height_px: int) -> List[Slice]:
    """
    Split a raster of the given height into page-sized slices.

    Args:
        height: Raster height in pixels
        page_content_height_px: Maximum rows per page

    Returns:
        List of ceil(height / page_content_height_px) slices

    Raises:
        InvalidInput: If either argument is not a positive integer

    Example:
        >>> [s.height_px for s in slice_raster(1000, 400)]
        [400, 400, 200]
    """
    _require_positive_int("height", height)
    _require_positive_int("page_content_height_px", page_content_height_px)

    slices: List[Slice] = []
    y_pos = 0
    while y_pos < height:
        band_height = min(page_content_height_px, height - y_pos)
        slices.append(Slice(
            index=len(slices),
            source_y_offset_px=y_pos,
            height_px=band_height,
        ))
        y_pos += band_height

    logger.debug(
        f"Sliced {height}px into {len(slices)} bands of up to {page_content_height_px}px"
    )
    return slices


def _require_positive_int(name: str, value: int) -> None:
    """Reject bools, non-integers and values below 1."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer: {value!r}")
    if value <= 0:
        raise InvalidInput(f"{name} must be positive: {value}")
