"""
Module: export.output.compositor

Purpose:
    Materializes each slice of the captured raster as an independent,
    encoded image. Pixels are copied verbatim; scaling happens only when
    the assembler places the band on a page.

Key Functions:
    - composite_band(): Crop and encode one slice
    - composite_bands(): Crop and encode slices in order

Dependencies:
    - PIL.Image: Cropping and encoding
    - export.layout.models: Slice, CompositedBand

Used By:
    - export.controller: Runs once per slice
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, Iterator

from PIL import Image

from ..errors import EncodingFailure
from ..layout.models import CompositedBand, Slice

logger = logging.getLogger(__name__)


def composite_band(
    raster: Image.Image,
    slice_: Slice,
    *,
    image_format: str = "PNG",
) -> CompositedBand:
    """
    Crop one slice from the raster and encode it.

    Args:
        raster: Captured source raster (not modified)
        slice_: Band to cut out
        image_format: Pillow format name for encoding (default PNG)

    Returns:
        CompositedBand of size (raster.width, slice_.height_px)

    Raises:
        EncodingFailure: If the region is empty or outside the raster, or
            the encoder rejects the image (unknown format, unsupported mode)

    Example:
        >>> band = composite_band(raster, Slice(0, 0, 400))
        >>> band.width, band.height
        (1000, 400)
    """
    if raster.width <= 0 or slice_.height_px <= 0:
        raise EncodingFailure(
            f"Slice {slice_.index} has zero area "
            f"({raster.width}x{slice_.height_px})"
        )
    if slice_.source_y_offset_px < 0 or slice_.bottom_px > raster.height:
        raise EncodingFailure(
            f"Slice {slice_.index} rows {slice_.source_y_offset_px}-{slice_.bottom_px} "
            f"outside raster height {raster.height}"
        )

    # crop() returns a new image; the source raster is left untouched
    box = (0, slice_.source_y_offset_px, raster.width, slice_.bottom_px)
    band_image = raster.crop(box)

    buf = io.BytesIO()
    try:
        band_image.save(buf, format=image_format)
    except (KeyError, ValueError, OSError) as e:
        raise EncodingFailure(
            f"Could not encode slice {slice_.index} as {image_format} "
            f"(mode {band_image.mode}): {e}"
        ) from e

    logger.debug(
        f"Composited band {slice_.index}: {band_image.width}x{band_image.height} "
        f"-> {buf.tell()} bytes {image_format}"
    )

    return CompositedBand(
        index=slice_.index,
        width=band_image.width,
        height=band_image.height,
        image_format=image_format.upper(),
        data=buf.getvalue(),
    )


def composite_bands(
    raster: Image.Image,
    slices: Iterable[Slice],
    *,
    image_format: str = "PNG",
) -> Iterator[CompositedBand]:
    """
    Yield encoded bands for each slice, in slice order.

    Bands are produced lazily so only one encoded band needs to be alive
    while the assembler places it.
    """
    for slice_ in slices:
        yield composite_band(raster, slice_, image_format=image_format)
