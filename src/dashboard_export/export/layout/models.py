"""
Module: export.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing page geometry, raster slices,
    encoded bands and their placement on pages.

Key Classes:
    - PageGeometry: Page-relative dimensions and scale factor
    - Slice: Horizontal band of the source raster
    - CompositedBand: Encoded image for one slice
    - PagePlacement: Band positioned on a document page

Dependencies:
    - dataclasses (std)

Used By:
    - export.layout.geometry: Creates PageGeometry
    - export.layout.slicer: Creates Slices
    - export.output: Compositing and assembly
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageGeometry:
    """
    Page geometry for one export (immutable).

    All lengths are in points except page_content_height_px, which is
    measured in source raster pixels.

    Attributes:
        paper_width: Paper width in points
        paper_height: Paper height in points
        margin: Margin in points, applied at placement time
        content_width: paper_width - 2 * margin
        scale: Points per source pixel (content_width / raster width)
        page_content_height_px: Source pixels that fit on one page

    Example:
        >>> geometry = compute_geometry(1000, 595.28, 841.89, 10)
        >>> round(geometry.scale, 4)
        0.5753
    """

    paper_width: float
    paper_height: float
    margin: float
    content_width: float
    scale: float
    page_content_height_px: int

    def rendered_height(self, height_px: int) -> float:
        """Height in points of a band of height_px source pixels."""
        return height_px * self.scale


@dataclass(frozen=True)
class Slice:
    """
    A horizontal band of the source raster.

    Attributes:
        index: Position in the slice sequence (0-indexed)
        source_y_offset_px: Top row of the band in the source raster
        height_px: Number of rows in the band

    Example:
        >>> s = Slice(index=1, source_y_offset_px=400, height_px=400)
        >>> s.bottom_px
        800
    """

    index: int
    source_y_offset_px: int
    height_px: int

    @property
    def bottom_px(self) -> int:
        """Row just below the band (exclusive end)."""
        return self.source_y_offset_px + self.height_px


@dataclass(frozen=True)
class CompositedBand:
    """
    Encoded raster for one slice, ready to embed in the document.

    Attributes:
        index: Index of the slice this band was cut from
        width: Width in pixels
        height: Height in pixels
        image_format: Pillow format name of data (e.g. "PNG")
        data: Encoded image bytes
    """

    index: int
    width: int
    height: int
    image_format: str
    data: bytes


@dataclass(frozen=True)
class PagePlacement:
    """
    A band placed on a document page.

    Coordinates use a top-left origin, matching how the page is described
    to users; the assembler converts to the PDF's bottom-left origin.

    Attributes:
        page_index: Page number (0-indexed)
        band_index: Index of the placed band
        x: Left edge in points
        y: Top edge in points
        width: Rendered width in points
        height: Rendered height in points
    """

    page_index: int
    band_index: int
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        """Bottom edge in points from the page top."""
        return self.y + self.height
