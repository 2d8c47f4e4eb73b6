"""
Module: export.layout

Purpose:
    Page geometry and slicing for report export.
    Converts a raster's dimensions into page-sized bands.

Key Functions:
    - compute_geometry(): Width-fit scale and page content height
    - slice_raster(): Partition raster height into bands

Key Classes:
    - PageGeometry: Page-relative dimensions
    - Slice: One horizontal band
    - CompositedBand: Encoded band image
    - PagePlacement: Band positioned on a page

Used By:
    - export.controller: Export pipeline
"""

from .models import PageGeometry, Slice, CompositedBand, PagePlacement
from .geometry import compute_geometry
from .slicer import slice_raster

__all__ = [
    # Models
    "PageGeometry",
    "Slice",
    "CompositedBand",
    "PagePlacement",
    # Functions
    "compute_geometry",
    "slice_raster",
]
