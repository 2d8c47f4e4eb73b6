"""
Module: export.layout.geometry

Purpose:
    Derive page-relative dimensions and the width-fit scale factor from
    paper size, margin and source raster width.

Key Functions:
    - compute_geometry(): Build PageGeometry for one export

Dependencies:
    - export.config: GeometryPolicy
    - export.layout.models: PageGeometry

Used By:
    - export.controller: Runs once per export
"""

from __future__ import annotations

import logging
import math

from ..config import GeometryPolicy
from ..errors import InvalidGeometry
from .models import PageGeometry

logger = logging.getLogger(__name__)

# Absorbs float error so 400.0000000001 and 399.9999999999 both floor to 400
_FLOOR_EPSILON = 1e-9


def compute_geometry(
    raster_width: int,
    paper_width: float,
    paper_height: float,
    margin: float,
    *,
    policy: GeometryPolicy = GeometryPolicy.FULL_PAGE,
) -> PageGeometry:
    """
    Compute page geometry for a raster of the given width.

    The raster is scaled so its full width fills the content width
    (paper width minus both margins). The page content height is the
    number of source rows that fit on one page at that scale:

    - FULL_PAGE: paper_height / scale. The margin is applied only when
      placing, so a full band overlaps the bottom margin by 2 * margin.
    - INSET: (paper_height - 2 * margin) / scale. Full bands stay inside
      the margins.

    Args:
        raster_width: Source raster width in pixels
        paper_width: Paper width in points
        paper_height: Paper height in points
        margin: Margin in points
        policy: Page content height policy (default FULL_PAGE)

    Returns:
        PageGeometry with page_content_height_px of at least 1

    Raises:
        InvalidGeometry: If any input is non-positive or margins consume
            the usable width (or height, under INSET)

    Example:
        >>> geometry = compute_geometry(400, 220, 200, 10)
        >>> geometry.scale, geometry.page_content_height_px
        (0.5, 400)
    """
    for name, value in (
        ("raster_width", raster_width),
        ("paper_width", paper_width),
        ("paper_height", paper_height),
        ("margin", margin),
    ):
        if value is None or value <= 0:
            raise InvalidGeometry(f"{name} must be positive: {value}")

    content_width = paper_width - 2 * margin
    if content_width <= 0:
        raise InvalidGeometry(
            f"Margins ({margin}pt) exceed paper width ({paper_width}pt)"
        )

    scale = content_width / raster_width

    if policy is GeometryPolicy.INSET:
        usable_height = paper_height - 2 * margin
        if usable_height <= 0:
            raise InvalidGeometry(
                f"Margins ({margin}pt) exceed paper height ({paper_height}pt)"
            )
    else:
        usable_height = paper_height

    page_content_height_px = math.floor(usable_height / scale + _FLOOR_EPSILON)
    if page_content_height_px < 1:
        logger.warning(
            f"Page fits less than one source row at scale {scale:.4f}, using 1px"
        )
        page_content_height_px = 1

    logger.debug(
        f"Geometry: content_width={content_width:.2f}pt scale={scale:.4f} "
        f"page_content_height={page_content_height_px}px ({policy.value})"
    )

    return PageGeometry(
        paper_width=paper_width,
        paper_height=paper_height,
        margin=margin,
        content_width=content_width,
        scale=scale,
        page_content_height_px=page_content_height_px,
    )
