"""
Module: export.capture.surface

Purpose:
    A lightweight visual surface model and its capturer. A surface is a
    tree of blocks stacked vertically (a report region: title, cards,
    table rows). Capturing renders the tree into one raster, skipping
    every node the exclusion predicate matches together with its subtree.

Key Classes:
    - SurfaceNode: One block of the surface, with optional children

Key Functions:
    - capture_surface(): Render a surface tree to a single raster
    - table_surface(): Build an events-table surface with placeholder rows

Dependencies:
    - PIL.Image, PIL.ImageDraw, PIL.ImageFont: Rendering and stitching

Used By:
    - export.controller: Default capture collaborator
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..errors import CaptureFailure

logger = logging.getLogger(__name__)

# Table rendering defaults (pixels at scale 1)
ROW_HEIGHT_PX = 24
HEADER_HEIGHT_PX = 28
TITLE_HEIGHT_PX = 40
CELL_PADDING_PX = 6
EMPTY_ROW_CLASS = "empty-row"


@dataclass
class SurfaceNode:
    """
    A block on a visual surface.

    A node draws its own content first (an image, or a solid block of
    ``height`` rows in ``fill``), then its children stacked beneath it.

    Attributes:
        name: Identifier used in logs
        image: Rendered content (None for solid or container blocks)
        height: Height of a solid block when image is None
        fill: Solid block colour (None leaves the background showing)
        classes: Class names the exclusion predicate can match
        children: Nested nodes, rendered top to bottom

    Example:
        >>> row = SurfaceNode("row-1", image=row_image, classes=("row",))
        >>> table = SurfaceNode("table", children=[header, row])
    """
    name: str
    image: Optional[Image.Image] = None
    height: int = 0
    fill: Optional[str] = None
    classes: Tuple[str, ...] = ()
    children: List["SurfaceNode"] = field(default_factory=list)

    @property
    def own_height(self) -> int:
        """Rows drawn by this node itself, excluding children."""
        return self.image.height if self.image is not None else self.height

    @property
    def own_width(self) -> int:
        """Columns drawn by this node itself (solid blocks span the surface)."""
        return self.image.width if self.image is not None else 0


def rendered_height(
    node: SurfaceNode,
    is_excluded: Callable[[Any], bool],
) -> int:
    """Height in rows at scale 1 after exclusion."""
    if is_excluded(node):
        return 0
    return node.own_height + sum(rendered_height(c, is_excluded) for c in node.children)


def _rendered_width(node: SurfaceNode, is_excluded: Callable[[Any], bool]) -> int:
    if is_excluded(node):
        return 0
    widths = [node.own_width] + [_rendered_width(c, is_excluded) for c in node.children]
    return max(widths)


def capture_surface(
    surface: Optional[SurfaceNode],
    is_excluded: Callable[[Any], bool],
    *,
    scale: int = 1,
    background: str = "#ffffff",
) -> Optional[Image.Image]:
    """
    Render a surface tree into a single RGB raster.

    Excluded nodes contribute zero rows: the nodes after them move up.
    Every row is multiplied by ``scale``, so an excluded node changes the
    raster height by exactly its rendered height times the scale.

    Args:
        surface: Root node, or None when the region was not found
        is_excluded: Predicate; matching nodes (and subtrees) are skipped
        scale: Integer pixel multiplier (default 1)
        background: Colour behind transparent or missing content

    Returns:
        Captured raster, or None if surface is None

    Raises:
        CaptureFailure: If the surface renders to zero width or height,
            or scale is not positive
    """
    if surface is None:
        logger.warning("No surface to capture")
        return None
    if scale <= 0:
        raise CaptureFailure(f"Capture scale must be positive: {scale}")

    height = rendered_height(surface, is_excluded)
    width = _rendered_width(surface, is_excluded)
    if height <= 0 or width <= 0:
        raise CaptureFailure(
            f"Surface {surface.name!r} is empty ({width}x{height}) after exclusion"
        )

    raster = Image.new("RGB", (width * scale, height * scale), background)
    draw = ImageDraw.Draw(raster)
    _paint(raster, draw, surface, is_excluded, 0, scale)

    logger.info(
        f"Captured surface {surface.name!r}: {raster.width}x{raster.height}px "
        f"at scale {scale}"
    )
    return raster


def _paint(
    raster: Image.Image,
    draw: ImageDraw.ImageDraw,
    node: SurfaceNode,
    is_excluded: Callable[[Any], bool],
    top: int,
    scale: int,
) -> int:
    """Paint node at row ``top`` (scaled); return the row below it."""
    if is_excluded(node):
        logger.debug(f"Skipping excluded node {node.name!r}")
        return top

    if node.image is not None:
        content = node.image
        if scale != 1:
            content = content.resize(
                (content.width * scale, content.height * scale),
                Image.Resampling.NEAREST,
            )
        if content.mode in ("RGBA", "LA", "P"):
            content = content.convert("RGBA")
            raster.paste(content, (0, top), content)
        else:
            raster.paste(content.convert("RGB"), (0, top))
        top += content.height
    elif node.height > 0:
        block_height = node.height * scale
        if node.fill:
            draw.rectangle(
                (0, top, raster.width - 1, top + block_height - 1),
                fill=node.fill,
            )
        top += block_height

    for child in node.children:
        top = _paint(raster, draw, child, is_excluded, top, scale)
    return top


def table_surface(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    width: int = 600,
    page_length: int = 10,
) -> SurfaceNode:
    """
    Build a surface for a titled table, padded with placeholder rows.

    Tables on the dashboard keep a fixed height by filling the last page
    of rows with blank ``empty-row`` placeholders. Those placeholders
    carry EMPTY_ROW_CLASS so the default export predicate drops them.

    Args:
        title: Heading drawn above the table
        columns: Column headings
        rows: Row values, one sequence per row
        width: Table width in pixels at scale 1
        page_length: Rows per table page; short tables are padded to it

    Returns:
        SurfaceNode with title, header, data rows and placeholder rows

    Example:
        >>> surface = table_surface("Events", ["Name", "Date"], [("Expo", "2026-05-01")])
        >>> len(surface.children)
        12  # title + header + 1 row + 9 placeholders
    """
    if not columns:
        raise ValueError("table_surface requires at least one column")

    font = ImageFont.load_default()
    children = [
        SurfaceNode("title", image=_text_strip([title], width, TITLE_HEIGHT_PX, font)),
        SurfaceNode(
            "header",
            image=_text_strip(columns, width, HEADER_HEIGHT_PX, font, fill="#eef1f5"),
            classes=("table-header",),
        ),
    ]
    for i, row in enumerate(rows):
        cells = [("" if v is None else str(v)) for v in row]
        children.append(SurfaceNode(
            f"row-{i}",
            image=_text_strip(cells, width, ROW_HEIGHT_PX, font, columns=len(columns)),
            classes=("table-row",),
        ))

    padding = (-len(rows)) % page_length if rows else page_length
    for i in range(padding):
        children.append(SurfaceNode(
            f"empty-{i}",
            height=ROW_HEIGHT_PX,
            fill="#ffffff",
            classes=(EMPTY_ROW_CLASS,),
        ))

    return SurfaceNode(title, children=children, classes=("content",))


def _text_strip(
    cells: Sequence[str],
    width: int,
    height: int,
    font: ImageFont.ImageFont,
    *,
    fill: str = "#ffffff",
    columns: Optional[int] = None,
) -> Image.Image:
    """Render cells left to right in equal-width columns with a bottom rule."""
    strip = Image.new("RGB", (width, height), fill)
    draw = ImageDraw.Draw(strip)
    count = columns or len(cells)
    col_width = width // max(count, 1)
    for i, text in enumerate(cells[:count]):
        draw.text(
            (i * col_width + CELL_PADDING_PX, CELL_PADDING_PX),
            text,
            fill="#1f2933",
            font=font,
        )
    draw.line((0, height - 1, width - 1, height - 1), fill="#d5dae1")
    return strip
