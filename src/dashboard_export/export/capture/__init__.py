"""
Module: export.capture

Purpose:
    Capture collaborators that rasterize a visual surface for export.

Key Functions:
    - capture_surface(): Render a SurfaceNode tree (Pillow)
    - table_surface(): Build a titled table surface with placeholder rows
    - capture_widget(): Render a PySide6 widget (import from .qt)

Key Classes:
    - Capturer: Protocol shared by all capture collaborators
    - SurfaceNode: Block on a visual surface

Used By:
    - export.controller: ExportController
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, Union

from PIL import Image

from .surface import SurfaceNode, capture_surface, rendered_height, table_surface


class Capturer(Protocol):
    """
    Rasterizes a surface, skipping nodes the predicate matches.

    May return the raster directly or an awaitable resolving to it.
    None means the surface was not found.
    """

    def __call__(
        self,
        surface: Any,
        is_excluded: Callable[[Any], bool],
        *,
        scale: int = 1,
        background: str = "#ffffff",
    ) -> Union[Optional[Image.Image], Awaitable[Optional[Image.Image]]]: ...


__all__ = [
    "Capturer",
    "SurfaceNode",
    "capture_surface",
    "rendered_height",
    "table_surface",
]
