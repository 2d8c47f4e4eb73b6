"""
Module: export.config

Purpose:
    Configuration dataclass for the export pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - ExportConfig: Paper, margin, capture and output settings
    - GeometryPolicy: How page content height is derived

Dependencies:
    - reportlab.lib.pagesizes: Paper dimensions in points
    - dataclasses (std)

Used By:
    - export.controller: ExportController
    - export.layout.geometry: compute_geometry
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Tuple

from reportlab.lib import pagesizes

# Paper sizes in points (1/72 inch), portrait
PAPER_SIZES = {
    "A3": pagesizes.A3,
    "A4": pagesizes.A4,
    "A5": pagesizes.A5,
    "LETTER": pagesizes.LETTER,
    "LEGAL": pagesizes.LEGAL,
}

DEFAULT_FILENAME = "events-overview.pdf"
DEFAULT_MARGIN_PT = 10.0
DEFAULT_CAPTURE_SCALE = 3
DEFAULT_EXCLUDED_CLASSES = ("empty-row",)


class GeometryPolicy(str, Enum):
    """
    Policy for deriving the source pixel height that fits on one page.

    FULL_PAGE divides the full paper height by the scale, so a full band
    runs into the bottom margin. INSET subtracts both margins first.
    """
    FULL_PAGE = "full_page"
    INSET = "inset"


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for a report export (immutable).

    Attributes:
        paper_size: Paper name, one of PAPER_SIZES
        orientation: Page orientation (only "portrait")
        unit: Document unit (only "pt")
        margin: Margin on every edge, in points
        filename: Name handed to the save collaborator
        geometry_policy: Page content height policy
        capture_scale: Pixel multiplier used by capture collaborators
        background: Capture background colour
        image_format: Pillow format used to encode each band
        excluded_classes: Surface classes that contribute no pixels

    Example:
        >>> config = ExportConfig(margin=20, filename="attendees-overview.pdf")
        >>> config.page_size
        (595.2755905511812, 841.8897637795277)
    """

    # Paper
    paper_size: str = "A4"
    orientation: str = "portrait"
    unit: str = "pt"
    margin: float = DEFAULT_MARGIN_PT

    # Output
    filename: str = DEFAULT_FILENAME
    geometry_policy: GeometryPolicy = GeometryPolicy.FULL_PAGE
    image_format: str = "PNG"

    # Capture
    capture_scale: int = DEFAULT_CAPTURE_SCALE
    background: str = "#ffffff"
    excluded_classes: Tuple[str, ...] = DEFAULT_EXCLUDED_CLASSES

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.paper_size.upper() not in PAPER_SIZES:
            raise ValueError(f"Unknown paper_size: {self.paper_size!r}")
        if self.orientation != "portrait":
            raise ValueError(f"Only portrait orientation is supported: {self.orientation!r}")
        if self.unit != "pt":
            raise ValueError(f"Only point units are supported: {self.unit!r}")
        if self.margin <= 0:
            raise ValueError(f"margin must be positive: {self.margin}")
        width, _ = self.page_size
        if width - 2 * self.margin <= 0:
            raise ValueError("Margins exceed page width")
        if not self.filename or not self.filename.lower().endswith(".pdf"):
            raise ValueError(f"filename must end with .pdf: {self.filename!r}")
        if isinstance(self.capture_scale, bool) or not isinstance(self.capture_scale, int):
            raise ValueError(f"capture_scale must be an integer: {self.capture_scale!r}")
        if self.capture_scale <= 0:
            raise ValueError(f"capture_scale must be positive: {self.capture_scale}")
        if not isinstance(self.geometry_policy, GeometryPolicy):
            object.__setattr__(self, "geometry_policy", GeometryPolicy(self.geometry_policy))
        object.__setattr__(self, "excluded_classes", tuple(self.excluded_classes))

    @property
    def page_size(self) -> Tuple[float, float]:
        """(width, height) of the paper in points."""
        return PAPER_SIZES[self.paper_size.upper()]

    def is_excluded(self, node: Any) -> bool:
        """
        Exclusion predicate handed to capture collaborators.

        A node is excluded when any of its classes is in excluded_classes.
        Surface nodes expose ``classes``; Qt widgets carry a space separated
        ``class`` dynamic property, the same one stylesheets select on.
        """
        classes: Iterable[str] = getattr(node, "classes", None) or ()
        if not classes and callable(getattr(node, "property", None)):
            value = node.property("class")
            classes = str(value).split() if value else ()
        return any(c in self.excluded_classes for c in classes)
