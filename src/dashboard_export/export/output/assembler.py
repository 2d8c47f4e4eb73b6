"""
Module: export.output.assembler

Purpose:
    Place composited bands onto successive pages of a PDF using
    ReportLab. Every page holds exactly one band at (margin, margin),
    scaled to the content width.

Key Classes:
    - DocumentAssembler: Incremental EMPTY -> BUILDING -> COMPLETE builder
    - AssemblerState: Assembler lifecycle states

Dependencies:
    - reportlab: PDF generation
    - export.layout.models: PageGeometry, CompositedBand, PagePlacement

Used By:
    - export.controller: Pipeline orchestration
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from typing import List, Optional, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..errors import AssemblyFailure
from ..layout.models import CompositedBand, PageGeometry, PagePlacement, Slice

logger = logging.getLogger(__name__)


class AssemblerState(str, Enum):
    """Lifecycle of a DocumentAssembler."""
    EMPTY = "empty"
    BUILDING = "building"
    COMPLETE = "complete"


class DocumentAssembler:
    """
    Builds a paginated PDF one band at a time.

    The first band goes onto page 1. Each later band starts a new page
    before it is drawn, so the page count always equals the number of
    placed bands. finish() serializes the document and closes it to
    further placements.

    Output is produced in ReportLab's invariant mode (fixed creation
    date and document id), so identical bands give identical bytes.

    Example:
        >>> assembler = DocumentAssembler(geometry)
        >>> for slice_, band in zip(slices, bands):
        ...     assembler.place(band, slice_)
        >>> pdf_bytes = assembler.finish()
    """

    def __init__(self, geometry: PageGeometry, *, title: Optional[str] = None):
        self._geometry = geometry
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=(geometry.paper_width, geometry.paper_height),
            invariant=1,
            pageCompression=1,
        )
        if title:
            self._canvas.setTitle(title)
        self._state = AssemblerState.EMPTY
        self._placements: List[PagePlacement] = []

    @property
    def state(self) -> AssemblerState:
        """Current lifecycle state."""
        return self._state

    @property
    def page_count(self) -> int:
        """Pages holding a band so far."""
        return len(self._placements)

    @property
    def placements(self) -> Tuple[PagePlacement, ...]:
        """Placements in page order."""
        return tuple(self._placements)

    def place(self, band: CompositedBand, slice_: Slice) -> PagePlacement:
        """
        Place a band on the next page.

        Args:
            band: Encoded band image
            slice_: Slice the band was cut from (drives rendered height)

        Returns:
            PagePlacement describing where the band was drawn

        Raises:
            AssemblyFailure: If the document is complete, the band does not
                belong to the slice, or ReportLab rejects the image
        """
        if self._state is AssemblerState.COMPLETE:
            raise AssemblyFailure(
                f"Cannot place band {band.index}: document is complete"
            )
        if band.index != slice_.index or band.height != slice_.height_px:
            raise AssemblyFailure(
                f"Band {band.index} ({band.height}px) does not match "
                f"slice {slice_.index} ({slice_.height_px}px)"
            )

        if self._state is AssemblerState.BUILDING:
            # Close the previous page before drawing on a new one
            self._canvas.showPage()
        self._state = AssemblerState.BUILDING

        geometry = self._geometry
        width_pt = geometry.content_width
        height_pt = geometry.rendered_height(slice_.height_px)
        x_pt = geometry.margin
        y_pt = _transform_y(geometry.paper_height, geometry.margin, height_pt)

        try:
            reader = ImageReader(io.BytesIO(band.data))
            self._canvas.drawImage(
                reader,
                x_pt,
                y_pt,
                width=width_pt,
                height=height_pt,
                mask="auto",
            )
        except Exception as e:
            raise AssemblyFailure(
                f"Document rejected band {band.index}: {e}"
            ) from e

        placement = PagePlacement(
            page_index=len(self._placements),
            band_index=band.index,
            x=x_pt,
            y=geometry.margin,
            width=width_pt,
            height=height_pt,
        )
        self._placements.append(placement)

        logger.debug(
            f"Placed band {band.index} on page {placement.page_index + 1} "
            f"({width_pt:.1f}x{height_pt:.1f}pt)"
        )
        return placement

    def finish(self) -> bytes:
        """
        Complete the document and return the serialized PDF.

        Raises:
            AssemblyFailure: If nothing was placed, the document is already
                complete, or serialization fails
        """
        if self._state is AssemblerState.COMPLETE:
            raise AssemblyFailure("Document is already complete")
        if self._state is AssemblerState.EMPTY:
            raise AssemblyFailure("Cannot finish a document with no pages")

        self._state = AssemblerState.COMPLETE
        try:
            self._canvas.save()
        except Exception as e:
            raise AssemblyFailure(f"Could not serialize document: {e}") from e

        data = self._buffer.getvalue()
        logger.info(f"Assembled {self.page_count} pages ({len(data)} bytes)")
        return data


def _transform_y(page_height_pt: float, top_pt: float, height_pt: float) -> float:
    """
    Convert a top-down Y coordinate to ReportLab's bottom-up Y.

    Args:
        page_height_pt: Page height in points
        top_pt: Distance from page top to the element's top edge
        height_pt: Element height in points

    Returns:
        Y of the element's bottom edge, measured from the page bottom
    """
    return page_height_pt - top_pt - height_pt
