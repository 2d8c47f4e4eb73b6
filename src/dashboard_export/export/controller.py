"""
Module: export.controller

Purpose:
    Orchestrate the complete report export pipeline.
    Capture → Geometry → Slice → Composite → Assemble → Save

Key Functions:
    - export_surface(): One-shot export with a fresh controller

Key Classes:
    - ExportController: Runs exports against one export indicator
    - ExportResult: Outcome of one export

Dependencies:
    - export.capture: Capture collaborators
    - export.layout: Geometry and slicing
    - export.output: Compositing, PDF assembly, saving

Used By:
    - Dashboard export actions (events, attendees overviews)
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple

from PIL import Image

from .capture import Capturer, capture_surface
from .config import ExportConfig
from .errors import CaptureFailure, ExportBusy, ExportError, SaveFailure
from .indicator import ExportIndicator
from .layout import PagePlacement, compute_geometry, slice_raster
from .output import DocumentAssembler, Saver, composite_bands
from .timing import PhaseTimings, timed_phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """
    Outcome of one export (immutable).

    Attributes:
        succeeded: True if the document was saved
        filename: Name handed (or meant to be handed) to the saver
        page_count: Pages in the saved document (0 on failure)
        byte_size: Size of the saved document (0 on failure)
        placements: Band placements in page order
        error: The failure, if any
        saved_to: Whatever the saver returned (a path, a key...)
        timings: Per-phase durations

    Example:
        >>> result = await controller.export(surface)
        >>> if not result.succeeded:
        ...     show_error(str(result.error))
    """
    succeeded: bool
    filename: str
    page_count: int = 0
    byte_size: int = 0
    placements: Tuple[PagePlacement, ...] = ()
    error: Optional[ExportError] = None
    saved_to: Any = None
    timings: PhaseTimings = field(default_factory=PhaseTimings)


class ExportController:
    """
    Runs report exports one at a time.

    The controller owns its ExportIndicator: the indicator is set while
    an export runs and cleared on every exit path. Starting a second
    export while one is running fails fast with ExportBusy.

    Args:
        saver: Save collaborator, called once per successful export
        capturer: Capture collaborator (default: capture_surface)
        config: Export configuration (default: ExportConfig())
        indicator: Busy flag to hold (default: a new ExportIndicator)

    Example:
        >>> controller = ExportController(FileSaver(Path("exports")))
        >>> result = asyncio.run(controller.export(surface))
        >>> result.page_count
        3
    """

    def __init__(
        self,
        saver: Saver,
        *,
        capturer: Capturer = capture_surface,
        config: Optional[ExportConfig] = None,
        indicator: Optional[ExportIndicator] = None,
    ):
        self.saver = saver
        self.capturer = capturer
        self.config = config or ExportConfig()
        self.indicator = indicator or ExportIndicator()

    async def export(self, surface: Any, *, filename: Optional[str] = None) -> ExportResult:
        """
        Capture a surface and save it as a paginated PDF.

        Failures never raise: they are logged and returned on the result,
        and nothing is saved. The indicator is released either way.

        Args:
            surface: Surface handed to the capturer
            filename: Overrides config.filename for this export

        Returns:
            ExportResult describing the outcome

        Raises:
            ValueError: If filename does not end with .pdf
        """
        filename = filename or self.config.filename
        if not filename.lower().endswith(".pdf"):
            raise ValueError(f"filename must end with .pdf: {filename!r}")

        timings = PhaseTimings()
        try:
            with self.indicator.hold():
                return await self._run(surface, filename, timings)
        except ExportBusy as e:
            logger.warning(f"Export of {filename} rejected: {e}")
            return ExportResult(succeeded=False, filename=filename, error=e, timings=timings)

    async def _run(self, surface: Any, filename: str, timings: PhaseTimings) -> ExportResult:
        logger.info(f"Starting export to {filename}")
        try:
            with timed_phase(timings, "capture"):
                raster = await self._capture(surface)

            data, placements = self.build_document(
                raster,
                timings=timings,
                title=Path(filename).stem,
            )

            with timed_phase(timings, "save"):
                saved_to = self._save(data, filename)
        except ExportError as e:
            logger.exception(f"Export to {filename} failed: {e}")
            return ExportResult(succeeded=False, filename=filename, error=e, timings=timings)

        logger.info(
            f"Exported {len(placements)} pages to {filename} "
            f"({len(data)} bytes; {timings.summary()})"
        )
        return ExportResult(
            succeeded=True,
            filename=filename,
            page_count=len(placements),
            byte_size=len(data),
            placements=placements,
            saved_to=saved_to,
            timings=timings,
        )

    def build_document(
        self,
        raster: Image.Image,
        *,
        timings: Optional[PhaseTimings] = None,
        title: Optional[str] = None,
    ) -> Tuple[bytes, Tuple[PagePlacement, ...]]:
        """
        Paginate a captured raster into PDF bytes.

        Runs synchronously: geometry once, slicing once, then composite
        and place each slice in order.

        Args:
            raster: Captured raster (not modified)
            timings: Collector for phase durations (optional)
            title: PDF title metadata (optional)

        Returns:
            Tuple of (pdf_bytes, placements)

        Raises:
            InvalidGeometry, InvalidInput, EncodingFailure, AssemblyFailure
        """
        timings = timings if timings is not None else PhaseTimings()
        config = self.config
        paper_width, paper_height = config.page_size

        with timed_phase(timings, "geometry"):
            geometry = compute_geometry(
                raster.width,
                paper_width,
                paper_height,
                config.margin,
                policy=config.geometry_policy,
            )
        with timed_phase(timings, "slice"):
            slices = slice_raster(raster.height, geometry.page_content_height_px)

        logger.info(
            f"Paginating {raster.width}x{raster.height}px raster onto "
            f"{len(slices)} pages ({geometry.page_content_height_px}px per page)"
        )

        assembler = DocumentAssembler(geometry, title=title)
        bands = composite_bands(raster, slices, image_format=config.image_format)
        for slice_ in slices:
            with timed_phase(timings, "composite"):
                band = next(bands)
            with timed_phase(timings, "assemble"):
                assembler.place(band, slice_)

        with timed_phase(timings, "assemble"):
            data = assembler.finish()
        return data, assembler.placements

    async def _capture(self, surface: Any) -> Image.Image:
        try:
            raster = self.capturer(
                surface,
                self.config.is_excluded,
                scale=self.config.capture_scale,
                background=self.config.background,
            )
            if inspect.isawaitable(raster):
                raster = await raster
        except ExportError:
            raise
        except Exception as e:
            raise CaptureFailure(f"Capture failed: {e}") from e

        if raster is None:
            raise CaptureFailure("Capture produced no raster (surface missing)")
        if raster.width <= 0 or raster.height <= 0:
            raise CaptureFailure(f"Captured raster is empty ({raster.width}x{raster.height})")
        return raster

    def _save(self, data: bytes, filename: str) -> Any:
        try:
            return self.saver(data, filename)
        except ExportError:
            raise
        except Exception as e:
            raise SaveFailure(f"Could not save {filename}: {e}") from e


async def export_surface(
    surface: Any,
    saver: Saver,
    *,
    capturer: Capturer = capture_surface,
    config: Optional[ExportConfig] = None,
    filename: Optional[str] = None,
) -> ExportResult:
    """
    Export a surface with a one-off controller.

    Each call gets its own indicator, so calls are not guarded against
    each other; share an ExportController for single-flight behaviour.

    Example:
        >>> saver = MemorySaver()
        >>> result = asyncio.run(export_surface(surface, saver))
        >>> saver.files.keys()
        dict_keys(['events-overview.pdf'])
    """
    controller = ExportController(saver, capturer=capturer, config=config)
    return await controller.export(surface, filename=filename)
