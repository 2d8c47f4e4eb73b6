"""
Module: export.output

Purpose:
    Band compositing, PDF assembly and saving for report export.

Key Functions:
    - composite_band(): Crop and encode one slice
    - composite_bands(): Crop and encode slices in order

Key Classes:
    - DocumentAssembler: Place bands onto PDF pages (ReportLab)
    - FileSaver, MemorySaver: Save collaborators

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - portalocker: Locked file writes

Used By:
    - export.controller: Pipeline orchestration
"""

from .compositor import composite_band, composite_bands
from .assembler import AssemblerState, DocumentAssembler
from .savers import FileSaver, MemorySaver, Saver

__all__ = [
    "composite_band",
    "composite_bands",
    "AssemblerState",
    "DocumentAssembler",
    "FileSaver",
    "MemorySaver",
    "Saver",
]
