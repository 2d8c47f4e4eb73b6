"""
Module: export

Purpose:
    Rasterized report export: capture a dashboard region, cut it into
    page-sized bands, and assemble a multi-page PDF.

Key Functions:
    - export_surface(): One-shot export

Key Classes:
    - ExportController: Pipeline orchestration with a busy indicator
    - ExportConfig: Paper, margin, capture and output settings
    - ExportResult: Outcome of one export

Dependencies:
    - PIL: Raster handling
    - reportlab: PDF generation
    - portalocker: Locked file saves
    - PySide6: Widget capture (export.capture.qt)
"""

from .config import ExportConfig, GeometryPolicy
from .controller import ExportController, ExportResult, export_surface
from .errors import (
    AssemblyFailure,
    CaptureFailure,
    EncodingFailure,
    ExportBusy,
    ExportError,
    InvalidGeometry,
    InvalidInput,
    SaveFailure,
)
from .indicator import ExportIndicator

__all__ = [
    # Config
    "ExportConfig",
    "GeometryPolicy",
    # Pipeline
    "ExportController",
    "ExportResult",
    "ExportIndicator",
    "export_surface",
    # Errors
    "ExportError",
    "InvalidGeometry",
    "InvalidInput",
    "EncodingFailure",
    "AssemblyFailure",
    "CaptureFailure",
    "SaveFailure",
    "ExportBusy",
]
