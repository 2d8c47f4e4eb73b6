"""
Module: export.errors

Purpose:
    Exception hierarchy for the export pipeline. Components raise the
    specific subclass; the controller catches ExportError at its boundary
    and reports it on the ExportResult.

Key Classes:
    - ExportError: Base class for every pipeline failure
    - InvalidGeometry, InvalidInput, EncodingFailure, AssemblyFailure,
      CaptureFailure, SaveFailure, ExportBusy

Used By:
    - export.layout: geometry and slicing validation
    - export.output: compositing, assembly, saving
    - export.controller: boundary handling
"""

from __future__ import annotations


class ExportError(Exception):
    """Error during the export pipeline."""
    pass


class InvalidGeometry(ExportError):
    """Paper size, margin or raster width cannot produce a page layout."""
    pass


class InvalidInput(ExportError):
    """Raster height or page content height cannot be sliced."""
    pass


class EncodingFailure(ExportError):
    """A slice region could not be encoded into an embeddable image."""
    pass


class AssemblyFailure(ExportError):
    """The document rejected a placement or could not be serialized."""
    pass


class CaptureFailure(ExportError):
    """The visual surface was missing, empty, or could not be rasterized."""
    pass


class SaveFailure(ExportError):
    """The save collaborator could not persist the finished document."""
    pass


class ExportBusy(ExportError):
    """Another export is already running on the same indicator."""
    pass
