"""
Module: export.capture.qt

Purpose:
    Capture collaborator for PySide6 widgets. Renders a widget into a
    raster, temporarily hiding every child the exclusion predicate
    matches so the layout closes the gap they leave.

Key Functions:
    - capture_widget(): Render a QWidget (and its children) to a PIL image
    - qimage_to_pil(): Convert a QImage to a PIL image

Dependencies:
    - PySide6: Widget rendering
    - PIL.Image: Raster handed to the pipeline

Used By:
    - GUI export actions that pass a dashboard widget as the surface
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from PIL import Image
from PySide6.QtCore import QPoint
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QWidget

from ..errors import CaptureFailure

logger = logging.getLogger(__name__)


def capture_widget(
    widget: Optional[QWidget],
    is_excluded: Callable[[Any], bool],
    *,
    scale: int = 1,
    background: str = "#ffffff",
) -> Optional[Image.Image]:
    """
    Render a widget to an RGB raster, skipping excluded children.

    Excluded children are hidden and the widget is shrunk to its size
    hint for the duration of the render; both are restored afterwards,
    including when rendering fails.

    Args:
        widget: Widget to capture, or None when it was not found
        is_excluded: Predicate applied to every descendant widget
        scale: Integer pixel multiplier (default 1)
        background: Colour painted behind the widget

    Returns:
        Captured raster, or None if widget is None

    Raises:
        CaptureFailure: If the widget renders to an empty area or the
            image cannot be converted
    """
    if widget is None:
        logger.warning("No widget to capture")
        return None
    if scale <= 0:
        raise CaptureFailure(f"Capture scale must be positive: {scale}")

    hidden: List[QWidget] = [
        child for child in widget.findChildren(QWidget)
        if child.isVisibleTo(widget) and is_excluded(child)
    ]
    restore_size = widget.size()

    for child in hidden:
        child.setVisible(False)
    try:
        layout = widget.layout()
        if layout is not None:
            layout.activate()
        widget.adjustSize()

        width, height = widget.width(), widget.height()
        if width <= 0 or height <= 0:
            raise CaptureFailure(
                f"Widget {widget.objectName()!r} is empty ({width}x{height})"
            )

        image = QImage(width * scale, height * scale, QImage.Format.Format_RGB32)
        image.fill(QColor(background))
        painter = QPainter(image)
        try:
            painter.scale(scale, scale)
            widget.render(painter, QPoint(0, 0))
        finally:
            painter.end()
    finally:
        for child in hidden:
            child.setVisible(True)
        widget.resize(restore_size)

    raster = qimage_to_pil(image)
    logger.info(
        f"Captured widget {widget.objectName()!r}: {raster.width}x{raster.height}px "
        f"({len(hidden)} children excluded)"
    )
    return raster


def qimage_to_pil(image: QImage) -> Image.Image:
    """
    Convert a QImage to an RGB PIL image.

    Copies the pixel rows straight out of an RGB888 conversion, so tall
    captures are not subject to Pillow's decompression bomb limit.

    Raises:
        CaptureFailure: If the image is null
    """
    if image.isNull():
        raise CaptureFailure("Captured image is null")

    rgb = image.convertToFormat(QImage.Format.Format_RGB888)
    size = (rgb.width(), rgb.height())
    # Rows are padded to 32-bit boundaries
    stride = rgb.bytesPerLine()
    return Image.frombuffer("RGB", size, bytes(rgb.constBits()), "raw", "RGB", stride, 1)
