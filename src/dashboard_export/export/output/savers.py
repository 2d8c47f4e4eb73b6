"""
Module: export.output.savers

Purpose:
    Save collaborators for finished documents. The pipeline only knows
    the Saver call signature (bytes, filename); where the bytes end up
    is up to the implementation.

Key Classes:
    - Saver: Protocol for save collaborators
    - FileSaver: Write into a directory under an exclusive file lock
    - MemorySaver: Keep saved documents in memory

Dependencies:
    - common.file_locking: Locked writes (portalocker)

Used By:
    - export.controller: Final pipeline step
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Protocol, Tuple

from dashboard_export.common.file_locking import locked_write_bytes

logger = logging.getLogger(__name__)


class Saver(Protocol):
    """Persists a finished document."""

    def __call__(self, data: bytes, filename: str) -> object: ...


class FileSaver:
    """
    Save documents into a directory.

    The filename must be a bare name; path separators are rejected so a
    configured filename cannot escape the target directory.

    Example:
        >>> saver = FileSaver(Path("workspace/exports"))
        >>> saver(pdf_bytes, "events-overview.pdf")
        PosixPath('workspace/exports/events-overview.pdf')
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def __call__(self, data: bytes, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename:
            raise ValueError(f"filename must not contain a directory: {filename!r}")

        path = self.directory / name
        written = locked_write_bytes(path, data)
        logger.info(f"Saved {written} bytes to {path}")
        return path


class MemorySaver:
    """
    Keep saved documents in memory, keyed by filename.

    Useful for previews and tests. Later saves under the same name
    replace earlier ones; ``calls`` keeps every save in order.
    """

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.calls: List[Tuple[str, int]] = []

    def __call__(self, data: bytes, filename: str) -> str:
        self.files[filename] = bytes(data)
        self.calls.append((filename, len(data)))
        logger.debug(f"Stored {len(data)} bytes as {filename}")
        return filename
