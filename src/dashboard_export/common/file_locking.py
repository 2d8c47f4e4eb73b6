"""
Module: common.file_locking

Purpose:
    Cross-platform file locking utilities for writing export artifacts.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_write_bytes: Replace a file's contents under an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - export.output.savers: FileSaver
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, IO

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'rb',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[IO, None, None]:
    """
    Context manager for cross-platform locked file access.

    Text modes are opened as UTF-8; binary modes are opened raw.

    Args:
        path: Path to file.
        mode: File open mode ('rb', 'ab', 'r+b', 'r', ...).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Example:
        >>> with locked_file(path, 'ab') as f:
        ...     f.write(b'data')
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    encoding = None if 'b' in mode else 'utf-8'
    with open(path, mode, encoding=encoding) as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_write_bytes(path: Path, data: bytes) -> int:
    """
    Replace the contents of a file while holding an exclusive lock.

    The file is opened without truncation, locked, and only then
    truncated, so a concurrent writer never observes a half-empty file
    it did not lock.

    Args:
        path: Destination file (parent directories are created).
        data: Bytes to write.

    Returns:
        Number of bytes written.

    Example:
        >>> locked_write_bytes(Path("out/report.pdf"), pdf_bytes)
        48213
    """
    with locked_file(path, 'r+b', portalocker.LOCK_EX) as f:
        f.seek(0)
        f.truncate()
        written = f.write(data)
        f.flush()

    logger.debug(f"Wrote {written} bytes to {path.name}")
    return written
