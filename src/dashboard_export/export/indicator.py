"""
Module: export.indicator

Purpose:
    The "export in progress" flag that export buttons and page styling
    follow. Held for exactly one export at a time and always released.

Key Classes:
    - ExportIndicator: Scoped, single-flight busy flag with listeners

Used By:
    - export.controller: Acquired around every export
    - GUI code that disables the export action while busy
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Generator, List

from .errors import ExportBusy

logger = logging.getLogger(__name__)


class ExportIndicator:
    """
    Busy flag for one export surface.

    ``hold()`` sets the flag for the duration of a with-block and clears
    it on every exit path. A second ``hold()`` while the flag is set
    raises ExportBusy and leaves the running export's flag untouched.

    Listeners receive the new value on every change, so a button can
    disable itself and re-enable once the export ends.

    Example:
        >>> indicator = ExportIndicator()
        >>> indicator.subscribe(lambda busy: button.setEnabled(not busy))
        >>> with indicator.hold():
        ...     run_export()
    """

    def __init__(self) -> None:
        self._exporting = False
        self._listeners: List[Callable[[bool], None]] = []

    @property
    def exporting(self) -> bool:
        """True while an export holds the indicator."""
        return self._exporting

    def subscribe(self, listener: Callable[[bool], None]) -> None:
        """Call listener(exporting) on every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[bool], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @contextmanager
    def hold(self) -> Generator[None, None, None]:
        """
        Hold the indicator for one export.

        Raises:
            ExportBusy: If another export already holds it
        """
        if self._exporting:
            raise ExportBusy("An export is already in progress")

        self._set(True)
        try:
            yield
        finally:
            self._set(False)

    def _set(self, value: bool) -> None:
        self._exporting = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                # A broken listener must not leave the flag stuck
                logger.exception("Export indicator listener failed")
