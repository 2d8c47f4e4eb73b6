"""
Module: export.timing

Purpose:
    Timing instrumentation for the export pipeline, to see which phase
    (capture, compositing, assembly...) dominates an export.

Key Classes:
    - PhaseTimings: Collects per-phase durations for one export

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)

Used By:
    - export.controller: Attaches timings to every ExportResult
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator

logger = logging.getLogger(__name__)


@dataclass
class PhaseTimings:
    """
    Durations per pipeline phase, in seconds.

    Repeated phases (one composite per slice) accumulate.

    Example:
        >>> timings = PhaseTimings()
        >>> with timed_phase(timings, "capture"):
        ...     raster = capture(surface)
        >>> timings.summary()
        'capture=0.412s total=0.412s'
    """
    phases: Dict[str, float] = field(default_factory=dict)

    def log_phase(self, phase: str, duration: float) -> None:
        """Add duration to a phase."""
        self.phases[phase] = self.phases.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phases.values())

    def summary(self) -> str:
        """One-line report in phase order."""
        parts = [f"{name}={seconds:.3f}s" for name, seconds in self.phases.items()]
        parts.append(f"total={self.total:.3f}s")
        return " ".join(parts)


@contextmanager
def timed_phase(timings: PhaseTimings, phase: str) -> Generator[None, None, None]:
    """
    Time a block and record it on timings, even if the block raises.

    Args:
        timings: Collector to record on
        phase: Phase name
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        timings.log_phase(phase, duration)
        logger.debug(f"Phase {phase} took {duration:.3f}s")
