"""Core domain models.

These dataclasses are the only values the pipeline hands to reporters, so a
console or any other frontend can render a run without touching its state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class RunPhase(str, Enum):
    """Lifecycle of one pipeline run."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time copy of the scan counters."""

    lines_scanned: int
    matches_written: int
    elapsed_seconds: float
    final: bool = False


@dataclass(frozen=True)
class RunReport:
    """Summary of one completed scan."""

    lines_scanned: int
    matches_written: int
    elapsed_seconds: float
    output_path: Path

    @property
    def lines_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.lines_scanned / self.elapsed_seconds
