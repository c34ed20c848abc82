"""Ports (interfaces) used by the core pipeline.

The reporter port is the only way the pipeline talks to the outside world
while a scan runs; it receives immutable values and never mutates state.
"""

from __future__ import annotations

from typing import Protocol

from bigtextsearcher.core.config import SearchSettings
from bigtextsearcher.core.models import ProgressSnapshot, RunReport


class ProgressReporter(Protocol):
    """Progress operations required by the core pipeline."""

    async def start(self, settings: SearchSettings) -> None:
        ...

    async def progress(self, snapshot: ProgressSnapshot) -> None:
        ...

    async def finish(self, report: RunReport) -> None:
        ...


class NullReporter:
    """Reporter that drops every event, for headless runs."""

    async def start(self, settings: SearchSettings) -> None:
        return None

    async def progress(self, snapshot: ProgressSnapshot) -> None:
        return None

    async def finish(self, report: RunReport) -> None:
        return None
