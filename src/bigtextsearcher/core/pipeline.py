"""Core scan pipeline.

The pipeline enforces a strict order:
1) Validate settings before touching the input or output
2) Open the line source, then the output sink (truncating it)
3) Read, match, and write lines in input order, emitting progress snapshots
4) Emit a final snapshot, close both streams, and build the RunReport

Blocking reads and writes run in a worker thread one batch at a time, so the
event loop stays free for a progress renderer. There is still exactly one
reader and one writer per run and no two batches overlap.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, Optional, TextIO

from bigtextsearcher.core.config import SearchSettings, validate_settings
from bigtextsearcher.core.errors import OutputWriteError, SearchError
from bigtextsearcher.core.line_source import LineSource, open_line_source
from bigtextsearcher.core.matcher import KeywordMatcher
from bigtextsearcher.core.models import ProgressSnapshot, RunPhase, RunReport
from bigtextsearcher.core.ports import NullReporter, ProgressReporter

LOGGER = logging.getLogger(__name__)

READ_BATCH_LINES = 8192
PROGRESS_EVERY_LINES = 100_000
PROGRESS_INTERVAL_SECONDS = 0.5
OUTPUT_ENCODING = "utf-8"
LINE_TERMINATOR = "\n"

_ALLOWED_TRANSITIONS: Dict[RunPhase, FrozenSet[RunPhase]] = {
    RunPhase.IDLE: frozenset({RunPhase.VALIDATING}),
    RunPhase.VALIDATING: frozenset({RunPhase.RUNNING, RunPhase.FAILED}),
    RunPhase.RUNNING: frozenset({RunPhase.COMPLETED, RunPhase.FAILED}),
    RunPhase.COMPLETED: frozenset(),
    RunPhase.FAILED: frozenset(),
}


@dataclass
class ScanState:
    """Mutable counters for a single run; only the pipeline writes them."""

    lines_scanned: int = 0
    matches_written: int = 0
    last_progress_at: float = 0.0


def _open_sink(path: Path, buffer_size: int) -> TextIO:
    try:
        return open(
            path,
            "w",
            encoding=OUTPUT_ENCODING,
            newline=LINE_TERMINATOR,
            buffering=buffer_size,
        )
    except OSError as exc:
        raise OutputWriteError(
            f"Unable to open output file {path}: {exc}",
            context={"output_path": str(path)},
        ) from exc


def _write_lines(sink: TextIO, lines: Iterable[str]) -> None:
    try:
        sink.writelines(f"{line}{LINE_TERMINATOR}" for line in lines)
    except OSError as exc:
        raise OutputWriteError(
            f"Failed writing output file {sink.name}: {exc}",
            context={"output_path": str(sink.name)},
        ) from exc


def _close_sink(sink: TextIO) -> None:
    # Closing flushes the last buffered block, so disk-full can surface here.
    try:
        sink.close()
    except OSError as exc:
        raise OutputWriteError(
            f"Failed finalizing output file {sink.name}: {exc}",
            context={"output_path": str(sink.name)},
        ) from exc


def _sink_closer(sink: TextIO) -> Callable[..., bool]:
    """ExitStack callback closing ``sink`` without masking an earlier failure."""

    def _exit(exc_type, exc, tb) -> bool:
        try:
            _close_sink(sink)
        except OutputWriteError as close_error:
            if exc is None:
                raise
            LOGGER.warning("%s (while handling an earlier failure)", close_error.message)
        return False

    return _exit


class ScanPipeline:
    """Orchestrates validation, the read/match/write loop, and reporting."""

    def __init__(
        self,
        settings: SearchSettings,
        reporter: Optional[ProgressReporter] = None,
        *,
        clock: Callable[[], float] = time.perf_counter,
        batch_lines: int = READ_BATCH_LINES,
        progress_every_lines: int = PROGRESS_EVERY_LINES,
        progress_interval: float = PROGRESS_INTERVAL_SECONDS,
    ) -> None:
        self._settings = settings
        self._reporter = reporter or NullReporter()
        self._clock = clock
        self._batch_lines = max(1, batch_lines)
        self._progress_every_lines = max(1, progress_every_lines)
        self._progress_interval = progress_interval
        self._matcher = KeywordMatcher(settings.keywords, settings.case_sensitive)
        self._phase = RunPhase.IDLE
        self._started_at = 0.0

    @property
    def phase(self) -> RunPhase:
        return self._phase

    async def run(self) -> RunReport:
        """Run the scan once and return its report; any failure ends in FAILED."""

        self._transition(RunPhase.VALIDATING)
        try:
            validate_settings(self._settings)
        except SearchError as exc:
            self._fail(exc)
            raise

        try:
            await self._reporter.start(self._settings)
            self._started_at = self._clock()
            self._transition(RunPhase.RUNNING)
            LOGGER.info(
                "Scanning %s (%s keyword(s), case_sensitive=%s)",
                self._settings.input_path,
                len(self._settings.keywords),
                self._settings.case_sensitive,
            )
            state = await self._execute()
            report = RunReport(
                lines_scanned=state.lines_scanned,
                matches_written=state.matches_written,
                elapsed_seconds=self._clock() - self._started_at,
                output_path=self._settings.output_path,
            )
            self._transition(RunPhase.COMPLETED)
        except (Exception, asyncio.CancelledError) as exc:
            self._fail(exc)
            raise

        LOGGER.info(
            "Scan complete: lines=%s, matches=%s, seconds=%.2f",
            report.lines_scanned,
            report.matches_written,
            report.elapsed_seconds,
        )
        await self._reporter.finish(report)
        return report

    async def _execute(self) -> ScanState:
        settings = self._settings
        state = ScanState(last_progress_at=self._started_at)
        with ExitStack() as streams:
            source = streams.enter_context(
                await asyncio.to_thread(
                    open_line_source, settings.input_path, settings.buffer_size_bytes
                )
            )
            # The sink is opened only after the source, so a missing input never truncates it.
            sink = await asyncio.to_thread(
                _open_sink, settings.output_path, settings.buffer_size_bytes
            )
            streams.push(_sink_closer(sink))

            await self._scan(source, sink, state)
            await self._reporter.progress(self._snapshot(state, final=True))
        return state

    async def _scan(self, source: LineSource, sink: TextIO, state: ScanState) -> None:
        matcher = self._matcher
        while True:
            batch = await asyncio.to_thread(source.read_batch, self._batch_lines)
            if not batch:
                return

            matched = []
            for line in batch:
                state.lines_scanned += 1
                if matcher(line):
                    matched.append(line)
                    state.matches_written += 1
                if self._progress_due(state):
                    state.last_progress_at = self._clock()
                    await self._reporter.progress(self._snapshot(state))

            if matched:
                await asyncio.to_thread(_write_lines, sink, matched)

    def _progress_due(self, state: ScanState) -> bool:
        if state.lines_scanned % self._progress_every_lines == 0:
            return True
        return self._clock() - state.last_progress_at >= self._progress_interval

    def _snapshot(self, state: ScanState, *, final: bool = False) -> ProgressSnapshot:
        return ProgressSnapshot(
            lines_scanned=state.lines_scanned,
            matches_written=state.matches_written,
            elapsed_seconds=self._clock() - self._started_at,
            final=final,
        )

    def _transition(self, target: RunPhase) -> None:
        if target not in _ALLOWED_TRANSITIONS[self._phase]:
            raise ValueError(f"Invalid transition {self._phase.value} -> {target.value}")
        LOGGER.debug("Pipeline %s -> %s", self._phase.value, target.value)
        self._phase = target

    def _fail(self, exc: BaseException) -> None:
        if self._phase in (RunPhase.VALIDATING, RunPhase.RUNNING):
            self._transition(RunPhase.FAILED)
        if isinstance(exc, SearchError):
            LOGGER.error("Scan failed [%s]: %s", exc.code.value, exc.message)
        else:
            LOGGER.error("Scan failed: %s", str(exc) or exc.__class__.__name__)


async def search(
    settings: SearchSettings, reporter: Optional[ProgressReporter] = None
) -> RunReport:
    """Run one scan with a fresh pipeline."""

    return await ScanPipeline(settings, reporter).run()


def run_search(
    settings: SearchSettings, reporter: Optional[ProgressReporter] = None
) -> RunReport:
    """Blocking entry point that drives ``search`` on a new event loop."""

    return asyncio.run(search(settings, reporter))
