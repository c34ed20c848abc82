"""Shared console formatting helpers.

Keeping number and label formatting here keeps the configuration table, the
progress line, and the result panel consistent with each other.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from bigtextsearcher.core.config import BYTES_PER_MB, SearchSettings
from bigtextsearcher.core.models import ProgressSnapshot, RunReport


def format_megabytes(size_bytes: int) -> str:
    return f"{size_bytes / BYTES_PER_MB:,.1f} MB"


def format_count(value: int) -> str:
    return f"{value:,}"


def format_seconds(seconds: float) -> str:
    return f"{seconds:,.2f}"


def settings_rows(settings: SearchSettings, input_size_bytes: int) -> list[tuple[str, str]]:
    """Rows for the configuration table shown before a scan."""

    return [
        ("Input File", str(settings.input_path)),
        ("Input Size", format_megabytes(input_size_bytes)),
        ("Output File", str(settings.output_path)),
        ("Keywords", ", ".join(settings.keywords)),
        ("Case Sensitive", "Yes" if settings.case_sensitive else "No"),
        ("Buffer Size", f"{settings.buffer_size_mb} MB"),
    ]


def progress_description(snapshot: ProgressSnapshot) -> str:
    """Rich markup describing a snapshot, in its running or completed form."""

    lines = format_count(snapshot.lines_scanned)
    matches = format_count(snapshot.matches_written)
    if snapshot.final:
        return f"[green]Completed:[/] {lines} lines scanned, [yellow]{matches}[/] matches found"
    return f"[green]Scanned:[/] {lines} lines, [yellow]Matched:[/] {matches}"


def report_markup(report: RunReport) -> str:
    """Rich markup body of the success panel."""

    output = escape(str(Path(report.output_path).resolve()))
    return (
        "[green]Success![/]\n\n"
        f"Lines scanned: [cyan]{format_count(report.lines_scanned)}[/]\n"
        f"Matches found: [yellow]{format_count(report.matches_written)}[/]\n"
        f"Time elapsed: [cyan]{format_seconds(report.elapsed_seconds)}[/] seconds\n"
        f"Throughput: [cyan]{report.lines_per_second:,.0f}[/] lines/s\n"
        f"Output file: {output}"
    )
