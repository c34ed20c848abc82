"""Core configuration dataclasses.

Argument parsing lives outside the core, but these helpers define the shape
the core expects and the checks that must pass before any I/O starts.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from bigtextsearcher.core.errors import ConfigurationError, InputNotFound

DEFAULT_KEYWORDS = "chrome,edge,firefox"
DEFAULT_BUFFER_SIZE_MB = 4
MIN_BUFFER_SIZE_MB = 1
BYTES_PER_MB = 1024 * 1024
COMPRESSED_SUFFIX = ".gz"


@dataclass(frozen=True)
class SearchSettings:
    """Immutable settings for a single scan."""

    input_path: Path
    output_path: Path
    keywords: Tuple[str, ...]
    case_sensitive: bool = False
    buffer_size_bytes: int = DEFAULT_BUFFER_SIZE_MB * BYTES_PER_MB

    @property
    def buffer_size_mb(self) -> int:
        return self.buffer_size_bytes // BYTES_PER_MB


def parse_keywords(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated keyword list, trimming entries and dropping empties.

    Order and duplicates are kept as given.
    """

    return tuple(part.strip() for part in raw.split(",") if part.strip())


def build_settings(
    input_path: str | Path,
    output_path: str | Path,
    *,
    keywords: str = DEFAULT_KEYWORDS,
    case_sensitive: bool = False,
    buffer_size_mb: int = DEFAULT_BUFFER_SIZE_MB,
) -> SearchSettings:
    """Build settings from CLI-shaped values (keyword string, buffer in MB)."""

    return SearchSettings(
        input_path=Path(input_path),
        output_path=Path(output_path),
        keywords=parse_keywords(keywords),
        case_sensitive=case_sensitive,
        buffer_size_bytes=buffer_size_mb * BYTES_PER_MB,
    )


def validate_settings(settings: SearchSettings) -> None:
    """Fail fast on settings that would break the run before it opens anything."""

    if not settings.input_path.is_file():
        raise InputNotFound(
            f"Input file not found: {settings.input_path}",
            context={"input_path": str(settings.input_path)},
        )

    # An output path without a directory component lands in the working directory.
    output_dir = settings.output_path.parent
    if str(output_dir) not in ("", ".") and not output_dir.is_dir():
        raise ConfigurationError(
            f"Output directory not found: {output_dir}",
            context={"output_dir": str(output_dir)},
        )

    if settings.buffer_size_bytes < MIN_BUFFER_SIZE_MB * BYTES_PER_MB:
        raise ConfigurationError(
            f"Buffer size must be at least {MIN_BUFFER_SIZE_MB} MB",
            context={"buffer_size_bytes": settings.buffer_size_bytes},
        )
