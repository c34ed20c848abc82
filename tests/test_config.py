from __future__ import annotations

from pathlib import Path

import pytest

from bigtextsearcher.core.config import (
    BYTES_PER_MB,
    DEFAULT_KEYWORDS,
    SearchSettings,
    build_settings,
    parse_keywords,
    validate_settings,
)
from bigtextsearcher.core.errors import ConfigurationError, ErrorCode, InputNotFound


def test_parse_keywords_trims_and_drops_empty_entries() -> None:
    assert parse_keywords(" chrome, ,edge ,chrome,") == ("chrome", "edge", "chrome")
    assert parse_keywords("") == ()
    assert parse_keywords(" , ,") == ()


def test_build_settings_defaults() -> None:
    settings = build_settings("in.log", "out.txt")
    assert settings.keywords == parse_keywords(DEFAULT_KEYWORDS)
    assert settings.case_sensitive is False
    assert settings.buffer_size_bytes == 4 * BYTES_PER_MB
    assert settings.buffer_size_mb == 4
    assert settings.input_path == Path("in.log")


def test_build_settings_converts_megabytes() -> None:
    settings = build_settings("in.log", "out.txt", keywords="a,b", case_sensitive=True, buffer_size_mb=16)
    assert settings.buffer_size_bytes == 16 * 1_048_576
    assert settings.keywords == ("a", "b")
    assert settings.case_sensitive is True


def test_validate_accepts_existing_paths(tmp_path: Path) -> None:
    source = tmp_path / "in.log"
    source.write_text("x\n", encoding="utf-8")
    validate_settings(build_settings(source, tmp_path / "out.txt"))


def test_validate_output_without_directory_uses_cwd(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    Path("in.log").write_text("x\n", encoding="utf-8")
    validate_settings(build_settings("in.log", "out.txt"))


def test_validate_missing_input(tmp_path: Path) -> None:
    settings = build_settings(tmp_path / "missing.log", tmp_path / "out.txt")
    with pytest.raises(InputNotFound) as excinfo:
        validate_settings(settings)
    assert excinfo.value.code == ErrorCode.INPUT_NOT_FOUND
    assert "Input file not found" in excinfo.value.message


def test_validate_input_directory_is_not_a_file(tmp_path: Path) -> None:
    with pytest.raises(InputNotFound):
        validate_settings(build_settings(tmp_path, tmp_path / "out.txt"))


def test_validate_missing_output_directory(tmp_path: Path) -> None:
    source = tmp_path / "in.log"
    source.write_text("x\n", encoding="utf-8")
    settings = build_settings(source, tmp_path / "nope" / "out.txt")
    with pytest.raises(ConfigurationError) as excinfo:
        validate_settings(settings)
    assert not isinstance(excinfo.value, InputNotFound)
    assert "Output directory not found" in excinfo.value.message


def test_validate_buffer_size_minimum(tmp_path: Path) -> None:
    source = tmp_path / "in.log"
    source.write_text("x\n", encoding="utf-8")
    settings = SearchSettings(
        input_path=source,
        output_path=tmp_path / "out.txt",
        keywords=("x",),
        buffer_size_bytes=BYTES_PER_MB - 1,
    )
    with pytest.raises(ConfigurationError) as excinfo:
        validate_settings(settings)
    assert excinfo.value.code == ErrorCode.CONFIG_ERROR
    assert str(excinfo.value).startswith("[CONFIG_ERROR] Buffer size must be at least 1 MB")
