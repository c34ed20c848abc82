"""Error codes and exceptions raised by the search core."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    INPUT_NOT_FOUND = "INPUT_NOT_FOUND"
    DECODE_ERROR = "DECODE_ERROR"
    OUTPUT_WRITE_ERROR = "OUTPUT_WRITE_ERROR"
    IO_ERROR = "IO_ERROR"


class SearchError(RuntimeError):
    """Exception carrying a stable error code for scripts and logs."""

    default_code = ErrorCode.IO_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.context = context or {}

    @property
    def message(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        base = self.message
        return f"[{self.code.value}] {base}" if base else self.code.value


class ConfigurationError(SearchError):
    """Settings failed validation before the scan started."""

    default_code = ErrorCode.CONFIG_ERROR


class InputNotFound(ConfigurationError):
    default_code = ErrorCode.INPUT_NOT_FOUND


class DecodeError(SearchError):
    """Input is not valid UTF-8 or its gzip container is corrupt or truncated."""

    default_code = ErrorCode.DECODE_ERROR


class OutputWriteError(SearchError):
    default_code = ErrorCode.OUTPUT_WRITE_ERROR
