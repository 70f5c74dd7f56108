"""Runtime configuration for the post-processing stage."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import re
from typing import Mapping

from rga_postproc.streams import DEFAULT_READ_CHUNK_BYTES

DEFAULT_LINE_BREAK_PATTERN = r"\n"
DEFAULT_BINARY_SNIFF_BYTES = 1 << 13
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class ConfigurationError(ValueError):
    """Raised when construction-time parameters are malformed."""


def compile_line_break(pattern: str | bytes | re.Pattern[bytes]) -> re.Pattern[bytes]:
    """Compile a byte regex that matches one line break.

    Patterns that fail to compile, or that can match the empty string, are
    rejected since a prefix would otherwise be injected between every byte.
    """

    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        raw = pattern.encode("utf-8") if isinstance(pattern, str) else pattern
        if not raw:
            raise ConfigurationError("Line break pattern cannot be empty")
        try:
            compiled = re.compile(raw)
        except re.error as exc:
            raise ConfigurationError(f"Invalid line break pattern {raw!r}: {exc}") from exc

    if not isinstance(compiled.pattern, bytes):
        raise ConfigurationError("Line break pattern must operate on bytes")
    if compiled.match(b"") is not None:
        raise ConfigurationError(f"Line break pattern {compiled.pattern!r} matches the empty string")
    return compiled


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw_value!r}") from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class PostprocSettings:
    """Validated settings shared by the post-processing adapters."""

    line_break_pattern: str = DEFAULT_LINE_BREAK_PATTERN
    binary_sniff_bytes: int = DEFAULT_BINARY_SNIFF_BYTES
    read_chunk_bytes: int = DEFAULT_READ_CHUNK_BYTES
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        compile_line_break(self.line_break_pattern)
        if self.binary_sniff_bytes < 1:
            raise ConfigurationError("binary_sniff_bytes must be >= 1")
        if self.read_chunk_bytes < 1:
            raise ConfigurationError("read_chunk_bytes must be >= 1")
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    @property
    def line_break(self) -> re.Pattern[bytes]:
        return compile_line_break(self.line_break_pattern)

    @property
    def logging_level(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PostprocSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        line_break_raw = source.get("RGA_LINE_BREAK_PATTERN", DEFAULT_LINE_BREAK_PATTERN)
        sniff_raw = source.get("RGA_BINARY_SNIFF_BYTES", str(DEFAULT_BINARY_SNIFF_BYTES)).strip()
        chunk_raw = source.get("RGA_READ_CHUNK_BYTES", str(DEFAULT_READ_CHUNK_BYTES)).strip()
        log_level_raw = source.get("RGA_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()

        if not line_break_raw:
            raise ConfigurationError("RGA_LINE_BREAK_PATTERN cannot be empty")
        if not sniff_raw:
            raise ConfigurationError("RGA_BINARY_SNIFF_BYTES cannot be empty")
        if not chunk_raw:
            raise ConfigurationError("RGA_READ_CHUNK_BYTES cannot be empty")
        if not log_level_raw:
            raise ConfigurationError("RGA_LOG_LEVEL cannot be empty")

        binary_sniff_bytes = _parse_positive_int(name="RGA_BINARY_SNIFF_BYTES", raw_value=sniff_raw)
        read_chunk_bytes = _parse_positive_int(name="RGA_READ_CHUNK_BYTES", raw_value=chunk_raw)

        return cls(
            line_break_pattern=line_break_raw,
            binary_sniff_bytes=binary_sniff_bytes,
            read_chunk_bytes=read_chunk_bytes,
            log_level=log_level_raw,
        )
