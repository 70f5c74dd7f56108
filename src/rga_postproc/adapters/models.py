"""Envelope and metadata structures exchanged with the adapter framework."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rga_postproc.config import PostprocSettings
from rga_postproc.streams import ByteStream


@dataclass(frozen=True, slots=True)
class FileMatcher:
    """Reason an adapter was chosen: a file extension or a mime type."""

    kind: str
    value: str

    @classmethod
    def extension(cls, value: str) -> "FileMatcher":
        return cls(kind="extension", value=value)

    @classmethod
    def mime(cls, value: str) -> "FileMatcher":
        return cls(kind="mime", value=value)


@dataclass(frozen=True, slots=True)
class AdapterMeta:
    """Static description of an adapter."""

    name: str
    version: int
    description: str
    recurses: bool = False
    fast_matchers: tuple[FileMatcher, ...] = ()
    slow_matchers: tuple[FileMatcher, ...] | None = None
    keep_fast_matchers_if_accurate: bool = False
    disabled_by_default: bool = False


@dataclass(slots=True)
class AdaptInfo:
    """One input handed to an adapter, with its provenance."""

    filepath_hint: Path
    line_prefix: str
    inp: ByteStream
    is_real_file: bool = False
    archive_recursion_depth: int = 0
    postprocess: bool = True
    config: PostprocSettings = field(default_factory=PostprocSettings)
