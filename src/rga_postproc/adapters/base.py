"""Shared adapter contract for post-processing stages."""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from rga_postproc.adapters.models import AdapterMeta, AdaptInfo, FileMatcher


@runtime_checkable
class PostprocAdapter(Protocol):
    """Protocol that every post-processing adapter must implement."""

    @property
    def metadata(self) -> AdapterMeta:
        """Static adapter description."""

    def adapt(self, info: AdaptInfo, detection_reason: FileMatcher | None = None) -> AsyncIterator[AdaptInfo]:
        """Yield the transformed envelope(s) for *info*."""
