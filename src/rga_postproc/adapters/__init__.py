"""Post-processing adapter implementations and contracts."""

from .base import PostprocAdapter
from .models import AdapterMeta, AdaptInfo, FileMatcher
from .pagebreaks_adapter import PAGEBREAKS_EXTENSION, PostprocPageBreaks
from .prefix_adapter import PostprocPrefix


def build_default_postprocessors() -> dict[str, PostprocAdapter]:
    """Return the static post-processing adapter table keyed by adapter name."""
    adapters: list[PostprocAdapter] = [PostprocPrefix(), PostprocPageBreaks()]
    return {adapter.metadata.name: adapter for adapter in adapters}


__all__ = [
    "AdaptInfo",
    "AdapterMeta",
    "FileMatcher",
    "PAGEBREAKS_EXTENSION",
    "PostprocAdapter",
    "PostprocPageBreaks",
    "PostprocPrefix",
    "build_default_postprocessors",
]
