"""Adapter that labels lines of form-feed delimited text with page numbers."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import AsyncIterator

from rga_postproc.adapters.models import AdapterMeta, AdaptInfo, FileMatcher
from rga_postproc.transforms import add_newline, postproc_encoding, postproc_pagebreaks

logger = logging.getLogger(__name__)

PAGEBREAKS_EXTENSION = "asciipagebreaks"

_METADATA = AdapterMeta(
    name="postprocpagebreaks",
    version=1,
    description="Adds the line prefix and the page number to each line of text delimited by form feeds",
    recurses=True,
    fast_matchers=(FileMatcher.extension(PAGEBREAKS_EXTENSION),),
)


class PostprocPageBreaks:
    """Normalize encoding, then prefix every line with ``Page N:``."""

    @property
    def metadata(self) -> AdapterMeta:
        return _METADATA

    async def adapt(self, info: AdaptInfo, detection_reason: FileMatcher | None = None) -> AsyncIterator[AdaptInfo]:
        settings = info.config
        line_break = settings.line_break
        logger.debug("Labelling pages of %s", info.filepath_hint)

        normalized = await postproc_encoding(info.line_prefix, info.inp, window_size=settings.binary_sniff_bytes)
        labelled = postproc_pagebreaks(info.line_prefix, normalized, line_break=line_break)

        yield replace(info, inp=add_newline(labelled), postprocess=False)
