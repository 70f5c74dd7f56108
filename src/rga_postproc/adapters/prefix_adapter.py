"""Adapter that prefixes every output line with the file's provenance."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import AsyncIterator

from rga_postproc.adapters.models import AdapterMeta, AdaptInfo, FileMatcher
from rga_postproc.transforms import add_newline, postproc_encoding, postproc_prefix

logger = logging.getLogger(__name__)

_METADATA = AdapterMeta(
    name="postprocprefix",
    version=1,
    description="Adds the line prefix to each line (e.g. the filename within a zip)",
    recurses=True,
)


class PostprocPrefix:
    """Normalize encoding, then add the line prefix to every line."""

    @property
    def metadata(self) -> AdapterMeta:
        return _METADATA

    async def adapt(self, info: AdaptInfo, detection_reason: FileMatcher | None = None) -> AsyncIterator[AdaptInfo]:
        settings = info.config
        line_break = settings.line_break
        logger.debug("Prefixing lines of %s", info.filepath_hint)

        normalized = await postproc_encoding(info.line_prefix, info.inp, window_size=settings.binary_sniff_bytes)
        prefixed = postproc_prefix(info.line_prefix, normalized, line_break=line_break)

        # keep filename etc, replace only the stream
        yield replace(info, inp=add_newline(prefixed), postprocess=False)
