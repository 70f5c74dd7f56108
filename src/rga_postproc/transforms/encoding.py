"""BOM normalization and binary detection for extractor output."""

from __future__ import annotations

import codecs
import logging

from rga_postproc.config import DEFAULT_BINARY_SNIFF_BYTES, ConfigurationError
from rga_postproc.streams import ByteStream, ReplayStream, closing_stream, once, take_window

logger = logging.getLogger(__name__)

BINARY_SENTINEL = b"[rga: binary data]"

# Longest BOM we sniff for.
_BOM_SNIFF_BYTES = len(codecs.BOM_UTF8)

_UTF16_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


async def _transcode(encoding: str, inp: ByteStream) -> ByteStream:
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    async with closing_stream(inp):
        async for chunk in inp:
            text = decoder.decode(chunk)
            if text:
                yield text.encode("utf-8")
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail.encode("utf-8")


async def strip_bom(inp: ByteStream) -> ByteStream:
    """Drop a leading UTF-8 BOM and transcode UTF-16 input to UTF-8.

    Input without a BOM passes through byte for byte.
    """

    head, rest = await take_window(inp, _BOM_SNIFF_BYTES)

    if head.startswith(codecs.BOM_UTF8):
        return ReplayStream(head[len(codecs.BOM_UTF8) :], rest)

    for bom, encoding in _UTF16_BOMS:
        if head.startswith(bom):
            logger.debug("Transcoding %s input to utf-8", encoding)
            return _transcode(encoding, ReplayStream(head[len(bom) :], rest))

    return ReplayStream(head, rest)


async def postproc_encoding(
    line_prefix: str,
    inp: ByteStream,
    *,
    window_size: int = DEFAULT_BINARY_SNIFF_BYTES,
) -> ByteStream:
    """Normalize a leading BOM and replace binary content with a sentinel.

    The first *window_size* bytes (after BOM handling) are buffered and
    checked for NUL bytes. Binary input collapses to ``BINARY_SENTINEL`` and
    is not read any further; text input is replayed unchanged, window first.
    """

    if window_size < 1:
        raise ConfigurationError("window_size must be >= 1")

    normalized = await strip_bom(inp)
    window, rest = await take_window(normalized, window_size)

    if b"\x00" in window:
        logger.debug("%sdetected binary data", line_prefix)
        await rest.aclose()
        return once(BINARY_SENTINEL)

    return ReplayStream(window, rest)
