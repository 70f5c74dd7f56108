"""Page labelling for form-feed delimited text such as ``pdftotext`` output."""

from __future__ import annotations

import re

from rga_postproc.config import compile_line_break
from rga_postproc.streams import ByteStream, GuardedStream, closing_stream
from rga_postproc.transforms.line_prefix import insert_after_line_breaks

FORM_FEED = b"\x0c"


def page_label(line_prefix: str, page_count: int) -> bytes:
    """Label for the page following *page_count* completed pages."""

    return f"{line_prefix}Page {page_count + 1}:".encode("utf-8")


async def _pagebreak_stream(line_prefix: str, line_break: re.Pattern[bytes], inp: ByteStream) -> ByteStream:
    page_count = 0
    label = page_label(line_prefix, page_count)

    async with closing_stream(inp):
        yield label
        async for chunk in inp:
            for sub_chunk in chunk.split(FORM_FEED):
                # Sub-chunks without a line break are dropped, not passed through.
                if not line_break.search(sub_chunk):
                    continue
                yield insert_after_line_breaks(line_break, sub_chunk, label)
                page_count += 1
                label = page_label(line_prefix, page_count)


def postproc_pagebreaks(
    line_prefix: str,
    inp: ByteStream,
    *,
    line_break: str | bytes | re.Pattern[bytes] = b"\n",
) -> ByteStream:
    """Prefix each line with ``Page N:`` where N starts at one.

    Every form feed in a chunk starts a new sub-chunk; each sub-chunk that
    holds at least one line break is labelled with the current page and then
    advances the page counter.
    """

    return GuardedStream(_pagebreak_stream(line_prefix, compile_line_break(line_break), inp), inp)
