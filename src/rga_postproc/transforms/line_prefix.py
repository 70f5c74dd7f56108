"""Provenance prefix injection after every line break."""

from __future__ import annotations

import re

from rga_postproc.config import compile_line_break
from rga_postproc.streams import ByteStream, GuardedStream, closing_stream


def insert_after_line_breaks(line_break: re.Pattern[bytes], chunk: bytes, literal: bytes) -> bytes:
    """Follow every line break in *chunk* with *literal*, keeping the break."""

    def _with_literal(match: re.Match[bytes]) -> bytes:
        return match.group(0) + literal

    return line_break.sub(_with_literal, chunk)


async def _prefix_stream(literal: bytes, line_break: re.Pattern[bytes], inp: ByteStream) -> ByteStream:
    async with closing_stream(inp):
        yield literal
        async for chunk in inp:
            if line_break.search(chunk):
                yield insert_after_line_breaks(line_break, chunk, literal)
            else:
                yield chunk


def postproc_prefix(
    line_prefix: str,
    inp: ByteStream,
    *,
    line_break: str | bytes | re.Pattern[bytes] = b"\n",
) -> ByteStream:
    """Add *line_prefix* at the start of the stream and after each line break.

    Chunks are handled independently: a line break split across two chunks
    is not reassembled. The line break pattern is validated here, before any
    input is read.
    """

    output = _prefix_stream(line_prefix.encode("utf-8"), compile_line_break(line_break), inp)
    return GuardedStream(output, inp)
