"""Trailing newline guarantee for line-oriented consumers."""

from __future__ import annotations

from rga_postproc.streams import ByteStream, GuardedStream, closing_stream


async def _trailer_stream(inp: ByteStream) -> ByteStream:
    async with closing_stream(inp):
        async for chunk in inp:
            yield chunk
    yield b"\n"


def add_newline(inp: ByteStream) -> ByteStream:
    return GuardedStream(_trailer_stream(inp), inp)
