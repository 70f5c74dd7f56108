"""Pull-based async byte streams shared by every post-processing stage."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, BinaryIO, TypeAlias

DEFAULT_READ_CHUNK_BYTES = 8192

ByteStream: TypeAlias = AsyncIterator[bytes]


async def _close(stream: object) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


@asynccontextmanager
async def closing_stream(stream: AsyncIterable[bytes]) -> AsyncIterator[AsyncIterable[bytes]]:
    """Close *stream* on exit when it supports ``aclose``."""

    try:
        yield stream
    finally:
        await _close(stream)


class ReplayStream:
    """Yield already-buffered bytes, then continue pulling from *source*.

    Closing the replay closes the source as well, even if nothing was read.
    """

    def __init__(self, buffered: bytes, source: ByteStream) -> None:
        self._buffered = buffered
        self._source = source
        self._closed = False

    def __aiter__(self) -> "ReplayStream":
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        if self._buffered:
            chunk, self._buffered = self._buffered, b""
            return chunk
        return await self._source.__anext__()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._buffered = b""
        await _close(self._source)


class GuardedStream:
    """Output of a transform that also closes the transform's input.

    Closing an async generator that never started skips its ``finally``
    blocks, so the input is closed here as well.
    """

    def __init__(self, output: ByteStream, source: AsyncIterable[bytes]) -> None:
        self._output = output
        self._source = source

    def __aiter__(self) -> "GuardedStream":
        return self

    async def __anext__(self) -> bytes:
        return await self._output.__anext__()

    async def aclose(self) -> None:
        try:
            await _close(self._output)
        finally:
            await _close(self._source)


async def bytes_stream(data: bytes, chunk_size: int | None = None) -> ByteStream:
    """Yield *data* as one chunk, or in pieces of *chunk_size* bytes."""

    if chunk_size is None:
        yield data
        return
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    for start in range(0, len(data), chunk_size):
        yield data[start : start + chunk_size]


async def once(data: bytes) -> ByteStream:
    yield data


async def file_stream(source: Path | str | BinaryIO, chunk_size: int = DEFAULT_READ_CHUNK_BYTES) -> ByteStream:
    """Read a file in chunks without blocking the event loop.

    Paths are opened here and closed when the stream finishes or is closed.
    File objects are read as-is and left open for the caller.
    """

    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    owns_handle = isinstance(source, (str, Path))
    handle: BinaryIO = await asyncio.to_thread(open, source, "rb") if owns_handle else source
    try:
        while True:
            chunk = await asyncio.to_thread(handle.read, chunk_size)
            if not chunk:
                return
            yield chunk
    finally:
        if owns_handle:
            handle.close()


async def take_window(stream: ByteStream, size: int) -> tuple[bytes, ReplayStream]:
    """Buffer the first *size* bytes of *stream* without losing the rest.

    The returned stream replays any bytes read past the window before
    continuing with *stream*.
    """

    buffered = bytearray()
    while len(buffered) < size:
        try:
            chunk = await stream.__anext__()
        except StopAsyncIteration:
            break
        buffered += chunk

    window = bytes(buffered[:size])
    return window, ReplayStream(bytes(buffered[size:]), stream)


async def read_to_end(stream: AsyncIterable[bytes]) -> bytes:
    out = bytearray()
    async with closing_stream(stream):
        async for chunk in stream:
            out += chunk
    return bytes(out)
