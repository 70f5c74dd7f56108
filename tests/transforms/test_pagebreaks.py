from __future__ import annotations

import pytest

from rga_postproc.config import ConfigurationError
from rga_postproc.streams import bytes_stream, read_to_end
from rga_postproc.transforms import page_label, postproc_encoding, postproc_pagebreaks


async def _paginate(line_prefix: str, text: bytes) -> bytes:
    normalized = await postproc_encoding("", bytes_stream(text))
    return await read_to_end(postproc_pagebreaks(line_prefix, normalized))


class _TrackedStream:
    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)
        self.pulls = 0
        self.closed = False

    def __aiter__(self) -> "_TrackedStream":
        return self

    async def __anext__(self) -> bytes:
        if self.closed or not self._chunks:
            raise StopAsyncIteration
        self.pulls += 1
        return self._chunks.pop(0)

    async def aclose(self) -> None:
        self.closed = True


async def _failing_stream():
    yield b"page one\n"
    raise OSError("extractor crashed")


def test_page_label_uses_one_based_numbers() -> None:
    assert page_label("", 0) == b"Page 1:"
    assert page_label("book.pdf: ", 4) == b"book.pdf: Page 5:"


@pytest.mark.asyncio
async def test_single_page_lines_are_labelled_page_one() -> None:
    output = await _paginate("", b"What is this\nThis is a test\nFoo")

    assert output == b"Page 1:What is this\nPage 1:This is a test\nPage 1:Foo"


@pytest.mark.asyncio
async def test_form_feeds_advance_the_page_number() -> None:
    text = b"What is this\nThis is a test\nFoo\x0c\nHelloooo\nHow are you?\x0c\nGreat!"

    output = await _paginate("", text)

    assert output == (
        b"Page 1:What is this\nPage 1:This is a test\nPage 1:Foo"
        b"\nPage 2:Helloooo\nPage 2:How are you?"
        b"\nPage 3:Great!"
    )
    assert b"\x0c" not in output


@pytest.mark.asyncio
async def test_line_prefix_precedes_page_label() -> None:
    output = await _paginate("doc.pdf: ", b"first\nline\x0c\nsecond")

    assert output == b"doc.pdf: Page 1:first\ndoc.pdf: Page 1:line\ndoc.pdf: Page 2:second"


@pytest.mark.asyncio
async def test_first_chunk_is_the_page_one_label() -> None:
    chunks = [chunk async for chunk in postproc_pagebreaks("x:", bytes_stream(b"a\nb"))]

    assert chunks[0] == b"x:Page 1:"


@pytest.mark.asyncio
async def test_sub_chunks_without_newline_are_dropped_and_do_not_count() -> None:
    output = await read_to_end(postproc_pagebreaks("", bytes_stream(b"cover\x0ctitle page\x0cline\nend")))

    assert output == b"Page 1:line\nPage 1:end"


@pytest.mark.asyncio
async def test_page_counter_advances_per_labelled_chunk() -> None:
    output = await read_to_end(postproc_pagebreaks("", bytes_stream(b"a\nbc\nd", chunk_size=3)))

    assert output == b"Page 1:a\nPage 1:bc\nPage 2:d"


@pytest.mark.asyncio
async def test_upstream_error_propagates() -> None:
    received: list[bytes] = []

    with pytest.raises(OSError, match="extractor crashed"):
        async for chunk in postproc_pagebreaks("", _failing_stream()):
            received.append(chunk)

    assert received == [b"Page 1:", b"page one\nPage 1:"]


def test_invalid_line_break_pattern_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        postproc_pagebreaks("", bytes_stream(b"a\n"), line_break=rb"\n*")


@pytest.mark.asyncio
async def test_closing_after_leading_label_closes_wrapped_stream() -> None:
    source = _TrackedStream([b"one\n", b"two\n"])
    output = postproc_pagebreaks("", source)

    assert await output.__anext__() == b"Page 1:"
    await output.aclose()

    assert source.closed is True
    assert source.pulls == 0


@pytest.mark.asyncio
async def test_closing_mid_stream_closes_wrapped_stream() -> None:
    source = _TrackedStream([b"one\n", b"two\n", b"three\n"])
    output = postproc_pagebreaks("", source)

    assert await output.__anext__() == b"Page 1:"
    assert await output.__anext__() == b"one\nPage 1:"
    await output.aclose()

    assert source.closed is True
    assert source.pulls == 1


@pytest.mark.asyncio
async def test_closing_unread_output_closes_wrapped_stream() -> None:
    source = _TrackedStream([b"one\n"])

    await postproc_pagebreaks("", source).aclose()

    assert source.closed is True
