"""CLI command that runs one file through the post-processing stage."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys
from typing import BinaryIO

from dotenv import load_dotenv

from rga_postproc.adapters import AdaptInfo, PostprocAdapter, PostprocPageBreaks, PostprocPrefix
from rga_postproc.config import ConfigurationError, PostprocSettings
from rga_postproc.streams import ByteStream, closing_stream, file_stream

load_dotenv()

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Prefix extracted text lines with provenance and page labels")
    parser.add_argument("--path", required=True, help="Source file, or '-' for stdin")
    parser.add_argument("--line-prefix", default="", help="Literal added to the start of every line")
    parser.add_argument(
        "--pagebreaks",
        action="store_true",
        help="Treat form feeds as page delimiters and add 'Page N:' labels",
    )
    parser.add_argument("--output", default=None, help="Write to this file instead of stdout")
    return parser.parse_args(argv)


async def _write_all(stream: ByteStream, sink: BinaryIO) -> None:
    async with closing_stream(stream):
        async for chunk in stream:
            await asyncio.to_thread(sink.write, chunk)
    await asyncio.to_thread(sink.flush)


async def _run(args: argparse.Namespace, settings: PostprocSettings) -> None:
    source: Path | BinaryIO = sys.stdin.buffer if args.path == "-" else Path(args.path)
    adapter: PostprocAdapter = PostprocPageBreaks() if args.pagebreaks else PostprocPrefix()

    info = AdaptInfo(
        filepath_hint=Path(args.path),
        line_prefix=args.line_prefix,
        inp=file_stream(source, settings.read_chunk_bytes),
        is_real_file=args.path != "-",
        config=settings,
    )

    outputs = adapter.adapt(info)
    async with closing_stream(outputs):
        async for adapted in outputs:
            async with closing_stream(adapted.inp):
                if args.output is None:
                    await _write_all(adapted.inp, sys.stdout.buffer)
                    continue
                # Adapting already read the input window, so an unreadable source never creates the output.
                sink = await asyncio.to_thread(open, args.output, "wb")
                try:
                    await _write_all(adapted.inp, sink)
                finally:
                    sink.close()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = PostprocSettings.from_env()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
        LOGGER.error("Invalid configuration: %s", exc)
        return 2

    logging.basicConfig(level=settings.logging_level, format="%(asctime)s %(levelname)s %(message)s")

    try:
        asyncio.run(_run(args, settings))
    except OSError as exc:
        LOGGER.error("Post-processing failed for %s: %s", args.path, exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
