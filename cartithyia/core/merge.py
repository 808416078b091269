"""Concatenate the video streams of two clips.

Both clips are read into memory and handed to ffmpeg through a pair of
named pipes. ffmpeg's stdout (a fragmented MP4) becomes the output file.
Audio is dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .capture import run_media
from .config import Settings
from .errors import FilesystemError, PipeWriterError
from .pipes import PipeFeeder, WriterOutcome
from .validation import MergeRequest

logger = logging.getLogger(__name__)

CONCAT_FILTER = "[0:v][1:v]concat=n=2:v=1:a=0[outv]"


def merge_args(pipe1: str, pipe2: str) -> list[str]:
    return [
        "-i", pipe1,
        "-i", pipe2,
        "-filter_complex", CONCAT_FILTER,
        "-map", "[outv]",
        "-f", "mp4",
        "-movflags", "frag_keyframe+empty_moov",
        "pipe:1",
    ]


def _read(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise FilesystemError(f"read {path}: {exc}") from exc


def _check_writers(outcomes: list[WriterOutcome]) -> None:
    failed = [o for o in outcomes if not o.ok]
    for outcome in failed:
        if isinstance(outcome.error, BrokenPipeError):
            # ffmpeg finished without draining the pipe; output is still usable
            logger.warning("ffmpeg closed %s early: %s", outcome.pipe.path, outcome.error)
    fatal = [o for o in failed if not isinstance(o.error, BrokenPipeError)]
    if fatal:
        raise PipeWriterError(
            "; ".join(f"writer for {o.pipe.path}: {o.error}" for o in fatal)
        )


def merge_videos(request: MergeRequest, settings: Settings | None = None) -> int:
    """Write ``request.source_v1`` followed by ``request.source_v2`` to the destination.

    Returns the number of bytes written.
    """
    settings = settings or Settings.from_env()
    v1raw = _read(request.source_v1)
    v2raw = _read(request.source_v2)

    with PipeFeeder([v1raw, v2raw], directory=settings.pipe_dir) as feeder:
        captured = run_media(merge_args(*feeder.paths), settings=settings)
        _check_writers(feeder.join())

    try:
        Path(request.destination).write_bytes(captured.stdout)
    except OSError as exc:
        raise FilesystemError(f"write {request.destination}: {exc}") from exc
    logger.info(
        "merged %s + %s -> %s (%d bytes)",
        request.source_v1, request.source_v2, request.destination, len(captured.stdout),
    )
    return len(captured.stdout)


__all__ = ["CONCAT_FILTER", "merge_args", "merge_videos"]
