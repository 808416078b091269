"""Grab the first frame of a video as a JPEG."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from .capture import run_media
from .config import Settings
from .errors import FilesystemError, NotAFileError
from .validation import FrameRequest

logger = logging.getLogger(__name__)

# ffmpeg reads the clip from stdin and writes one MJPEG image to stdout
FRAME_ARGS = [
    "-i", "pipe:0",
    "-vframes", "1",
    "-f", "image2",
    "-vcodec", "mjpeg",
    "pipe:1",
]


def extract_frame(request: FrameRequest, settings: Settings | None = None) -> int:
    """Write the first decodable frame of ``request.source`` to ``request.destination``.

    Returns the number of bytes written.
    """
    source = Path(request.source)
    try:
        info = source.stat()
    except OSError as exc:
        raise FilesystemError(f"source {source}: {exc}") from exc
    if stat.S_ISDIR(info.st_mode):
        raise NotAFileError("source cannot be a directory")

    try:
        fh = open(source, "rb")
    except OSError as exc:
        raise FilesystemError(f"open {source}: {exc}") from exc
    with fh:
        captured = run_media(FRAME_ARGS, stdin=fh, settings=settings)

    try:
        Path(request.destination).write_bytes(captured.stdout)
    except OSError as exc:
        raise FilesystemError(f"write {request.destination}: {exc}") from exc
    logger.info("frame %s -> %s (%d bytes)", source, request.destination, len(captured.stdout))
    return len(captured.stdout)


__all__ = ["FRAME_ARGS", "extract_frame"]
