"""Run ffmpeg and collect what it wrote to stdout and stderr."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import IO, Sequence

from .config import Settings
from .errors import SubprocessError

logger = logging.getLogger(__name__)


@dataclass
class CapturedOutput:
    """Buffered result of one finished ffmpeg run."""

    args: list[str]
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def get_ffmpeg_path(settings: Settings | None = None) -> str:
    """Resolve the configured ffmpeg executable on ``PATH``."""
    settings = settings or Settings.from_env()
    ffmpeg = shutil.which(settings.ffmpeg)
    if ffmpeg is None:
        raise SubprocessError(
            f"{settings.ffmpeg} not found in PATH. Please install FFmpeg: "
            "https://ffmpeg.org/download.html"
        )
    return ffmpeg


def run_media(
    args: Sequence[str],
    stdin: IO[bytes] | None = None,
    settings: Settings | None = None,
) -> CapturedOutput:
    """Run ffmpeg with *args* and return its captured output.

    Raises:
        SubprocessError: ffmpeg could not be started or exited non-zero. The
            full stderr is part of the error message.
    """
    cmd = [get_ffmpeg_path(settings), *args]
    logger.debug("running %s", shlex.join(cmd))

    try:
        result = subprocess.run(cmd, stdin=stdin, capture_output=True)
    except OSError as exc:
        raise SubprocessError(f"failed to launch {cmd[0]}: {exc}") from exc

    captured = CapturedOutput(
        args=cmd,
        returncode=result.returncode,
        stdout=result.stdout or b"",
        stderr=result.stderr or b"",
    )
    if captured.returncode != 0:
        raise SubprocessError(
            f"{cmd[0]} exited with status {captured.returncode}",
            returncode=captured.returncode,
            stderr=captured.stderr_text,
        )
    logger.debug("ffmpeg wrote %d byte(s) to stdout", len(captured.stdout))
    return captured


__all__ = ["CapturedOutput", "get_ffmpeg_path", "run_media"]
