"""Runtime settings read from the environment (and ``.env``)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

FFMPEG_ENV = "CARTITHYIA_FFMPEG"
PIPE_DIR_ENV = "CARTITHYIA_PIPE_DIR"
LOG_LEVEL_ENV = "CARTITHYIA_LOG_LEVEL"


def _level_name(value: str) -> str:
    level = value.upper()
    # unknown names come back as "Level <name>" rather than an int
    return level if isinstance(logging.getLevelName(level), int) else "WARNING"


@dataclass(frozen=True)
class Settings:
    ffmpeg: str = "ffmpeg"
    pipe_dir: Path = Path(".")
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``CARTITHYIA_*`` variables, falling back to defaults."""
        return cls(
            ffmpeg=os.getenv(FFMPEG_ENV) or cls.ffmpeg,
            pipe_dir=Path(os.getenv(PIPE_DIR_ENV) or "."),
            log_level=_level_name(os.getenv(LOG_LEVEL_ENV) or cls.log_level),
        )

    def with_ffmpeg(self, ffmpeg: str | None) -> "Settings":
        return replace(self, ffmpeg=ffmpeg) if ffmpeg else self


__all__ = ["Settings", "FFMPEG_ENV", "PIPE_DIR_ENV", "LOG_LEVEL_ENV"]
