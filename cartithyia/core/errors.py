"""Exception types raised by the frame and merge operations."""

from __future__ import annotations


class CartithyiaError(Exception):
    """Base class for every failure surfaced by the CLI."""


class ValidationError(CartithyiaError, ValueError):
    """A CLI argument is empty or has an unsupported extension."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class FilesystemError(CartithyiaError, OSError):
    """stat/open/read/write on a real file failed."""


class NotAFileError(FilesystemError):
    pass


class PipeCreationError(CartithyiaError):
    """A named pipe could not be created."""


class PipeWriterError(CartithyiaError):
    """A background pipe writer failed to deliver its buffer."""


class SubprocessError(CartithyiaError):
    """ffmpeg could not be launched or exited non-zero.

    The message always carries the captured stderr so nothing ffmpeg said
    is lost.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        text = message if not stderr else f"{message}\n{stderr.rstrip()}"
        super().__init__(text)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "CartithyiaError",
    "ValidationError",
    "FilesystemError",
    "NotAFileError",
    "PipeCreationError",
    "PipeWriterError",
    "SubprocessError",
]
