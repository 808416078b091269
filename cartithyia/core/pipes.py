"""Feed in-memory buffers to a consumer process through named pipes.

Each buffer gets its own FIFO and its own writer thread. A writer does not
block in ``open()``. It polls a non-blocking write-only open until a
reader has the FIFO open, and only then switches to blocking writes. If
the feeder is joined before any reader showed up, the writer gives up
with an error instead of hanging forever.
"""

from __future__ import annotations

import errno
import logging
import os
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .errors import PipeCreationError, PipeWriterError

logger = logging.getLogger(__name__)

PIPE_MODE = 0o600
POLL_INTERVAL_SEC = 0.01


@dataclass(frozen=True)
class EphemeralPipe:
    path: Path

    @classmethod
    def create(cls, directory: Path) -> "EphemeralPipe":
        """Create a FIFO with a random name inside *directory*."""
        if not hasattr(os, "mkfifo"):
            raise PipeCreationError("named pipes are not supported on this platform")
        path = directory / uuid.uuid4().hex
        try:
            os.mkfifo(path, PIPE_MODE)
        except OSError as exc:
            raise PipeCreationError(f"could not create pipe {path}: {exc}") from exc
        return cls(path)

    def remove(self) -> None:
        try:
            os.unlink(self.path)
        except OSError as exc:
            logger.warning("remove pipe %s: %s", self.path, exc)


@dataclass
class WriterOutcome:
    pipe: EphemeralPipe
    bytes_written: int = 0
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PipeWriter:
    """Write one buffer into one FIFO once a reader attaches."""

    def __init__(
        self,
        pipe: EphemeralPipe,
        data: bytes,
        stop: threading.Event,
        poll_interval: float = POLL_INTERVAL_SEC,
    ):
        self.pipe = pipe
        self.data = data
        self.attached = threading.Event()
        self._stop = stop
        self._poll_interval = poll_interval

    def _open(self) -> int:
        while True:
            try:
                return os.open(self.pipe.path, os.O_WRONLY | os.O_NONBLOCK)
            except OSError as exc:
                # ENXIO: nobody has the read end open yet
                if exc.errno != errno.ENXIO:
                    raise
            if self._stop.wait(self._poll_interval):
                raise PipeWriterError(f"no reader attached to {self.pipe.path}")

    def __call__(self) -> int:
        fd = self._open()
        self.attached.set()
        os.set_blocking(fd, True)
        with os.fdopen(fd, "wb") as fh:
            fh.write(self.data)
        return len(self.data)


class PipeFeeder:
    """Context manager owning the FIFOs and writers of one consumer run.

    Usage::

        with PipeFeeder([first, second]) as feeder:
            run_consumer(*feeder.paths)
            outcomes = feeder.join()

    The FIFOs are removed on exit whatever happened inside the block.
    """

    def __init__(
        self,
        buffers: Sequence[bytes],
        directory: str | Path | None = None,
        poll_interval: float = POLL_INTERVAL_SEC,
    ):
        self.buffers = list(buffers)
        self.directory = Path(directory) if directory is not None else Path(".")
        self.poll_interval = poll_interval
        self.pipes: list[EphemeralPipe] = []
        self.writers: list[PipeWriter] = []
        self._stop = threading.Event()
        self._executor: ThreadPoolExecutor | None = None
        self._futures: list[Future] = []
        self._outcomes: list[WriterOutcome] | None = None

    @property
    def paths(self) -> list[str]:
        return [str(p.path) for p in self.pipes]

    def __enter__(self) -> "PipeFeeder":
        try:
            for _ in self.buffers:
                self.pipes.append(EphemeralPipe.create(self.directory))
        except PipeCreationError:
            self._remove_pipes()
            raise
        logger.debug("created pipes %s", self.paths)

        self._executor = ThreadPoolExecutor(
            max_workers=max(len(self.pipes), 1), thread_name_prefix="pipe-writer"
        )
        for pipe, data in zip(self.pipes, self.buffers):
            writer = PipeWriter(pipe, data, self._stop, self.poll_interval)
            self.writers.append(writer)
            self._futures.append(self._executor.submit(writer))
        return self

    def join(self) -> list[WriterOutcome]:
        """Release writers still waiting for a reader and collect every outcome."""
        if self._outcomes is not None:
            return self._outcomes
        self._stop.set()
        outcomes = []
        for writer, future in zip(self.writers, self._futures):
            outcome = WriterOutcome(writer.pipe)
            try:
                outcome.bytes_written = future.result()
            except Exception as exc:
                outcome.error = exc
            outcomes.append(outcome)
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        self._outcomes = outcomes
        return outcomes

    def _remove_pipes(self) -> None:
        for pipe in self.pipes:
            pipe.remove()

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            outcomes = self.join()
            if exc is not None:
                for outcome in outcomes:
                    if not outcome.ok:
                        logger.warning("writer for %s: %s", outcome.pipe.path, outcome.error)
        finally:
            self._remove_pipes()


__all__ = [
    "EphemeralPipe",
    "PipeFeeder",
    "PipeWriter",
    "WriterOutcome",
]
