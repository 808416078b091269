"""Argument checks for the ``frame`` and ``merge`` subcommands.

Everything here is lexical: paths are never stat'ed or opened, and the
extension is whatever follows the last ``.`` of the final path element.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ValidationError

VIDEO_FORMATS = frozenset({".mp4"})
IMAGE_FORMATS = frozenset({".jpg"})
MERGE_OUTPUT_FORMATS = frozenset({".mp4", ".mkv"})


@dataclass(frozen=True)
class FrameRequest:
    source: str
    destination: str


@dataclass(frozen=True)
class MergeRequest:
    source_v1: str
    source_v2: str
    destination: str


def extension(path: str) -> str:
    """Return the extension of *path* including the dot, or ``""``.

    >>> extension("clips/a.b.mp4")
    '.mp4'
    >>> extension("clips.d/noext")
    ''
    """
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _check(field: str, value: str, allowed: frozenset[str], kind: str) -> str:
    if not value:
        raise ValidationError(field, f"{field} cannot be empty")
    ext = extension(value)
    if ext not in allowed:
        raise ValidationError(
            field,
            f"{field}: supported {kind} formats: {', '.join(sorted(allowed))}, "
            f"got: {ext or '(none)'}",
        )
    return value


def parse_frame_request(source: str, destination: str) -> FrameRequest:
    return FrameRequest(
        source=_check("source", source, VIDEO_FORMATS, "video"),
        destination=_check("destination", destination, IMAGE_FORMATS, "image"),
    )


def parse_merge_request(v1: str, v2: str, destination: str) -> MergeRequest:
    return MergeRequest(
        source_v1=_check("v1", v1, VIDEO_FORMATS, "video"),
        source_v2=_check("v2", v2, VIDEO_FORMATS, "video"),
        destination=_check("destination", destination, MERGE_OUTPUT_FORMATS, "video"),
    )


__all__ = [
    "FrameRequest",
    "MergeRequest",
    "VIDEO_FORMATS",
    "IMAGE_FORMATS",
    "MERGE_OUTPUT_FORMATS",
    "extension",
    "parse_frame_request",
    "parse_merge_request",
]
