"""Core frame/merge operations package."""

from . import (
    errors,
    config,
    validation,
    capture,
    pipes,
    frame,
    merge,
)

__all__ = [
    "errors",
    "config",
    "validation",
    "capture",
    "pipes",
    "frame",
    "merge",
]
