"""Cartithyia package."""

from .core import (
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
