"""Typer-based command line interface for cartithyia."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from typer.core import TyperGroup

from .core import frame, merge, validation
from .core.config import FFMPEG_ENV, Settings
from .core.errors import CartithyiaError


class FeatureGroup(TyperGroup):
    """Command group that lists the supported subcommands on an unknown one."""

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        name = args[0] if args else None
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            supported = ", ".join(self.list_commands(ctx))
            typer.echo(
                f"unknown subcommand {name!r}; supported subcommands: {supported}",
                err=True,
            )
            ctx.exit(1)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=FeatureGroup,
    help="Extract a frame from, or merge, MP4 clips with ffmpeg",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    ffmpeg: Optional[str] = typer.Option(
        None, envvar=FFMPEG_ENV, help="ffmpeg executable to run"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log ffmpeg invocations"),
):
    settings = Settings.from_env().with_ffmpeg(ffmpeg)
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


def _abort(exc: CartithyiaError) -> typer.Exit:
    typer.echo(f"❌  {exc}", err=True)
    return typer.Exit(code=2)


@app.command("frame")
def frame_cmd(
    ctx: typer.Context,
    source: str = typer.Option("", "-source", "--source", help="Source .mp4 clip"),
    destination: str = typer.Option(
        "", "-destination", "--destination", help="Destination .jpg image"
    ),
):
    """Extract the first frame of a clip as a JPEG."""
    try:
        request = validation.parse_frame_request(source, destination)
        size = frame.extract_frame(request, ctx.obj)
    except CartithyiaError as exc:
        raise _abort(exc) from exc
    typer.echo(f"✅  frame → {request.destination} · size {size} bytes")


@app.command("merge")
def merge_cmd(
    ctx: typer.Context,
    v1: str = typer.Option("", "-v1", "--v1", help="First .mp4 clip"),
    v2: str = typer.Option("", "-v2", "--v2", help="Second .mp4 clip"),
    destination: str = typer.Option(
        "", "-destination", "--destination", help="Destination .mp4 or .mkv"
    ),
):
    """Concatenate the video of two clips, first v1 then v2 (audio dropped)."""
    try:
        request = validation.parse_merge_request(v1, v2, destination)
        size = merge.merge_videos(request, ctx.obj)
    except CartithyiaError as exc:
        raise _abort(exc) from exc
    typer.echo(f"🏁  {request.destination} assembled · size {size} bytes")


if __name__ == "__main__":
    app()
