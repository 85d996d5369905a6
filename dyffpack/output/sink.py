"""Where rendered output goes: standard output or an in-place file rewrite."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
import tempfile
from typing import Callable, TextIO

import typer

from dyffpack.core.exceptions import RenderError

logger = logging.getLogger(__name__)

# Render callbacks receive the stream and whether styling is allowed.
Render = Callable[[TextIO, bool], None]


def render_to_string(render: Render, *, color: bool = False) -> str:
    buffer = io.StringIO()
    render(buffer, color)
    return buffer.getvalue()


def write_to_stdout(render: Render, *, color: bool) -> None:
    """Render fully into memory, then emit the result in one write."""
    text = render_to_string(render, color=color)
    try:
        typer.echo(text, nl=False, color=color)
    except OSError as error:
        raise RenderError(f"failed to write to standard output: {error}") from error


def write_in_place(path: str | Path, render: Render) -> None:
    """Replace the contents of `path` with plain rendered output.

    The target is only touched after rendering succeeded; the new content is
    written to a temporary file in the same directory and moved over the target.
    """
    target = Path(path)
    try:
        text = render_to_string(render, color=False)
    except RenderError as error:
        raise RenderError(f"{target} was left unchanged: {error}") from error

    temp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_name = handle.name
            handle.write(text)
        if target.exists():
            os.chmod(temp_name, target.stat().st_mode & 0o7777)
        os.replace(temp_name, target)
    except OSError as error:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise RenderError(f"failed to overwrite {target}: {error}") from error
    logger.debug("wrote %d characters to %s", len(text), target)
