"""SacredStar command line interface package."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from .app import app


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point; returns the process exit status."""

    command = typer.main.get_command(app)
    try:
        command.main(args=list(argv) if argv is not None else None, prog_name="sacredstar")
    except SystemExit as exc:
        code = exc.code
        return code if isinstance(code, int) else (0 if code is None else 1)
    return 0


__all__ = ["app", "main"]
