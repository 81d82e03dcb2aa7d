"""Shared helpers for CLI commands."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

import typer

from relbump.core.errors import ErrorCode
from relbump.core.result import Err, Result
from relbump.output.console import ConsoleProtocol, Style

T = TypeVar("T")
E = TypeVar("E")

DEBUG_ENV = "DEBUG"

# Options shared by every command.
WORKDIR_OPTION = typer.Option(
    None,
    "--workdir",
    "-C",
    help="Directory holding the manifest and receiving the artifact (default: cwd)",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Release settings file (default: relbump.toml in the working directory)",
)
MANIFEST_OPTION = typer.Option(None, "--manifest", help="Manifest path, relative to workdir")
PACKAGE_OPTION = typer.Option(None, "--package", help="Package name used in the artifact name")


def exit_on_error(result: Result[T, E], console: ConsoleProtocol) -> None:
    """Exit with code 1 if result is Err, otherwise return.

    Expects error objects to have 'message' and optional 'detail' and 'hint'
    attributes. The detail (captured tool stderr) is printed verbatim.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        detail: str | None = getattr(error, "detail", None)
        hint: str | None = getattr(error, "hint", None)
        console.error(message)
        if detail:
            console.print(detail)
        if hint:
            console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.FAILURE))


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


@contextmanager
def report_unexpected_errors(console: ConsoleProtocol) -> Iterator[None]:
    """Turn any uncaught exception into ``Error: <message>`` and exit 1.

    The traceback is shown only when the DEBUG environment variable is set.
    """
    try:
        yield
    except (typer.Exit, typer.Abort):
        raise
    except Exception as e:
        console.print(f"Error: {e}", Style.ERROR)
        if debug_enabled():
            console.exception()
        raise typer.Exit(code=int(ErrorCode.FAILURE)) from e


def display_path(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)
