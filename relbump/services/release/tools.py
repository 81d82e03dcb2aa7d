"""Invocation of the external build and publish tools."""

from __future__ import annotations

from pathlib import Path

from relbump.core.result import Err, Ok, Result
from relbump.output.console import ConsoleProtocol, Style
from relbump.platform.process import ProcessError, format_command
from relbump.platform.process import run as run_process
from relbump.services.release.errors import ReleaseError, ReleaseErrorKind


def build_command(base: tuple[str, ...], manifest: str) -> list[str]:
    return [*base, manifest]


def publish_command(base: tuple[str, ...], artifact: str) -> list[str]:
    return [*base, artifact]


def _tool_error(error: ProcessError, *, kind: ReleaseErrorKind, message: str) -> ReleaseError:
    detail = error.stderr.strip() or error.stdout.strip() or None
    hint: str | None = None
    if error.returncode == -1:
        hint = f"Is '{error.command[0]}' installed and on PATH?"
    return ReleaseError(kind=kind, message=f"{message} ({error})", hint=hint, detail=detail)


def _run_tool(
    cmd: list[str],
    *,
    workdir: Path,
    console: ConsoleProtocol,
    kind: ReleaseErrorKind,
    message: str,
) -> Result[str, ReleaseError]:
    console.print(f"Running: {format_command(cmd)}", Style.DIM)
    result = run_process(cmd, cwd=workdir)
    if isinstance(result, Err):
        return Err(_tool_error(result.error, kind=kind, message=message))
    return Ok(result.value)


def run_build(
    *,
    base: tuple[str, ...],
    manifest: str,
    workdir: Path,
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    return _run_tool(
        build_command(base, manifest),
        workdir=workdir,
        console=console,
        kind="build_failed",
        message="Failed to build artifact",
    )


def run_publish(
    *,
    base: tuple[str, ...],
    artifact: str,
    workdir: Path,
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    return _run_tool(
        publish_command(base, artifact),
        workdir=workdir,
        console=console,
        kind="publish_failed",
        message="Failed to publish artifact",
    )
