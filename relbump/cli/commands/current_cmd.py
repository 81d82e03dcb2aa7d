from __future__ import annotations

from pathlib import Path

import typer

from relbump.cli.commands._helpers import (
    CONFIG_OPTION,
    MANIFEST_OPTION,
    WORKDIR_OPTION,
    exit_on_error,
    report_unexpected_errors,
)
from relbump.cli.context import build_context
from relbump.core.result import Err
from relbump.output.console import RichConsole
from relbump.services.release.workflow import extract_current_version


def current(
    workdir: Path | None = WORKDIR_OPTION,
    config: Path | None = CONFIG_OPTION,
    manifest: str | None = MANIFEST_OPTION,
) -> None:
    """Print the version declared in the manifest."""
    console = RichConsole()
    with report_unexpected_errors(console):
        ctx = build_context(workdir=workdir, config=config, manifest=manifest, console=console)
        result = extract_current_version(settings=ctx.settings, workdir=ctx.workdir)
        if isinstance(result, Err):
            exit_on_error(result, ctx.console)
            return
        typer.echo(result.value.current_version)
