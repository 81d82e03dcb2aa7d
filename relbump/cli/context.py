from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relbump.core.config import (
    CONFIG_FILENAME,
    ReleaseSettings,
    load_config,
    load_config_or_default,
)
from relbump.core.errors import ErrorCode
from relbump.core.result import Err
from relbump.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    workdir: Path
    settings: ReleaseSettings
    console: ConsoleProtocol


def build_context(
    *,
    workdir: Path | None = None,
    config: Path | None = None,
    manifest: str | None = None,
    package: str | None = None,
    console: ConsoleProtocol | None = None,
) -> CLIContext:
    root = (workdir or Path.cwd()).expanduser().resolve()
    if not root.is_dir():
        typer.echo(f"error: working directory not found: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    if config is not None:
        settings_result = load_config(config.expanduser())
    else:
        settings_result = load_config_or_default(root / CONFIG_FILENAME)

    if isinstance(settings_result, Err):
        typer.echo(f"error: {settings_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        workdir=root,
        settings=settings_result.value.with_overrides(manifest=manifest, package=package),
        console=console or RichConsole(),
    )
