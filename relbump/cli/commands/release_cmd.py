"""Release command - bump, build, publish and clean up."""

from __future__ import annotations

from pathlib import Path

import typer

from relbump.cli.commands._helpers import (
    CONFIG_OPTION,
    MANIFEST_OPTION,
    PACKAGE_OPTION,
    WORKDIR_OPTION,
    display_path,
    exit_on_error,
    report_unexpected_errors,
)
from relbump.cli.context import CLIContext, build_context
from relbump.core.result import Err
from relbump.output.console import RichConsole, Style
from relbump.platform.process import format_command
from relbump.services.release.workflow import plan_release, run_release


def release(
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show what would happen, change nothing"
    ),
    workdir: Path | None = WORKDIR_OPTION,
    config: Path | None = CONFIG_OPTION,
    manifest: str | None = MANIFEST_OPTION,
    package: str | None = PACKAGE_OPTION,
) -> None:
    """Bump the patch version, build the artifact, publish it, then clean up."""
    console = RichConsole()
    with report_unexpected_errors(console):
        ctx = build_context(
            workdir=workdir, config=config, manifest=manifest, package=package, console=console
        )
        if dry_run:
            _print_plan(ctx)
            return

        ctx.console.step("Starting release")
        result = run_release(settings=ctx.settings, workdir=ctx.workdir, console=ctx.console)
        exit_on_error(result, ctx.console)


def _print_plan(ctx: CLIContext) -> None:
    console = ctx.console
    plan = plan_release(settings=ctx.settings, workdir=ctx.workdir)
    if isinstance(plan, Err):
        exit_on_error(plan, console)
        return

    p = plan.value
    console.header("DRY-RUN")
    console.print(f"manifest: {display_path(p.manifest, ctx.workdir)}")
    console.print(f"version:  {p.current_version} -> {p.new_version}")
    console.print(f"build:    {format_command(p.build_cmd)}")
    console.print(f"publish:  {format_command(p.publish_cmd)}")
    console.print(f"artifact: {p.artifact}")
    for stale in p.stale_artifacts:
        console.print(f"would delete: {stale.name}", Style.DIM)
