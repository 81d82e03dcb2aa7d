"""Release sequence: bump -> build -> publish -> cleanup.

Each step takes the immutable ``ReleaseContext`` produced by the previous one
and returns a new context or the error that stops the run. Nothing here exits
the process; the CLI maps a final ``Err`` to an exit code.

A failed build or publish leaves the bumped version in the manifest, and a
later run bumps again from there.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from relbump.core.config import ReleaseSettings
from relbump.core.result import Err, Ok, Result
from relbump.output.console import ConsoleProtocol
from relbump.platform.files import matching_files
from relbump.services.release.artifacts import remove_artifacts
from relbump.services.release.errors import ReleaseError
from relbump.services.release.manifest import ManifestSnapshot, read_manifest, write_version
from relbump.services.release.tools import build_command, publish_command, run_build, run_publish
from relbump.services.release.version import next_patch_version


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    settings: ReleaseSettings
    workdir: Path
    manifest: ManifestSnapshot
    new_version: str | None = None
    artifact: str | None = None

    @property
    def current_version(self) -> str:
        return self.manifest.version

    def require_new_version(self) -> str:
        if self.new_version is None:
            raise RuntimeError("version has not been bumped yet")
        return self.new_version

    def require_artifact(self) -> str:
        if self.artifact is None:
            raise RuntimeError("artifact has not been built yet")
        return self.artifact


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """What a release run would do, computed without side effects."""

    manifest: Path
    current_version: str
    new_version: str
    artifact: str
    build_cmd: list[str]
    publish_cmd: list[str]
    stale_artifacts: list[Path]


def extract_current_version(
    *, settings: ReleaseSettings, workdir: Path
) -> Result[ReleaseContext, ReleaseError]:
    snapshot = read_manifest(workdir / settings.manifest, version_field=settings.version_field)
    if isinstance(snapshot, Err):
        return snapshot
    return Ok(ReleaseContext(settings=settings, workdir=workdir, manifest=snapshot.value))


def bump_version(
    ctx: ReleaseContext, *, console: ConsoleProtocol
) -> Result[ReleaseContext, ReleaseError]:
    console.step("Bumping version")

    new_version = next_patch_version(ctx.current_version)
    if isinstance(new_version, Err):
        return new_version

    console.print(f"Bumping from {ctx.current_version} to {new_version.value}")
    written = write_version(ctx.manifest, new_version.value)
    if isinstance(written, Err):
        return written

    console.success(f"Updated {ctx.settings.manifest} with new version")
    return Ok(replace(ctx, new_version=new_version.value))


def build_artifact(
    ctx: ReleaseContext, *, console: ConsoleProtocol
) -> Result[ReleaseContext, ReleaseError]:
    console.step("Building artifact")
    settings = ctx.settings

    stale = remove_artifacts(workdir=ctx.workdir, pattern=settings.artifact_glob)
    if isinstance(stale, Err):
        return stale

    built = run_build(
        base=settings.build_command,
        manifest=settings.manifest,
        workdir=ctx.workdir,
        console=console,
    )
    if isinstance(built, Err):
        return built

    # Not required to exist: the publish tool reports a missing file.
    artifact = settings.artifact_name(ctx.require_new_version())
    if not (ctx.workdir / artifact).is_file():
        console.warning(f"expected artifact not found: {artifact}")
    console.success(f"Built artifact: {artifact}")
    return Ok(replace(ctx, artifact=artifact))


def publish_artifact(
    ctx: ReleaseContext, *, console: ConsoleProtocol
) -> Result[ReleaseContext, ReleaseError]:
    console.step("Publishing artifact")
    artifact = ctx.require_artifact()

    published = run_publish(
        base=ctx.settings.publish_command,
        artifact=artifact,
        workdir=ctx.workdir,
        console=console,
    )
    if isinstance(published, Err):
        return published

    console.success(f"Published {artifact}")
    return Ok(ctx)


def cleanup_artifacts(
    ctx: ReleaseContext, *, console: ConsoleProtocol
) -> Result[list[Path], ReleaseError]:
    console.step("Cleaning up artifacts")
    removed = remove_artifacts(
        workdir=ctx.workdir,
        pattern=ctx.settings.artifact_glob,
        console=console,
    )
    if isinstance(removed, Err):
        return removed
    console.success("Cleanup complete")
    return removed


def run_release(
    *, settings: ReleaseSettings, workdir: Path, console: ConsoleProtocol
) -> Result[ReleaseContext, ReleaseError]:
    ctx = extract_current_version(settings=settings, workdir=workdir)
    if isinstance(ctx, Err):
        return ctx
    console.print(f"Current version: {ctx.value.current_version}")
    console.header(f"Releasing {settings.package_name}")

    bumped = bump_version(ctx.value, console=console)
    if isinstance(bumped, Err):
        return bumped

    built = build_artifact(bumped.value, console=console)
    if isinstance(built, Err):
        return built

    published = publish_artifact(built.value, console=console)
    if isinstance(published, Err):
        return published

    cleaned = cleanup_artifacts(published.value, console=console)
    if isinstance(cleaned, Err):
        return cleaned

    final = published.value
    console.success(f"Released {settings.package_name} {final.require_new_version()}")
    return Ok(final)


def plan_release(*, settings: ReleaseSettings, workdir: Path) -> Result[ReleasePlan, ReleaseError]:
    ctx = extract_current_version(settings=settings, workdir=workdir)
    if isinstance(ctx, Err):
        return ctx

    new_version = next_patch_version(ctx.value.current_version)
    if isinstance(new_version, Err):
        return new_version

    artifact = settings.artifact_name(new_version.value)
    return Ok(
        ReleasePlan(
            manifest=ctx.value.manifest.path,
            current_version=ctx.value.current_version,
            new_version=new_version.value,
            artifact=artifact,
            build_cmd=build_command(settings.build_command, settings.manifest),
            publish_cmd=publish_command(settings.publish_command, artifact),
            stale_artifacts=matching_files(workdir, settings.artifact_glob),
        )
    )
