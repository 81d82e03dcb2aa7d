from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from relbump.core.config import ReleaseSettings
from relbump.core.result import Err, Ok, Result
from relbump.output.console import MockConsole
from relbump.platform.process import ProcessError
from relbump.services.release import tools as tools_mod
from relbump.services.release import workflow as workflow_mod

GEMSPEC = """\
Gem::Specification.new do |spec|
  spec.name          = "schema-tools"
  spec.version       = "1.2.3"
  spec.files         = Dir["lib/**/*.rb"]
end
"""


def _calls() -> list[list[str]]:
    return []


@dataclass
class FakeGem:
    """Stands in for `gem build` / `gem push`."""

    build_ok: bool = True
    publish_ok: bool = True
    create_artifact: bool = True
    calls: list[list[str]] = field(default_factory=_calls)
    artifacts_seen_by_build: list[str] | None = None

    def __call__(self, cmd: list[str], cwd: Path) -> Result[str, ProcessError]:
        self.calls.append(cmd)
        if cmd[:2] == ["gem", "build"]:
            self.artifacts_seen_by_build = sorted(p.name for p in cwd.glob("*.gem"))
            if not self.build_ok:
                return Err(ProcessError(tuple(cmd), 1, "", "ERROR: invalid gemspec\n"))
            if self.create_artifact:
                version = _manifest_version(cwd / cmd[2])
                (cwd / f"schema-tools-{version}.gem").write_bytes(b"gem")
            return Ok("Successfully built RubyGem\n")
        if cmd[:2] == ["gem", "push"]:
            if not self.publish_ok:
                return Err(ProcessError(tuple(cmd), 1, "", "Repushing is not allowed.\n"))
            return Ok("Successfully registered gem\n")
        raise AssertionError(f"unexpected command: {cmd}")


def _manifest_version(path: Path) -> str:
    for line in path.read_text(encoding="utf-8").splitlines():
        if "spec.version" in line:
            return line.split('"')[1]
    raise AssertionError("no version line")


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    (tmp_path / "schema-tools.gemspec").write_text(GEMSPEC, encoding="utf-8")
    return tmp_path


@pytest.fixture
def fake_gem(monkeypatch: pytest.MonkeyPatch) -> FakeGem:
    fake = FakeGem()
    monkeypatch.setattr(tools_mod, "run_process", fake)
    return fake


def _release(workdir: Path, console: MockConsole | None = None):
    return workflow_mod.run_release(
        settings=ReleaseSettings(),
        workdir=workdir,
        console=console or MockConsole(),
    )


def test_happy_path_bumps_builds_publishes_and_cleans(workdir: Path, fake_gem: FakeGem) -> None:
    console = MockConsole()

    result = _release(workdir, console)

    assert isinstance(result, Ok)
    assert result.value.new_version == "1.2.4"
    assert result.value.artifact == "schema-tools-1.2.4.gem"
    assert (workdir / "schema-tools.gemspec").read_text(encoding="utf-8") == GEMSPEC.replace(
        '"1.2.3"', '"1.2.4"'
    )
    assert fake_gem.calls == [
        ["gem", "build", "schema-tools.gemspec"],
        ["gem", "push", "schema-tools-1.2.4.gem"],
    ]
    assert console.find("Deleted schema-tools-1.2.4.gem")
    assert not (workdir / "schema-tools-1.2.4.gem").exists()
    assert console.steps == [
        "Bumping version",
        "Building artifact",
        "Publishing artifact",
        "Cleaning up artifacts",
    ]
    assert not console.has_warning()


def test_sequential_runs_compose(workdir: Path, fake_gem: FakeGem) -> None:
    assert isinstance(_release(workdir), Ok)
    assert isinstance(_release(workdir), Ok)

    assert '"1.2.5"' in (workdir / "schema-tools.gemspec").read_text(encoding="utf-8")
    assert fake_gem.calls[-1] == ["gem", "push", "schema-tools-1.2.5.gem"]


def test_missing_version_line_aborts_without_touching_manifest(
    workdir: Path, fake_gem: FakeGem
) -> None:
    manifest = workdir / "schema-tools.gemspec"
    manifest.write_text("Gem::Specification.new do |spec|\nend\n", encoding="utf-8")
    before = manifest.read_bytes()

    result = _release(workdir)

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_parse"
    assert "Could not find version" in result.error.message
    assert manifest.read_bytes() == before
    assert fake_gem.calls == []


def test_invalid_version_aborts_before_writing(workdir: Path, fake_gem: FakeGem) -> None:
    manifest = workdir / "schema-tools.gemspec"
    manifest.write_text(GEMSPEC.replace("1.2.3", "1.2"), encoding="utf-8")
    before = manifest.read_bytes()

    result = _release(workdir)

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_version"
    assert manifest.read_bytes() == before
    assert fake_gem.calls == []


def test_build_failure_keeps_bump_and_skips_publish(workdir: Path, fake_gem: FakeGem) -> None:
    fake_gem.build_ok = False

    result = _release(workdir)

    assert isinstance(result, Err)
    assert result.error.kind == "build_failed"
    assert result.error.detail == "ERROR: invalid gemspec"
    assert fake_gem.calls == [["gem", "build", "schema-tools.gemspec"]]
    assert '"1.2.4"' in (workdir / "schema-tools.gemspec").read_text(encoding="utf-8")


def test_publish_failure_skips_cleanup(workdir: Path, fake_gem: FakeGem) -> None:
    fake_gem.publish_ok = False
    console = MockConsole()

    result = _release(workdir, console)

    assert isinstance(result, Err)
    assert result.error.kind == "publish_failed"
    assert (workdir / "schema-tools-1.2.4.gem").exists()
    assert console.find("Deleted") == []
    assert "Cleaning up artifacts" not in console.steps


def test_build_starts_from_clean_slate(workdir: Path, fake_gem: FakeGem) -> None:
    (workdir / "schema-tools-1.2.2.gem").write_bytes(b"old")
    (workdir / "other-0.1.0.gem").write_bytes(b"other")

    assert isinstance(_release(workdir), Ok)

    assert fake_gem.artifacts_seen_by_build == []
    assert list(workdir.glob("*.gem")) == []


def test_cleanup_removes_every_artifact(workdir: Path) -> None:
    ctx = workflow_mod.extract_current_version(settings=ReleaseSettings(), workdir=workdir)
    assert isinstance(ctx, Ok)
    for name in ("schema-tools-1.2.4.gem", "schema-tools-1.2.3.gem", "stray.gem"):
        (workdir / name).write_bytes(b"")
    console = MockConsole()

    result = workflow_mod.cleanup_artifacts(ctx.value, console=console)

    assert isinstance(result, Ok)
    assert sorted(p.name for p in result.value) == [
        "schema-tools-1.2.3.gem",
        "schema-tools-1.2.4.gem",
        "stray.gem",
    ]
    assert len(console.find("Deleted")) == 3
    assert (workdir / "schema-tools.gemspec").exists()


def test_missing_artifact_only_warns(workdir: Path, fake_gem: FakeGem) -> None:
    fake_gem.create_artifact = False
    console = MockConsole()

    result = _release(workdir, console)

    assert isinstance(result, Ok)
    assert console.find("expected artifact not found: schema-tools-1.2.4.gem")
    assert fake_gem.calls[-1] == ["gem", "push", "schema-tools-1.2.4.gem"]


def test_custom_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "pkg.toml").write_text('[pkg]\nversion = "0.3.9"\n', encoding="utf-8")
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], cwd: Path) -> Result[str, ProcessError]:
        calls.append(cmd)
        return Ok("")

    monkeypatch.setattr(tools_mod, "run_process", fake_run)
    settings = ReleaseSettings(
        manifest="pkg.toml",
        package="demo",
        version_field="version",
        artifact_ext="tar.gz",
        build_command=("make", "dist"),
        publish_command=("upload",),
    )

    result = workflow_mod.run_release(settings=settings, workdir=tmp_path, console=MockConsole())

    assert isinstance(result, Ok)
    assert calls == [["make", "dist", "pkg.toml"], ["upload", "demo-0.3.10.tar.gz"]]
    assert (tmp_path / "pkg.toml").read_text(encoding="utf-8") == (
        '[pkg]\nversion       = "0.3.10"\n'
    )


def test_steps_require_previous_state(workdir: Path) -> None:
    ctx = workflow_mod.extract_current_version(settings=ReleaseSettings(), workdir=workdir)
    assert isinstance(ctx, Ok)

    with pytest.raises(RuntimeError, match="not been built"):
        workflow_mod.publish_artifact(ctx.value, console=MockConsole())


def test_plan_release_has_no_side_effects(workdir: Path, fake_gem: FakeGem) -> None:
    (workdir / "old.gem").write_bytes(b"")
    before = (workdir / "schema-tools.gemspec").read_bytes()

    plan = workflow_mod.plan_release(settings=ReleaseSettings(), workdir=workdir)

    assert isinstance(plan, Ok)
    assert plan.value.current_version == "1.2.3"
    assert plan.value.new_version == "1.2.4"
    assert plan.value.build_cmd == ["gem", "build", "schema-tools.gemspec"]
    assert plan.value.publish_cmd == ["gem", "push", "schema-tools-1.2.4.gem"]
    assert [p.name for p in plan.value.stale_artifacts] == ["old.gem"]
    assert (workdir / "schema-tools.gemspec").read_bytes() == before
    assert (workdir / "old.gem").exists()
    assert fake_gem.calls == []
