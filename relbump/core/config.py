"""Typed release configuration.

Settings come from an optional ``relbump.toml`` next to the manifest:

    [release]
    manifest = "schema-tools.gemspec"
    package = "schema-tools"
    version_field = "spec.version"
    artifact_ext = "gem"
    build_command = "gem build"
    publish_command = ["gem", "push"]

Every key is optional; missing keys fall back to the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_command, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ReleaseSettings",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "relbump.toml"

DEFAULT_MANIFEST = "schema-tools.gemspec"
DEFAULT_VERSION_FIELD = "spec.version"
DEFAULT_ARTIFACT_EXT = "gem"
DEFAULT_BUILD_COMMAND = ("gem", "build")
DEFAULT_PUBLISH_COMMAND = ("gem", "push")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """What to bump, how to build it and where to push it."""

    manifest: str = DEFAULT_MANIFEST
    package: str | None = None
    version_field: str = DEFAULT_VERSION_FIELD
    artifact_ext: str = DEFAULT_ARTIFACT_EXT
    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    publish_command: tuple[str, ...] = DEFAULT_PUBLISH_COMMAND

    @property
    def package_name(self) -> str:
        """Explicit package name, or the manifest file stem."""
        if self.package:
            return self.package
        return Path(self.manifest).stem

    @property
    def artifact_glob(self) -> str:
        return f"*.{self.artifact_ext}"

    def artifact_name(self, version: str) -> str:
        return f"{self.package_name}-{version}.{self.artifact_ext}"

    def with_overrides(
        self,
        *,
        manifest: str | None = None,
        package: str | None = None,
    ) -> ReleaseSettings:
        """Apply command line overrides on top of file values."""
        out = self
        if manifest:
            out = replace(out, manifest=manifest)
        if package:
            out = replace(out, package=package)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseSettings:
        """Create settings from parsed TOML (the whole document)."""
        release: StrDict = get_table(data, "release") or {}

        return cls(
            manifest=get_str(release, "manifest") or DEFAULT_MANIFEST,
            package=get_str(release, "package"),
            version_field=get_str(release, "version_field") or DEFAULT_VERSION_FIELD,
            artifact_ext=(get_str(release, "artifact_ext") or DEFAULT_ARTIFACT_EXT).lstrip("."),
            build_command=get_command(release, "build_command") or DEFAULT_BUILD_COMMAND,
            publish_command=get_command(release, "publish_command") or DEFAULT_PUBLISH_COMMAND,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except IsADirectoryError:
        return Err(ConfigError(f"Error reading config: {path} is a directory", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseSettings, ConfigError]:
    """Load and validate release settings from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(ReleaseSettings) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseSettings.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ReleaseSettings, ConfigError]:
    """Like load_config, but a missing file means default settings.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(ReleaseSettings())
    return load_config(path)
