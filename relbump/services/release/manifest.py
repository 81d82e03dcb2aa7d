"""Reading and rewriting the version line of a manifest.

The manifest is treated as plain text: the version assignment is located with
a regular expression and substituted in place, so every other byte of the
file (comments, alignment, line endings) is preserved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from relbump.core.result import Err, Ok, Result
from relbump.platform.files import atomic_write_text, read_text_exact
from relbump.services.release.errors import ReleaseError

# Column padding of the rewritten assignment, as laid out in gemspecs.
_ASSIGN_PADDING = " " * 7


@dataclass(frozen=True, slots=True)
class ManifestSnapshot:
    """Manifest content as read at the start of a run."""

    path: Path
    text: str
    version_field: str
    version: str


def version_pattern(field: str) -> re.Pattern[str]:
    """Match ``<field> = "<version>"`` with either quote style and any spacing."""
    return re.compile(re.escape(field) + r"""\s*=\s*["']([^"']+)["']""")


def format_version_line(field: str, version: str) -> str:
    return f'{field}{_ASSIGN_PADDING}= "{version}"'


def find_version(text: str, field: str) -> str | None:
    m = version_pattern(field).search(text)
    if m is None:
        return None
    return m.group(1)


def replace_version(text: str, field: str, version: str) -> str:
    """Rewrite every matching assignment with the normalized line."""
    line = format_version_line(field, version)
    return version_pattern(field).sub(lambda _m: line, text)


def read_manifest(path: Path, *, version_field: str) -> Result[ManifestSnapshot, ReleaseError]:
    try:
        text = read_text_exact(path)
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="manifest_io",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    version = find_version(text, version_field)
    if version is None:
        return Err(
            ReleaseError(
                kind="manifest_parse",
                message=f"Could not find version in {path.name}",
                hint=f"Expected a line like: {format_version_line(version_field, '1.0.0')}",
            )
        )

    return Ok(ManifestSnapshot(path=path, text=text, version_field=version_field, version=version))


def write_version(snapshot: ManifestSnapshot, version: str) -> Result[Path, ReleaseError]:
    """Write ``version`` into the manifest captured by ``snapshot``."""
    updated = replace_version(snapshot.text, snapshot.version_field, version)
    try:
        atomic_write_text(snapshot.path, updated)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_io",
                message=f"failed to write {snapshot.path.name}: {e}",
                hint=str(snapshot.path),
            )
        )
    return Ok(snapshot.path)
