from __future__ import annotations

import re
from dataclasses import dataclass

from relbump.core.result import Err, Ok, Result
from relbump.services.release.errors import ReleaseError

_SEGMENT_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class ManifestVersion:
    """Dot-separated version as declared in a manifest.

    Only the first three segments have a meaning; any further numeric
    segments are kept as-is so the rewritten string has the same shape.
    """

    major: int
    minor: int
    patch: int
    extra: tuple[int, ...] = ()

    def __str__(self) -> str:
        parts = (self.major, self.minor, self.patch, *self.extra)
        return ".".join(str(p) for p in parts)

    def bump_patch(self) -> ManifestVersion:
        return ManifestVersion(self.major, self.minor, self.patch + 1, self.extra)


def parse_version(text: str) -> Result[ManifestVersion, ReleaseError]:
    segments = text.split(".")
    if len(segments) < 3:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid version: {text!r}",
                hint="Expected MAJOR.MINOR.PATCH",
            )
        )

    numbers: list[int] = []
    for seg in segments:
        if _SEGMENT_RE.fullmatch(seg) is None:
            return Err(
                ReleaseError(
                    kind="invalid_version",
                    message=f"invalid version segment {seg!r} in {text!r}",
                    hint="Version segments must be non-negative integers",
                )
            )
        numbers.append(int(seg))

    return Ok(ManifestVersion(numbers[0], numbers[1], numbers[2], tuple(numbers[3:])))


def next_patch_version(text: str) -> Result[str, ReleaseError]:
    """``"1.2.3"`` -> ``"1.2.4"``."""
    return parse_version(text).map(lambda v: str(v.bump_patch()))
