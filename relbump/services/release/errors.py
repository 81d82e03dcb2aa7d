from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "manifest_io",
    "manifest_parse",
    "invalid_version",
    "build_failed",
    "publish_failed",
    "cleanup_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Why a release run stopped.

    ``detail`` carries captured tool output (stderr) when an external command
    failed; ``hint`` is a short suggestion for the user.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    detail: str | None = None
