"""Release orchestration: manifest version bump, build, publish, cleanup."""

from .errors import ReleaseError
from .workflow import (
    ReleaseContext,
    ReleasePlan,
    build_artifact,
    bump_version,
    cleanup_artifacts,
    extract_current_version,
    plan_release,
    publish_artifact,
    run_release,
)

__all__ = [
    "ReleaseContext",
    "ReleaseError",
    "ReleasePlan",
    "build_artifact",
    "bump_version",
    "cleanup_artifacts",
    "extract_current_version",
    "plan_release",
    "publish_artifact",
    "run_release",
]
