from __future__ import annotations

from pathlib import Path

from relbump.core.result import Err, Ok, Result
from relbump.output.console import ConsoleProtocol, Style
from relbump.platform.files import matching_files
from relbump.services.release.errors import ReleaseError


def remove_artifacts(
    *,
    workdir: Path,
    pattern: str,
    console: ConsoleProtocol | None = None,
) -> Result[list[Path], ReleaseError]:
    """Delete every file in ``workdir`` matching ``pattern``.

    Not limited to the artifact of the current run: stale artifacts left by
    earlier runs (or anything else with the same extension) go too. Each
    deletion is reported when a console is given.
    """
    removed: list[Path] = []
    for path in matching_files(workdir, pattern):
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="cleanup_failed",
                    message=f"failed to delete {path.name}: {e}",
                    hint=str(path),
                )
            )
        removed.append(path)
        if console is not None:
            console.print(f"Deleted {path.name}", Style.DIM)
    return Ok(removed)
