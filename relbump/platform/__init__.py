"""Platform abstraction layer."""

from .files import atomic_write_text, matching_files, read_text_exact
from .process import ProcessError, format_command, run

__all__ = [
    # files
    "atomic_write_text",
    "matching_files",
    "read_text_exact",
    # process
    "ProcessError",
    "format_command",
    "run",
]
