"""
Diagram path resolution.

- Paths under a sandbox alias (`/home/claude` by default) are saved by
  file name into the diagrams directory
- `~` expands to the home directory
- Relative paths are saved by file name into the diagrams directory
- Absolute paths inside protected system directories are refused
"""

import os
from pathlib import Path
from typing import Optional

from .config import Settings, get_settings
from .exceptions import UnsafePathError


def _is_under(path: Path, prefix: str) -> bool:
    try:
        path.relative_to(prefix)
        return True
    except ValueError:
        return False


def resolve_path(filepath: str, settings: Optional[Settings] = None) -> Path:
    """
    Resolve a user-supplied diagram path to an absolute path.

    Raises:
        UnsafePathError: If the path lies in a blocked system directory
    """
    settings = settings or get_settings()
    path = Path(filepath)

    for alias in settings.diagrams_dir_aliases:
        if path == Path(alias):
            path = settings.diagrams_dir
            break
        if _is_under(path, alias):
            path = settings.diagrams_dir / path.name
            break

    path = path.expanduser()

    if not path.is_absolute():
        path = settings.diagrams_dir / path.name

    # Collapse .. without touching the filesystem
    path = Path(os.path.normpath(path))

    for prefix in settings.blocked_prefixes:
        if _is_under(path, prefix):
            raise UnsafePathError(
                f"Cannot create files in system directory: {path}. "
                "Please use a path in your home directory or Desktop."
            )

    return path
