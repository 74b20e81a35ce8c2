"""Path normalization shared by the index, the extractor and the filters.

Every path javadeps stores is a forward-slash string, relative to the
project root when the file lives below it and absolute otherwise. Two
spellings of the same file therefore compare equal in the discovered and
changed sets.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def project_root_path(project_root: PathLike) -> Path:
    return Path(os.path.abspath(str(project_root).replace("\\", "/")))


def absolute_path(path: PathLike, project_root: Path) -> Path:
    """Resolve *path* (host or Windows separators) against *project_root*."""
    candidate = Path(str(path).replace("\\", "/"))
    if not candidate.is_absolute():
        candidate = project_root / candidate
    return Path(os.path.normpath(candidate))


def normalize_path(path: PathLike, project_root: Path) -> str:
    absolute = absolute_path(path, project_root)
    try:
        return absolute.relative_to(project_root).as_posix()
    except ValueError:
        return absolute.as_posix()
