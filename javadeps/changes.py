"""Changed-file sources and the filter that intersects them with a closure."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence, Set

from . import config
from .paths import PathLike, normalize_path, project_root_path

logger = logging.getLogger(__name__)


class ChangedFileProvider(ABC):
    """Supplies the set of files considered changed."""

    @abstractmethod
    def changed_files(self) -> Set[str]:
        """Return normalized paths of changed source files."""
        ...


class StaticChangedFileProvider(ChangedFileProvider):
    """In-memory provider, for tests and explicitly listed files."""

    def __init__(self, paths: Iterable[PathLike], project_root: PathLike = ".") -> None:
        root = project_root_path(project_root)
        self._paths = {normalize_path(p, root) for p in paths}

    def changed_files(self) -> Set[str]:
        return set(self._paths)


class GitDiffProvider(ChangedFileProvider):
    """Runs ``git diff --name-only`` in the project root.

    Paths printed by git are relative to the repository top level, so the
    project root should be that directory for the intersection to be
    meaningful. Any failure is logged and treated as "nothing changed".
    """

    def __init__(
        self,
        project_root: PathLike = ".",
        command: Optional[Sequence[str]] = None,
        ref: Optional[str] = None,
        extension: str = config.SOURCE_EXTENSION,
        timeout: float = 30,
    ) -> None:
        self.project_root = project_root_path(project_root)
        self.command = list(command or config.DEFAULT_DIFF_COMMAND.split())
        if ref:
            self.command.append(ref)
        self.extension = extension
        self.timeout = timeout

    def changed_files(self) -> Set[str]:
        try:
            result = subprocess.run(
                self.command,
                cwd=self.project_root,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as exc:
            logger.warning("%s failed: %s", " ".join(self.command), (exc.stderr or "").strip())
            return set()
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("Could not run %s: %s", " ".join(self.command), exc)
            return set()
        return parse_diff_output(result.stdout, self.project_root, self.extension)


def parse_diff_output(output: str, project_root: PathLike, extension: str = config.SOURCE_EXTENSION) -> Set[str]:
    """Newline-delimited paths -> normalized set, source files only."""
    root = project_root_path(project_root)
    return {
        normalize_path(line.strip(), root)
        for line in output.splitlines()
        if line.strip().endswith(extension)
    }


def filter_changed(discovered: Iterable[str], changed: Iterable[str]) -> Set[str]:
    return set(discovered) & set(changed)
