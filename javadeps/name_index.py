"""Simple type name -> source file lookup table.

Java allows the same simple name in several packages; this index does not
understand packages, so duplicates are settled by a collision strategy:

- ``last``: the file visited last (sorted walk order) wins
- ``first``: the file visited first wins
- ``error``: any duplicate raises :class:`NameCollisionError`
- ``all``: every path is kept and lookups disambiguate by directory
"""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from . import config
from .errors import ConfigurationError, NameCollisionError
from .paths import PathLike, normalize_path, project_root_path

logger = logging.getLogger(__name__)


class NameIndex:
    """Maps bare type names to normalized file paths."""

    def __init__(self, strategy: str = config.DEFAULT_COLLISION_STRATEGY) -> None:
        if strategy not in config.COLLISION_STRATEGIES:
            raise ConfigurationError(
                f"Unknown collision strategy '{strategy}'. "
                f"Use one of: {', '.join(config.COLLISION_STRATEGIES)}"
            )
        self.strategy = strategy
        self._entries: Dict[str, List[str]] = {}
        self.collisions: Dict[str, List[str]] = {}

    @classmethod
    def build(
        cls,
        root: PathLike,
        project_root: PathLike = ".",
        extension: str = config.SOURCE_EXTENSION,
        strategy: str = config.DEFAULT_COLLISION_STRATEGY,
    ) -> "NameIndex":
        """Scan *root* once and index every ``*<extension>`` regular file."""
        project = project_root_path(project_root)
        root_path = Path(root)
        if not root_path.is_absolute():
            root_path = project / root_path
        if not root_path.is_dir():
            raise ConfigurationError(f"Source root not found or not a directory: {root_path}")

        index = cls(strategy)
        try:
            # rglob silently skips directories it cannot list, the root included.
            with os.scandir(root_path):
                pass
            files = sorted(root_path.rglob(f"*{extension}"))
        except OSError as exc:
            raise ConfigurationError(f"Cannot read source root {root_path}: {exc}") from exc

        for file_path in files:
            if not file_path.is_file():
                continue
            index.add(file_path.name[: -len(extension)], normalize_path(file_path, project))

        logger.debug("Indexed %d type names under %s (%d collisions)", len(index), root_path, len(index.collisions))
        return index

    def add(self, name: str, path: str) -> None:
        existing = self._entries.get(name)
        if not existing:
            self._entries[name] = [path]
            return
        if path in existing:
            return

        self.collisions.setdefault(name, list(existing)).append(path)
        logger.debug("Type name collision for %s: %s", name, self.collisions[name])

        if self.strategy == "error":
            raise NameCollisionError(name, self.collisions[name])
        if self.strategy == "last":
            self._entries[name] = [path]
        elif self.strategy == "all":
            existing.append(path)

    def resolve(self, name: str, referrer: Optional[str] = None) -> Tuple[str, ...]:
        """Return the path(s) for *name*; empty when the name is unknown.

        Under the ``all`` strategy a candidate in the same directory as
        *referrer* is preferred, since same-package types need no import.
        """
        paths = self._entries.get(name)
        if not paths:
            return ()
        if len(paths) > 1 and referrer is not None:
            package_dir = posixpath.dirname(referrer)
            local = [p for p in paths if posixpath.dirname(p) == package_dir]
            if len(local) == 1:
                return (local[0],)
        return tuple(paths)

    def names(self) -> List[str]:
        return sorted(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
