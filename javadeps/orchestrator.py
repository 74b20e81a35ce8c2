"""Coordinates index, extractor, closure engine and change filter for one run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Set

from .changes import ChangedFileProvider, filter_changed
from .closure import ClosureEngine
from .config_manager import Settings
from .errors import ConfigurationError
from .extractor import DependencyExtractor, QualifiedNameResolver
from .models import ClosureResult, RuleMatch
from .name_index import NameIndex
from .paths import PathLike, absolute_path, normalize_path, project_root_path
from .rules import detect_base_package

logger = logging.getLogger(__name__)


class DependencyFinder:
    """Owns the one-time setup (name index, base package) shared by the
    commands, and validates the fatal preconditions before any output."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        project_root: PathLike = ".",
    ) -> None:
        self.settings = settings or Settings()
        self.project_root = project_root_path(project_root)
        self._index: Optional[NameIndex] = None

    @property
    def src_root(self) -> Path:
        return absolute_path(self.settings.src_root, self.project_root)

    @property
    def name_index(self) -> NameIndex:
        if self._index is None:
            self._index = NameIndex.build(
                self.src_root,
                project_root=self.project_root,
                extension=self.settings.source_extension,
                strategy=self.settings.collision_strategy,
            )
        return self._index

    def entry_path(self, entry_file: PathLike) -> str:
        """Relative entry paths are tried against the project root first,
        then against the current directory."""
        path = absolute_path(entry_file, self.project_root)
        if not path.is_file():
            from_cwd = absolute_path(entry_file, project_root_path("."))
            if from_cwd.is_file():
                path = from_cwd
        if not path.is_file():
            raise ConfigurationError(f"Entry file not found: {path}")
        return normalize_path(path, self.project_root)

    def base_package_for(self, entry: str) -> str:
        try:
            content = absolute_path(entry, self.project_root).read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            raise ConfigurationError(f"Could not read {entry}: {exc}") from exc
        base = detect_base_package(content, self.settings.base_package_segments)
        if base is None:
            raise ConfigurationError(
                f"Could not detect the base package of {entry}; pass it explicitly (e.g. --base-package com.example)"
            )
        return base

    def extractor(self, base_package: str) -> DependencyExtractor:
        resolver = QualifiedNameResolver(
            self.settings.src_root,
            project_root=self.project_root,
            extension=self.settings.source_extension,
        )
        return DependencyExtractor(self.name_index, resolver, base_package)

    def find(
        self,
        entry_file: PathLike,
        base_package: Optional[str] = None,
        max_depth: Optional[int] = None,
    ) -> ClosureResult:
        entry = self.entry_path(entry_file)
        base = base_package or self.base_package_for(entry)
        depth = max_depth if max_depth is not None else self.settings.max_depth
        if depth < 1:
            raise ConfigurationError(f"max_depth must be at least 1, got {depth}")

        logger.info("Searching dependencies of %s (base package %s, max depth %d)", entry, base, depth)
        engine = ClosureEngine(self.extractor(base))
        return engine.closure(entry, depth)

    def explain(self, file_path: PathLike, base_package: Optional[str] = None) -> List[RuleMatch]:
        entry = self.entry_path(file_path)
        base = base_package or self.base_package_for(entry)
        extractor = self.extractor(base)
        content = extractor.read_source(entry)
        if content is None:
            return []
        return extractor.explain(entry, content)

    @staticmethod
    def changed(result: ClosureResult, provider: ChangedFileProvider) -> Set[str]:
        return filter_changed(result.discovered, provider.changed_files())
