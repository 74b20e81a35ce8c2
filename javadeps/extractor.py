"""Turns rule matches inside one file into dependency file paths."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from . import config
from .models import RuleMatch
from .name_index import NameIndex
from .paths import PathLike, absolute_path, normalize_path, project_root_path
from .rules import DEFAULT_RULES, ExtractionRule

logger = logging.getLogger(__name__)


class QualifiedNameResolver:
    """Maps ``com.example.Foo`` to ``<src_root>/com/example/Foo.java`` if that
    file exists."""

    def __init__(
        self,
        src_root: PathLike,
        project_root: PathLike = ".",
        extension: str = config.SOURCE_EXTENSION,
    ) -> None:
        self.project_root = project_root_path(project_root)
        self.src_root = absolute_path(src_root, self.project_root)
        self.extension = extension

    def candidate(self, qualified_name: str) -> Path:
        return self.src_root / (qualified_name.replace(".", "/") + self.extension)

    def resolve(self, qualified_name: str) -> Optional[str]:
        path = self.candidate(qualified_name)
        if not path.is_file():
            return None
        return normalize_path(path, self.project_root)


def in_base_package(qualified_name: str, base_package: str) -> bool:
    """Segment-aware prefix test: ``com.example`` accepts ``com.example.Foo``
    but not ``com.examples.Foo``, which a plain string prefix would."""
    return qualified_name == base_package or qualified_name.startswith(base_package + ".")


class DependencyExtractor:
    """Applies every extraction rule to a file and unions the results."""

    def __init__(
        self,
        name_index: NameIndex,
        resolver: QualifiedNameResolver,
        base_package: str,
        rules: Iterable[ExtractionRule] = DEFAULT_RULES,
    ) -> None:
        self.name_index = name_index
        self.resolver = resolver
        self.base_package = base_package
        self.rules = tuple(rules)

    @property
    def project_root(self) -> Path:
        return self.resolver.project_root

    def explain(self, file_path: str, content: str) -> List[RuleMatch]:
        """Every rule hit in *content*, resolved or not.

        Imports outside the base package are not reported at all; they are
        third-party or JDK types by definition.
        """
        matches: List[RuleMatch] = []
        for rule in self.rules:
            for token in rule.match(content):
                if rule.kind == "qualified":
                    if not in_base_package(token, self.base_package):
                        continue
                    resolved = self.resolver.resolve(token)
                    matches.append(RuleMatch(rule.name, token, resolved))
                else:
                    paths = self.name_index.resolve(token, referrer=file_path)
                    if not paths:
                        matches.append(RuleMatch(rule.name, token))
                    for path in paths:
                        matches.append(RuleMatch(rule.name, token, path))
        return matches

    def extract(self, file_path: str, content: str) -> Set[str]:
        """Dependency paths of *file_path*, never including the file itself."""
        return {
            match.path
            for match in self.explain(file_path, content)
            if match.path is not None and match.path != file_path
        }

    def read_source(self, file_path: str) -> Optional[str]:
        try:
            return absolute_path(file_path, self.project_root).read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            logger.warning("Could not read %s: %s", file_path, exc)
            return None

    def extract_file(self, file_path: str) -> Set[str]:
        """Read and extract one file; unreadable files contribute nothing."""
        content = self.read_source(file_path)
        if content is None:
            return set()
        deps = self.extract(file_path, content)
        logger.debug("%s -> %d dependencies", file_path, len(deps))
        return deps
