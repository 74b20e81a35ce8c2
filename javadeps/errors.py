"""Exception hierarchy for javadeps.

Only configuration problems are fatal. Everything that goes wrong while
reading or matching an individual file is logged and reduces recall.
"""

from __future__ import annotations


class JavaDepsError(Exception):
    """Base class for javadeps errors."""


class ConfigurationError(JavaDepsError):
    """Raised when a run cannot start: missing entry file, missing source
    root, undetectable base package or invalid settings."""


class NameCollisionError(ConfigurationError):
    """Raised by the ``error`` collision strategy when two files share a
    simple type name."""

    def __init__(self, name: str, paths: list[str]) -> None:
        self.name = name
        self.paths = paths
        super().__init__(f"Type name '{name}' is defined in several files: {', '.join(paths)}")
