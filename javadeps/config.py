"""Configuration paths and built-in defaults for javadeps."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("JAVADEPS_HOME", str(Path.home() / ".javadeps"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

SOURCE_EXTENSION = ".java"
DEFAULT_SRC_ROOT = "src/main/java"
DEFAULT_MAX_DEPTH = 50
# The two historical variants of this tool used 2 and 3 segments.
DEFAULT_BASE_PACKAGE_SEGMENTS = 2
DEFAULT_COLLISION_STRATEGY = "last"
COLLISION_STRATEGIES = ("last", "first", "error", "all")
DEFAULT_DIFF_COMMAND = "git diff --name-only"


def ensure_base_dir() -> None:
    """Create the configuration directory if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
