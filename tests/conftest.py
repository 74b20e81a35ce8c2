"""Pytest configuration and fixtures for javadeps tests."""

from pathlib import Path
from typing import Callable, Dict

import pytest

SAMPLE_SRC = "src/main/java/com/example"


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Point the config file at a throwaway directory so a developer's own
    ~/.javadeps/config.toml never leaks into the tests."""
    home = tmp_path_factory.mktemp("javadeps_home")
    monkeypatch.setattr("javadeps.config.BASE_DIR", home)
    monkeypatch.setattr("javadeps.config.CONFIG_FILE", home / "config.toml")
    return home


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample Java project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write Java sources below ``<tmp>/src/main/java`` and return the
    project root.

    Keys are paths relative to the source root, e.g. ``"com/acme/A.java"``.
    """

    def _make(files: Dict[str, str]) -> Path:
        src = tmp_path / "src" / "main" / "java"
        src.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            path = src / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    return _make


@pytest.fixture
def cyclic_project(make_project) -> Path:
    """A <-> B, with B also pointing at C."""
    return make_project({
        "com/acme/app/A.java": (
            "package com.acme.app;\n\n"
            "import com.acme.app.B;\n\n"
            "public class A {\n}\n"
        ),
        "com/acme/app/B.java": (
            "package com.acme.app;\n\n"
            "import com.acme.app.A;\n\n"
            "public class B extends C {\n"
            "    public B(A owner) {\n    }\n}\n"
        ),
        "com/acme/app/C.java": "package com.acme.app;\n\npublic class C {\n}\n",
    })
