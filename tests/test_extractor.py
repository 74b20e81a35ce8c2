"""Tests for turning rule matches into dependency paths."""

import logging
from pathlib import Path

import pytest

from javadeps.extractor import DependencyExtractor, QualifiedNameResolver, in_base_package
from javadeps.name_index import NameIndex

SRC = "src/main/java"


def _extractor(root: Path, base_package: str = "base.pkg") -> DependencyExtractor:
    index = NameIndex.build(SRC, project_root=root)
    resolver = QualifiedNameResolver(SRC, project_root=root)
    return DependencyExtractor(index, resolver, base_package)


@pytest.fixture
def widget_project(make_project) -> Path:
    return make_project({
        "base/pkg/Widget.java": "package base.pkg;\n\npublic class Widget {\n}\n",
        "base/pkg/Foo.java": "package base.pkg;\n\npublic interface Foo {\n}\n",
        "base/pkg/Bar.java": "package base.pkg;\n\npublic class Bar {\n}\n",
        "base/app/Main.java": "package base.app;\n\npublic class Main {\n}\n",
    })


def test_in_base_package():
    assert in_base_package("com.example.Foo", "com.example")
    assert in_base_package("com.example", "com.example")
    assert not in_base_package("com.examples.Foo", "com.example")
    assert not in_base_package("org.other.Foo", "com.example")


def test_resolver_requires_existing_file(widget_project: Path):
    resolver = QualifiedNameResolver(SRC, project_root=widget_project)
    assert resolver.resolve("base.pkg.Widget") == "src/main/java/base/pkg/Widget.java"
    assert resolver.resolve("base.pkg.Missing") is None


def test_import_of_existing_file_is_found(widget_project: Path):
    extractor = _extractor(widget_project)
    deps = extractor.extract("src/main/java/base/app/Main.java", "import base.pkg.Widget;\n")
    assert deps == {"src/main/java/base/pkg/Widget.java"}


def test_import_of_missing_file_is_dropped(widget_project: Path):
    extractor = _extractor(widget_project)
    deps = extractor.extract("src/main/java/base/app/Main.java", "import base.pkg.Gone;\n")
    assert deps == set()


def test_imports_outside_base_package_are_ignored(widget_project: Path):
    extractor = _extractor(widget_project, base_package="base.app")
    content = "import base.pkg.Widget;\nimport java.util.List;\n"
    assert extractor.extract("src/main/java/base/app/Main.java", content) == set()
    assert extractor.explain("src/main/java/base/app/Main.java", content) == []


def test_implements_keeps_only_indexed_names(widget_project: Path):
    extractor = _extractor(widget_project)
    deps = extractor.extract("src/main/java/base/app/Main.java", "public class Main implements Runnable, Foo {\n")
    assert deps == {"src/main/java/base/pkg/Foo.java"}


def test_every_rule_contributes(widget_project: Path):
    extractor = _extractor(widget_project)
    content = (
        "package base.app;\n"
        "import base.pkg.Widget;\n"
        "public class Main extends Bar implements Foo {\n"
        "    public Main(int size, String name) {}\n"
        "}\n"
    )
    deps = extractor.extract("src/main/java/base/app/Main.java", content)
    assert deps == {
        "src/main/java/base/pkg/Widget.java",
        "src/main/java/base/pkg/Bar.java",
        "src/main/java/base/pkg/Foo.java",
    }


def test_gated_rule_needs_marker_but_constructor_rule_still_applies(widget_project: Path):
    extractor = _extractor(widget_project)
    field_only = "public class Main {\n    private final Widget widget;\n}\n"
    assert extractor.extract("src/main/java/base/app/Main.java", field_only) == set()

    with_constructor = field_only.replace("}\n", "    public Main(Widget widget) {}\n}\n", 1)
    matches = extractor.explain("src/main/java/base/app/Main.java", with_constructor)
    assert {m.rule for m in matches} == {"constructor-parameter"}


def test_basic_constructor_parameters_never_resolve(make_project):
    root = make_project({
        "base/pkg/String.java": "package base.pkg;\npublic class String {}\n",
        "base/pkg/Main.java": "package base.pkg;\npublic class Main {}\n",
    })
    extractor = _extractor(root)
    deps = extractor.extract("src/main/java/base/pkg/Main.java", "public Main(String name, int size) {}")
    assert deps == set()


def test_file_never_depends_on_itself(widget_project: Path):
    extractor = _extractor(widget_project)
    deps = extractor.extract("src/main/java/base/pkg/Bar.java", "public class Bar {\n    public Bar(Bar parent) {}\n}\n")
    assert deps == set()


def test_explain_reports_unresolved_tokens(widget_project: Path):
    extractor = _extractor(widget_project)
    matches = extractor.explain("src/main/java/base/app/Main.java", "class Main implements Runnable, Foo {")
    by_token = {m.token: m for m in matches}

    assert by_token["Runnable"].path is None
    assert not by_token["Runnable"].resolved
    assert by_token["Foo"].path == "src/main/java/base/pkg/Foo.java"
    assert by_token["Foo"].rule == "implements"


def test_unreadable_file_contributes_nothing(widget_project: Path, caplog):
    extractor = _extractor(widget_project)
    with caplog.at_level(logging.WARNING, logger="javadeps.extractor"):
        deps = extractor.extract_file("src/main/java/base/app/Nope.java")

    assert deps == set()
    assert "Could not read" in caplog.text


def test_extract_file_reads_from_disk(widget_project: Path):
    main = widget_project / SRC / "base" / "app" / "Main.java"
    main.write_text("package base.app;\nimport base.pkg.Widget;\npublic class Main extends Bar {}\n")

    extractor = _extractor(widget_project)
    assert extractor.extract_file("src/main/java/base/app/Main.java") == {
        "src/main/java/base/pkg/Widget.java",
        "src/main/java/base/pkg/Bar.java",
    }
