"""Pattern rules that approximate Java dependency declarations.

None of this is a parser. Each rule is a regular expression over the raw
file text that yields candidate names; anything it does not recognise
(multi-line generic signatures, annotations with arguments in odd places,
comments that happen to look like code) simply produces no match. The
extractor decides what a name resolves to.

Rules come in two kinds:

- ``qualified`` rules yield dotted names (``com.example.Foo``) that map to
  a path below the source root;
- ``symbol`` rules yield bare type names looked up in the name index.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

IMPORT_PATTERN = re.compile(r"^\s*import\s+([\w.]+)\s*;", re.MULTILINE)
PACKAGE_PATTERN = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
EXTENDS_PATTERN = re.compile(r"\bextends\s+([\w.]+)")
IMPLEMENTS_PATTERN = re.compile(r"\bimplements\s+([^{;]+)")
INJECTED_FIELD_PATTERN = re.compile(
    r"@(?:Autowired|Inject)\b(?:\s*\([^)]*\))?\s+"
    r"(?:(?:public|protected|private)\s+)?(?:final\s+)?([\w.]+)"
)
FINAL_FIELD_PATTERN = re.compile(r"\bprivate\s+final\s+([\w.]+(?:\s*<[^;=(){}]*>)?)\s+\w+\s*;")
CONSTRUCTOR_PATTERN = re.compile(r"\bpublic\s+(\w+)\s*\(([^)]*)\)")

_GENERIC_ARGS = re.compile(r"<[^<>]*>")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")

# Lombok annotations that generate a constructor from final fields.
CODEGEN_MARKERS: Tuple[str, ...] = ("@RequiredArgsConstructor", "@AllArgsConstructor")

BASIC_TYPES = frozenset({
    "byte", "short", "int", "long", "float", "double",
    "boolean", "char", "void",
    "String", "Integer", "Long", "Short", "Byte", "Double", "Float",
    "Boolean", "Character", "Object",
})


def strip_generics(text: str) -> str:
    """Remove ``<...>`` type arguments, innermost first."""
    previous = None
    while previous != text:
        previous = text
        text = _GENERIC_ARGS.sub("", text)
    return text


def simple_name(token: str) -> str:
    """``com.example.Foo`` -> ``Foo``; also drops array and varargs suffixes."""
    token = strip_generics(token).strip()
    token = token.replace("...", "").replace("[]", "")
    return token.rsplit(".", 1)[-1].strip()


def _type_names(tokens) -> List[str]:
    names = []
    for token in tokens:
        name = simple_name(token)
        if _IDENTIFIER.match(name):
            names.append(name)
    return names


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def match_imports(content: str) -> List[str]:
    """Qualified names of single-type imports. Wildcard and static imports
    never match."""
    return IMPORT_PATTERN.findall(content)


def match_extends(content: str) -> List[str]:
    """One type per ``extends``; type arguments are never captured."""
    return _type_names(EXTENDS_PATTERN.findall(content))


def match_implements(content: str) -> List[str]:
    names: List[str] = []
    for clause in IMPLEMENTS_PATTERN.findall(content):
        names.extend(_type_names(strip_generics(clause).split(",")))
    return names


def match_injected_fields(content: str) -> List[str]:
    return _type_names(INJECTED_FIELD_PATTERN.findall(content))


def has_codegen_marker(content: str) -> bool:
    return any(marker in content for marker in CODEGEN_MARKERS)


def match_constructor_injected_fields(content: str) -> List[str]:
    """``private final`` fields, but only in classes whose constructor is
    generated from them."""
    if not has_codegen_marker(content):
        return []
    return _type_names(FINAL_FIELD_PATTERN.findall(content))


def match_constructor_parameters(content: str) -> List[str]:
    names: List[str] = []
    for _, params in CONSTRUCTOR_PATTERN.findall(content):
        for param in strip_generics(params).split(","):
            tokens = [t for t in param.split() if not t.startswith("@") and t != "final"]
            if not tokens:
                continue
            for name in _type_names(tokens[:1]):
                if name not in BASIC_TYPES:
                    names.append(name)
    return names


@dataclass(frozen=True)
class ExtractionRule:
    name: str
    kind: str
    match: Callable[[str], List[str]]


DEFAULT_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule("import", "qualified", match_imports),
    ExtractionRule("extends", "symbol", match_extends),
    ExtractionRule("implements", "symbol", match_implements),
    ExtractionRule("injected-field", "symbol", match_injected_fields),
    ExtractionRule("constructor-injected-field", "symbol", match_constructor_injected_fields),
    ExtractionRule("constructor-parameter", "symbol", match_constructor_parameters),
)


# ---------------------------------------------------------------------------
# Package declarations
# ---------------------------------------------------------------------------

def detect_package(content: str) -> Optional[str]:
    match = PACKAGE_PATTERN.search(content)
    return match.group(1) if match else None


def detect_base_package(content: str, segments: int) -> Optional[str]:
    """First *segments* components of the file's package declaration.

    ``com.example.web.controller`` with 2 segments gives ``com.example``.
    Shorter packages are returned whole.
    """
    package = detect_package(content)
    if package is None:
        return None
    return ".".join(package.split(".")[:segments])
