"""Data models shared by the closure engine, the filters and the reports."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set, Tuple


@dataclass
class RuleMatch:
    """One hit of one extraction rule inside one file."""
    rule: str
    token: str
    path: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.path is not None


@dataclass
class TraversalContext:
    """State of a single closure run.

    ``discovered`` is a dict used as an insertion-ordered set.
    """
    frontier: Deque[str] = field(default_factory=deque)
    processed: Set[str] = field(default_factory=set)
    discovered: Dict[str, None] = field(default_factory=dict)
    depth: int = 0

    @classmethod
    def seed(cls, entry_file: str) -> "TraversalContext":
        return cls(frontier=deque([entry_file]))

    @property
    def pending(self) -> List[str]:
        """Queued files that were never expanded."""
        return [path for path in self.frontier if path not in self.processed]


@dataclass
class ClosureResult:
    entry_file: str
    discovered: Tuple[str, ...]
    depth: int
    max_depth: int
    truncated: bool = False

    def sorted(self) -> List[str]:
        return sorted(self.discovered)

    def __contains__(self, path: object) -> bool:
        return path in self.discovered

    def __len__(self) -> int:
        return len(self.discovered)
