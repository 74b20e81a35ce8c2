"""Breadth-first, depth-bounded dependency closure."""

from __future__ import annotations

import logging

from .extractor import DependencyExtractor
from .models import ClosureResult, TraversalContext

logger = logging.getLogger(__name__)


class ClosureEngine:
    """Expands an entry file level by level until nothing new turns up or
    the depth bound is reached.

    All traversal state lives in a :class:`TraversalContext` created per
    call, so one engine can serve any number of runs.
    """

    def __init__(self, extractor: DependencyExtractor) -> None:
        self.extractor = extractor

    def step(self, ctx: TraversalContext) -> TraversalContext:
        """Drain exactly the files queued when the level started."""
        batch_size = len(ctx.frontier)
        for _ in range(batch_size):
            current = ctx.frontier.popleft()
            if current in ctx.processed:
                continue

            ctx.processed.add(current)
            ctx.discovered[current] = None

            for dep in sorted(self.extractor.extract_file(current)):
                if dep not in ctx.processed:
                    ctx.frontier.append(dep)

        ctx.depth += 1
        return ctx

    def closure(self, entry_file: str, max_depth: int) -> ClosureResult:
        ctx = TraversalContext.seed(entry_file)
        while ctx.frontier and ctx.depth < max_depth:
            ctx = self.step(ctx)

        pending = ctx.pending
        if pending:
            logger.warning(
                "Reached maximum depth (%d) with %d file(s) left unexpanded",
                max_depth, len(set(pending)),
            )

        return ClosureResult(
            entry_file=entry_file,
            discovered=tuple(ctx.discovered),
            depth=ctx.depth,
            max_depth=max_depth,
            truncated=bool(pending),
        )
