from __future__ import annotations

"""
Closure Walker.

Computes the transitive shared-library closure of a binary with a
depth-first traversal over the loader-reported dependency relation, copying
every node into the mirrored output tree as it is discovered.

The traversal uses an explicit stack, so deep dependency chains do not grow
the Python call stack. Each canonical path is analyzed once per run: the
per-run registry is the only thing that stops cycles (A -> B -> A).
"""

import logging
import os
from typing import List, Optional, Set

from depgather.core.analysis.extractor import DependencyExtractor
from depgather.core.analysis.ldd_parser import parse_output
from depgather.core.analysis.resolver import resolve_path
from depgather.core.services.copier import StructuredCopier
from depgather.core.services.registry import ProcessedRegistry
from depgather.domain.closure_models import (
    ClosureResult,
    Edge,
    ExtractStatus,
    SkipReason,
)
from depgather.domain.constants import DEFAULT_MAX_SYMLINK_HOPS
from depgather.domain.errors import AnalysisFailedError, CopyFailedError, SymlinkLoopError

logger = logging.getLogger(__name__)


class ClosureWalker:
    """
    Drives classification, extraction, resolution and copying per node.

    A walker may be reused for several runs; no state survives between
    them except the copier's statistics.
    """

    def __init__(
            self,
            output_root: str,
            extractor: Optional[DependencyExtractor] = None,
            copier: Optional[StructuredCopier] = None,
            max_symlink_hops: int = DEFAULT_MAX_SYMLINK_HOPS,
    ) -> None:
        self.output_root = os.path.abspath(output_root)
        self.extractor = extractor or DependencyExtractor()
        self.copier = copier or StructuredCopier(self.output_root)
        self.max_symlink_hops = max_symlink_hops

    def run(self, binary_path: str) -> ClosureResult:
        """
        Gather the full dependency closure of a binary.

        Args:
            binary_path: Executable or shared library, raw or canonical.

        Returns:
            ClosureResult: Visited nodes, copies and recoverable warnings.

        Raises:
            AnalysisFailedError: A node's dependencies could not be listed.
            SymlinkLoopError: A path resolves through a symlink loop.
            CopyFailedError: A file could not be copied into the tree.
        """
        registry = ProcessedRegistry()
        raw_copied: Set[str] = set()

        start = os.path.abspath(binary_path)
        result = ClosureResult(
            binary_path=binary_path,
            canonical_path=resolve_path(start, self.max_symlink_hops),
            output_root=self.output_root,
        )

        stack: List[str] = [start]
        while stack:
            raw = stack.pop()
            canonical = resolve_path(raw, self.max_symlink_hops)

            # Every symlink form is staged, even for an already visited target
            if raw != canonical and raw not in raw_copied:
                raw_copied.add(raw)
                self._copy(raw, result)

            if registry.contains(canonical):
                continue
            registry.mark_visited(canonical)
            self._copy(canonical, result)

            extraction = self.extractor.extract(canonical)
            result.extractions += 1

            if extraction.status is ExtractStatus.ANALYSIS_FAILED:
                raise AnalysisFailedError(canonical, extraction.reason)

            if extraction.status is ExtractStatus.STATIC_NO_DEPS:
                result.static_leaves.append(canonical)
                continue

            children = self._children(canonical, extraction.lines, result)
            # Reversed so the first listed dependency is visited first
            stack.extend(reversed(children))

        result.visited = registry.visited()
        logger.debug(
            f"Closure of {result.canonical_path}: {len(result.visited)} nodes, "
            f"{result.extractions} listings, {result.files_copied} files copied, "
            f"{len(result.warnings)} warnings"
        )
        return result

    def _children(self, parent: str, lines, result: ClosureResult) -> List[str]:
        children: List[str] = []
        for parsed in parse_output(lines):
            if not isinstance(parsed, Edge):
                if parsed.reason is SkipReason.UNRESOLVED:
                    self._warn(result, f"library not found: '{parsed.name}' (required by {parent})")
                continue

            if not os.path.isfile(parsed.path):
                problem = "symlink loop" if self._is_loop(parsed.path) else "library not found"
                self._warn(result, f"{problem}: '{parsed.path}' (required by {parent})")
                continue

            children.append(parsed.path)
        return children

    def _is_loop(self, path: str) -> bool:
        if not os.path.islink(path):
            return False
        try:
            resolve_path(path, self.max_symlink_hops)
        except SymlinkLoopError:
            return True
        return False

    def _copy(self, source: str, result: ClosureResult) -> None:
        try:
            result.copies.append(self.copier.copy(source))
        except OSError as e:
            raise CopyFailedError(source, str(e)) from e

    @staticmethod
    def _warn(result: ClosureResult, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)
