from __future__ import annotations

"""
Processed Path Registry.

In-memory record of the canonical paths visited during one closure run.
It only grows, and membership is the sole mechanism that breaks dependency
cycles and prevents re-analysis of shared libraries.
"""

from typing import Dict, Iterator, List


class ProcessedRegistry:
    """Insertion-ordered set of visited canonical paths."""

    def __init__(self) -> None:
        self._seen: Dict[str, None] = {}

    def contains(self, path: str) -> bool:
        return path in self._seen

    def mark_visited(self, path: str) -> None:
        self._seen.setdefault(path, None)

    def visited(self) -> List[str]:
        """Visited paths in the order they were first marked."""
        return list(self._seen)

    def __contains__(self, path: object) -> bool:
        return path in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self._seen)
