from __future__ import annotations

"""
Path Canonicalization.

Resolves a path to its canonical form by dereferencing every symlink
component, with an upper bound on the number of links followed so that a
loop of symlinks fails with a dedicated error instead of hanging.
"""

import os
from typing import List

from depgather.domain.constants import DEFAULT_MAX_SYMLINK_HOPS
from depgather.domain.errors import SymlinkLoopError


def resolve_path(path: str, max_hops: int = DEFAULT_MAX_SYMLINK_HOPS) -> str:
    """
    Fully dereference symlink chains into an absolute canonical path.

    Components are processed left to right; each symlink's target is spliced
    in front of the remaining components. Components that do not exist are
    kept verbatim. Resolving an already canonical path returns it unchanged.

    Args:
        path: Raw path, absolute or relative to the working directory.
        max_hops: Maximum number of symlinks followed in total.

    Returns:
        str: Canonical absolute path.

    Raises:
        SymlinkLoopError: More than max_hops symlinks were encountered.
    """
    original = path
    pending: List[str] = _split(os.path.abspath(path))
    resolved = "/"
    hops = 0

    while pending:
        component = pending.pop(0)
        if component in ("", "."):
            continue
        if component == "..":
            resolved = os.path.dirname(resolved)
            continue

        candidate = os.path.join(resolved, component)
        if not os.path.islink(candidate):
            resolved = candidate
            continue

        hops += 1
        if hops > max_hops:
            raise SymlinkLoopError(original, max_hops)

        target = os.readlink(candidate)
        if target.startswith("/"):
            resolved = "/"
        pending = _split(target) + pending

    return resolved


def _split(path: str) -> List[str]:
    return [p for p in path.split("/") if p]
