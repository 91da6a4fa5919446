from __future__ import annotations

"""
Domain Exceptions.

Every fatal condition of a gathering or packaging run is expressed as a
typed exception carrying the offending path (or value) and a stable
``kind`` identifier used by the interface layer for reporting and exit
code selection.
"""

from typing import Optional


# -----------------------------------------------------------------------------
# GATHERING ERRORS
# -----------------------------------------------------------------------------

class GatherError(Exception):
    """Base class for fatal errors raised while computing a closure."""

    kind: str = "GatherError"

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"{path}: {reason}" if reason else path
        super().__init__(message)


class InputNotFoundError(GatherError):
    """The input binary does not exist."""

    kind = "NotFound"

    def __init__(self, path: str) -> None:
        super().__init__(path, "file not found")


class NotABinaryError(GatherError):
    """The input failed ELF identification."""

    kind = "NotABinary"

    def __init__(self, path: str) -> None:
        super().__init__(path, "not a valid ELF binary")


class AnalysisFailedError(GatherError):
    """
    The dependency listing failed for a binary that declares dependencies.

    A bundle built without the real dependency set of even one binary is
    unusable, so this aborts the whole closure.
    """

    kind = "AnalysisFailed"


class SymlinkLoopError(GatherError):
    """Symlink resolution exceeded the allowed number of hops."""

    kind = "SymlinkLoop"

    def __init__(self, path: str, max_hops: int) -> None:
        self.max_hops = max_hops
        super().__init__(path, f"too many levels of symbolic links (limit {max_hops})")


class CopyFailedError(GatherError):
    """A file could not be copied into the output tree."""

    kind = "CopyFailed"


# -----------------------------------------------------------------------------
# PACKAGING ERRORS
# -----------------------------------------------------------------------------

class PackagingError(Exception):
    """Base class for errors raised while building a Debian archive."""

    kind: str = "PackagingError"


class InvalidPackageNameError(PackagingError):
    kind = "InvalidPackageName"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Package name must be lowercase and contain only letters, numbers, "
            f"hyphens, periods, and plus signs. Invalid name: {name}"
        )


class InvalidVersionError(PackagingError):
    kind = "InvalidVersion"

    def __init__(self, version: str, reason: Optional[str] = None) -> None:
        self.version = version
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Invalid package version: {version!r}{detail}")


class MissingToolError(PackagingError):
    kind = "MissingTool"

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(
            f"Required tool '{tool}' not found. "
            f"Install it with: sudo apt-get install dpkg-dev fakeroot"
        )


class PackageBuildError(PackagingError):
    kind = "PackageBuildFailed"
