from __future__ import annotations

"""
Closure Domain Data Models.

Defines the value objects exchanged between the analysis components and the
closure walker: binary classification, parsed dependency-listing lines,
extraction outcomes, copy outcomes and the final closure summary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

class BinaryKind(str, Enum):
    """Result of ELF identification for a single file."""
    DYNAMIC = "dynamic"
    STATIC = "static"
    NOT_A_BINARY = "not_a_binary"

# -----------------------------------------------------------------------------
# DEPENDENCY LISTING GRAMMAR
# -----------------------------------------------------------------------------

class SkipReason(str, Enum):
    VIRTUAL = "virtual"
    UNRESOLVED = "unresolved"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Edge:
    """
    A dependency reported by the loader listing.

    Attributes:
        path: Path of the library as printed by the loader.
        name: Requested soname, empty for the direct '/path (addr)' form.
        address: Load address reported by the loader, if any.
    """
    path: str
    name: str = ""
    address: str = ""


@dataclass(frozen=True)
class Skip:
    """A listing line that names no file to bundle."""
    line: str
    reason: SkipReason
    name: str = ""


ParsedLine = Union[Edge, Skip]

# -----------------------------------------------------------------------------
# EXTRACTION
# -----------------------------------------------------------------------------

class ExtractStatus(str, Enum):
    LISTED = "listed"
    STATIC_NO_DEPS = "static_no_deps"
    ANALYSIS_FAILED = "analysis_failed"


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of listing the direct dependencies of one canonical path.

    Attributes:
        path: The canonical path that was analyzed.
        status: Success or failure variant.
        lines: Raw listing lines (only meaningful for LISTED).
        reason: Human-readable failure description for ANALYSIS_FAILED.
    """
    path: str
    status: ExtractStatus
    lines: Tuple[str, ...] = ()
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not ExtractStatus.ANALYSIS_FAILED

# -----------------------------------------------------------------------------
# COPY & CLOSURE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CopyOutcome:
    source: str
    destination: str
    copied: bool


@dataclass
class ClosureResult:
    """
    Summary of a completed closure walk.

    Attributes:
        binary_path: Input path as given by the caller.
        canonical_path: Fully resolved input path.
        output_root: Root of the mirrored output tree.
        visited: Canonical paths in visitation order.
        copies: Every copy performed or skipped, in order.
        warnings: Recoverable problems (missing or unresolved libraries).
        extractions: Number of dependency listings performed.
        static_leaves: Canonical paths recognized as statically linked.
    """
    binary_path: str
    canonical_path: str
    output_root: str
    visited: List[str] = field(default_factory=list)
    copies: List[CopyOutcome] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    extractions: int = 0
    static_leaves: List[str] = field(default_factory=list)

    @property
    def files_copied(self) -> int:
        return sum(1 for c in self.copies if c.copied)

# -----------------------------------------------------------------------------
# MANIFEST
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Manifest:
    binary_path: str
    generated_at: str
    files: Tuple[str, ...]
    path: Optional[str] = None
