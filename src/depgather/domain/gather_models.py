from __future__ import annotations

"""
Gathering Result Data Models.

Defines the result object returned by the gathering engine to the interface
layer (CLI), along with the factory functions that build success and error
variants.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class GatherResult:
    """
    Unified result object of a complete gathering run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Stable identifier of the failure class (e.g. 'NotFound').
        binary_path: Input path as provided.
        canonical_path: Fully resolved input path.
        output_dir: Root of the mirrored output tree.
        manifest_path: Path of the written manifest, empty when none.
        files: Sorted destination files present after the run.
        warnings: Recoverable problems encountered during the walk.
        summary: Execution statistics.
    """
    ok: bool
    error: str
    error_kind: str

    binary_path: str
    canonical_path: str
    output_dir: str

    manifest_path: str = ""
    files: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        error_kind: str,
        binary_path: str,
        output_dir: str,
        canonical_path: str = "",
        warnings: Optional[List[str]] = None,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> GatherResult:
    """
    Create a failed gathering result. No manifest is ever attached.
    """
    return GatherResult(
        ok=False,
        error=error,
        error_kind=error_kind,
        binary_path=binary_path,
        canonical_path=canonical_path,
        output_dir=output_dir,
        warnings=warnings or [],
        summary=summary_extra or {},
    )


def create_success_result(
        binary_path: str,
        canonical_path: str,
        output_dir: str,
        files: List[str],
        manifest_path: str = "",
        warnings: Optional[List[str]] = None,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> GatherResult:
    """
    Create a successful gathering result.

    Args:
        binary_path: Input path as provided.
        canonical_path: Resolved input path.
        output_dir: Output tree root.
        files: Sorted list of files present in the tree.
        manifest_path: Manifest location if one was written.
        warnings: Recoverable problems encountered.
        summary_extra: Execution statistics.

    Returns:
        GatherResult: An immutable success result object.
    """
    return GatherResult(
        ok=True,
        error="",
        error_kind="",
        binary_path=binary_path,
        canonical_path=canonical_path,
        output_dir=output_dir,
        manifest_path=manifest_path,
        files=files,
        warnings=warnings or [],
        summary=summary_extra or {},
    )
