from __future__ import annotations

"""
Gathering Orchestration.

Coordinates one complete gathering run:
1. Validates configuration and the input binary.
2. Prepares the output directory and clears a stale manifest.
3. Walks the dependency closure, staging every file.
4. Writes the manifest describing the finished tree.

Runs are single-threaded and hold no lock: exactly one run may target a
given output directory at a time. Two concurrent runs against the same
directory duplicate work and may leave partially written files behind.
"""

import logging
import os
from typing import Any, Dict, Optional

from depgather.core.analysis.classifier import classify
from depgather.core.analysis.extractor import DependencyExtractor
from depgather.core.analysis.resolver import resolve_path
from depgather.core.pipeline.validator import validate_config
from depgather.core.pipeline.walker import ClosureWalker
from depgather.core.services.copier import StructuredCopier
from depgather.core.services.manifest import (
    list_output_files,
    manifest_path_for,
    remove_stale_manifest,
    write_manifest,
)
from depgather.domain.closure_models import BinaryKind
from depgather.domain.errors import (
    GatherError,
    InputNotFoundError,
    NotABinaryError,
    SymlinkLoopError,
)
from depgather.domain.gather_models import (
    GatherResult,
    create_error_result,
    create_success_result,
)
from depgather.infra.fs import normalize_path, safe_mkdir

logger = logging.getLogger(__name__)


def run_gather(
        binary_path: str,
        output_dir: str,
        config: Optional[Dict[str, Any]] = None,
        *,
        extractor: Optional[DependencyExtractor] = None,
) -> GatherResult:
    """
    Gather the shared-library closure of a binary into a mirrored tree.

    Args:
        binary_path: Executable or shared library to analyze.
        output_dir: Root of the output tree (created if missing).
        config: Raw configuration; defaults are applied for missing keys.
        extractor: Optional pre-built extractor (overrides ldd settings).

    Returns:
        GatherResult: Success with the file listing, or an error result.
    """
    logger.info("Gathering started.")

    # -------------------------------------------------------------------------
    # 1) Config & Input Validation
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config if config is not None else {}, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    raw_binary = (binary_path or "").strip()
    out_root = normalize_path(output_dir or cfg["output_dir"], os.getcwd())

    if not raw_binary:
        return _fail(InputNotFoundError(raw_binary), raw_binary, out_root)

    binary = normalize_path(raw_binary, os.getcwd())

    # A looping link fails isfile() too; report it as a loop, not as missing
    if os.path.islink(binary) and not os.path.exists(binary):
        try:
            resolve_path(binary, cfg["max_symlink_hops"])
        except SymlinkLoopError as e:
            return _fail(e, binary, out_root)

    if not os.path.isfile(binary):
        return _fail(InputNotFoundError(raw_binary), raw_binary, out_root)

    if classify(binary) is BinaryKind.NOT_A_BINARY:
        return _fail(NotABinaryError(binary), binary, out_root)

    # -------------------------------------------------------------------------
    # 2) Output Preparation
    # -------------------------------------------------------------------------
    ok, err = safe_mkdir(out_root)
    if not ok:
        msg = f"Failed to create output directory {out_root}: {err}"
        logger.critical(msg)
        return create_error_result(msg, "OutputDirFailed", binary, out_root)

    # A failed run must not leave a previous run's manifest looking current
    remove_stale_manifest(out_root, cfg["manifest_name"])

    logger.info(f"Gathering dependencies for: {binary}")
    logger.info(f"Output directory: {out_root}")

    # -------------------------------------------------------------------------
    # 3) Closure Walk
    # -------------------------------------------------------------------------
    copier = StructuredCopier(out_root)
    walker = ClosureWalker(
        out_root,
        extractor=extractor or DependencyExtractor(
            ldd_command=cfg["ldd_command"],
            timeout=cfg["ldd_timeout"],
        ),
        copier=copier,
        max_symlink_hops=cfg["max_symlink_hops"],
    )

    try:
        closure = walker.run(binary)
    except GatherError as e:
        return _fail(e, binary, out_root)

    # -------------------------------------------------------------------------
    # 4) Manifest & Summary
    # -------------------------------------------------------------------------
    manifest_path = ""
    if cfg["write_manifest"]:
        try:
            manifest = write_manifest(out_root, binary, cfg["manifest_name"])
        except OSError as e:
            msg = f"Failed to write manifest in {out_root}: {e}"
            logger.error(msg)
            return create_error_result(msg, "ManifestFailed", binary, out_root, closure.canonical_path)
        manifest_path = manifest.path or ""

    files = list_output_files(out_root, exclude=manifest_path_for(out_root, cfg["manifest_name"]))

    summary = {
        "total_files": len(files),
        "nodes_visited": len(closure.visited),
        "listings": closure.extractions,
        "copied": copier.copied,
        "unchanged": copier.skipped,
        "static_leaves": list(closure.static_leaves),
        "warnings": len(closure.warnings),
    }

    logger.info(f"Dependency gathering complete! Total files copied: {len(files)}")
    return create_success_result(
        binary, closure.canonical_path, out_root, files,
        manifest_path=manifest_path,
        warnings=closure.warnings,
        summary_extra=summary,
    )


def _fail(error: GatherError, binary: str, out_root: str) -> GatherResult:
    msg = f"{error.kind}: {error}"
    logger.error(msg)
    return create_error_result(msg, error.kind, binary, out_root)
