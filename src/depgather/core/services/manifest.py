from __future__ import annotations

"""
Manifest Service.

Summarizes a finished output tree into a plain-text descriptor at its root.
Runs strictly after the closure walk; it reads the tree and never modifies
anything but the manifest file itself.
"""

import logging
import os
from datetime import datetime
from typing import List, Optional

from depgather.domain.closure_models import Manifest
from depgather.domain.constants import DEFAULT_MANIFEST_NAME

logger = logging.getLogger(__name__)

_HEADER_BINARY = "Dependency manifest for: "
_HEADER_DATE = "Generated on: "
_HEADER_FILES = "Files:"


def list_output_files(output_root: str, exclude: Optional[str] = None) -> List[str]:
    """
    List every file under the output root, sorted.

    Args:
        output_root: Root of the output tree.
        exclude: Absolute path left out of the listing (the manifest).

    Returns:
        List[str]: Sorted absolute destination paths.
    """
    excluded = os.path.abspath(exclude) if exclude else None
    found: List[str] = []
    for root, dirs, files in os.walk(os.path.abspath(output_root)):
        for name in files:
            path = os.path.join(root, name)
            if path != excluded:
                found.append(path)
    return sorted(found)


def manifest_path_for(output_root: str, manifest_name: str = DEFAULT_MANIFEST_NAME) -> str:
    return os.path.join(os.path.abspath(output_root), manifest_name)


def write_manifest(
        output_root: str,
        binary_path: str,
        manifest_name: str = DEFAULT_MANIFEST_NAME,
        generated_at: Optional[datetime] = None,
) -> Manifest:
    """
    Write the manifest describing the current content of the output tree.

    Args:
        output_root: Root of the finished output tree.
        binary_path: Input binary the tree was gathered for.
        manifest_name: File name of the manifest at the tree root.
        generated_at: Timestamp recorded in the header; defaults to now.

    Returns:
        Manifest: The written manifest, including its location.
    """
    path = manifest_path_for(output_root, manifest_name)
    files = list_output_files(output_root, exclude=path)
    stamp = (generated_at or datetime.now().astimezone()).isoformat(timespec="seconds")

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{_HEADER_BINARY}{binary_path}\n")
        f.write(f"{_HEADER_DATE}{stamp}\n")
        f.write(f"{_HEADER_FILES}\n")
        for entry in files:
            f.write(f"{entry}\n")

    logger.info(f"Manifest created: {path}")
    return Manifest(binary_path=binary_path, generated_at=stamp, files=tuple(files), path=path)


def read_manifest(path: str) -> Manifest:
    """
    Parse a manifest written by write_manifest.

    Raises:
        ValueError: The file does not start with the expected header.
    """
    with open(path, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()

    if len(lines) < 3 or not lines[0].startswith(_HEADER_BINARY) \
            or not lines[1].startswith(_HEADER_DATE) or lines[2] != _HEADER_FILES:
        raise ValueError(f"Not a dependency manifest: {path}")

    return Manifest(
        binary_path=lines[0][len(_HEADER_BINARY):],
        generated_at=lines[1][len(_HEADER_DATE):],
        files=tuple(line for line in lines[3:] if line),
        path=path,
    )


def remove_stale_manifest(output_root: str, manifest_name: str = DEFAULT_MANIFEST_NAME) -> bool:
    """Delete a manifest left by a previous run. Returns True if one existed."""
    path = manifest_path_for(output_root, manifest_name)
    if os.path.isfile(path):
        os.remove(path)
        logger.debug(f"Removed stale manifest: {path}")
        return True
    return False
