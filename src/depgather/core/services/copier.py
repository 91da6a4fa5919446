from __future__ import annotations

"""
Structured Copy Service.

Copies files into an output root at the destination obtained by appending
the absolute source path to the root, so the staged tree mirrors the
original filesystem layout. Files already present and byte-identical are
left alone, which keeps repeated runs incremental.
"""

import logging
import os
import shutil

from depgather.domain.closure_models import CopyOutcome
from depgather.infra.fs import files_identical

logger = logging.getLogger(__name__)


def destination_for(source: str, output_root: str) -> str:
    """
    Compute the mirrored destination of an absolute source path.

    Args:
        source: Absolute source path (raw or canonical).
        output_root: Root of the output tree.

    Returns:
        str: output_root concatenated with source.
    """
    if not os.path.isabs(source):
        raise ValueError(f"Source path must be absolute: {source}")
    return os.path.join(output_root, source.lstrip("/"))


class StructuredCopier:
    """
    Copies sources into a mirrored tree and keeps copy statistics.

    Symlink sources are copied by content: the destination is a regular file
    holding the bytes of the link target.
    """

    def __init__(self, output_root: str) -> None:
        self.output_root = os.path.abspath(output_root)
        self.copied = 0
        self.skipped = 0

    def copy(self, source: str) -> CopyOutcome:
        """
        Copy a file to its mirrored destination unless it is unchanged.

        Args:
            source: Absolute path of the file to copy.

        Returns:
            CopyOutcome: Source, destination and whether bytes were written.

        Raises:
            OSError: The source cannot be read or the destination written.
        """
        dest = destination_for(source, self.output_root)
        os.makedirs(os.path.dirname(dest), exist_ok=True)

        if files_identical(source, dest):
            self.skipped += 1
            logger.debug(f"Unchanged: {source}")
            return CopyOutcome(source, dest, copied=False)

        # A stale symlink at the destination would redirect the write
        if os.path.islink(dest):
            os.unlink(dest)

        shutil.copy2(source, dest)
        self.copied += 1
        logger.info(f"Copied: {source} -> {dest}")
        return CopyOutcome(source, dest, copied=True)
