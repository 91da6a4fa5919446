from __future__ import annotations

"""
Binary Classification Service.

Identifies ELF files and inspects their dynamic section. Serves two
callers: input validation (is this a binary at all?) and the dependency
extractor's fallback path, where the presence of DT_NEEDED entries tells a
statically linked binary apart from a failed analysis.
"""

import logging
import os
from typing import List

from elftools.common.exceptions import ELFError
from elftools.elf.dynamic import DynamicSection, DynamicSegment
from elftools.elf.elffile import ELFFile

from depgather.domain.closure_models import BinaryKind

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def is_elf(path: str) -> bool:
    """Check the ELF magic number without parsing the rest of the file."""
    try:
        with open(path, "rb") as f:
            return f.read(len(ELF_MAGIC)) == ELF_MAGIC
    except OSError:
        return False


def classify(path: str) -> BinaryKind:
    """
    Determine whether a file is a dynamic ELF, a static ELF or neither.

    A file is dynamic when it requests a program interpreter (PT_INTERP)
    or declares at least one DT_NEEDED entry.

    Args:
        path: File to inspect.

    Returns:
        BinaryKind: Classification of the file.
    """
    if not os.path.isfile(path) or not is_elf(path):
        return BinaryKind.NOT_A_BINARY

    try:
        with open(path, "rb") as f:
            elf = ELFFile(f)
            if _has_interpreter(elf) or _needed_entries(elf):
                return BinaryKind.DYNAMIC
            return BinaryKind.STATIC
    except (ELFError, OSError, ValueError) as e:
        logger.debug(f"ELF parsing failed for {path}: {e}")
        return BinaryKind.NOT_A_BINARY


def read_needed(path: str) -> List[str]:
    """
    Return the DT_NEEDED sonames declared by an ELF file.

    Raises:
        ELFError: The file is not a parseable ELF object.
        OSError: The file cannot be read.
    """
    with open(path, "rb") as f:
        return _needed_entries(ELFFile(f))


def has_needed_entries(path: str) -> bool:
    """
    Report whether a binary declares required shared objects.

    An unreadable or unparseable file is reported as declaring entries:
    after a failed listing that keeps the outcome on the fatal side.
    """
    try:
        needed = read_needed(path)
    except (ELFError, OSError, ValueError) as e:
        logger.warning(f"Cannot inspect dynamic section of {path}: {e}")
        return True

    if needed:
        logger.debug(f"{path} declares {len(needed)} NEEDED entries: {', '.join(needed)}")
    return bool(needed)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _has_interpreter(elf: ELFFile) -> bool:
    return any(seg["p_type"] == "PT_INTERP" for seg in elf.iter_segments())


def _needed_entries(elf: ELFFile) -> List[str]:
    # Section headers may be stripped; the PT_DYNAMIC segment is authoritative then
    for section in elf.iter_sections():
        if isinstance(section, DynamicSection):
            return _collect_needed(section)

    for segment in elf.iter_segments():
        if isinstance(segment, DynamicSegment):
            return _collect_needed(segment)

    return []


def _collect_needed(dynamic) -> List[str]:
    return [tag.needed for tag in dynamic.iter_tags() if tag.entry.d_tag == "DT_NEEDED"]
