from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, application data directory resolution and
small filesystem helpers shared by the gathering engine and the packaging
layer.
"""

import filecmp
import os
import stat
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

UNIX_APP_DIR_NAME = ".depgather"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the directory used for persistent application data.

    Automatically creates the hierarchy if it does not exist.

    Returns:
        str: Absolute path to ~/.depgather.
    """
    try:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)
    except Exception:
        path = os.path.abspath(UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR) and user home shortcuts
    (~/). Reverts to fallback if the input is empty. Symlinks are left
    untouched; canonicalization is the resolver's job.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# FILESYSTEM OPERATIONS API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


def files_identical(a: str, b: str) -> bool:
    """Byte-for-byte comparison; False if either side is missing."""
    if not (os.path.isfile(a) and os.path.isfile(b)):
        return False
    return filecmp.cmp(a, b, shallow=False)


def is_executable_file(path: str) -> bool:
    """Regular file (not a symlink) with at least one execute bit set."""
    try:
        st = os.lstat(path)
    except OSError:
        return False
    if not stat.S_ISREG(st.st_mode):
        return False
    return bool(st.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def disk_usage_kib(path: str) -> int:
    """
    Approximate `du -sk`: sum of file sizes rounded up to whole KiB.

    Symlinks are counted by their own size and never followed.
    """
    total = 0
    for root, dirs, files in os.walk(path):
        for name in files:
            try:
                size = os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
            total += (size + 1023) // 1024
    return total
