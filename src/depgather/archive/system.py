from __future__ import annotations

"""
Packaging Inputs and Host Probing.

Validation of user-supplied package identity, architecture detection and
inspection of a staged tree (main executable discovery, installed size).
"""

import logging
import os
import platform
import re
from typing import Optional

from debian.debian_support import Version

from depgather.domain.constants import (
    ARCHITECTURE_MAP,
    EXECUTABLE_DIRS,
    PACKAGE_NAME_PATTERN,
)
from depgather.domain.errors import InvalidPackageNameError, InvalidVersionError
from depgather.infra.fs import disk_usage_kib, is_executable_file

logger = logging.getLogger(__name__)

_NAME_RX = re.compile(PACKAGE_NAME_PATTERN)


def validate_package_name(name: str) -> str:
    if not name or not _NAME_RX.match(name):
        raise InvalidPackageNameError(name)
    return name


def validate_version(version: str) -> str:
    """
    Check a Debian version string.

    Raises:
        InvalidVersionError: Unparseable, or upstream part not starting with a digit.
    """
    try:
        parsed = Version(version)
    except ValueError as e:
        raise InvalidVersionError(version, str(e)) from e

    if not str(parsed.upstream_version or "")[:1].isdigit():
        raise InvalidVersionError(version, "upstream version must start with a digit")
    return version


def detect_architecture(machine: Optional[str] = None) -> str:
    """
    Map the machine hardware name to a Debian architecture.

    Args:
        machine: uname -m style name; defaults to the running host.

    Returns:
        str: Debian architecture, 'all' when unknown.
    """
    m = (machine if machine is not None else platform.machine()).strip()
    if m.startswith("armv7"):
        return "armhf"
    return ARCHITECTURE_MAP.get(m, "all")


def find_main_executable(root: str) -> Optional[str]:
    """
    Best-effort discovery of the bundle's main executable.

    Probes the conventional executable directories under a staging root
    and returns the first executable regular file found, as the absolute
    path it will have once installed (e.g. '/usr/bin/foo').

    Args:
        root: Staging root mirroring the target filesystem.

    Returns:
        Optional[str]: Install path of the executable, or None.
    """
    root = os.path.abspath(root)
    for rel_dir in EXECUTABLE_DIRS:
        directory = os.path.join(root, rel_dir)
        if not os.path.isdir(directory):
            continue
        for dirpath, dirnames, filenames in os.walk(directory):
            dirnames.sort()
            for name in sorted(filenames):
                candidate = os.path.join(dirpath, name)
                if is_executable_file(candidate):
                    install_path = "/" + os.path.relpath(candidate, root)
                    logger.info(f"Detected main executable: {install_path}")
                    return install_path
    return None


def calculate_installed_size(path: str) -> int:
    """Installed size in KiB, as recorded in the control file."""
    return disk_usage_kib(path)
