from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the fixed values shared by the gathering engine and the
packaging layer: manifest naming, dynamic-loader entry patterns,
conventional executable directories and Debian defaults.
"""

from typing import Dict, List, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_MANIFEST_NAME = "MANIFEST.txt"
DEFAULT_LDD_COMMAND = "ldd"

# Linux MAXSYMLINKS
DEFAULT_MAX_SYMLINK_HOPS = 40

# -----------------------------------------------------------------------------
# DYNAMIC LOADER OUTPUT
# -----------------------------------------------------------------------------

# Entries injected by the loader (or naming the loader itself). They have no
# file worth bundling even when the listing prints a path for them.
VIRTUAL_ENTRY_PATTERNS: Tuple[str, ...] = (
    r"linux-vdso\.so",
    r"linux-gate\.so",
    r"ld-linux",
    r"ld64\.so",
    r"ld-musl",
)

# -----------------------------------------------------------------------------
# PACKAGING DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_PACKAGE_VERSION = "1.0.0"
DEFAULT_SECTION = "misc"
DEFAULT_PRIORITY = "optional"
DEFAULT_DISTRIBUTION = "unstable"
DEFAULT_URGENCY = "low"

PACKAGE_NAME_PATTERN = r"^[a-z0-9][a-z0-9+.-]*$"

# Searched in order, relative to the staging root
EXECUTABLE_DIRS: List[str] = ["usr/bin", "bin", "usr/local/bin"]

ARCHITECTURE_MAP: Dict[str, str] = {
    "x86_64": "amd64",
    "i386": "i386",
    "i686": "i386",
    "aarch64": "arm64",
}

# Libraries whose presence marks a bundle as a desktop application
GUI_LIBRARY_MARKERS: Tuple[str, ...] = ("gtk", "qt", "X11", "wayland")
