from __future__ import annotations

"""
Debian Metadata Rendering.

Pure functions producing the text of every generated packaging file:
control, maintainer scripts, copyright and changelog. Nothing here touches
the filesystem.
"""

from datetime import datetime
from email.utils import format_datetime
from typing import Optional

from debian.changelog import Changelog
from debian.deb822 import Deb822

from depgather.domain.constants import (
    DEFAULT_DISTRIBUTION,
    DEFAULT_PRIORITY,
    DEFAULT_SECTION,
    DEFAULT_URGENCY,
    GUI_LIBRARY_MARKERS,
)

# -----------------------------------------------------------------------------
# TEMPLATES
# -----------------------------------------------------------------------------

_POSTINST_TEMPLATE = r"""#!/bin/bash
# Post-installation script

set -e

# Update ldconfig cache to recognize new libraries
if command -v ldconfig >/dev/null 2>&1; then
    ldconfig
fi

# Create desktop entry if we have a GUI application
MAIN_EXE="__MAIN_EXE__"
PACKAGE_NAME="__PACKAGE_NAME__"

if [[ -n "$MAIN_EXE" && -f "$MAIN_EXE" ]]; then
    # Check if it's a GUI application (very basic check)
    if ldd "$MAIN_EXE" 2>/dev/null | grep -q -E "(__GUI_MARKERS__)"; then
        DESKTOP_FILE="/usr/share/applications/${PACKAGE_NAME}.desktop"

        if [[ ! -f "$DESKTOP_FILE" ]]; then
            mkdir -p /usr/share/applications
            cat > "$DESKTOP_FILE" << EOD
[Desktop Entry]
Version=1.0
Type=Application
Name=${PACKAGE_NAME}
Comment=Bundled application with dependencies
Exec=${MAIN_EXE}
Terminal=false
Categories=Application;
EOD
            echo "Created desktop entry: $DESKTOP_FILE"
        fi
    fi
fi

echo "Installation completed successfully!"
echo "Package: $PACKAGE_NAME"
if [[ -n "$MAIN_EXE" ]]; then
    echo "Main executable: $MAIN_EXE"
fi

exit 0
"""

_PRERM_TEMPLATE = r"""#!/bin/bash
# Pre-removal script

set -e

# Remove desktop entry if it exists
DESKTOP_FILE="/usr/share/applications/__PACKAGE_NAME__.desktop"
if [[ -f "$DESKTOP_FILE" ]]; then
    rm -f "$DESKTOP_FILE"
    echo "Removed desktop entry: $DESKTOP_FILE"
fi

exit 0
"""

_COPYRIGHT_TEMPLATE = """Format: https://www.debian.org/doc/packaging-manuals/copyright-format/1.0/
Upstream-Name: {name}
Source: Generated by dependency bundler

Files: *
Copyright: {year} {maintainer}
License: Custom
 This package bundles an application with its dependencies.
 Individual components may have their own licenses.
 Please refer to the original software documentation for
 specific license information.
"""

_LONG_DESCRIPTION = (
    " This package contains a bundled application with all its dependencies\n"
    " included to ensure compatibility across different systems.\n"
    " .\n"
    " Generated automatically by depgather."
)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def default_description(package_name: str) -> str:
    return f"Bundled application with dependencies for {package_name}"


def render_control(
        package_name: str,
        version: str,
        architecture: str,
        installed_size_kib: int,
        maintainer: str,
        description: str,
        section: str = DEFAULT_SECTION,
        priority: str = DEFAULT_PRIORITY,
) -> str:
    """
    Render DEBIAN/control.

    The first description line is the synopsis; the extended description
    follows as indented continuation lines.
    """
    control = Deb822()
    control["Package"] = package_name
    control["Version"] = version
    control["Section"] = section
    control["Priority"] = priority
    control["Architecture"] = architecture
    control["Installed-Size"] = str(installed_size_kib)
    control["Maintainer"] = maintainer
    control["Description"] = f"{_single_line(description)}\n{_LONG_DESCRIPTION}"
    return control.dump()


def render_postinst(package_name: str, main_executable: Optional[str]) -> str:
    return (
        _POSTINST_TEMPLATE
        .replace("__MAIN_EXE__", main_executable or "")
        .replace("__PACKAGE_NAME__", package_name)
        .replace("__GUI_MARKERS__", "|".join(GUI_LIBRARY_MARKERS))
    )


def render_prerm(package_name: str) -> str:
    return _PRERM_TEMPLATE.replace("__PACKAGE_NAME__", package_name)


def render_copyright(package_name: str, maintainer: str, year: Optional[int] = None) -> str:
    return _COPYRIGHT_TEMPLATE.format(
        name=package_name,
        year=year if year is not None else datetime.now().year,
        maintainer=maintainer,
    )


def render_changelog(
        package_name: str,
        version: str,
        maintainer: str,
        when: Optional[datetime] = None,
) -> str:
    """
    Render changelog.Debian with a single initial entry.

    Args:
        package_name: Source/binary package name.
        version: Debian version of the entry.
        maintainer: 'Name <email>' signature.
        when: Entry timestamp (RFC 2822 in the output); defaults to now.
    """
    stamp = format_datetime(when or datetime.now().astimezone())

    changelog = Changelog()
    changelog.new_block(
        package=package_name,
        version=version,
        distributions=DEFAULT_DISTRIBUTION,
        urgency=DEFAULT_URGENCY,
        author=maintainer,
        date=stamp,
    )
    changelog.add_change("")
    changelog.add_change("  * Initial package creation with bundled dependencies")
    changelog.add_change("  * Automatically generated from dependency gatherer")
    changelog.add_change("")
    return str(changelog)


def _single_line(text: str) -> str:
    return " ".join(text.split())
