from __future__ import annotations

"""
Debian Archive Builder.

Turns a gathered dependency tree into a .deb archive: stages a copy of the
tree, generates the DEBIAN metadata and documentation files, then hands the
staging directory to 'dpkg-deb' under 'fakeroot'.
"""

import gzip
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional

from depgather.domain.constants import DEFAULT_MANIFEST_NAME
from depgather.domain.errors import MissingToolError, PackageBuildError, PackagingError
from depgather.infra.process import find_tool, run_command
from depgather.archive.metadata import (
    default_description,
    render_changelog,
    render_control,
    render_copyright,
    render_postinst,
    render_prerm,
)
from depgather.archive.system import (
    calculate_installed_size,
    detect_architecture,
    find_main_executable,
    validate_package_name,
    validate_version,
)

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("dpkg-deb", "fakeroot")

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PackageRequest:
    """
    Everything needed to build one archive.

    Attributes:
        deps_dir: Gathered tree (output of the gather command).
        package_name: Debian package name.
        version: Debian version.
        maintainer: 'Name <email>' used in control and changelog.
        description: Synopsis; a default is derived from the name when empty.
        section: Debian section.
        priority: Debian priority.
        architecture: Target architecture; detected from the host when None.
        output_dir: Directory receiving the .deb file.
        manifest_name: Name of the gatherer manifest at the tree root.
    """
    deps_dir: str
    package_name: str
    version: str
    maintainer: str
    description: str = ""
    section: str = "misc"
    priority: str = "optional"
    architecture: Optional[str] = None
    output_dir: str = "."
    manifest_name: str = DEFAULT_MANIFEST_NAME


@dataclass(frozen=True)
class PackageResult:
    deb_path: str
    package_name: str
    version: str
    architecture: str
    installed_size_kib: int
    main_executable: Optional[str] = None
    size_bytes: int = 0


@dataclass(frozen=True)
class PackageInspection:
    info: str
    contents: List[str] = field(default_factory=list)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def check_tools() -> None:
    """Raise MissingToolError for the first required tool not on PATH."""
    for tool in REQUIRED_TOOLS:
        if not find_tool(tool):
            raise MissingToolError(tool)


def deb_filename(package_name: str, version: str, architecture: str) -> str:
    """Archive file name; the epoch never appears in Debian file names."""
    bare_version = version.split(":", 1)[-1]
    return f"{package_name}_{bare_version}_{architecture}.deb"


def build_package(request: PackageRequest) -> PackageResult:
    """
    Build a .deb archive from a gathered tree.

    Args:
        request: Package identity and locations.

    Returns:
        PackageResult: Location and metadata of the built archive.

    Raises:
        InvalidPackageNameError, InvalidVersionError: Bad identity.
        PackagingError: The dependency directory does not exist.
        MissingToolError: dpkg-deb or fakeroot is unavailable.
        PackageBuildError: dpkg-deb reported a failure.
    """
    name = validate_package_name(request.package_name)
    version = validate_version(request.version)

    deps_dir = os.path.abspath(request.deps_dir)
    if not os.path.isdir(deps_dir):
        raise PackagingError(f"Dependencies directory '{deps_dir}' not found!")

    check_tools()

    architecture = request.architecture or detect_architecture()
    description = request.description.strip() or default_description(name)
    output_dir = os.path.abspath(request.output_dir)
    os.makedirs(output_dir, exist_ok=True)
    deb_path = os.path.join(output_dir, deb_filename(name, version, architecture))

    logger.info(f"Building Debian package {name} {version} ({architecture}) from {deps_dir}")

    with tempfile.TemporaryDirectory(prefix="depgather-") as tmp:
        package_dir = os.path.join(tmp, name)
        _stage_tree(deps_dir, package_dir, name, request.manifest_name)

        main_exe = find_main_executable(package_dir)
        installed_size = calculate_installed_size(package_dir)

        _write_metadata(package_dir, request, name, version, architecture,
                        description, installed_size, main_exe)

        output = run_command(["fakeroot", "dpkg-deb", "--build", package_dir, deb_path])
        if not output.ok:
            detail = output.stderr.strip() or output.stdout.strip()
            raise PackageBuildError(f"Failed to build package: {detail}")

    size_bytes = os.path.getsize(deb_path) if os.path.exists(deb_path) else 0
    logger.info(f"Package built successfully: {deb_path}")
    return PackageResult(
        deb_path=deb_path,
        package_name=name,
        version=version,
        architecture=architecture,
        installed_size_kib=installed_size,
        main_executable=main_exe,
        size_bytes=size_bytes,
    )


def inspect_package(deb_path: str) -> PackageInspection:
    """
    Collect 'dpkg-deb --info' and '--contents' output for a built archive.

    Raises:
        PackageBuildError: dpkg-deb could not read the archive.
    """
    info = run_command(["dpkg-deb", "--info", deb_path])
    contents = run_command(["dpkg-deb", "--contents", deb_path])
    if not (info.ok and contents.ok):
        raise PackageBuildError(f"Cannot inspect {deb_path}: {info.stderr or contents.stderr}".strip())
    return PackageInspection(info=info.stdout, contents=contents.stdout.splitlines())

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _doc_dir(package_dir: str, name: str) -> str:
    return os.path.join(package_dir, "usr", "share", "doc", name)


def _stage_tree(deps_dir: str, package_dir: str, name: str, manifest_name: str) -> None:
    """Copy the tree, relocating the manifest from / to the package doc dir."""

    def _ignore_root_manifest(directory: str, names: List[str]) -> List[str]:
        if os.path.abspath(directory) == deps_dir and manifest_name in names:
            return [manifest_name]
        return []

    logger.info("Copying dependencies...")
    shutil.copytree(deps_dir, package_dir, symlinks=True, ignore=_ignore_root_manifest)

    manifest = os.path.join(deps_dir, manifest_name)
    if os.path.isfile(manifest):
        doc_dir = _doc_dir(package_dir, name)
        os.makedirs(doc_dir, exist_ok=True)
        shutil.copy2(manifest, os.path.join(doc_dir, manifest_name))


def _write_metadata(
        package_dir: str,
        request: PackageRequest,
        name: str,
        version: str,
        architecture: str,
        description: str,
        installed_size: int,
        main_exe: Optional[str],
) -> None:
    logger.info("Creating package metadata...")
    debian_dir = os.path.join(package_dir, "DEBIAN")
    os.makedirs(debian_dir, exist_ok=True)

    _write_text(os.path.join(debian_dir, "control"), render_control(
        name, version, architecture, installed_size, request.maintainer,
        description, section=request.section, priority=request.priority,
    ))
    _write_text(os.path.join(debian_dir, "postinst"), render_postinst(name, main_exe), mode=0o755)
    _write_text(os.path.join(debian_dir, "prerm"), render_prerm(name), mode=0o755)

    doc_dir = _doc_dir(package_dir, name)
    os.makedirs(doc_dir, exist_ok=True)
    _write_text(os.path.join(doc_dir, "copyright"), render_copyright(name, request.maintainer))

    changelog = render_changelog(name, version, request.maintainer)
    with gzip.open(os.path.join(doc_dir, "changelog.Debian.gz"), "wb", compresslevel=9) as f:
        f.write(changelog.encode("utf-8"))


def _write_text(path: str, content: str, mode: Optional[int] = None) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    if mode is not None:
        os.chmod(path, mode)
