from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema ('gather' and 'package' sub-commands plus
shared diagnostic flags) and translates parsed namespaces into
configuration overrides.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the depgather CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    common.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default location when no path is given).",
    )
    common.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore persisted settings and start from built-in defaults.",
    )
    common.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    common.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration for future runs.",
    )
    common.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the result as JSON instead of a human-readable summary.",
    )

    p = argparse.ArgumentParser(
        prog="depgather",
        description="Gather the shared-library closure of a binary and package it as a .deb.",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- gather ---
    g = sub.add_parser(
        "gather",
        parents=[common],
        help="Copy a binary and all its shared libraries into a mirrored tree.",
        description=(
            "Copy BINARY and every shared library it transitively requires into "
            "OUTPUT_DIR, preserving absolute paths. Only one run may target a "
            "given OUTPUT_DIR at a time."
        ),
        epilog="Example: depgather gather /usr/bin/firefox /tmp/firefox_deps",
    )
    g.add_argument("binary", help="Path to the executable or shared library.")
    g.add_argument(
        "output_dir",
        nargs="?",
        default=None,
        help="Directory where dependencies will be copied (defaults to the configured output_dir).",
    )
    g.add_argument("--no-manifest", action="store_true", help="Do not write the manifest file.")
    g.add_argument("--manifest-name", dest="manifest_name", default=None, help="Manifest file name.")
    g.add_argument("--ldd", dest="ldd_command", default=None, help="Dependency listing command.")
    g.add_argument(
        "--ldd-timeout",
        dest="ldd_timeout",
        type=float,
        default=None,
        help="Seconds to wait for each dependency listing (default: no limit).",
    )
    g.add_argument(
        "--max-symlink-hops",
        dest="max_symlink_hops",
        type=int,
        default=None,
        help="Maximum symlinks followed while resolving a path.",
    )

    # --- package ---
    k = sub.add_parser(
        "package",
        parents=[common],
        help="Build a Debian package from a gathered tree.",
        description="Create a .deb package with all gathered dependencies included.",
        epilog=(
            "Examples:\n"
            "  depgather package /tmp/firefox_deps my-firefox-bundle\n"
            "  depgather package /tmp/app_deps my-app 2.1.0 'My custom application bundle'"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    k.add_argument("deps_dir", help="Directory containing the gathered dependencies.")
    k.add_argument("package_name", help="Name of the package (lowercase, no spaces).")
    k.add_argument("version", nargs="?", default=None, help="Package version.")
    k.add_argument("description", nargs="?", default=None, help="Package description.")
    k.add_argument("--maintainer", default=None, help="Maintainer as 'Name <email>'.")
    k.add_argument("--section", dest="package_section", default=None, help="Debian section.")
    k.add_argument("--priority", dest="package_priority", default=None, help="Debian priority.")
    k.add_argument("--arch", dest="architecture", default=None, help="Target architecture (default: host).")
    k.add_argument(
        "-o", "--output-dir",
        dest="package_output_dir",
        default=None,
        help="Directory receiving the .deb file (default: current directory).",
    )
    k.add_argument("--manifest-name", dest="manifest_name", default=None, help="Manifest file name.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Only options that map onto persisted configuration keys are returned;
    positional inputs stay on the namespace.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["manifest_name"] = getattr(args, "manifest_name", None)

    if args.command == "gather":
        overrides["output_dir"] = args.output_dir
        overrides["ldd_command"] = args.ldd_command
        overrides["ldd_timeout"] = args.ldd_timeout
        overrides["max_symlink_hops"] = args.max_symlink_hops
        if args.no_manifest:
            overrides["write_manifest"] = False

    elif args.command == "package":
        overrides["package_version"] = args.version
        overrides["maintainer"] = args.maintainer
        overrides["package_section"] = args.package_section
        overrides["package_priority"] = args.package_priority
        overrides["package_output_dir"] = args.package_output_dir

    return overrides
