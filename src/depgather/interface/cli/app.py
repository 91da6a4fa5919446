from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: initialization of logging, loading and
merging of configuration sources (defaults, persistent storage, and CLI
overrides), command execution, and result rendering.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from depgather.core.pipeline.engine import run_gather
from depgather.core.pipeline.validator import validate_config
from depgather.domain.config import get_default_config, load_config, save_config
from depgather.domain.errors import PackagingError
from depgather.domain.gather_models import GatherResult
from depgather.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
    shutdown_logging,
)
from depgather.interface.cli import args as cli_args
from depgather.archive.builder import (
    PackageRequest,
    PackageResult,
    build_package,
    inspect_package,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 2
EXIT_INTERRUPTED = 130

CONTENTS_PREVIEW_LINES = 20

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    log_level = "DEBUG" if args.debug else "INFO"
    log_file = None
    if args.log_file is not None:
        log_file = args.log_file or get_default_log_path()
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=log_file))

    try:
        return _run(args)
    finally:
        shutdown_logging()


def _run(args) -> int:
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    # 5. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_config:
        save_config(clean_conf)

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 6. Command execution phase
    try:
        if args.command == "gather":
            return _run_gather(args, clean_conf)
        return _run_package(args, clean_conf)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_gather(args, cfg: Dict[str, Any]) -> int:
    output_dir = cfg.get("output_dir", "")
    if not output_dir:
        print("ERROR: no output directory given and none configured.", file=sys.stderr)
        return EXIT_FAILURE

    result = run_gather(args.binary, output_dir, cfg)

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_gather_summary(result)

    if result.ok:
        return EXIT_OK
    return EXIT_NOT_FOUND if result.error_kind == "NotFound" else EXIT_FAILURE


def _run_package(args, cfg: Dict[str, Any]) -> int:
    request = PackageRequest(
        deps_dir=args.deps_dir,
        package_name=args.package_name,
        version=cfg["package_version"],
        maintainer=cfg["maintainer"],
        description=args.description or "",
        section=cfg["package_section"],
        priority=cfg["package_priority"],
        architecture=args.architecture,
        output_dir=cfg.get("package_output_dir") or os.getcwd(),
        manifest_name=cfg["manifest_name"],
    )

    try:
        result = build_package(request)
    except PackagingError as e:
        logger.error(f"{e.kind}: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_package_summary(result)
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys are merged and None means 'not given on the command line'.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in base and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_gather_summary(result: GatherResult) -> None:
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    print("")
    print("Dependency gathering complete!")
    print(f"All files copied to: {result.output_dir}")
    print(f"Total files copied: {len(result.files)}")

    summary = result.summary
    if summary:
        print(f"  - newly copied: {summary.get('copied', 0)}")
        print(f"  - unchanged: {summary.get('unchanged', 0)}")
        for leaf in summary.get("static_leaves", []):
            print(f"  - statically linked: {leaf}")

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for w in result.warnings:
            print(f"  - {w}")

    if result.manifest_path:
        print(f"Manifest created: {result.manifest_path}")


def _print_package_summary(result: PackageResult) -> None:
    print("")
    print("Package built successfully!")
    print(f"File: {result.deb_path}")
    print(f"Size: {result.size_bytes / 1024:.1f}K")
    print(f"Architecture: {result.architecture}")
    print(f"Installed-Size: {result.installed_size_kib}KB")
    if result.main_executable:
        print(f"Main executable: {result.main_executable}")

    try:
        inspection = inspect_package(result.deb_path)
    except PackagingError as e:
        logger.warning(f"Could not inspect package: {e}")
    else:
        print("")
        print("Package information:")
        print(inspection.info.rstrip())
        print("")
        print("Package contents:")
        for line in inspection.contents[:CONTENTS_PREVIEW_LINES]:
            print(line)
        if len(inspection.contents) > CONTENTS_PREVIEW_LINES:
            print(f"... ({len(inspection.contents)} total files)")

    print("")
    print("Installation command:")
    print(f"  sudo dpkg -i {result.deb_path}")
    print("")
    print("If there are dependency issues, run:")
    print("  sudo apt-get install -f")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
