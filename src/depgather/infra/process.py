from __future__ import annotations

"""
External Process Infrastructure.

Thin wrapper over ``subprocess`` used for every external tool invocation
(dynamic-loader listing, archive assembly). Output is always captured as
text and never raises on a non-zero exit status; callers inspect the
return code themselves.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(args: Sequence[str], timeout: Optional[float] = None) -> CommandOutput:
    """
    Run an external command to completion and capture its output.

    Args:
        args: Command and arguments.
        timeout: Seconds to wait before giving up; None waits forever.

    Returns:
        CommandOutput: Exit status plus decoded stdout/stderr.

    Raises:
        FileNotFoundError: The executable does not exist.
        subprocess.TimeoutExpired: The command did not finish in time.
    """
    logger.debug(f"Running: {' '.join(args)}")
    proc = subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        errors="replace",
        timeout=timeout,
        check=False,
    )
    return CommandOutput(proc.returncode, proc.stdout or "", proc.stderr or "")


def find_tool(name: str) -> Optional[str]:
    """Locate an executable on PATH."""
    return shutil.which(name)
