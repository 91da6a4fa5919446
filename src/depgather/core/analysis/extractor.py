from __future__ import annotations

"""
Dependency Extraction Service.

Lists the direct dependencies of a canonical binary path through the
dynamic loader ('ldd'). When the listing fails, the binary's dynamic
section is inspected to decide between a statically linked leaf
(recoverable) and a genuine analysis failure (fatal to the closure).
"""

import logging
import subprocess
from typing import Callable, Optional, Sequence

from depgather.core.analysis.classifier import has_needed_entries
from depgather.domain.closure_models import ExtractionResult, ExtractStatus
from depgather.domain.constants import DEFAULT_LDD_COMMAND
from depgather.infra.process import CommandOutput, run_command

logger = logging.getLogger(__name__)

# (args, timeout) -> CommandOutput
CommandRunner = Callable[[Sequence[str], Optional[float]], CommandOutput]
# path -> declares DT_NEEDED entries
NeededInspector = Callable[[str], bool]


class DependencyExtractor:
    """
    Produces the raw dependency listing of one binary at a time.

    The command runner and the inspector are injectable so the traversal
    can be exercised against synthetic dependency graphs.
    """

    def __init__(
            self,
            ldd_command: str = DEFAULT_LDD_COMMAND,
            timeout: Optional[float] = None,
            runner: Optional[CommandRunner] = None,
            inspector: Optional[NeededInspector] = None,
    ) -> None:
        self.ldd_command = ldd_command
        self.timeout = timeout
        self._runner: CommandRunner = runner or run_command
        self._inspector: NeededInspector = inspector or has_needed_entries

    def extract(self, canonical_path: str) -> ExtractionResult:
        """
        List the direct dependencies of a binary.

        Args:
            canonical_path: Fully resolved path of the binary.

        Returns:
            ExtractionResult: LISTED with the raw lines, STATIC_NO_DEPS for a
            statically linked binary, or ANALYSIS_FAILED with a reason.
        """
        try:
            output = self._runner([self.ldd_command, canonical_path], self.timeout)
        except FileNotFoundError:
            reason = f"dependency listing tool '{self.ldd_command}' not found"
            logger.error(reason)
            return ExtractionResult(canonical_path, ExtractStatus.ANALYSIS_FAILED, reason=reason)
        except subprocess.TimeoutExpired:
            reason = f"'{self.ldd_command}' timed out after {self.timeout}s"
            logger.error(f"{reason} on {canonical_path}")
            return ExtractionResult(canonical_path, ExtractStatus.ANALYSIS_FAILED, reason=reason)

        if output.ok:
            lines = tuple(output.stdout.splitlines())
            logger.debug(f"{canonical_path}: {len(lines)} listing lines")
            return ExtractionResult(canonical_path, ExtractStatus.LISTED, lines=lines)

        return self._disambiguate(canonical_path, output)

    def _disambiguate(self, canonical_path: str, output: CommandOutput) -> ExtractionResult:
        logger.warning(f"{self.ldd_command} failed for {canonical_path}, checking if it's statically linked...")

        if self._inspector(canonical_path):
            detail = output.stderr.strip() or output.stdout.strip() or f"exit status {output.returncode}"
            reason = f"could not analyze dependencies ({detail})"
            return ExtractionResult(canonical_path, ExtractStatus.ANALYSIS_FAILED, reason=reason)

        logger.info(f"Note: {canonical_path} appears to be statically linked")
        return ExtractionResult(canonical_path, ExtractStatus.STATIC_NO_DEPS)
