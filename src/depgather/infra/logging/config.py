from __future__ import annotations

"""
Logging settings for the CLI: a severity threshold, the stderr console
and an optional rotating log file.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    name: getattr(logging, name)
    for name in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
}

# Console lines stay short; the file keeps timestamps and logger names
CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        level: 'DEBUG' under --debug, 'INFO' otherwise.
        console: Echo records to stderr.
        log_file: Rotating file target, set by --log-file.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to it.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 2
