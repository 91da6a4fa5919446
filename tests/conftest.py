from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A symlink-free temporary root, so canonical paths are predictable.
3. A synthetic dynamic loader that serves listings for a fake dependency
   graph built on disk.
"""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from depgather.core.analysis.extractor import DependencyExtractor  # noqa: E402
from depgather.infra.process import CommandOutput  # noqa: E402


# -----------------------------------------------------------------------------
# Synthetic Loader
# -----------------------------------------------------------------------------
class FakeLoader:
    """
    Stand-in for 'ldd' driven by a dictionary of canned listings.

    Paths registered with add() list successfully; paths in `static` fail
    and are reported as declaring no NEEDED entries; any other path fails
    and is reported as declaring entries (a genuine analysis failure).
    """

    def __init__(self) -> None:
        self.listings: Dict[str, List[str]] = {}
        self.static: Set[str] = set()
        self.calls: List[str] = []

    def add(self, path: str, *lines: str) -> None:
        self.listings[str(path)] = list(lines)

    def add_static(self, path: str) -> None:
        self.static.add(str(path))

    def runner(self, args: Sequence[str], timeout: Optional[float]) -> CommandOutput:
        path = args[-1]
        self.calls.append(path)
        if path in self.listings:
            text = "".join(f"\t{line}\n" for line in self.listings[path])
            return CommandOutput(0, text, "")
        return CommandOutput(1, "", "\tnot a dynamic executable\n")

    def inspector(self, path: str) -> bool:
        return path not in self.static

    def extractor(self) -> DependencyExtractor:
        return DependencyExtractor(runner=self.runner, inspector=self.inspector)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def real_tmp(tmp_path: Path) -> Path:
    """tmp_path with every symlink component resolved (e.g. macOS /private)."""
    return Path(os.path.realpath(tmp_path))


@pytest.fixture
def fake_loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def make_file():
    """Factory writing a small file (parents included) and returning its path."""

    def _make(path: Path, content: bytes = b"\x7fELF-fake", mode: int = 0o644) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        os.chmod(path, mode)
        return path

    return _make
