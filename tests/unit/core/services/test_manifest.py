from __future__ import annotations

"""
Unit tests for the Manifest Service.

Verifies header layout, completeness and ordering of the file listing,
self-exclusion, parsing back and stale manifest removal.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from depgather.core.services.manifest import (
    list_output_files,
    read_manifest,
    remove_stale_manifest,
    write_manifest,
)


@pytest.fixture
def tree(real_tmp: Path, make_file) -> Path:
    root = real_tmp / "out"
    make_file(root / "usr" / "bin" / "app")
    make_file(root / "lib" / "libz.so.1")
    make_file(root / "lib" / "libc.so.6")
    return root


def test_list_output_files_is_sorted_and_complete(tree: Path):
    assert list_output_files(str(tree)) == [
        str(tree / "lib" / "libc.so.6"),
        str(tree / "lib" / "libz.so.1"),
        str(tree / "usr" / "bin" / "app"),
    ]


def test_write_manifest_layout(tree: Path):
    stamp = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
    manifest = write_manifest(str(tree), "/usr/bin/app", "MANIFEST.txt", generated_at=stamp)

    lines = (tree / "MANIFEST.txt").read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Dependency manifest for: /usr/bin/app"
    assert lines[1] == "Generated on: 2024-05-01T12:30:00+00:00"
    assert lines[2] == "Files:"
    assert lines[3:] == list(manifest.files)
    assert manifest.path == str(tree / "MANIFEST.txt")


def test_manifest_does_not_list_itself(tree: Path):
    write_manifest(str(tree), "/usr/bin/app")
    manifest = write_manifest(str(tree), "/usr/bin/app")

    assert str(tree / "MANIFEST.txt") not in manifest.files
    assert len(manifest.files) == 3


def test_read_manifest_round_trip(tree: Path):
    written = write_manifest(str(tree), "/usr/bin/app", "deps.txt")
    parsed = read_manifest(str(tree / "deps.txt"))

    assert parsed == written


def test_read_manifest_rejects_foreign_file(tmp_path: Path):
    other = tmp_path / "notes.txt"
    other.write_text("hello\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_manifest(str(other))


def test_remove_stale_manifest(tree: Path):
    assert remove_stale_manifest(str(tree)) is False
    write_manifest(str(tree), "/usr/bin/app")
    assert remove_stale_manifest(str(tree)) is True
    assert not (tree / "MANIFEST.txt").exists()
