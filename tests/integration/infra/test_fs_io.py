from __future__ import annotations

"""
Integration tests for the FileSystem and process infrastructure.
"""

import os
import sys
from pathlib import Path

import pytest

from depgather.infra import fs
from depgather.infra.process import find_tool, run_command


def test_normalize_path_expands_user_and_vars(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("DEPGATHER_TEST_DIR", str(tmp_path))
    assert fs.normalize_path("$DEPGATHER_TEST_DIR/out", "/fallback") == str(tmp_path / "out")
    assert fs.normalize_path("   ", str(tmp_path)) == str(tmp_path)


def test_normalize_path_keeps_symlinks(tmp_path: Path):
    real = tmp_path / "real"
    real.mkdir()
    os.symlink(str(real), tmp_path / "alias")
    assert fs.normalize_path(str(tmp_path / "alias"), "/") == str(tmp_path / "alias")


def test_safe_mkdir_reports_failure(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    assert fs.safe_mkdir(str(tmp_path / "a" / "b")) == (True, None)
    ok, err = fs.safe_mkdir(str(blocker / "sub"))
    assert not ok and err


def test_files_identical(tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"same")
    b.write_bytes(b"same")
    assert fs.files_identical(str(a), str(b))

    b.write_bytes(b"diff")
    assert not fs.files_identical(str(a), str(b))
    assert not fs.files_identical(str(a), str(tmp_path / "missing"))


def test_is_executable_file(tmp_path: Path):
    exe = tmp_path / "tool"
    exe.write_bytes(b"x")
    os.chmod(exe, 0o755)
    data = tmp_path / "data"
    data.write_bytes(b"x")
    os.chmod(data, 0o644)
    os.symlink(str(exe), tmp_path / "link")

    assert fs.is_executable_file(str(exe))
    assert not fs.is_executable_file(str(data))
    assert not fs.is_executable_file(str(tmp_path / "link"))
    assert not fs.is_executable_file(str(tmp_path))


def test_disk_usage_rounds_up_per_file(tmp_path: Path):
    (tmp_path / "small").write_bytes(b"x")
    (tmp_path / "kib").write_bytes(b"x" * 1024)
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "more").write_bytes(b"x" * 1025)
    assert fs.disk_usage_kib(str(tmp_path)) == 1 + 1 + 2


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX only")
def test_run_command_captures_output():
    out = run_command([sys.executable, "-c", "import sys; print('hi'); sys.exit(3)"])
    assert out.returncode == 3
    assert not out.ok
    assert out.stdout.strip() == "hi"


def test_run_command_missing_executable_raises():
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-real-tool-depgather"])


def test_find_tool():
    assert find_tool("definitely-not-a-real-tool-depgather") is None
