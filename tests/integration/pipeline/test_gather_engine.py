from __future__ import annotations

"""
Integration tests for the Gathering Engine.

Runs the full orchestration (validation, output preparation, closure walk,
manifest) against a fake dependency graph on disk. ELF classification is
stubbed for the synthetic binaries; one test uses the real interpreter and
the real loader when available.
"""

import os
import shutil
import sys
from pathlib import Path

import pytest

from depgather.core.pipeline import engine
from depgather.core.services.manifest import read_manifest
from depgather.domain.closure_models import BinaryKind


@pytest.fixture
def dynamic_everything(monkeypatch):
    monkeypatch.setattr(engine, "classify", lambda path: BinaryKind.DYNAMIC)


@pytest.fixture
def app_graph(real_tmp: Path, make_file, fake_loader):
    fs = real_tmp / "fs"
    app = make_file(fs / "usr" / "bin" / "app", b"APP", mode=0o755)
    libz = make_file(fs / "lib" / "libz.so.1.2", b"Z")
    os.symlink("libz.so.1.2", fs / "lib" / "libz.so.1")
    libc = make_file(fs / "lib" / "libc.so.6", b"C")

    fake_loader.add(
        app,
        "linux-vdso.so.1 (0x1)",
        f"libz.so.1 => {fs / 'lib' / 'libz.so.1'} (0x2)",
        f"libc.so.6 => {libc} (0x3)",
        "libmissing.so.9 => not found",
    )
    fake_loader.add(libz, f"libc.so.6 => {libc} (0x3)")
    fake_loader.add(libc)
    return {"fs": fs, "app": app, "libz": libz, "libc": libc}


def test_successful_run_writes_tree_and_manifest(real_tmp, app_graph, fake_loader, dynamic_everything):
    out = real_tmp / "out"
    result = engine.run_gather(str(app_graph["app"]), str(out), {}, extractor=fake_loader.extractor())

    assert result.ok, result.error
    assert result.manifest_path == str(out / "MANIFEST.txt")
    assert len(result.files) == 4
    assert result.summary["nodes_visited"] == 3
    assert result.summary["copied"] == 4
    assert len(result.warnings) == 1 and "libmissing.so.9" in result.warnings[0]

    manifest = read_manifest(result.manifest_path)
    assert manifest.binary_path == str(app_graph["app"])
    assert list(manifest.files) == result.files
    assert set(manifest.files) == {
        str(out / str(p).lstrip("/"))
        for p in (app_graph["app"], app_graph["libz"], app_graph["libc"], app_graph["fs"] / "lib" / "libz.so.1")
    }


def test_rerun_copies_nothing(real_tmp, app_graph, fake_loader, dynamic_everything):
    out = real_tmp / "out"
    engine.run_gather(str(app_graph["app"]), str(out), {}, extractor=fake_loader.extractor())
    second = engine.run_gather(str(app_graph["app"]), str(out), {}, extractor=fake_loader.extractor())

    assert second.ok
    assert second.summary["copied"] == 0
    assert second.summary["unchanged"] == 4
    assert len(second.files) == 4


def test_missing_input_is_not_found(real_tmp):
    out = real_tmp / "out"
    result = engine.run_gather(str(real_tmp / "nope"), str(out), {})

    assert not result.ok
    assert result.error_kind == "NotFound"
    assert not out.exists()


def test_non_binary_input_is_rejected(real_tmp, make_file):
    script = make_file(real_tmp / "run.sh", b"#!/bin/sh\n")
    result = engine.run_gather(str(script), str(real_tmp / "out"), {})

    assert result.error_kind == "NotABinary"
    assert result.manifest_path == ""


def test_analysis_failure_leaves_no_manifest(real_tmp, make_file, fake_loader, dynamic_everything):
    out = real_tmp / "out"
    out.mkdir()
    (out / "MANIFEST.txt").write_text("stale\n", encoding="utf-8")

    app = make_file(real_tmp / "fs" / "bin" / "app")
    broken = make_file(real_tmp / "fs" / "lib" / "libbroken.so")
    fake_loader.add(app, f"libbroken.so => {broken} (0x1)")

    result = engine.run_gather(str(app), str(out), {}, extractor=fake_loader.extractor())

    assert not result.ok
    assert result.error_kind == "AnalysisFailed"
    assert str(broken) in result.error
    assert not (out / "MANIFEST.txt").exists()


def test_manifest_can_be_disabled(real_tmp, app_graph, fake_loader, dynamic_everything):
    out = real_tmp / "out"
    result = engine.run_gather(
        str(app_graph["app"]), str(out), {"write_manifest": False}, extractor=fake_loader.extractor()
    )

    assert result.ok
    assert result.manifest_path == ""
    assert not (out / "MANIFEST.txt").exists()


def test_custom_manifest_name(real_tmp, app_graph, fake_loader, dynamic_everything):
    out = real_tmp / "out"
    result = engine.run_gather(
        str(app_graph["app"]), str(out), {"manifest_name": "deps.lst"}, extractor=fake_loader.extractor()
    )

    assert result.manifest_path == str(out / "deps.lst")
    assert str(out / "deps.lst") not in result.files


@pytest.mark.skipif(
    not sys.platform.startswith("linux") or shutil.which("ldd") is None,
    reason="requires a Linux host with ldd",
)
def test_real_interpreter_closure(real_tmp):
    binary = os.path.realpath(sys.executable)
    out = real_tmp / "out"

    result = engine.run_gather(binary, str(out), {})

    assert result.ok, result.error
    assert (out / binary.lstrip("/")).is_file()
    assert result.summary["nodes_visited"] >= 1


def test_symlink_loop_input_is_reported_as_loop(real_tmp):
    os.symlink("loop2", real_tmp / "loop1")
    os.symlink("loop1", real_tmp / "loop2")
    out = real_tmp / "out"

    result = engine.run_gather(str(real_tmp / "loop1"), str(out), {})

    assert not result.ok
    assert result.error_kind == "SymlinkLoop"
    assert result.manifest_path == ""
    assert not out.exists()


def test_dangling_symlink_input_is_not_found(real_tmp):
    os.symlink("gone", real_tmp / "dangling")
    result = engine.run_gather(str(real_tmp / "dangling"), str(real_tmp / "out"), {})

    assert result.error_kind == "NotFound"


def test_static_input_yields_single_file_tree(real_tmp, make_file, fake_loader, monkeypatch):
    monkeypatch.setattr(engine, "classify", lambda path: BinaryKind.STATIC)
    tool = make_file(real_tmp / "fs" / "bin" / "busybox", b"BUSYBOX", mode=0o755)
    fake_loader.add_static(tool)
    out = real_tmp / "out"

    result = engine.run_gather(str(tool), str(out), {}, extractor=fake_loader.extractor())

    assert result.ok, result.error
    assert result.files == [str(out / str(tool).lstrip("/"))]
    assert result.summary["static_leaves"] == [str(tool)]
    assert result.warnings == []
    assert list(read_manifest(result.manifest_path).files) == result.files


def test_cyclic_graph_with_virtual_entry(real_tmp, make_file, fake_loader, dynamic_everything):
    lib = real_tmp / "fs" / "lib"
    x = make_file(real_tmp / "fs" / "bin" / "X", b"X", mode=0o755)
    liba = make_file(lib / "liba.so", b"A")
    libb = make_file(lib / "libb.so", b"B")
    libc = make_file(lib / "libc.so", b"C")

    fake_loader.add(
        x,
        "linux-vdso.so.1 (0x1)",
        f"liba.so => {liba} (0x2)",
        f"libc.so => {libc} (0x3)",
    )
    fake_loader.add(liba, f"libb.so => {libb} (0x4)", f"libc.so => {libc} (0x3)")
    fake_loader.add(libb, f"liba.so => {liba} (0x2)", f"libc.so => {libc} (0x3)")
    fake_loader.add(libc)
    out = real_tmp / "out"

    result = engine.run_gather(str(x), str(out), {}, extractor=fake_loader.extractor())

    assert result.ok, result.error
    expected = sorted(str(out / str(p).lstrip("/")) for p in (x, liba, libb, libc))
    assert list(read_manifest(result.manifest_path).files) == expected
    assert result.warnings == []
    assert not any("vdso" in path for path in result.files)
    assert sorted(fake_loader.calls) == sorted(str(p) for p in (x, liba, libb, libc))
