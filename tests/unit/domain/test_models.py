from __future__ import annotations

"""
Unit tests for domain models and exceptions.
"""

import dataclasses

import pytest

from depgather.domain.closure_models import ClosureResult, CopyOutcome, ExtractionResult, ExtractStatus
from depgather.domain.errors import (
    AnalysisFailedError,
    InputNotFoundError,
    InvalidPackageNameError,
    NotABinaryError,
    SymlinkLoopError,
)
from depgather.domain.gather_models import create_error_result, create_success_result


def test_error_kinds_and_messages():
    assert InputNotFoundError("/x").kind == "NotFound"
    assert str(InputNotFoundError("/x")) == "/x: file not found"
    assert NotABinaryError("/x").kind == "NotABinary"
    assert AnalysisFailedError("/lib/a.so", "boom").kind == "AnalysisFailed"
    assert "limit 40" in str(SymlinkLoopError("/l", 40))
    assert "Bad_Name" in str(InvalidPackageNameError("Bad_Name"))


def test_extraction_ok_flag():
    assert ExtractionResult("/a", ExtractStatus.LISTED).ok
    assert ExtractionResult("/a", ExtractStatus.STATIC_NO_DEPS).ok
    assert not ExtractionResult("/a", ExtractStatus.ANALYSIS_FAILED, reason="x").ok


def test_closure_result_aggregates():
    result = ClosureResult("/bin/a", "/bin/a", "/out")
    result.copies.extend([
        CopyOutcome("/bin/a", "/out/bin/a", True),
        CopyOutcome("/lib/l.so", "/out/lib/l.so", False),
        CopyOutcome("/lib/l.so", "/out/lib/l.so", False),
    ])
    assert result.files_copied == 1


def test_error_result_has_no_manifest():
    result = create_error_result("NotFound: /x", "NotFound", "/x", "/out")
    assert not result.ok
    assert result.manifest_path == ""
    assert result.files == []


def test_results_are_frozen():
    result = create_success_result("/x", "/x", "/out", ["/out/x"])
    assert result.ok and result.error == ""
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.ok = False  # type: ignore[misc]
